"""
Experiment registry: turns raw plugin configuration into the active list.
Configuration defects are logged and filtered, never raised.
"""
import logging
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from prompt_ab.logging_config import setup_logging
from prompt_ab.models import AbTestExperiment, PromptAbTestConfig

LOG_PREFIX = "prompt-ab-test"


def _raw_entries(raw_config: Any, logger: logging.Logger) -> Sequence[Any]:
    """Extract the experiment entries from any accepted config shape."""
    if raw_config is None:
        return []
    if isinstance(raw_config, PromptAbTestConfig):
        return raw_config.experiments
    if isinstance(raw_config, Mapping):
        entries = raw_config.get("experiments")
        if entries is None:
            return []
    else:
        entries = raw_config

    if isinstance(entries, (list, tuple)):
        return entries

    logger.warning(
        f"{LOG_PREFIX}: ignoring experiments config of type {type(entries).__name__}, expected a list"
    )
    return []


def _entry_field(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def build_active_list(
    raw_config: Any,
    logger: Optional[logging.Logger] = None,
) -> List[AbTestExperiment]:
    """
    Validate raw configuration into well-formed, enabled experiments.

    Args:
        raw_config: {"experiments": [...]}, a bare list, a PromptAbTestConfig or None.
            Entries may be mappings or AbTestExperiment instances.
        logger: Logger for configuration warnings

    Returns:
        Active experiments in configured order
    """
    logger = logger or setup_logging()
    active: List[AbTestExperiment] = []
    seen_ids = set()

    for entry in _raw_entries(raw_config, logger):
        exp_id = _entry_field(entry, "id") if entry else None
        if not isinstance(exp_id, str) or not exp_id.strip():
            logger.warning(f"{LOG_PREFIX}: skipping experiment with missing id")
            continue

        variants = _entry_field(entry, "variants")
        if not isinstance(variants, (list, tuple)) or len(variants) == 0:
            logger.warning(
                f'{LOG_PREFIX}: skipping experiment "{exp_id}" — must have at least one variant',
                extra={"experiment_id": exp_id},
            )
            continue

        if _entry_field(entry, "enabled") is False:
            continue

        if exp_id in seen_ids:
            logger.warning(
                f'{LOG_PREFIX}: skipping experiment "{exp_id}" — duplicate experiment id',
                extra={"experiment_id": exp_id},
            )
            continue

        if isinstance(entry, AbTestExperiment):
            experiment = entry
        else:
            try:
                if isinstance(entry, Mapping):
                    # Only a literal False disables; anything else counts as enabled
                    experiment = AbTestExperiment.model_validate({**entry, "enabled": True})
                else:
                    experiment = AbTestExperiment.model_validate(entry, from_attributes=True)
            except ValidationError as e:
                logger.warning(
                    f'{LOG_PREFIX}: skipping experiment "{exp_id}" — invalid definition',
                    extra={"experiment_id": exp_id, "error": str(e)},
                )
                continue

        seen_ids.add(exp_id)
        active.append(experiment)

    return active
