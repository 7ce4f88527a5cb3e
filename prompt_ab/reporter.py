"""
Assignment reporting for log-based analytics.

Session-end lines are formatted as:
  prompt-ab-test: assignments session=<key> [exp1=variant-id, exp2=variant-id]

Log aggregators parse these lines to compare outcomes between variants, so
the shape must not change.
"""
import logging
from typing import List, Optional, Sequence, Union

from prompt_ab.logging_config import setup_logging
from prompt_ab.models import AbTestExperiment, SessionEndContext
from prompt_ab.registry import LOG_PREFIX
from prompt_ab.store import AssignmentStore


def format_weight(weight: Optional[Union[int, float]]) -> str:
    """Render a configured weight the way it was written; absent means 1."""
    if weight is None:
        return "1"
    if isinstance(weight, float) and weight.is_integer():
        return str(int(weight))
    return str(weight)


class AssignmentReporter:
    """Reads the assignment store; never creates assignments."""

    def __init__(
        self,
        experiments: Sequence[AbTestExperiment],
        store: AssignmentStore,
        logger: Optional[logging.Logger] = None,
    ):
        self.experiments = tuple(experiments)
        self.store = store
        self.logger = logger or setup_logging()

    def report_session_end(self, context: SessionEndContext) -> Optional[str]:
        """
        Log the assignments already resolved for a finished session.

        Experiments never evaluated for the session (e.g. filtered out by
        agentIds) are omitted.

        Returns:
            The emitted line, or None when nothing was logged
        """
        session_key = context.session_key if context.session_key is not None else context.session_id
        if not session_key:
            return None

        pairs: List[str] = []
        for experiment in self.experiments:
            variant = self.store.lookup(session_key, experiment.id)
            if variant is not None:
                pairs.append(f"{experiment.id}={variant.id}")

        if not pairs:
            return None

        line = f"{LOG_PREFIX}: assignments session={session_key} [{', '.join(pairs)}]"
        self.logger.info(line, extra={"session_key": session_key, "assignments": pairs})
        return line

    def log_startup_summary(self) -> List[str]:
        """Emit one line per active experiment so operators can verify config."""
        lines = []
        for experiment in self.experiments:
            variant_summary = ", ".join(
                f"{v.id}(w={format_weight(v.weight)})" for v in experiment.variants
            )
            description = experiment.description if experiment.description is not None else "no description"
            line = (
                f'{LOG_PREFIX}: experiment "{experiment.id}" — {description} '
                f"— variants: [{variant_summary}]"
            )
            self.logger.info(line, extra={"experiment_id": experiment.id})
            lines.append(line)
        return lines
