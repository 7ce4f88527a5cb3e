"""
In-memory assignment store.
One store per plugin instance; nothing is shared at module level.
"""
import logging
from typing import Dict, Optional

from prompt_ab.logging_config import setup_logging
from prompt_ab.metrics import emit_metric
from prompt_ab.models import AbTestExperiment, PromptVariant
from prompt_ab.selection import assign_variant


def assignment_key(session_key: str, experiment_id: str) -> str:
    """Composite key for one assignment decision."""
    return f"{session_key}:{experiment_id}"


class AssignmentStore:
    """
    Memoizes (session, experiment) -> variant for the life of the process.

    Assignment is a pure function of its inputs, so two concurrent first
    requests for the same key store an identical value and no lock is taken.
    There is no eviction: memory grows with the number of distinct
    session/experiment pairs seen until the process restarts.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._assignments: Dict[str, PromptVariant] = {}
        self.logger = logger or setup_logging()

    def get_or_assign(self, session_key: str, experiment: AbTestExperiment) -> PromptVariant:
        """
        Return the cached variant, computing and storing it on first access.

        Args:
            session_key: Resolved session identity
            experiment: Active experiment

        Returns:
            The session's variant for this experiment
        """
        key = assignment_key(session_key, experiment.id)
        cached = self._assignments.get(key)
        if cached is not None:
            return cached

        variant = assign_variant(session_key, experiment.id, experiment.variants)
        self._assignments[key] = variant

        self.logger.debug(
            f"prompt-ab-test: assigned session={session_key} "
            f"experiment={experiment.id} → variant={variant.id}",
            extra={
                "session_key": session_key,
                "experiment_id": experiment.id,
                "variant_id": variant.id,
            },
        )
        emit_metric(
            "increment",
            "prompt_ab.assignment.created",
            tags=[f"experiment:{experiment.id}", f"variant:{variant.id}"],
        )
        return variant

    def lookup(self, session_key: str, experiment_id: str) -> Optional[PromptVariant]:
        """Read-only lookup; never computes an assignment."""
        return self._assignments.get(assignment_key(session_key, experiment_id))

    def __len__(self) -> int:
        return len(self._assignments)

    def __contains__(self, key: object) -> bool:
        return key in self._assignments
