"""
Overlay composition for the prompt-build hook.

For each active experiment (filtered by agentIds when configured):
  - prependContext values from the assigned variants are trimmed and joined
    with a blank line, in configured order.
  - systemPrompt overrides: the last experiment with one wins, so operators
    put higher-priority experiments later in the list.

None means "render the default prompt unchanged", which is what a pure
control assignment produces.
"""
import logging
from typing import List, Optional, Sequence

from ddtrace import tracer

from prompt_ab.config import config
from prompt_ab.logging_config import setup_logging
from prompt_ab.metrics import emit_metric
from prompt_ab.models import AbTestExperiment, PromptBuildContext, PromptOverlay
from prompt_ab.store import AssignmentStore

ANONYMOUS_SESSION = "anonymous"


def resolve_session_key(context: PromptBuildContext) -> str:
    """sessionKey, then sessionId, then the anonymous placeholder."""
    if context.session_key is not None:
        return context.session_key
    if context.session_id is not None:
        return context.session_id
    return ANONYMOUS_SESSION


class OverlayComposer:
    """Resolves one assignment per applicable experiment and merges the overrides."""

    def __init__(
        self,
        experiments: Sequence[AbTestExperiment],
        store: AssignmentStore,
        logger: Optional[logging.Logger] = None,
    ):
        self.experiments = tuple(experiments)
        self.store = store
        self.logger = logger or setup_logging()

    def compose(self, context: PromptBuildContext) -> Optional[PromptOverlay]:
        """
        Build the overlay for one prompt-build request.

        Args:
            context: Request identity and agent

        Returns:
            The merged overlay, or None when no experiment produced a modification
        """
        session_key = resolve_session_key(context)

        with tracer.trace("prompt_ab.compose", service=config.DD_SERVICE) as span:
            span.set_tag("session_key", session_key)
            if context.agent_id:
                span.set_tag("agent_id", context.agent_id)

            system_prompt: Optional[str] = None
            prepend_parts: List[str] = []
            applied = 0

            for experiment in self.experiments:
                if not experiment.applies_to(context.agent_id):
                    continue

                variant = self.store.get_or_assign(session_key, experiment)
                applied += 1
                span.set_tag(f"experiment.{experiment.id}", variant.id)

                if variant.system_prompt:
                    system_prompt = variant.system_prompt

                if variant.prepend_context and variant.prepend_context.strip():
                    prepend_parts.append(variant.prepend_context.strip())

            span.set_tag("experiments_applied", applied)

            if system_prompt is None and not prepend_parts:
                span.set_tag("overlay", False)
                emit_metric("increment", "prompt_ab.overlay.skipped")
                return None

            span.set_tag("overlay", True)
            emit_metric(
                "increment",
                "prompt_ab.overlay.applied",
                tags=[
                    f"system_prompt:{system_prompt is not None}",
                    f"prepend_parts:{len(prepend_parts)}",
                ],
            )
            return PromptOverlay(
                system_prompt=system_prompt,
                prepend_context="\n\n".join(prepend_parts) if prepend_parts else None,
            )
