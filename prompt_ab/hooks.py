"""
Hook surface exposed to the hosting runtime.

Three hook kinds, each with a fixed payload model. Events form a closed
discriminated union on ``kind`` so a payload for one hook can't be routed
to another.
"""
import logging
from enum import Enum
from typing import Annotated, Any, List, Literal, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field, TypeAdapter

from prompt_ab.composer import OverlayComposer
from prompt_ab.logging_config import setup_logging
from prompt_ab.models import (
    AbTestExperiment,
    PromptBuildContext,
    PromptOverlay,
    SessionEndContext,
    StartupContext,
)
from prompt_ab.registry import LOG_PREFIX, build_active_list
from prompt_ab.reporter import AssignmentReporter
from prompt_ab.store import AssignmentStore


class HookKind(str, Enum):
    """Hook points the plugin handles"""
    PROMPT_BUILD = "before_prompt_build"
    SESSION_END = "agent_end"
    STARTUP = "gateway_start"


class PromptBuildEvent(BaseModel):
    kind: Literal["before_prompt_build"] = HookKind.PROMPT_BUILD.value
    context: PromptBuildContext = Field(default_factory=PromptBuildContext)
    prompt: Optional[str] = None


class SessionEndEvent(BaseModel):
    kind: Literal["agent_end"] = HookKind.SESSION_END.value
    context: SessionEndContext = Field(default_factory=SessionEndContext)
    success: Optional[bool] = None


class StartupEvent(BaseModel):
    kind: Literal["gateway_start"] = HookKind.STARTUP.value
    context: StartupContext = Field(default_factory=StartupContext)


HookEvent = Annotated[
    Union[PromptBuildEvent, SessionEndEvent, StartupEvent],
    Field(discriminator="kind"),
]

_hook_event_adapter = TypeAdapter(HookEvent)


def parse_event(payload: Mapping[str, Any]) -> HookEvent:
    """
    Validate a raw payload into its hook event.

    Raises:
        pydantic.ValidationError: unknown kind or payload shape mismatch.
    """
    return _hook_event_adapter.validate_python(payload)


class PromptAbTestPlugin:
    """
    Active plugin instance. Owns its assignment store, so independent
    instances never share assignments.
    """

    def __init__(self, experiments: Sequence[AbTestExperiment], logger: Optional[logging.Logger] = None):
        self.logger = logger or setup_logging()
        self.experiments = tuple(experiments)
        self.store = AssignmentStore(logger=self.logger)
        self.composer = OverlayComposer(self.experiments, self.store, logger=self.logger)
        self.reporter = AssignmentReporter(self.experiments, self.store, logger=self.logger)

    @property
    def experiment_ids(self) -> List[str]:
        return [e.id for e in self.experiments]

    def before_prompt_build(self, context: PromptBuildContext) -> Optional[PromptOverlay]:
        return self.composer.compose(context)

    def agent_end(self, context: SessionEndContext) -> Optional[str]:
        return self.reporter.report_session_end(context)

    def gateway_start(self, context: Optional[StartupContext] = None) -> None:
        self.reporter.log_startup_summary()

    def dispatch(self, event: HookEvent):
        """Route an event to its handler; only prompt-build returns a value."""
        if isinstance(event, PromptBuildEvent):
            return self.before_prompt_build(event.context)
        if isinstance(event, SessionEndEvent):
            self.agent_end(event.context)
            return None
        if isinstance(event, StartupEvent):
            self.gateway_start(event.context)
            return None
        raise TypeError(f"Unsupported hook event: {type(event).__name__}")


def register(raw_config: Any, logger: Optional[logging.Logger] = None) -> Optional[PromptAbTestPlugin]:
    """
    Build the plugin from raw configuration.

    Returns:
        The active plugin, or None when no experiment is active. An idle
        plugin registers no hooks at all.
    """
    logger = logger or setup_logging()
    active = build_active_list(raw_config, logger=logger)

    if not active:
        logger.info(f"{LOG_PREFIX}: no active experiments configured, plugin is idle")
        return None

    ids = [e.id for e in active]
    logger.info(
        f"{LOG_PREFIX}: loaded {len(active)} active experiment(s): {', '.join(ids)}",
        extra={"experiments": ids},
    )
    return PromptAbTestPlugin(active, logger=logger)
