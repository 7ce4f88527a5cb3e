"""
Pydantic models for the prompt A/B test service.

Field names are snake_case in Python; the camelCase aliases are the
configuration and wire spelling. Both are accepted on input.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class PromptVariant(BaseModel):
    """
    A single variant within an experiment. Include a "control" variant with no
    overrides to keep a holdout group that sees the default prompt.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(..., description="Variant identifier, unique within its experiment")
    # None means the default weight of 1; 0 disables the variant without removing it
    weight: Optional[Union[int, float]] = Field(None, description="Relative selection weight")
    prepend_context: Optional[str] = Field(
        None,
        alias="prependContext",
        description="Text injected before the system prompt context sections",
    )
    system_prompt: Optional[str] = Field(
        None,
        alias="systemPrompt",
        description="Full system prompt replacement",
    )

    @property
    def effective_weight(self) -> float:
        """Weight used for selection, clamped at zero."""
        return max(0, 1 if self.weight is None else self.weight)


class AbTestExperiment(BaseModel):
    """A single A/B test experiment. Multiple experiments can run in parallel."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(..., min_length=1)
    description: Optional[str] = None
    enabled: bool = True
    variants: List[PromptVariant] = Field(..., min_length=1)
    agent_ids: Optional[List[str]] = Field(
        None,
        alias="agentIds",
        description="Restrict the experiment to these agent IDs; empty applies to all",
    )

    def applies_to(self, agent_id: Optional[str]) -> bool:
        """Check the agentIds allow-list against a request's agent."""
        if not self.agent_ids:
            return True
        return bool(agent_id) and agent_id in self.agent_ids


class PromptAbTestConfig(BaseModel):
    """Raw plugin configuration. Entries are validated by the registry, not here."""
    experiments: List[Any] = Field(default_factory=list)


class PromptOverlay(BaseModel):
    """Composed prompt modification for one request."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    system_prompt: Optional[str] = Field(None, alias="systemPrompt")
    prepend_context: Optional[str] = Field(None, alias="prependContext")

    def to_payload(self) -> Dict[str, str]:
        """Only the fields that were actually produced, camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


# --- Hook contexts ---


class PromptBuildContext(BaseModel):
    """Context passed with each outbound prompt assembly."""
    model_config = ConfigDict(populate_by_name=True)

    session_key: Optional[str] = Field(None, alias="sessionKey")
    session_id: Optional[str] = Field(None, alias="sessionId")
    agent_id: Optional[str] = Field(None, alias="agentId")


class SessionEndContext(BaseModel):
    """Context passed once a session/run completes."""
    model_config = ConfigDict(populate_by_name=True)

    session_key: Optional[str] = Field(None, alias="sessionKey")
    session_id: Optional[str] = Field(None, alias="sessionId")


class StartupContext(BaseModel):
    """Context passed at service start."""
    port: Optional[int] = None


# --- HTTP API ---


class PromptBuildResponse(BaseModel):
    """Response for the prompt-build hook"""
    modified: bool
    overlay: Optional[Dict[str, str]] = None


class SessionEndResponse(BaseModel):
    """Response for the session-end hook"""
    status: str = "ok"
    reported: bool = False


class StartupResponse(BaseModel):
    """Response for the startup hook"""
    status: str = "ok"
    experiments: int = 0


class RenderRequest(PromptBuildContext):
    """Request model for rendering a prompt with the session's overlay"""
    base_prompt: Optional[str] = Field(
        None,
        alias="basePrompt",
        description="Prompt to modify; defaults to the default-system fragment",
    )


class RenderResponse(BaseModel):
    """Rendered prompt response"""
    model_config = ConfigDict(populate_by_name=True)

    system_prompt: str = Field(..., alias="systemPrompt")
    modified: bool


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    version: str
    active_experiments: List[str]
    uptime_seconds: Optional[int] = None
