"""ToolsConfig model."""

from pydantic import BaseModel, Field

from agent.modes import VisibilityClass


class ToolsConfig(BaseModel):
    """Tool visibility and execution settings."""

    visibility: dict[str, VisibilityClass] = Field(
        default_factory=dict,
        description="Visibility class per tool name, overriding the tool's own",
    )
    default_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Timeout in seconds for tools that declare none",
    )
