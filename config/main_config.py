"""Main Config model."""

from pydantic import BaseModel, Field

from agent.modes import DEFAULT_MODE, Mode

from .modes_config import ModesConfig
from .permissions_config import PermissionsConfig
from .tools_config import ToolsConfig


class Config(BaseModel):
    """Main configuration model."""

    default_mode: Mode = Field(
        default=DEFAULT_MODE,
        description="Mode a new session starts in",
    )
    permissions: PermissionsConfig = Field(
        default_factory=PermissionsConfig,
        description="Permission broker settings",
    )
    modes: ModesConfig = Field(
        default_factory=ModesConfig,
        description="Planning mode write targets",
    )
    tools: ToolsConfig = Field(
        default_factory=ToolsConfig,
        description="Tool visibility and timeouts",
    )
