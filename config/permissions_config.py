"""PermissionsConfig model."""

from pydantic import BaseModel, Field

from .defaults import DEFAULT_PROJECT_PERMISSIONS_FILE


class PermissionsConfig(BaseModel):
    """Permission broker settings."""

    persist_always: bool = Field(
        default=False,
        description='Persist "always" approvals to the project permissions file',
    )
    project_file: str = Field(
        default=DEFAULT_PROJECT_PERMISSIONS_FILE,
        description="Project permissions file, relative to the project root",
    )
    express: bool = Field(
        default=False,
        description="Start with express mode enabled (every prompt auto-approved)",
    )
