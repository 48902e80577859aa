"""ModesConfig model."""

from pydantic import BaseModel, Field

from .defaults import DEFAULT_DOCS_DIR, DEFAULT_SINGLE_FILE


class ModesConfig(BaseModel):
    """Write targets of the planning modes."""

    docs_dir: str = Field(default=DEFAULT_DOCS_DIR, description="Directory PLANNER mode may write to")
    single_file: str = Field(default=DEFAULT_SINGLE_FILE, description="File name PLAN-PRD mode may write")
