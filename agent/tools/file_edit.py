"""
File edit tool: exact string replacement in an existing file.
"""
import os

from pydantic import BaseModel, Field

from core.exceptions import CoreError
from core.permissions import PermissionKind

from ..context import get_tool_context
from ..paths import sanitize_path
from .registry import ToolResult

PREVIEW_CHARS = 100

FILE_EDIT_DESCRIPTION = """Perform an exact string replacement in a file.

old_string must match the file contents exactly, including whitespace. If
it occurs more than once, either make it unique with more context or set
replace_all to replace every occurrence."""


class FileEditInput(BaseModel):
    file_path: str = Field(description="Path of the file to modify")
    old_string: str = Field(min_length=1, description="Text to replace")
    new_string: str = Field(description="Replacement text")
    replace_all: bool = Field(default=False, description="Replace every occurrence")


def _preview(text: str) -> str:
    return text[:PREVIEW_CHARS] + ("..." if len(text) > PREVIEW_CHARS else "")


async def file_edit(params: FileEditInput) -> ToolResult:
    """Replace text in a sanitized, mode-checked file after approval."""
    ctx = get_tool_context()
    try:
        safe_path = sanitize_path(params.file_path, ctx.base_dir)
        ctx.check_write_path(safe_path)
    except CoreError as e:
        return ToolResult.failure(str(e))

    if not os.path.isfile(safe_path):
        return ToolResult.failure(f"File not found: {params.file_path}")

    with open(safe_path, "r", encoding="utf-8") as f:
        content = f.read()

    occurrences = content.count(params.old_string)
    if occurrences == 0:
        return ToolResult.failure(f"old_string not found in file: {params.file_path}")
    if occurrences > 1 and not params.replace_all:
        return ToolResult.failure(
            f"old_string found {occurrences} times in file. "
            f"Use replace_all: true to replace all occurrences."
        )

    try:
        await ctx.ask(
            PermissionKind.EDIT,
            [safe_path],
            f"Edit file: {os.path.relpath(safe_path, ctx.base_dir)}",
            metadata={
                "file_path": safe_path,
                "old_string": _preview(params.old_string),
                "new_string": _preview(params.new_string),
                "replacements": occurrences if params.replace_all else 1,
            },
        )
    except CoreError as e:
        return ToolResult.failure(str(e))

    if params.replace_all:
        new_content = content.replace(params.old_string, params.new_string)
    else:
        new_content = content.replace(params.old_string, params.new_string, 1)

    with open(safe_path, "w", encoding="utf-8") as f:
        f.write(new_content)

    replaced = occurrences if params.replace_all else 1
    return ToolResult(
        success=True,
        output=f"Edited {params.file_path}: {replaced} replacement(s)",
        metadata={
            "type": "file_edit",
            "file_path": params.file_path,
            "replacements": replaced,
        },
    )
