"""
File write tool.

Every write is sanitized, checked against the current mode, and approved
through the permission broker before the file is touched.
"""
import os

from pydantic import BaseModel, Field

from core.exceptions import CoreError
from core.permissions import PermissionKind

from ..context import get_tool_context
from ..paths import sanitize_path
from .registry import ToolResult

CONTENT_PREVIEW_CHARS = 200

FILE_WRITE_DESCRIPTION = """Write a file, creating it or replacing its contents.

Parent directories are created as needed. In planning modes only the
planning documents may be written."""


class FileWriteInput(BaseModel):
    file_path: str = Field(description="Path of the file to write")
    content: str = Field(description="Full content of the file")


async def file_write(params: FileWriteInput) -> ToolResult:
    """Write content to a sanitized, mode-checked, approved path."""
    ctx = get_tool_context()
    try:
        safe_path = sanitize_path(params.file_path, ctx.base_dir)
        ctx.check_write_path(safe_path)

        is_new_file = not os.path.exists(safe_path)
        await ctx.ask(
            PermissionKind.WRITE if is_new_file else PermissionKind.EDIT,
            [safe_path],
            f"{'Create' if is_new_file else 'Overwrite'} file: {os.path.relpath(safe_path, ctx.base_dir)}",
            metadata={
                "file_path": safe_path,
                "is_new_file": is_new_file,
                "content_length": len(params.content),
                "preview": params.content[:CONTENT_PREVIEW_CHARS],
            },
        )
    except CoreError as e:
        return ToolResult.failure(str(e))

    existing_mode = None if is_new_file else os.stat(safe_path).st_mode
    os.makedirs(os.path.dirname(safe_path), exist_ok=True)
    with open(safe_path, "w", encoding="utf-8") as f:
        f.write(params.content)
    if existing_mode is not None:
        os.chmod(safe_path, existing_mode)

    return ToolResult(
        success=True,
        output=f"File written successfully: {params.file_path}",
        metadata={
            "type": "file_write",
            "file_path": params.file_path,
            "lines_written": len(params.content.split("\n")),
            "created": is_new_file,
        },
    )
