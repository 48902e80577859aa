"""
File read tool.
"""
import os

from pydantic import BaseModel, Field

from core.exceptions import CoreError

from ..context import get_tool_context
from ..paths import sanitize_path
from .registry import ToolResult

# Default limits
DEFAULT_LINE_LIMIT = 2000
MAX_LINE_LENGTH = 2000

FILE_READ_DESCRIPTION = """Read a file from the project.

Returns the file with line numbers (cat -n format). Use offset and limit to
page through large files. Paths are relative to the project root; paths that
leave the project are refused."""


class FileReadInput(BaseModel):
    file_path: str = Field(description="Path of the file to read")
    offset: int | None = Field(default=None, ge=1, description="Line number to start from (1-based)")
    limit: int | None = Field(default=None, ge=1, description="Number of lines to read")


async def file_read(params: FileReadInput) -> ToolResult:
    """Read a sanitized path and return numbered lines."""
    ctx = get_tool_context()
    try:
        safe_path = sanitize_path(params.file_path, ctx.base_dir)
    except CoreError as e:
        return ToolResult.failure(str(e))

    if not os.path.exists(safe_path):
        return ToolResult.failure(f"File not found: {params.file_path}")
    if os.path.isdir(safe_path):
        return ToolResult.failure(f"Path is a directory: {params.file_path}")

    with open(safe_path, "r", encoding="utf-8", errors="replace") as f:
        lines = f.read().splitlines()

    start = (params.offset or 1) - 1
    limit = params.limit or DEFAULT_LINE_LIMIT
    selected = lines[start:start + limit]

    numbered = []
    for number, line in enumerate(selected, start=start + 1):
        if len(line) > MAX_LINE_LENGTH:
            line = line[:MAX_LINE_LENGTH] + "..."
        numbered.append(f"{number:6d}\t{line}")

    truncated = start + limit < len(lines)
    output = "\n".join(numbered) if numbered else "(empty file)"
    if truncated:
        output += f"\n[Showing lines {start + 1}-{start + len(selected)} of {len(lines)}]"

    return ToolResult(
        success=True,
        output=output,
        metadata={
            "type": "file_read",
            "file_path": params.file_path,
            "lines_read": len(selected),
            "total_lines": len(lines),
            "truncated": truncated,
        },
    )
