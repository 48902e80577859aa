"""
Read-only search tools: glob for file names and grep for file contents.

Both walk the project tree in-process, skip version control and dependency
directories, and refuse search roots outside the project.
"""
import fnmatch
import os
import re

from pydantic import BaseModel, Field

from core.exceptions import CoreError

from ..context import get_tool_context
from ..paths import sanitize_path
from .registry import ToolResult

# Directories never worth searching
SKIP_DIRS = {".git", "node_modules", "__pycache__", ".venv", "venv", ".mypy_cache", ".pytest_cache"}

DEFAULT_MAX_RESULTS = 100
MAX_MATCH_LINE_LENGTH = 500

GLOB_DESCRIPTION = """Find files by name pattern (for example "**/*.py" or "src/*.ts").

Results are sorted by modification time, newest first."""

GREP_DESCRIPTION = """Search file contents with a regular expression.

Returns matching lines as path:line: text. Use include to restrict the
search to file names matching a glob pattern."""


class GlobInput(BaseModel):
    pattern: str = Field(min_length=1, description="Glob pattern to match file paths against")
    path: str | None = Field(default=None, description="Directory to search in (defaults to the project root)")


class GrepInput(BaseModel):
    pattern: str = Field(min_length=1, description="Regular expression to search for")
    path: str | None = Field(default=None, description="File or directory to search in")
    include: str | None = Field(default=None, description='File name filter, e.g. "*.py"')
    case_insensitive: bool = Field(default=False, description="Case-insensitive search")
    max_results: int = Field(default=DEFAULT_MAX_RESULTS, ge=1, le=1000, description="Maximum matches to return")


def walk_files(root: str):
    """Yield every file under root, skipping ignored directories."""
    if os.path.isfile(root):
        yield root
        return
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        for filename in sorted(filenames):
            yield os.path.join(dirpath, filename)


def _matches_glob(rel_path: str, pattern: str) -> bool:
    rel_path = rel_path.replace(os.sep, "/")
    if fnmatch.fnmatch(rel_path, pattern):
        return True
    # "**/" also matches zero directories
    if pattern.startswith("**/") and fnmatch.fnmatch(rel_path, pattern[3:]):
        return True
    # Bare file patterns match at any depth
    if "/" not in pattern:
        return fnmatch.fnmatch(os.path.basename(rel_path), pattern)
    return False


def _search_root(path: str | None) -> tuple[str, str]:
    ctx = get_tool_context()
    root = sanitize_path(path, ctx.base_dir) if path else ctx.base_dir
    return ctx.base_dir, root


async def glob(params: GlobInput) -> ToolResult:
    """Find files whose project-relative path matches a glob pattern."""
    try:
        base_dir, root = _search_root(params.path)
    except CoreError as e:
        return ToolResult.failure(str(e))

    if not os.path.isdir(root):
        return ToolResult.failure(f"Directory not found: {params.path}")

    matches = [
        file_path for file_path in walk_files(root)
        if _matches_glob(os.path.relpath(file_path, root), params.pattern)
    ]
    matches.sort(key=lambda p: os.path.getmtime(p), reverse=True)

    truncated = len(matches) > DEFAULT_MAX_RESULTS
    shown = [os.path.relpath(p, base_dir) for p in matches[:DEFAULT_MAX_RESULTS]]
    if not shown:
        output = "No files found"
    else:
        output = "\n".join(shown)
        if truncated:
            output += f"\n[Showing {len(shown)} of {len(matches)} files]"

    return ToolResult(
        success=True,
        output=output,
        metadata={"type": "glob", "pattern": params.pattern, "count": len(matches), "truncated": truncated},
    )


async def grep(params: GrepInput) -> ToolResult:
    """Search file contents under a sanitized root."""
    try:
        base_dir, root = _search_root(params.path)
    except CoreError as e:
        return ToolResult.failure(str(e))

    try:
        regex = re.compile(params.pattern, re.IGNORECASE if params.case_insensitive else 0)
    except re.error as e:
        return ToolResult.failure(f"Invalid regex pattern: {e}")

    if not os.path.exists(root):
        return ToolResult.failure(f"Path not found: {params.path}")

    results = []
    files_matched = 0
    truncated = False
    for file_path in walk_files(root):
        if params.include and not fnmatch.fnmatch(os.path.basename(file_path), params.include):
            continue
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        except (UnicodeDecodeError, OSError):
            continue

        rel_path = os.path.relpath(file_path, base_dir)
        found = False
        for number, line in enumerate(lines, start=1):
            if not regex.search(line):
                continue
            found = True
            if len(results) >= params.max_results:
                truncated = True
                break
            results.append(f"{rel_path}:{number}: {line[:MAX_MATCH_LINE_LENGTH]}")
        files_matched += found
        if truncated:
            break

    output = "\n".join(results) if results else "No matches found"
    if truncated:
        output += f"\n[Results limited to {params.max_results} matches]"

    return ToolResult(
        success=True,
        output=output,
        metadata={
            "type": "grep",
            "pattern": params.pattern,
            "matches": len(results),
            "files_matched": files_matched,
            "truncated": truncated,
        },
    )
