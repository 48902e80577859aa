"""
Shell execution tool.

Commands run through asyncio's subprocess support. Anything that is not a
plain read-only command is approved through the permission broker first.
"""
import asyncio
import os
import re

from pydantic import BaseModel, Field

from core.exceptions import CoreError
from core.logging_config import timed
from core.permissions import PermissionKind, is_dangerous_bash_command

from ..context import get_tool_context
from ..paths import is_within, sanitize_path
from .registry import ToolResult

DEFAULT_TIMEOUT_SECONDS = 120
MAX_OUTPUT_LINES = 2000

# Always require approval, even if they look like a safe command
DESTRUCTIVE_COMMANDS = [
    # File/directory deletion
    "rm", "rmdir", "unlink", "shred",
    # Force/dangerous git operations
    "git push --force", "git push -f", "git reset --hard", "git clean -fd",
    # System commands
    "sudo", "su", "chmod", "chown", "chgrp",
    # Package managers that modify the system
    "apt", "apt-get", "yum", "dnf", "pacman", "brew install", "brew uninstall",
    # Process control
    "kill", "killall", "pkill",
    # Disk operations
    "mkfs", "fdisk", "dd",
    # Network
    "iptables", "ufw",
]

# Read-only or build commands that run without approval
SAFE_COMMANDS = [
    "ls", "cat", "head", "tail", "less", "more", "file", "stat", "wc", "du", "df",
    "find", "which", "whereis", "type",
    "grep", "rg", "ag", "ack", "sed -n",
    "git status", "git log", "git diff", "git show", "git branch", "git remote -v",
    "git ls-files", "git rev-parse", "git describe", "git tag -l",
    "npm test", "npm ls", "cargo check", "cargo test", "go test", "go vet",
    "pytest", "python -m pytest", "python -m unittest",
    "echo", "printf", "date", "pwd", "whoami", "hostname", "uname",
    "python --version", "node -v", "git --version",
]

# Options that turn a listed safe command into one that writes or runs programs.
# Matched as token prefixes against the lowercased command line.
UNSAFE_OPTIONS = {
    "find": ("-delete", "-exec", "-execdir", "-ok", "-okdir", "-fprint", "-fls"),
    "rg": ("--pre",),
    "git branch": ("-d", "--delete", "-m", "--move", "-c", "--copy", "-f", "--force"),
}

# Chaining, substitution and redirection make any prefix check meaningless
SHELL_CONTROL = re.compile(r"[;&|`<>]|\$\(")

# Absolute paths and ./ ../ relative paths inside a command line
PATH_TOKEN = re.compile(r"(?:^|\s)((?:\.{1,2}/|/)[^\s'\"]*)")

BASH_DESCRIPTION = """Execute a shell command in the project directory.

Read-only commands (ls, cat, grep, git status, ...) run immediately; other
commands need the user's approval. Use workdir instead of cd."""


class BashInput(BaseModel):
    command: str = Field(min_length=1, description="The command to execute")
    description: str = Field(default="", description="What the command does, in a few words")
    workdir: str | None = Field(default=None, description="Working directory, relative to the project root")
    timeout: int | None = Field(default=None, ge=1, le=600, description="Timeout in seconds")


def _starts_with_command(command: str, prefix: str) -> bool:
    return command == prefix or command.startswith(prefix + " ")


def _unsafe_option(safe: str, command: str) -> str | None:
    options = UNSAFE_OPTIONS.get(safe, ())
    for token in command.split()[len(safe.split()):]:
        if token.startswith(options):
            return token
    return None


def needs_permission(command: str, cwd: str) -> tuple[bool, str | None]:
    """
    Decide whether a command needs approval.

    Args:
        command: The command line
        cwd: Directory the command runs in

    Returns:
        Tuple of (needed, reason)
    """
    normalized = " ".join(command.strip().lower().split())

    for destructive in DESTRUCTIVE_COMMANDS:
        if _starts_with_command(normalized, destructive):
            return True, f"Destructive command: {destructive}"

    if SHELL_CONTROL.search(command):
        return True, "Command uses shell operators"

    for match in PATH_TOKEN.finditer(command):
        target = os.path.abspath(os.path.join(cwd, match.group(1)))
        if not is_within(target, cwd):
            return True, f"Path outside working directory: {match.group(1)}"

    for safe in SAFE_COMMANDS:
        if _starts_with_command(normalized, safe):
            unsafe = _unsafe_option(safe, normalized)
            if unsafe:
                return True, f"Command uses option {unsafe}"
            return False, None

    return True, "Unknown command"


@timed("Shell command")
async def run_command(command: str, cwd: str, timeout: int) -> tuple[int, str, bool]:
    """
    Run a command and collect its output.

    Returns:
        Tuple of (exit_code, output, truncated)

    Raises:
        TimeoutError: If the command runs longer than timeout seconds
    """
    process = await asyncio.create_subprocess_shell(
        command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise TimeoutError(f"Command timed out after {timeout} seconds")

    lines = stdout.decode(errors="replace").split("\n")
    truncated = len(lines) > MAX_OUTPUT_LINES
    output = "\n".join(lines[:MAX_OUTPUT_LINES])
    if truncated:
        output += f"\n[Output truncated to {MAX_OUTPUT_LINES} lines]"
    if stderr:
        output += f"\n{stderr.decode(errors='replace')}"
    return process.returncode or 0, output.strip("\n"), truncated


async def bash(params: BashInput) -> ToolResult:
    """Run a command after approval when it is not known to be safe."""
    ctx = get_tool_context()
    try:
        cwd = sanitize_path(params.workdir, ctx.base_dir) if params.workdir else ctx.base_dir
        needed, reason = needs_permission(params.command, cwd)
        if needed:
            is_dangerous, warning = is_dangerous_bash_command(params.command)
            await ctx.ask(
                PermissionKind.BASH,
                [params.command],
                params.description or f"Execute: {params.command[:50]}",
                metadata={
                    "command": params.command,
                    "workdir": cwd,
                    "reason": reason,
                    "is_dangerous": is_dangerous,
                    "warning": warning or None,
                },
            )
    except CoreError as e:
        return ToolResult.failure(str(e))

    timeout = params.timeout or DEFAULT_TIMEOUT_SECONDS
    metadata = {"type": "bash", "command": params.command, "description": params.description, "workdir": cwd}
    try:
        exit_code, output, truncated = await run_command(params.command, cwd, timeout)
    except TimeoutError as e:
        return ToolResult.failure(str(e), {**metadata, "exit_code": -1})

    return ToolResult(
        success=exit_code == 0,
        output=output or "Command completed successfully.",
        metadata={**metadata, "exit_code": exit_code, "truncated": truncated},
    )
