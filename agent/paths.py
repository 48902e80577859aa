"""
Path sanitization for untrusted file paths.

Every user-supplied path goes through sanitize_path() before any read,
write or stat. The check runs twice: once on the lexical path to catch
"../" traversal, and once after resolving symlinks to catch a symlinked
directory inside the base that points outside of it. Only the existing
part of the path is resolved, so targets that do not exist yet (a file
about to be created) can be sanitized too.
"""

import logging
import os

from core.exceptions import SecurityError

logger = logging.getLogger(__name__)


def _canonicalize(path: str) -> str:
    """Resolve symlinks, falling back to the lexical path if that fails."""
    try:
        return os.path.realpath(path)
    except OSError:
        return path


def _split_existing(path: str) -> tuple[str, list[str]]:
    """
    Split a path into its deepest existing ancestor and the missing tail.

    Dangling symlinks count as existing so that they get resolved.
    """
    existing = path
    tail: list[str] = []
    while not os.path.lexists(existing):
        parent = os.path.dirname(existing)
        if parent == existing:
            break
        tail.append(os.path.basename(existing))
        existing = parent
    tail.reverse()
    return existing, tail


def is_within(path: str, base_dir: str) -> bool:
    """
    Check if a path is equal to or nested under a directory.

    Pure string comparison on absolute, normalized paths.

    Args:
        path: Absolute path to check
        base_dir: Absolute directory

    Returns:
        True if path is base_dir or below it
    """
    path = os.path.normcase(os.path.normpath(path))
    base = os.path.normcase(os.path.normpath(base_dir))
    if path == base:
        return True
    prefix = base if base.endswith(os.sep) else base + os.sep
    return path.startswith(prefix)


def _escapes_lexically(candidate: str, base: str) -> bool:
    try:
        relative = os.path.relpath(candidate, base)
    except ValueError:
        # Different drives on Windows
        return True
    return relative == os.pardir or relative.startswith(os.pardir + os.sep)


def sanitize_path(file_path: str, base_dir: str | None = None) -> str:
    """
    Canonicalize an untrusted path and confine it to a base directory.

    Args:
        file_path: Absolute or base-relative path from the user or model
        base_dir: Directory the path must stay inside (defaults to cwd)

    Returns:
        Absolute path with symlinks resolved along its existing part

    Raises:
        SecurityError: If the path traverses or links out of base_dir
    """
    base = os.path.abspath(base_dir if base_dir is not None else os.getcwd())
    candidate = os.path.abspath(os.path.join(base, file_path))

    if _escapes_lexically(candidate, base):
        logger.warning("Path traversal blocked: %s (base %s)", file_path, base)
        raise SecurityError(f"Path traversal detected: {file_path}", file_path)

    existing, tail = _split_existing(candidate)
    resolved = os.path.join(_canonicalize(existing), *tail)
    real_base = _canonicalize(base)

    if not is_within(resolved, real_base):
        logger.warning("Symlink bypass blocked: %s -> %s (base %s)", file_path, resolved, real_base)
        raise SecurityError(f"Symlink bypass detected: {file_path}", file_path)

    return resolved
