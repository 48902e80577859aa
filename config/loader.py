"""
Layered JSONC configuration.

A global file in the user's home is read first, then the first project
file found. Later layers override earlier ones key by key, recursing into
nested sections, and the merged dict is validated as a Config.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from functools import lru_cache, reduce
from pathlib import Path
from typing import Any

from .defaults import CONFIG_DIR_NAME, CONFIG_FILE_NAMES, GLOBAL_CONFIG_FILE
from .main_config import Config

logger = logging.getLogger(__name__)

# A string literal is matched first so comment markers inside it survive
_JSONC_TOKEN = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)


@dataclass
class ConfigLayer:
    """One config file that contributed to the merged result."""

    path: Path
    data: dict[str, Any] = field(default_factory=dict)


def strip_jsonc_comments(content: str) -> str:
    """Remove `//` and `/* */` comments from JSONC text, leaving strings intact."""
    return _JSONC_TOKEN.sub(lambda m: m.group(1) or "", content)


def load_config_file(path: Path) -> dict[str, Any] | None:
    """
    Read one config file.

    Comments are stripped for `.jsonc` files. A file that is missing,
    unreadable, malformed or not a JSON object yields None; the last three
    are logged so a typo does not silently fall back to defaults.
    """
    if not path.exists():
        return None

    try:
        text = path.read_text()
        data = json.loads(strip_jsonc_comments(text) if path.suffix == ".jsonc" else text)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring config at %s: top level is not an object", path)
        return None
    return data


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge `override` into a copy of `base`; nested dicts merge, anything else replaces."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = merge_configs(current, value)
        merged[key] = value
    return merged


def project_config_paths(project_root: Path) -> list[Path]:
    """Project-level config locations, in lookup order."""
    return [project_root / name for name in CONFIG_FILE_NAMES] + [
        project_root / CONFIG_DIR_NAME / GLOBAL_CONFIG_FILE
    ]


def find_config_layers(project_root: Path, global_root: Path) -> list[ConfigLayer]:
    """
    Collect the config files that apply, lowest precedence first.

    Args:
        project_root: Directory searched for a project config
        global_root: Directory holding the global `.gatekeep` dir

    Returns:
        At most two layers: the global file and the first project file found
    """
    layers = []

    global_path = global_root / CONFIG_DIR_NAME / GLOBAL_CONFIG_FILE
    global_data = load_config_file(global_path)
    if global_data:
        layers.append(ConfigLayer(global_path, global_data))

    for path in project_config_paths(project_root):
        data = load_config_file(path)
        if data:
            layers.append(ConfigLayer(path, data))
            break

    return layers


def load_config(project_root: Path | None = None, global_root: Path | None = None) -> Config:
    """
    Build the effective Config for a project.

    Args:
        project_root: Project directory (defaults to the working directory)
        global_root: Home directory for the global config (defaults to `Path.home()`)

    Returns:
        Validated Config; raises pydantic.ValidationError for bad values
    """
    layers = find_config_layers(
        project_root if project_root is not None else Path(get_working_directory()),
        global_root if global_root is not None else Path.home(),
    )
    for layer in layers:
        logger.debug("Applying config layer %s", layer.path)

    return Config(**reduce(merge_configs, (layer.data for layer in layers), {}))


def get_working_directory() -> str:
    """Base directory for the gate: `WORKING_DIR` if set, else the process cwd."""
    return os.environ.get("WORKING_DIR", os.getcwd())


@lru_cache(maxsize=1)
def get_config(project_root: Path | None = None) -> Config:
    """Cached `load_config`; call `get_config.cache_clear()` to pick up edits."""
    return load_config(project_root)
