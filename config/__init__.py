"""
Configuration module for the execution gate.

Exports the configuration models, the loader and the factories that build
the broker, gate and registry from a loaded Config.
"""

from .defaults import DEFAULT_DOCS_DIR, DEFAULT_PROJECT_PERMISSIONS_FILE, DEFAULT_SINGLE_FILE
from .factory import create_broker, create_gate, create_mode_state, create_registry, resolve_base_dir
from .loader import (
    ConfigLayer,
    find_config_layers,
    get_config,
    get_working_directory,
    load_config,
    load_config_file,
    merge_configs,
    strip_jsonc_comments,
)
from .main_config import Config
from .modes_config import ModesConfig
from .permissions_config import PermissionsConfig
from .tools_config import ToolsConfig

__all__ = [
    # Constants
    "DEFAULT_DOCS_DIR",
    "DEFAULT_SINGLE_FILE",
    "DEFAULT_PROJECT_PERMISSIONS_FILE",
    # Config models
    "Config",
    "ModesConfig",
    "PermissionsConfig",
    "ToolsConfig",
    # Loader
    "ConfigLayer",
    "find_config_layers",
    "load_config",
    "get_config",
    "get_working_directory",
    "load_config_file",
    "merge_configs",
    "strip_jsonc_comments",
    # Factories
    "create_broker",
    "create_gate",
    "create_registry",
    "create_mode_state",
    "resolve_base_dir",
]
