"""Default configuration values."""

# Planning mode write targets
DEFAULT_DOCS_DIR = "docs"
DEFAULT_SINGLE_FILE = "PRD.md"

# Persisted "always" approvals, relative to the project root
DEFAULT_PROJECT_PERMISSIONS_FILE = ".gatekeep/permissions.json"

# Config file locations
CONFIG_DIR_NAME = ".gatekeep"
CONFIG_FILE_NAMES = ["gatekeep.jsonc", "gatekeep.json"]
GLOBAL_CONFIG_FILE = "gatekeep.jsonc"
