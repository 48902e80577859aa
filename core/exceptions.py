"""
Core domain exceptions.

These exceptions are transport-agnostic. Tool handlers convert them into
failed tool results; the server layer converts them into HTTP responses.
"""


class CoreError(Exception):
    """Base exception for all core errors."""

    pass


class NotFoundError(CoreError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvalidOperationError(CoreError):
    """Raised when an operation cannot be performed in the current state."""

    pass


class ToolValidationError(CoreError):
    """Raised when tool input does not match the tool's declared schema."""

    def __init__(self, tool_name: str, issues: list[str]):
        self.tool_name = tool_name
        self.issues = issues
        super().__init__(f"Invalid parameters: {', '.join(issues)}")


class PermissionDeniedError(CoreError):
    """Raised when a permission request is rejected."""

    pass


class SecurityError(CoreError):
    """Raised when a path escapes its base directory."""

    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(message)


class ModeRestrictionError(CoreError):
    """Raised when the current mode forbids an operation."""

    def __init__(self, message: str, mode: str):
        self.mode = mode
        super().__init__(message)
