"""
Tool registry: registration, mode filtering, validation and dispatch.

execute() is the tool execution boundary. Whatever happens inside a
handler comes back as a ToolResult; no exception crosses it.
"""

import asyncio
import logging
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError

from core.exceptions import CoreError, NotFoundError, ToolValidationError
from core.logging_config import log_timing

from ..context import ToolContext, use_tool_context
from ..modes import Mode, ModeGate, VisibilityClass

logger = logging.getLogger(__name__)


class ToolResult(BaseModel):
    """Outcome of a tool call."""

    success: bool
    output: str
    metadata: dict[str, Any] | None = None

    @classmethod
    def failure(cls, output: str, metadata: dict[str, Any] | None = None) -> "ToolResult":
        return cls(success=False, output=output, metadata=metadata)


ToolHandler = Callable[[Any], Awaitable[ToolResult]]


@dataclass
class ToolDefinition:
    """A registered tool."""

    name: str
    description: str
    input_model: type[BaseModel]
    handler: ToolHandler
    visibility: VisibilityClass | None = None
    timeout: float | None = None

    def parameters_schema(self) -> dict[str, Any]:
        """JSON schema of the tool's input."""
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        return schema


def strip_none_values(value: Any) -> Any:
    """Drop None entries recursively; models send null for omitted optionals."""
    if isinstance(value, dict):
        return {k: strip_none_values(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [strip_none_values(v) for v in value]
    return value


def _format_issues(error: ValidationError) -> list[str]:
    issues = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"])
        issues.append(f"{location}: {err['msg']}" if location else err["msg"])
    return issues


class ToolRegistry:
    """
    Tools keyed by name.

    Re-registering a name replaces the previous tool but keeps its position
    in the ordering. Tools registered without a visibility class are
    treated as unclassified: restrictive modes do not expose them.
    """

    def __init__(
        self,
        gate: ModeGate | None = None,
        visibility_overrides: dict[str, VisibilityClass] | None = None,
        default_timeout: float | None = None,
    ):
        """
        Initialize the registry.

        Args:
            gate: Mode gate deciding visibility (default policy table if omitted)
            visibility_overrides: Visibility classes assigned by configuration
            default_timeout: Timeout in seconds for tools that declare none
        """
        self.gate = gate or ModeGate()
        self.visibility_overrides = dict(visibility_overrides or {})
        self.default_timeout = default_timeout
        self._tools: dict[str, ToolDefinition] = {}

    def register(
        self,
        name: str,
        description: str,
        input_model: type[BaseModel],
        handler: ToolHandler,
        visibility: VisibilityClass | None = None,
        timeout: float | None = None,
    ) -> ToolDefinition:
        """Register a tool, replacing any tool with the same name."""
        tool = ToolDefinition(
            name=name,
            description=description,
            input_model=input_model,
            handler=handler,
            visibility=visibility,
            timeout=timeout,
        )
        if name in self._tools:
            logger.debug("Replacing tool: %s", name)
        self._tools[name] = tool
        return tool

    def unregister(self, name: str) -> bool:
        """Remove a tool. Returns True if it was registered."""
        return self._tools.pop(name, None) is not None

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def get_all(self) -> list[ToolDefinition]:
        return list(self._tools.values())

    def visibility_of(self, name: str) -> VisibilityClass | None:
        """Effective visibility class of a tool, None if unclassified."""
        if name in self.visibility_overrides:
            return self.visibility_overrides[name]
        tool = self._tools.get(name)
        return tool.visibility if tool else None

    def is_visible(self, mode: Mode | str, name: str) -> bool:
        """Check if a registered tool is exposed in a mode."""
        if name not in self._tools:
            return False
        return self.gate.is_tool_visible(mode, name, self.visibility_of(name))

    def get_visible_tools(self, mode: Mode | str) -> list[ToolDefinition]:
        """Tools exposed in a mode, in registration order."""
        return [tool for tool in self._tools.values() if self.is_visible(mode, tool.name)]

    def get_api_definitions(self, mode: Mode | str | None = None, names: list[str] | None = None) -> list[dict[str, Any]]:
        """
        Function definitions (JSON schema) for the model client.

        Args:
            mode: Only include tools visible in this mode
            names: Only include these tools

        Returns:
            List of {"type": "function", "function": {...}} dicts
        """
        tools = self.get_visible_tools(mode) if mode is not None else self.get_all()
        if names is not None:
            tools = [tool for tool in tools if tool.name in names]
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameters_schema(),
                },
            }
            for tool in tools
        ]

    def validate(self, name: str, raw_input: Any) -> BaseModel:
        """
        Validate raw input against a tool's schema.

        Raises:
            NotFoundError: If the tool is not registered
            ToolValidationError: If the input does not match the schema
        """
        tool = self._tools.get(name)
        if tool is None:
            raise NotFoundError("Tool", name)
        try:
            return tool.input_model.model_validate(strip_none_values(raw_input))
        except ValidationError as e:
            raise ToolValidationError(name, _format_issues(e)) from e

    async def execute(self, name: str, raw_input: Any, context: ToolContext | None = None) -> ToolResult:
        """
        Validate input and dispatch to a tool's handler.

        When a context is given it becomes the current tool context for the
        handler, and tools hidden in the context's mode are refused.

        Args:
            name: Tool name
            raw_input: Arguments as sent by the model
            context: Session, mode and gate objects for this call

        Returns:
            The handler's result, or a failed result describing the error
        """
        tool = self._tools.get(name)
        if tool is None:
            return ToolResult.failure(f"Tool not found: {name}")

        if context is not None and not self.is_visible(context.mode, name):
            return ToolResult.failure(f"Tool {name} is not available in {Mode(context.mode).value} mode")

        try:
            params = self.validate(name, raw_input)
        except ToolValidationError as e:
            logger.info("Rejected %s input: %s", name, e)
            return ToolResult.failure(str(e))

        timeout = tool.timeout or self.default_timeout
        scope = use_tool_context(context) if context is not None else nullcontext()
        try:
            with scope, log_timing(logger, f"Tool {name}"):
                if timeout:
                    return await asyncio.wait_for(tool.handler(params), timeout)
                return await tool.handler(params)
        except asyncio.TimeoutError as e:
            if not timeout:
                return self._failed(name, e)
            logger.warning("Tool %s timed out after %ss", name, timeout)
            return ToolResult.failure(f"Tool execution timed out after {timeout}s")
        except CoreError as e:
            return ToolResult.failure(str(e), {"error": type(e).__name__})
        except Exception as e:
            return self._failed(name, e)

    @staticmethod
    def _failed(name: str, error: Exception) -> ToolResult:
        logger.exception("Tool %s failed", name)
        return ToolResult.failure(str(error) or type(error).__name__, {"error": type(error).__name__})
