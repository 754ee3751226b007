"""Tool registry and dispatcher.

The registry is the only place where failures are caught: whatever an
operation raises is logged and turned into an error ToolResult, so nothing
escapes to the MCP transport as an unhandled exception.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from mcp_gmail.errors import ArgumentValidationError, UnknownOperationError

logger = logging.getLogger(__name__)


def _clean_schema(node: Any) -> Any:
    """Strip pydantic-only noise from a JSON schema.

    Removes "title" entries and collapses Optional[X] (anyOf X/null) to X so
    clients see plain JSON-Schema argument descriptors.
    """
    if isinstance(node, list):
        return [_clean_schema(item) for item in node]
    if not isinstance(node, dict):
        return node

    cleaned: dict[str, Any] = {}
    for key, value in node.items():
        if key == "title" and isinstance(value, str):
            continue
        if key == "properties":
            cleaned[key] = {name: _clean_schema(prop) for name, prop in value.items()}
            continue
        cleaned[key] = _clean_schema(value)

    any_of = cleaned.get("anyOf")
    if isinstance(any_of, list):
        non_null = [option for option in any_of if option.get("type") != "null"]
        if len(non_null) == 1:
            del cleaned["anyOf"]
            cleaned = {**non_null[0], **cleaned}
        if cleaned.get("default", ...) is None:
            del cleaned["default"]

    return cleaned


@dataclass(frozen=True)
class Operation:
    """A named, invocable tool.

    Attributes:
        name: Unique tool name.
        description: Human-readable description shown to the agent.
        arguments: Pydantic model describing and validating the arguments.
            Field names match the handler's keyword parameters; aliases are
            the wire names.
        handler: Coroutine function implementing the tool.
    """

    name: str
    description: str
    arguments: type[BaseModel]
    handler: Callable[..., Awaitable[Any]]

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the arguments, keyed by wire names."""
        schema = _clean_schema(self.arguments.model_json_schema(by_alias=True))
        schema.setdefault("properties", {})
        schema.setdefault("required", [])
        return schema

    def decode(self, arguments: dict[str, Any] | None) -> BaseModel:
        """Validate raw arguments into the typed argument model.

        Raises:
            ArgumentValidationError: If a required argument is missing or a
                value has the wrong type.
        """
        try:
            return self.arguments.model_validate(arguments or {})
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or 'arguments'}: {err['msg']}"
                for err in e.errors()
            )
            raise ArgumentValidationError(f"Invalid arguments for {self.name}: {problems}") from e

    async def invoke(self, arguments: dict[str, Any] | None) -> Any:
        args = self.decode(arguments)
        return await self.handler(**args.model_dump())


@dataclass(frozen=True)
class ToolResult:
    """Uniform success/error envelope returned for every call."""

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, value: Any) -> "ToolResult":
        return cls(text=json.dumps(value, indent=2, default=str))

    @classmethod
    def failure(cls, error: BaseException) -> "ToolResult":
        return cls(text=f"Error: {error}", is_error=True)


class ToolRegistry:
    """Closed set of tools, looked up by name.

    Example:
        ```python
        registry = ToolRegistry()
        registry.register(Operation("ping", "Ping", NoArguments, ping))
        result = await registry.call("ping", {})
        ```
    """

    def __init__(self) -> None:
        self._operations: dict[str, Operation] = {}

    def register(self, operation: Operation) -> None:
        """Add a tool.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if operation.name in self._operations:
            raise ValueError(f"Tool already registered: {operation.name}")
        self._operations[operation.name] = operation

    def get(self, name: str) -> Operation:
        """Look up a tool by name.

        Raises:
            UnknownOperationError: If no tool has that name.
        """
        operation = self._operations.get(name)
        if operation is None:
            raise UnknownOperationError(name)
        return operation

    def descriptors(self) -> list[Operation]:
        """All registered tools in registration order."""
        return list(self._operations.values())

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __len__(self) -> int:
        return len(self._operations)

    async def call(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        """Dispatch a tool call and wrap the outcome.

        Never raises: unknown tools, invalid arguments, credential problems
        and Google API failures all come back as an error result.
        """
        try:
            operation = self.get(name)
            result = await operation.invoke(arguments)
        except Exception as e:
            logger.exception(f"Error calling tool {name}")
            return ToolResult.failure(e)

        return ToolResult.success(result)
