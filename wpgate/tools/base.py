"""Tool catalog primitives shared by every tool module.

A tool is a name, a description, a pydantic input model (exported as the MCP
``inputSchema``) and an async handler that receives the WordPress client and
the validated arguments and returns one block of text.
"""

import json
import re
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from wpgate.framework.errors import ValidationFailure
from wpgate.wordpress.client import WordPressClient

ToolHandler = Callable[[WordPressClient, Any], Awaitable[str]]

_TAG_RE = re.compile(r"<[^>]*>")
NO_FIELDS_MESSAGE = "No fields to update were provided."


class ToolInput(BaseModel):
    """Base for tool argument models."""

    model_config = ConfigDict(extra="forbid")


class NoArguments(ToolInput):
    pass


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: type[ToolInput]
    handler: ToolHandler

    def input_schema(self) -> dict[str, Any]:
        return self.input_model.model_json_schema()


class ToolCatalog:
    """Ordered registry of tools, keyed by name."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> ToolSpec:
        if spec.name in self._tools:
            msg = f"Tool '{spec.name}' is already registered"
            raise ValueError(msg)
        self._tools[spec.name] = spec
        return spec

    def tool(
        self, name: str, description: str, input_model: type[ToolInput] = NoArguments
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator form of ``register``."""

        def decorator(handler: ToolHandler) -> ToolHandler:
            self.register(ToolSpec(name, description, input_model, handler))
            return handler

        return decorator

    def extend(self, other: "ToolCatalog") -> None:
        for spec in other:
            self.register(spec)

    def get(self, name: str) -> ToolSpec | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools


# =============================================================================
# Formatting helpers
# =============================================================================


def to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def strip_html(text: str | None, limit: int | None = None) -> str:
    plain = _TAG_RE.sub("", text or "")
    return plain[:limit] if limit is not None else plain


def rendered(item: dict[str, Any], key: str) -> str:
    """Return ``item[key]["rendered"]`` (WordPress wraps HTML fields this way)."""
    value = item.get(key)
    if isinstance(value, dict):
        return value.get("rendered") or ""
    return value or ""


def update_fields(args: ToolInput, *exclude: str) -> dict[str, Any]:
    """Fields the caller actually set, minus identifiers.

    Raises:
        ValidationFailure: If nothing is left to send
    """
    data = args.model_dump(exclude_none=True, exclude=set(exclude))
    if not data:
        raise ValidationFailure(NO_FIELDS_MESSAGE)
    return data


def found_summary(noun: str, total: int, shown: int, items: Any) -> str:
    return f"Found {total} {noun} (page shows {shown}):\n\n{to_json(items)}"
