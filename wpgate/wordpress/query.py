"""Query-string encoding following WordPress REST API conventions.

- ``None`` values are dropped entirely
- lists/tuples become one comma-separated value (``categories=1,2,3``)
- booleans are the literals ``true`` / ``false``
- everything else is ``str()``-ed and percent-encoded
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any
from urllib.parse import quote_plus

from pydantic import BaseModel


def _encode_value(value: Any) -> str:
    # bool before int: True is an int in Python
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(quote_plus(_encode_scalar(item)) for item in value)
    return quote_plus(_encode_scalar(value))


def _encode_scalar(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_query(params: Mapping[str, Any] | BaseModel | None) -> str:
    """Serialize parameters into ``?k=v&...`` or ``""`` when nothing remains."""
    if params is None:
        return ""
    if isinstance(params, BaseModel):
        params = params.model_dump(exclude_none=True, mode="json", by_alias=True)

    pairs = [
        f"{quote_plus(str(key))}={_encode_value(value)}"
        for key, value in params.items()
        if value is not None
    ]
    return f"?{'&'.join(pairs)}" if pairs else ""
