"""JSON reporter for scripts and editor integrations."""

from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any

from svnscope import __version__


def to_jsonable(value: Any) -> Any:
    """Recursively convert dataclasses, enums and containers to plain JSON types."""
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def render(kind: str, payload: Any) -> str:
    """Return a formatted JSON document wrapping *payload*."""
    return json.dumps(
        {"version": __version__, "kind": kind, "result": to_jsonable(payload)},
        indent=2,
    )
