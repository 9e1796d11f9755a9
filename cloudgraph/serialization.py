"""JSON-compatible rendering of the result dataclasses."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter


@lru_cache(maxsize=32)
def _adapter(tp: type) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


def to_jsonable(value: object) -> Any:
    """Return *value* as plain dicts/lists/strings/numbers.

    Enums become their values; ``None`` fields are kept.
    """
    return _adapter(type(value)).dump_python(value, mode="json")
