"""
Typed reads: check a stored value against a requested type without coercing it.
"""

from __future__ import annotations

import types
from functools import lru_cache
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import (
    ConfigDict,
    PydanticUserError,
    TypeAdapter,
    ValidationError,
)

from ..errors import TypeMismatchError

_UNION_TYPES = (Union, getattr(types, "UnionType", Union))


@lru_cache(maxsize=256)
def _strict_adapter(tp: Any) -> TypeAdapter:
    # plain classes inside generics (list[Engine]) fall back to isinstance
    return TypeAdapter(tp, config=ConfigDict(arbitrary_types_allowed=True))


def _origin_check(value: Any, tp: Any) -> bool:
    origin = get_origin(tp)
    if origin is Annotated:
        return is_compatible(value, get_args(tp)[0])
    if origin in _UNION_TYPES:
        return any(is_compatible(value, arg) for arg in get_args(tp))
    if isinstance(origin, type):
        return isinstance(value, origin)
    return False


def is_compatible(value: Any, tp: Any) -> bool:
    """True when ``value`` already *is* a ``tp``.

    Plain classes use ``isinstance``; typing constructs (``list[int]``,
    ``str | None``, ``Literal[...]``) go through a strict pydantic
    ``TypeAdapter`` so nothing gets converted along the way. Constructs
    pydantic cannot build a schema for (or that cannot be cached) are checked
    against their origin class only.
    """
    if tp is Any or tp is object:
        return True
    if isinstance(tp, type) and get_origin(tp) is None:
        return isinstance(value, tp)
    try:
        adapter = _strict_adapter(tp)
    except (TypeError, PydanticUserError):
        return _origin_check(value, tp)
    try:
        adapter.validate_python(value, strict=True)
    except ValidationError:
        return False
    return True


def check_type(name: str, value: Any, tp: Any) -> Any:
    """Return ``value`` unchanged, or raise TypeMismatchError."""
    if not is_compatible(value, tp):
        raise TypeMismatchError(name, tp, value)
    return value
