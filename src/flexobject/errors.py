"""
Exceptions raised by FlexObject.

Reading an unknown property is *not* an error: ``get_value`` returns ``None``
and ``contains_key`` returns ``False``. Only typed reads and the manual
notification hook raise.
"""

from typing import Any


class FlexError(Exception):
    """Base class for every flexobject error."""


class TypeMismatchError(FlexError, TypeError):
    """A typed read found a value whose runtime type is incompatible."""

    def __init__(self, name: str, expected: Any, value: Any):
        self.name = name
        self.expected = expected
        self.actual = type(value)
        self.value = value
        super().__init__(
            f"property {name!r} holds {self.actual.__name__}, "
            f"expected {_type_label(expected)}"
        )


class NotifyWithoutNameError(FlexError, ValueError):
    """``notify_changed`` could not work out which property changed."""

    def __init__(self, caller: str | None = None):
        self.caller = caller
        detail = f" (called from {caller})" if caller else ""
        super().__init__(
            "notify_changed() needs a property name; pass it explicitly "
            "or call it from inside a property setter" + detail
        )


def _type_label(tp: Any) -> str:
    return tp.__name__ if isinstance(tp, type) else repr(tp)
