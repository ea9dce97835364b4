"""
Static property discovery for FlexObject subclasses.

A *static* property is one the class declares:

* a pydantic model field (``name: str | None = None``), or
* a public ``property`` with a setter (typically backed by a private attr).

The table is built once per class by ``FlexMeta`` and never changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from pydantic import BaseModel

logger = logging.getLogger(__name__)

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]


@dataclass(frozen=True)
class StaticDescriptor:
    name: str
    getter: Getter
    setter: Setter
    # writes the absence value; None means "call setter with None"
    reset: Optional[Callable[[Any], None]] = None

    def clear(self, obj: Any) -> None:
        if self.reset is not None:
            self.reset(obj)
        else:
            self.setter(obj, None)


def _field_setter(name: str) -> Setter:
    # BaseModel.__setattr__ keeps fields_set and validate_assignment working
    def setter(obj: BaseModel, value: Any) -> None:
        BaseModel.__setattr__(obj, name, value)

    return setter


def _field_reset(name: str) -> Callable[[Any], None]:
    # absence is written past validate_assignment: remove never fails
    def reset(obj: BaseModel) -> None:
        obj.__dict__[name] = None

    return reset


class StaticDescriptorTable:
    """Ordered, read-only name -> StaticDescriptor mapping."""

    __slots__ = ("_descriptors",)

    def __init__(self, descriptors: Tuple[StaticDescriptor, ...] = ()):
        self._descriptors: Dict[str, StaticDescriptor] = {d.name: d for d in descriptors}

    @classmethod
    def for_model(cls, model: type[BaseModel]) -> "StaticDescriptorTable":
        """Discover ``model``'s declared properties.

        Fields come first, in ``model_fields`` order (inherited fields before
        the subclass's own), followed by settable properties in base-first
        MRO order. Private names are skipped, as is anything defined on
        ``BaseModel`` itself.
        """
        found: Dict[str, StaticDescriptor] = {}

        for name in model.model_fields:
            if not name.startswith("_"):
                found[name] = StaticDescriptor(
                    name, attrgetter(name), _field_setter(name), _field_reset(name)
                )

        for klass in reversed(model.__mro__):
            if klass in BaseModel.__mro__:
                continue
            for name, attr in vars(klass).items():
                if name.startswith("_") or not isinstance(attr, property):
                    continue
                if attr.fget is None or attr.fset is None:
                    # read-only on this class; drops a setter a base declared
                    found.pop(name, None)
                    continue
                found[name] = StaticDescriptor(name, attr.fget, attr.fset)

        table = cls(tuple(found.values()))
        logger.debug("%s: static properties %s", model.__name__, table.names())
        return table

    def get(self, name: str) -> Optional[StaticDescriptor]:
        return self._descriptors.get(name)

    def names(self) -> Tuple[str, ...]:
        return tuple(self._descriptors)

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"StaticDescriptorTable({list(self._descriptors)})"
