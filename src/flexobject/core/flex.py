"""
FlexObject kernel – declared (static) properties and free-form (dynamic)
properties behind one access surface.

* Static properties: pydantic fields and settable ``property`` objects,
  discovered once per class by ``FlexMeta``.
* Dynamic properties: pydantic's extras dict (``extra="allow"``), insertion
  ordered.
* Static always wins: writing a declared name never creates a dynamic entry.
* Only dynamic mutations notify automatically. A declared property that wants
  change notifications calls ``self.notify_changed()`` from its own setter.

Not thread-safe. Guard mutation, enumeration and subscription externally if
an instance is shared between threads.
"""

from __future__ import annotations

import inspect
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Iterator, List, Mapping, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    PrivateAttr,
    model_serializer,
    model_validator,
)

from ..errors import NotifyWithoutNameError
from ..events import ChangeNotifier, PropertyChangedHandler
from .descriptors import StaticDescriptorTable
from .typed import check_type

ModelMeta = BaseModel.__class__


# metaclass that builds the static descriptor table
class FlexMeta(ModelMeta):
    """Attach ``__flex_descriptors__`` at class-creation time."""

    def __new__(mcls, name: str, bases, ns, **kw):
        cls = super().__new__(mcls, name, bases, ns, **kw)  # pydantic fields first
        cls.__flex_descriptors__ = StaticDescriptorTable.for_model(cls)
        return cls


class FlexObject(BaseModel, metaclass=FlexMeta):
    """Object with declared properties plus arbitrary extra ones.

    Subclass it and declare fields as with any pydantic model::

        class Story(FlexObject):
            title: str | None = None

        s = Story()
        s["title"] = "Draft"      # declared field
        s["mood"] = "tense"       # dynamic property
        s.get_properties()        # ['title', 'mood']

    ``try_get_value``, ``set_value`` and ``remove`` are the only methods that
    touch storage; override them to customize behaviour.
    """

    __flex_descriptors__: ClassVar[StaticDescriptorTable]

    _notifier: ChangeNotifier = PrivateAttr(default_factory=ChangeNotifier)

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    # ------------------------------------------------------------------ #
    # resolver
    # ------------------------------------------------------------------ #
    def try_get_value(self, name: str) -> Tuple[Any, bool]:
        """Return ``(value, True)``; unknown names give ``(None, True)``."""
        descriptor = self.__flex_descriptors__.get(name)
        if descriptor is not None:
            return descriptor.getter(self), True
        return self._dynamic.get(name), True

    def set_value(self, name: str, value: Any) -> bool:
        """Route to the declared setter, or store dynamically and notify."""
        descriptor = self.__flex_descriptors__.get(name)
        if descriptor is not None:
            descriptor.setter(self, value)
        else:
            self._dynamic[name] = value
            self._notifier.notify(name)
        return True

    def remove(self, name: str) -> bool:
        """Reset a declared property to ``None`` or delete a dynamic one.

        Unknown names are ignored; the result is always ``True``. Fields are
        reset without ``validate_assignment``; a property's own setter still
        sees the ``None``.
        """
        descriptor = self.__flex_descriptors__.get(name)
        if descriptor is not None:
            descriptor.clear(self)
        elif name in self._dynamic:
            del self._dynamic[name]
            self._notifier.notify(name)
        return True

    def contains_key(self, name: str) -> bool:
        return name in self.__flex_descriptors__ or name in self._dynamic

    def get_properties(self) -> List[str]:
        """Declared names in declaration order, then dynamic names in insertion order."""
        return [*self.__flex_descriptors__, *self._dynamic]

    def clear(self) -> None:
        """Reset every declared property and drop every dynamic one."""
        for name in self.get_properties():
            self.remove(name)

    # ------------------------------------------------------------------ #
    # convenience helpers
    # ------------------------------------------------------------------ #
    def get_value(self, name: str) -> Any:
        value, _ = self.try_get_value(name)
        return value

    def get_as(self, name: str, type_: Any, default: Any = None) -> Any:
        """Typed read: ``default`` when absent, TypeMismatchError when incompatible."""
        value = self.get_value(name)
        if value is None:
            return default
        return check_type(name, value, type_)

    def try_get_as(self, name: str, type_: Any, default: Any = None) -> Tuple[Any, bool]:
        """Like ``get_as`` but reports absence as ``(default, False)``.

        A present value of the wrong type still raises TypeMismatchError.
        """
        value = self.get_value(name)
        if value is None:
            return default, False
        return check_type(name, value, type_), True

    def update(self, other: Optional[Mapping[str, Any]] = None, /, **kv: Any) -> None:
        """Set every key/value pair through ``set_value``."""
        for source in (other or {}, kv):
            for key, value in source.items():
                self.set_value(key, value)

    def keys(self) -> List[str]:
        return self.get_properties()

    def items(self) -> List[Tuple[str, Any]]:
        return [(name, self.get_value(name)) for name in self.get_properties()]

    @property
    def dynamic_properties(self) -> Mapping[str, Any]:
        """Read-only view of the dynamic store."""
        return MappingProxyType(self._dynamic)

    # ------------------------------------------------------------------ #
    # change notification
    # ------------------------------------------------------------------ #
    def subscribe(self, handler: PropertyChangedHandler) -> PropertyChangedHandler:
        return self._notifier.subscribe(handler)

    def unsubscribe(self, handler: PropertyChangedHandler) -> None:
        self._notifier.unsubscribe(handler)

    def notify_changed(self, name: Optional[str] = None) -> None:
        """Broadcast a change of ``name``.

        Call this from a declared property's setter; when ``name`` is omitted
        the setter's own name is used. Raises NotifyWithoutNameError when no
        name can be worked out, even if nobody is subscribed.
        """
        if name is None:
            frame = inspect.currentframe()
            caller = frame.f_back if frame is not None else None
            name = caller.f_code.co_name if caller is not None else None
            del frame, caller
            if name is None or name.startswith("<"):
                raise NotifyWithoutNameError(name)
        if not name:
            raise NotifyWithoutNameError()
        self._notifier.notify(name)

    # ------------------------------------------------------------------ #
    # indexer & attribute sugar
    # ------------------------------------------------------------------ #
    def __getitem__(self, name: str) -> Any:
        return self.get_value(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set_value(name, value)

    def __delitem__(self, name: str) -> None:
        self.remove(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains_key(name)

    def __setattr__(self, name: str, value: Any):
        if name.startswith("_"):
            return super().__setattr__(name, value)
        self.set_value(name, value)

    def __delattr__(self, name: str):
        if name.startswith("_"):
            return super().__delattr__(name)
        self.remove(name)

    def __iter__(self) -> Iterator[Tuple[str, Any]]:  # type: ignore[override]
        yield from self.items()

    def __repr_args__(self):
        yield from self.items()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FlexObject):
            return NotImplemented
        return type(self) is type(other) and self.items() == other.items()

    # ------------------------------------------------------------------ #
    # serialization
    # ------------------------------------------------------------------ #
    @model_serializer(mode="plain")
    def _serialize_properties(self) -> Dict[str, Any]:
        return dict(self.items())

    @model_validator(mode="wrap")
    @classmethod
    def _route_declared_properties(cls, data: Any, handler):
        """Hand fields and extras to pydantic, then run property setters."""
        if not isinstance(data, Mapping):
            return handler(data)
        via_setter, rest = cls._split_declared(data)
        if not via_setter:
            return handler(data)
        instance = handler(rest)
        instance.update(via_setter)
        return instance

    # ------------------------------------------------------------------ #
    # construction & copying
    # ------------------------------------------------------------------ #
    @classmethod
    def model_construct(cls, _fields_set: set[str] | None = None, **values: Any):
        via_setter, rest = cls._split_declared(values)
        instance = super().model_construct(_fields_set, **rest)
        instance.update(via_setter)
        return instance

    def model_copy(self, *, update: Optional[Mapping[str, Any]] = None, deep: bool = False):
        """Copy with a fresh subscriber list; ``update`` keys follow ``set_value`` routing."""
        via_setter, rest = self._split_declared(update or {})
        copied = super().model_copy(update=rest or None, deep=deep)
        copied.update(via_setter)
        return copied

    def __copy__(self):
        copied = super().__copy__()
        copied._notifier = ChangeNotifier()
        return copied

    def __deepcopy__(self, memo: Optional[Dict[int, Any]] = None):
        copied = super().__deepcopy__(memo)
        copied._notifier = ChangeNotifier()
        return copied

    @classmethod
    def _split_declared(
        cls, data: Mapping[str, Any]
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Split off keys owned by a declared property that is not a model field."""
        table = cls.__flex_descriptors__
        via_setter: Dict[str, Any] = {}
        rest: Dict[str, Any] = {}
        for key, value in data.items():
            if key in table and key not in cls.model_fields:
                via_setter[key] = value
            else:
                rest[key] = value
        return via_setter, rest

    # internal util
    @property
    def _dynamic(self) -> Dict[str, Any]:
        extra = self.__pydantic_extra__
        if extra is None:
            # model_construct() / subclass turned extras off
            extra = {}
            object.__setattr__(self, "__pydantic_extra__", extra)
        return extra
