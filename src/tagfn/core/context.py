"""Render contexts and getters.

A context is the data a node is evaluated against. Combinators derive child
contexts from it (``each`` per entry, ``within`` per shift) without mutating
it, and every child keeps a reference to its parent and to the root data of
the whole render call.
"""

from collections.abc import Mapping
from typing import Any, Callable, Iterator, Optional, Union

from tagfn.core.exceptions import TemplateTypeError


class _Undefined:
    """Marker for an absent value, distinct from ``None``."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Any = _Undefined()


class Context(Mapping):
    """Immutable view of one level of render data.

    ``parent`` and ``root`` are plain back-references: a child never owns
    or changes the context it was derived from.

    Reads go through to the data: ``c["name"]`` for mappings, ``c.name``
    for mapping keys and object attributes alike. Names the context defines
    itself (``data``, ``parent``, ``root``, ``get``, ...) take precedence.
    """

    __slots__ = ("data", "parent", "_root")

    def __init__(
        self,
        data: Any = None,
        parent: Optional["Context"] = None,
        root: Any = UNDEFINED,
    ) -> None:
        object.__setattr__(self, "data", data)
        object.__setattr__(self, "parent", parent)
        object.__setattr__(self, "_root", root)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Context is immutable")

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        value = self.lookup(name)
        if value is UNDEFINED:
            value = getattr(self.data, name, UNDEFINED)
        if value is UNDEFINED:
            raise AttributeError(f"{name!r} not found in {self!r}")
        return value

    @property
    def root(self) -> Any:
        """Data of the top-level context of this render call."""
        if self._root is UNDEFINED:
            return self.data
        return self._root

    @classmethod
    def of(cls, value: Any) -> "Context":
        if isinstance(value, Context):
            return value
        return cls(value)

    @classmethod
    def for_entry(cls, parent: "Context", entry: Any, index: Any) -> "Context":
        return cls(
            {"entry": entry, "index": index, "parent": parent},
            parent=parent,
            root=parent.root,
        )

    @classmethod
    def shifted(cls, parent: "Context", value: Any) -> "Context":
        return cls(value, parent=parent, root=parent.root)

    def lookup(self, key: str) -> Any:
        """Look up one path segment. Missing keys give ``UNDEFINED``."""
        if key == "$parent":
            return self.parent if self.parent is not None else UNDEFINED
        if key == "$root":
            return self.root
        return lookup(self.data, key)

    # Mapping protocol, so function getters can write ``c["url"]``

    def __getitem__(self, key: str) -> Any:
        value = self.lookup(key)
        if value is UNDEFINED:
            raise KeyError(key)
        return value

    def __iter__(self) -> Iterator[str]:
        if isinstance(self.data, Mapping):
            return iter(self.data)
        return iter(())

    def __len__(self) -> int:
        if isinstance(self.data, Mapping):
            return len(self.data)
        return 0

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.lookup(key) is not UNDEFINED

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        return f"Context({self.data!r})"


def lookup(obj: Any, key: str) -> Any:
    """Fail-soft single step lookup on any kind of value."""
    if obj is None or obj is UNDEFINED:
        return UNDEFINED
    if isinstance(obj, Context):
        return obj.lookup(key)
    if isinstance(obj, Mapping):
        return obj.get(key, UNDEFINED)
    if isinstance(obj, (list, tuple)):
        if key.isascii() and key.isdecimal() and int(key) < len(obj):
            return obj[int(key)]
        return UNDEFINED
    if isinstance(obj, (str, bytes, int, float)):
        return UNDEFINED
    return getattr(obj, key, UNDEFINED)


class Getter:
    """Pulls a value out of a context."""

    def resolve(self, context: Any) -> Any:
        raise NotImplementedError()

    def __call__(self, context: Any) -> Any:
        return self.resolve(context)


class PathGetter(Getter):
    """Dotted key path such as ``"entry.user.name"`` or ``"items.0"``."""

    __slots__ = ("path", "parts")

    def __init__(self, path: str) -> None:
        self.path = path
        self.parts = tuple(part for part in path.split(".") if part)

    def resolve(self, context: Any) -> Any:
        value = context
        for part in self.parts:
            value = lookup(value, part)
            if value is UNDEFINED:
                break
        return value

    def __repr__(self) -> str:
        return f"PathGetter({self.path!r})"


class FunctionGetter(Getter):
    """Wraps a plain ``fn(context)`` callable."""

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[Any], Any]) -> None:
        self.fn = fn

    def resolve(self, context: Any) -> Any:
        return unwrap(self.fn(context))

    def __repr__(self) -> str:
        return f"FunctionGetter({getattr(self.fn, '__name__', self.fn)!r})"


GetterSpec = Union[Getter, str, Callable[[Any], Any]]


def getter(spec: GetterSpec) -> Getter:
    """Normalize a path string or a callable into a ``Getter``."""
    if isinstance(spec, Getter):
        return spec
    if isinstance(spec, str):
        return PathGetter(spec)
    if callable(spec):
        return FunctionGetter(spec)
    raise TemplateTypeError(
        f"Getter must be a key path or a callable, got {type(spec).__name__}"
    )


G = getter


def unwrap(value: Any) -> Any:
    """A ``Context`` handed back by a getter stands for its data."""
    if isinstance(value, Context):
        return value.data
    return value
