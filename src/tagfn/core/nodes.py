"""Node model and the recursive render engine.

Every piece of content is classified once into a ``NodeKind`` when a
template is built. ``render`` then walks the compiled fragments depth first
and appends text to a single buffer owned by the top-level call.
"""

import enum
import types
from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Iterable, List, NamedTuple, Optional, Tuple

from tagfn.core.context import UNDEFINED, Context, FunctionGetter, Getter, unwrap
from tagfn.core.exceptions import UnsupportedContentError
from tagfn.runtime.escape import escape_html

Buffer = List[str]
RenderFn = Callable[[Context, Buffer, bool], Any]


class NodeKind(enum.Enum):
    EMPTY = "empty"
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    NODE = "node"
    GETTER = "getter"
    SEQUENCE = "sequence"
    ATTRIBUTES = "attributes"


class Fragment(NamedTuple):
    kind: NodeKind
    value: Any


class Node:
    """A deferred, reusable unit of output.

    Called standalone (``node(context)``) it renders into a private buffer
    and returns the resulting string. Called with a buffer
    (``node(context, buffer, escaped)``) it appends to that buffer and
    returns nothing (or further content to render in place); this is how
    nodes nest inside each other without building intermediate strings.

    Nodes hold no per-render state, so one instance can be rendered any
    number of times, including from independent threads.
    """

    __slots__ = ("fn", "name")

    def __init__(self, fn: RenderFn, name: Optional[str] = None) -> None:
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "node")

    def __call__(
        self,
        context: Any = None,
        buffer: Optional[Buffer] = None,
        escaped: bool = False,
    ) -> Any:
        context = Context.of(context)
        if buffer is None:
            own: Buffer = []
            render(self.fn(context, own, escaped), context, own, escaped)
            return "".join(own)
        # Anything fn returns is further content for the caller to render
        return self.fn(context, buffer, escaped)

    def render(self, context: Any = None) -> str:
        return self(context) or ""

    def __repr__(self) -> str:
        return f"<Node {self.name}>"


def with_buffer(fn: RenderFn, name: Optional[str] = None) -> Node:
    """Turn ``fn(context, buffer, escaped)`` into a dual-use ``Node``."""
    return Node(fn, name)


def classify(entity: Any) -> NodeKind:
    """Decide the runtime shape of a piece of content."""
    if entity is None or entity is UNDEFINED or isinstance(entity, bool):
        return NodeKind.EMPTY
    if isinstance(entity, str):
        return NodeKind.TEXT
    if isinstance(entity, (int, float, Decimal)):
        return NodeKind.NUMBER
    if isinstance(entity, date):
        return NodeKind.DATE
    if isinstance(entity, Node):
        return NodeKind.NODE
    if callable(entity):
        return NodeKind.GETTER
    if isinstance(entity, (list, tuple, types.GeneratorType)):
        return NodeKind.SEQUENCE
    if isinstance(entity, Mapping):
        return NodeKind.ATTRIBUTES
    raise UnsupportedContentError(entity)


def compile_content(items: Iterable[Any]) -> Tuple[Fragment, ...]:
    """Classify content once at build time.

    Raises ``UnsupportedContentError`` for mappings and unknown shapes.
    """
    fragments = []
    for item in items:
        kind = classify(item)
        if kind is NodeKind.EMPTY:
            continue
        if kind is NodeKind.ATTRIBUTES:
            raise UnsupportedContentError(item)
        if kind is NodeKind.SEQUENCE:
            item = compile_content(item)
        elif kind is NodeKind.GETTER and not isinstance(item, Getter):
            item = FunctionGetter(item)
        fragments.append(Fragment(kind, item))
    return tuple(fragments)


def format_date(value: date) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2020-01-01T00:00:00.000Z."""
    if not isinstance(value, datetime):
        return value.isoformat()
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S") + f".{value.microsecond // 1000:03d}Z"


def render(entity: Any, context: Context, buffer: Buffer, escaped: bool = False) -> None:
    """Render any content into ``buffer``.

    ``escaped`` marks the whole subtree as trusted: once set, no descendant
    text is escaped.
    """
    if isinstance(entity, Fragment):
        kind, value = entity
    else:
        entity = unwrap(entity)
        kind, value = classify(entity), entity

    if kind is NodeKind.EMPTY:
        return
    if kind is NodeKind.TEXT:
        if value:
            buffer.append(value if escaped else escape_html(value))
    elif kind is NodeKind.NUMBER:
        buffer.append(str(value))
    elif kind is NodeKind.DATE:
        buffer.append(format_date(value))
    elif kind is NodeKind.NODE:
        render(value(context, buffer, escaped), context, buffer, escaped)
    elif kind is NodeKind.GETTER:
        render(value(context), context, buffer, escaped)
    elif kind is NodeKind.SEQUENCE:
        for member in value:
            render(member, context, buffer, escaped)
    else:
        raise UnsupportedContentError(value)
