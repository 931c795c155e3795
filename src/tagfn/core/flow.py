"""Control-flow combinators: each, within, group, safe and if_.

None of these evaluate anything when built; they return nodes that resolve
their getters against whatever context they are later rendered with.
"""

from collections.abc import Mapping
from typing import Any, Callable, Iterator, Tuple

from tagfn.core.context import UNDEFINED, Context, GetterSpec, PathGetter, getter
from tagfn.core.nodes import Buffer, Node, compile_content, render, with_buffer


def _entries(collection: Any) -> Iterator[Tuple[Any, Any]]:
    if isinstance(collection, Mapping):
        for key, value in collection.items():
            yield key, value
    else:
        yield from enumerate(collection)


def each(collection: GetterSpec, *content: Any) -> Node:
    """Render ``content`` once per entry of a collection.

    Each entry is rendered against a child context exposing ``entry``,
    ``index`` and ``parent``; ``$root`` stays the top-level data. A falsy
    or missing collection renders nothing.
    """
    get_collection = getter(collection)
    children = compile_content(content)

    def render_each(context: Context, buffer: Buffer, escaped: bool) -> None:
        items = get_collection(context)
        if not items:
            return
        for index, entry in _entries(items):
            render(children, Context.for_entry(context, entry, index), buffer, escaped)

    return with_buffer(render_each, name="each")


def within(value: GetterSpec, *content: Any) -> Node:
    """Render ``content`` against a sub-value of the current context.

    The previous context stays reachable as ``$parent``.
    """
    get_value = getter(value)
    children = compile_content(content)

    def render_within(context: Context, buffer: Buffer, escaped: bool) -> None:
        render(children, Context.shifted(context, get_value(context)), buffer, escaped)

    return with_buffer(render_within, name="within")


def group(*content: Any) -> Node:
    children = compile_content(content)

    def render_group(context: Context, buffer: Buffer, escaped: bool) -> None:
        render(children, context, buffer, escaped)

    return with_buffer(render_group, name="group")


def safe(*content: Any) -> Node:
    """Render ``content`` without escaping, including nested tags."""
    children = compile_content(content)

    def render_safe(context: Context, buffer: Buffer, escaped: bool) -> None:
        render(children, context, buffer, True)

    return with_buffer(render_safe, name="safe")


def matches(expected: Mapping) -> Callable[[Any], bool]:
    """Predicate true when every ``path: value`` pair equals the context."""
    checks = tuple((PathGetter(str(key)), value) for key, value in expected.items())

    def predicate(context: Any) -> bool:
        for path, value in checks:
            actual = path(context)
            if actual is UNDEFINED or actual != value:
                return False
        return True

    return predicate


def if_(condition: Any, if_true: Any = None, if_false: Any = None) -> Node:
    """Render ``if_true`` or ``if_false`` depending on ``condition``.

    ``condition`` is a getter, or a mapping matched key by key against the
    context. The branch not taken is never touched.
    """
    if isinstance(condition, Mapping):
        test = getter(matches(condition))
    else:
        test = getter(condition)
    when_true = compile_content((if_true,))
    when_false = compile_content((if_false,))

    def render_if(context: Context, buffer: Buffer, escaped: bool) -> None:
        render(when_true if test(context) else when_false, context, buffer, escaped)

    return with_buffer(render_if, name="if")

