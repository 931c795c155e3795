"""Element nodes built from a compact ``tag#id.class`` descriptor."""

import json
import re
import types
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from tagfn.core.config import DEFAULT_CONFIG, TemplateConfig
from tagfn.core.context import UNDEFINED, Context, unwrap
from tagfn.core.exceptions import DescriptorError, UnsupportedContentError
from tagfn.core.nodes import (
    Buffer,
    Fragment,
    Node,
    NodeKind,
    classify,
    compile_content,
    format_date,
    render,
    with_buffer,
)
from tagfn.runtime.escape import escape_html

_DESCRIPTOR_RE = re.compile(
    r"^(?P<tag>[A-Za-z][\w:-]*)?(?:#(?P<id>[\w:-]+))?(?P<classes>(?:\.[\w:-]+)*)$"
)


class TagDescriptor(NamedTuple):
    tag: str
    id: Optional[str]
    classes: Tuple[str, ...]

    @property
    def fixed_classes(self) -> str:
        return " ".join(self.classes)

    @classmethod
    def parse(cls, descriptor: str) -> "TagDescriptor":
        return _parse_descriptor(descriptor)


@lru_cache(maxsize=512)
def _parse_descriptor(descriptor: str) -> TagDescriptor:
    match = _DESCRIPTOR_RE.match(descriptor.strip())
    if match is None:
        raise DescriptorError(descriptor)
    classes = tuple(c for c in match.group("classes").split(".") if c)
    return TagDescriptor(match.group("tag") or "div", match.group("id"), classes)


def _resolve(value: Any, context: Context) -> Any:
    if callable(value):
        return unwrap(value(context))
    return value


def _to_json(value: Any, context: Context) -> Any:
    """Resolve callables inside nested attribute data."""
    value = _resolve(value, context)
    if isinstance(value, Mapping):
        resolved = {}
        for key, item in value.items():
            item = _to_json(item, context)
            if item is not UNDEFINED:
                resolved[str(key)] = item
        return resolved
    if isinstance(value, (list, tuple)):
        return [None if v is UNDEFINED else v for v in (_to_json(i, context) for i in value)]
    if isinstance(value, date):
        return format_date(value)
    if isinstance(value, Decimal):
        return str(value)
    return value


def render_class(fixed: str, value: Any, context: Context) -> str:
    """Merge descriptor classes with a ``class`` attribute value.

    ``value`` may be a string, a callable of the context, or a mapping of
    class name to a flag (or callable returning one).
    """
    classes: List[str] = [fixed] if fixed else []

    if callable(value):
        result = _resolve(value, context)
        if result is not None and result is not UNDEFINED and result != "":
            classes.append(str(result))
    elif isinstance(value, str):
        if value:
            classes.append(value)
    elif isinstance(value, Mapping):
        for name, toggler in value.items():
            if _resolve(toggler, context):
                classes.append(name)

    return " ".join(classes)


def render_attribute(
    name: str,
    value: Any,
    context: Context,
    escaped: bool,
    fixed_classes: str = "",
    config: TemplateConfig = DEFAULT_CONFIG,
) -> Optional[str]:
    """Serialize one attribute, or return ``None`` to omit it."""
    if name == "class":
        rendered = render_class(fixed_classes, value, context)
        if not rendered and config.omit_empty_class:
            return None
    else:
        value = _resolve(value, context)

        if config.is_boolean(name):
            return name if value else None
        if value is UNDEFINED:
            return None

        if value is None:
            rendered = ""
        elif isinstance(value, bool):
            rendered = "true" if value else "false"
        elif isinstance(value, (Mapping, list, tuple)):
            rendered = json.dumps(
                _to_json(value, context), separators=(",", ":"), ensure_ascii=False
            )
        elif isinstance(value, date):
            rendered = format_date(value)
        else:
            rendered = str(value)

    return f'{name}="{rendered if escaped else escape_html(rendered)}"'


def _reject_numbers(entity: Any) -> None:
    # Literal numbers must be wrapped (group(5), or a getter); runtime values may be numeric
    kind = classify(entity)
    if kind is NodeKind.NUMBER:
        raise UnsupportedContentError(entity)
    if kind is NodeKind.SEQUENCE and not isinstance(entity, types.GeneratorType):
        for member in entity:
            _reject_numbers(member)


def tag(descriptor: str, *data: Any, config: TemplateConfig = DEFAULT_CONFIG) -> Node:
    """Build an element node.

    Args:
        descriptor: ``tag[#id][.class]*``, e.g. ``"div#main.card.wide"``
        *data: attribute mappings (merged in order, later keys win) and
            content (text, dates, nodes, callables, lists). A bare number
            raises ``UnsupportedContentError``; wrap it in ``group``.
            ``None`` and ``False`` are skipped so ``cond and {...}`` works.
        config: boolean attribute set and empty-class rule

    Returns:
        A ``Node`` rendering ``<tag ...>content</tag>``.
    """
    parsed = TagDescriptor.parse(descriptor)
    attrs: Dict[str, Any] = {}
    content: List[Fragment] = []

    if parsed.id:
        attrs["id"] = parsed.id

    for entity in data:
        kind = classify(entity)
        if kind is NodeKind.ATTRIBUTES:
            for key, val in entity.items():
                if not isinstance(key, str):
                    raise UnsupportedContentError(key, where="attribute name")
                attrs[key] = val
        elif kind is not NodeKind.EMPTY:
            _reject_numbers(entity)
            content.extend(compile_content((entity,)))

    fixed_classes = parsed.fixed_classes
    if "class" not in attrs and fixed_classes:
        attrs["class"] = ""

    name = parsed.tag
    attr_items = tuple(attrs.items())
    children = tuple(content)

    def render_tag(context: Context, buffer: Buffer, escaped: bool) -> None:
        rendered = [
            attr
            for attr in (
                render_attribute(key, val, context, escaped, fixed_classes, config)
                for key, val in attr_items
            )
            if attr is not None
        ]
        buffer.append(f"<{name} {' '.join(rendered)}>" if rendered else f"<{name}>")
        for child in children:
            render(child, context, buffer, escaped)
        buffer.append(f"</{name}>")

    return with_buffer(render_tag, name=descriptor)
