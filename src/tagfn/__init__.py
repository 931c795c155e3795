from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tagfn")
except PackageNotFoundError:
    __version__ = "unknown"

from tagfn.core.builder import Builder, h
from tagfn.core.config import DEFAULT_BOOLEAN_ATTRIBUTES, TemplateConfig
from tagfn.core.context import (
    UNDEFINED,
    Context,
    FunctionGetter,
    G,
    Getter,
    PathGetter,
    getter,
)
from tagfn.core.exceptions import (
    DescriptorError,
    TemplateError,
    TemplateTypeError,
    UnsupportedContentError,
)
from tagfn.core.nodes import Node, NodeKind, render, with_buffer
from tagfn.runtime.escape import escape_html

tag = h.tag
each = h.each
within = h.within
group = h.group
safe = h.safe
if_ = h.if_
when = h.if_

__all__ = [
    "Builder",
    "h",
    "tag",
    "each",
    "within",
    "group",
    "safe",
    "if_",
    "when",
    "getter",
    "G",
    "Getter",
    "PathGetter",
    "FunctionGetter",
    "Context",
    "UNDEFINED",
    "Node",
    "NodeKind",
    "render",
    "with_buffer",
    "escape_html",
    "TemplateConfig",
    "DEFAULT_BOOLEAN_ATTRIBUTES",
    "TemplateError",
    "TemplateTypeError",
    "UnsupportedContentError",
    "DescriptorError",
]
