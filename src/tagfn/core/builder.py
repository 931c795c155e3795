import logging
from typing import Any, Iterable, Optional

from tagfn.core import flow
from tagfn.core.config import DEFAULT_CONFIG, TemplateConfig
from tagfn.core.context import GetterSpec
from tagfn.core.nodes import Node
from tagfn.core.tag import tag as build_tag

logger = logging.getLogger(__name__)


class Builder:
    """Template builder bound to one ``TemplateConfig``.

    Usage:
        h = Builder(omit_empty_class=True)
        page = h("ul.menu", h.each("items", h("li", G("entry.title"))))
        page({"items": [...]})
    """

    def __init__(
        self,
        config: Optional[TemplateConfig] = None,
        *,
        boolean_attributes: Optional[Iterable[str]] = None,
        omit_empty_class: Optional[bool] = None,
    ) -> None:
        config = config or DEFAULT_CONFIG
        if boolean_attributes is not None:
            config = config.with_boolean_attributes(*boolean_attributes)
        if omit_empty_class is not None:
            config = TemplateConfig(config.boolean_attributes, omit_empty_class)
        self.config = config
        logger.debug(
            "Builder configured (omit_empty_class=%s, %d boolean attributes)",
            config.omit_empty_class,
            len(config.boolean_attributes),
        )

    def tag(self, descriptor: str, *data: Any) -> Node:
        return build_tag(descriptor, *data, config=self.config)

    __call__ = tag

    def each(self, collection: GetterSpec, *content: Any) -> Node:
        return flow.each(collection, *content)

    def within(self, value: GetterSpec, *content: Any) -> Node:
        return flow.within(value, *content)

    def group(self, *content: Any) -> Node:
        return flow.group(*content)

    def safe(self, *content: Any) -> Node:
        return flow.safe(*content)

    def if_(self, condition: Any, if_true: Any = None, if_false: Any = None) -> Node:
        return flow.if_(condition, if_true, if_false)

    when = if_


h = Builder()
