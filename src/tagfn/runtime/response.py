import logging
from typing import Any, Mapping, Optional

from starlette.background import BackgroundTask
from starlette.responses import HTMLResponse

from tagfn.core.nodes import Node

logger = logging.getLogger(__name__)


class TemplateResponse(HTMLResponse):
    """HTML response rendered from a template node.

    The node is rendered eagerly in the constructor, so render errors surface
    in the endpoint rather than while the body is being sent.
    """

    def __init__(
        self,
        node: Node,
        context: Any = None,
        status_code: int = 200,
        headers: Optional[Mapping[str, str]] = None,
        media_type: Optional[str] = None,
        background: Optional[BackgroundTask] = None,
    ) -> None:
        self.node = node
        self.context = context
        content = node(context)
        logger.debug("Rendered %r (%d chars)", node, len(content))
        super().__init__(
            content,
            status_code=status_code,
            headers=headers,
            media_type=media_type,
            background=background,
        )


def render_response(node: Node, context: Any = None, **kwargs: Any) -> TemplateResponse:
    return TemplateResponse(node, context, **kwargs)
