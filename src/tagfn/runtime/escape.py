"""HTML escaping utilities for XSS prevention."""

from typing import Any


def escape_html(value: Any) -> str:
    """Escape HTML special characters to prevent XSS.

    Escapes: & < > " ' `

    Args:
        value: Any value to escape (will be converted to string first)

    Returns:
        HTML-escaped string safe for embedding in HTML content or attributes
    """
    s = str(value)
    # "&" goes first, the other entities contain ampersands
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
        .replace("`", "&#x60;")
    )
