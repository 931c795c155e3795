"""Main CLI entry point."""

import importlib
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

import rich_click as click
from rich.console import Console
from rich.logging import RichHandler

from tagfn import __version__
from tagfn.core.exceptions import TemplateError
from tagfn.core.nodes import Node

console = Console(stderr=True)
logger = logging.getLogger(__name__)

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_HELPTEXT_FIRST = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running 'tagfn --help' for more information."

# Cyan theme
click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_OPTION = "cyan"
click.rich_click.STYLE_SWITCH = "cyan"
click.rich_click.STYLE_METAVAR = "dim white"
click.rich_click.STYLE_USAGE_COMMAND = "cyan"
click.rich_click.STYLE_USAGE = "dim"


def import_node(target: str) -> Node:
    """Import a template node from string (e.g. 'templates:page')."""
    if ":" not in target:
        raise click.BadParameter(
            "Template must be in format 'module:attribute'", param_hint="TARGET"
        )

    module_name, attr_name = target.split(":", 1)

    # Add current directory to path so we can import local modules
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(
            f"Could not import module '{module_name}': {e}", param_hint="TARGET"
        )

    node: Any = module
    for part in attr_name.split("."):
        try:
            node = getattr(node, part)
        except AttributeError:
            raise click.BadParameter(
                f"Attribute '{attr_name}' not found in module '{module_name}'",
                param_hint="TARGET",
            )

    if not isinstance(node, Node):
        raise click.BadParameter(
            f"'{target}' is a {type(node).__name__}, not a template node",
            param_hint="TARGET",
        )
    return node


def load_context(path: Optional[Path]) -> Any:
    """Read the render context from a JSON file ('-' for stdin)."""
    if path is None:
        return None
    try:
        if str(path) == "-":
            return json.load(sys.stdin)
        return json.loads(path.read_text("utf-8"))
    except OSError as e:
        raise click.BadParameter(f"Could not read {path}: {e}", param_hint="--context")
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON in {path}: {e}", param_hint="--context")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


@click.group(
    help=f"""
[bold white on cyan] tagfn [/] [bold cyan]v{__version__}[/] Functional HTML templates.

Run [bold cyan]tagfn render MODULE:NODE[/] to render a template node.
"""
)
@click.version_option(__version__)
def cli() -> None:
    pass


@cli.command()
@click.argument("target")
@click.option(
    "--context",
    "context_file",
    type=click.Path(dir_okay=False, path_type=Path, allow_dash=True),
    default=None,
    help="JSON file with the render context ('-' reads stdin).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write HTML to this file instead of stdout.",
)
@click.option("--safe", is_flag=True, help="Render without escaping.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def render(
    target: str,
    context_file: Optional[Path],
    output: Optional[Path],
    safe: bool,
    verbose: bool,
) -> None:
    """Render a template node to HTML."""
    setup_logging(verbose)

    node = import_node(target)
    context = load_context(context_file)
    logger.debug("Rendering [cyan]%s[/] (safe=%s)", target, safe)

    try:
        html = node(context, None, safe)
    except TemplateError as e:
        raise click.ClickException(f"Render failed: {e}")

    if output is None:
        click.echo(html)
        return

    output.write_text(html, "utf-8")
    console.print(f"✅ Wrote [cyan]{output}[/] ({len(html)} chars)")


if __name__ == "__main__":
    cli()
