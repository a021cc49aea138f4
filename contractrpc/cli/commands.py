"""CLI commands for contractrpc.

Tooling around contract publishing: load a router from ``module:attribute``
and export its procedure spec or list its procedures.
"""

from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from contractrpc import __version__
from contractrpc.cli.logging_utils import configure_stderr_logging, ensure_rotating_log_file
from contractrpc.config.access import get_settings
from contractrpc.server.router import Router
from contractrpc.utils.exceptions import ConfigurationError

app = typer.Typer(
    name="contractrpc",
    help="contractrpc - typed procedure contracts",
    no_args_is_help=True,
)

console = Console()


def load_router(target: str) -> Router[Any]:
    """Import ``module:attribute`` and return the router it names.

    The attribute may be a Router, anything with a ``router`` attribute
    (such as the bundle returned by ``make_rpc``), or a zero-argument
    factory returning either.
    """
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise ConfigurationError(f"Expected MODULE:ATTRIBUTE, got {target!r}")
    if "" not in sys.path:
        sys.path.insert(0, "")
    module = importlib.import_module(module_name)
    try:
        obj: Any = getattr(module, attribute)
    except AttributeError as e:
        raise ConfigurationError(f"{module_name} has no attribute {attribute!r}") from e
    if callable(obj) and not isinstance(obj, Router):
        obj = obj()
    if not isinstance(obj, Router):
        obj = getattr(obj, "router", None)
    if not isinstance(obj, Router):
        raise ConfigurationError(f"{target} does not resolve to a Router")
    return obj


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level"),
) -> None:
    settings = get_settings()
    level = log_level or settings.log_level
    configure_stderr_logging(level)
    if settings.log_file:
        ensure_rotating_log_file(settings.log_file, level)


@app.command()
def version() -> None:
    """Show the installed version."""
    console.print(f"contractrpc v{__version__}")


@app.command()
def spec(
    target: str = typer.Argument(..., help="Router location as MODULE:ATTRIBUTE"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the spec to this file"),
    indent: int = typer.Option(2, "--indent", help="JSON indentation"),
) -> None:
    """Export the procedure spec (name, method, input/output JSON Schema)."""
    try:
        router = load_router(target)
    except (ConfigurationError, ImportError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    text = json.dumps(router.specs(), indent=indent, ensure_ascii=False)
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    logger.info("Wrote {} procedure(s) to {}", len(router), output)
    console.print(f"[green]✓[/green] Wrote {len(router)} procedure(s) to {output}")


@app.command()
def procedures(
    target: str = typer.Argument(..., help="Router location as MODULE:ATTRIBUTE"),
) -> None:
    """List registered procedures."""
    try:
        router = load_router(target)
    except (ConfigurationError, ImportError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title="Procedures")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Verb")
    table.add_column("Mocked")
    for procedure in router.procedures():
        table.add_row(
            procedure.name,
            procedure.method.name.lower(),
            procedure.method.value,
            "yes" if procedure.mocked else "",
        )
    console.print(table)


if __name__ == "__main__":
    app()
