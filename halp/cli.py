"""CLI entry point.

Usage:
    halp find files larger than 100MB
    halp -q list listening ports | sh
    halp --explain tar -xzf
    halp -- grep -v comments

The command is printed to stdout; the explanation streams to stderr.
"""

import asyncio
import logging
import sys
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from halp import __version__
from halp.config import load_provider_config, load_settings, setup_logging
from halp.providers.registry import create_provider
from halp.services.output import DualChannelWriter
from halp.services.pipeline import run_query
from halp.services.prompts import build_system_prompt
from halp.utils.exceptions import HalpError

logger = logging.getLogger(__name__)

# Exit code for Ctrl-C, as a shell would report it
EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="halp",
    help="Get shell commands from natural language",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"halp {__version__}")
        raise typer.Exit()


def _run(query: str, quiet: bool, explain: bool, err_console: Console) -> None:
    settings = load_settings()
    provider = create_provider(load_provider_config(settings))
    system_prompt = build_system_prompt(settings.system_prompt)

    status = None
    if not quiet and err_console.is_terminal:
        status = err_console.status("Thinking...", spinner="dots")
        status.start()

    writer = DualChannelWriter(
        primary=sys.stdout,
        # Explanation-only mode puts the explanation where the command would go
        secondary=sys.stdout if explain else sys.stderr,
        suppress_command=explain,
        suppress_explanation=quiet,
        on_first_output=status.stop if status else None,
    )
    try:
        result = asyncio.run(run_query(provider, query, system_prompt, writer))
    finally:
        if status:
            status.stop()

    if result.interrupted:
        logger.debug(f"Kept command from interrupted stream: {result.error}")


# Query words such as "-la" are not options
@app.command(context_settings={"ignore_unknown_options": True})
def main(
    query: Annotated[
        List[str],
        typer.Argument(help="Natural language description of the command you need"),
    ],
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress explanation (command only)"),
    ] = False,
    explain: Annotated[
        bool,
        typer.Option("--explain", "-e", help="Show explanation only (no command output)"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr"),
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """Get a shell command for QUERY."""
    setup_logging(verbose)
    err_console = Console(stderr=True)

    try:
        _run(" ".join(query), quiet, explain, err_console)
    except HalpError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        raise typer.Exit(EXIT_INTERRUPTED)


if __name__ == "__main__":
    app()
