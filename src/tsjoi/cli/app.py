import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from tsjoi.core.errors import TsJoiError
from tsjoi.core.generate import generate

app = typer.Typer(
    name="tsjoi",
    help="Read TypeScript's types from INPUT and write Joi schemas on OUTPUT.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command()
def run(
    input_path: Annotated[str, typer.Argument(metavar="INPUT", help="TypeScript file to read, or '-' for stdin.")],
    output_path: Annotated[
        str | None, typer.Argument(metavar="OUTPUT", help="File to write; stdout when omitted.")
    ] = None,
    suffix: Annotated[
        str, typer.Option("--suffix", "-s", envvar="TSJOI_SUFFIX", help="Appended to generated names.")
    ] = "",
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress to stderr.")] = False,
) -> None:
    """Generate Joi schemas and type guards from TypeScript interfaces and type aliases."""
    _configure_logging(verbose)
    try:
        generate(input_path, output_path, suffix)
    except FileNotFoundError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from None
    except TsJoiError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]", highlight=False)
        raise typer.Exit(1) from None


def main() -> None:
    app()
