"""
abi-to-sol: command-line entrypoint.

Reads an ABI JSON document (a bare ABI list, or a build artifact carrying
an "abi" key) and prints an equivalent Solidity interface.

Examples:
  abi-to-sol IToken < build/Token.json
  abi-to-sol IToken --input abi.json --output IToken.sol -V "^0.8.4"
  abi-to-sol --no-prettify -L MIT < abi.json

Options fall back to the ABI_TO_SOL_* environment variables (see
abi_to_sol.config) and then to built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import load_config
from ..errors import AbiToSolError
from ..solidity import generate_solidity
from ..version import __version__

log = logging.getLogger(__name__)

app = typer.Typer(
    name="abi-to-sol",
    help="Generate a Solidity interface from a contract ABI",
    add_completion=False,
)

_err = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"abi-to-sol {__version__}")
        raise typer.Exit()


def _read_input(path: Optional[Path]) -> str:
    if path is None or str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


@app.command()
def main(
    name: Optional[str] = typer.Argument(
        None,
        help="Interface name [default: ABI_TO_SOL_NAME or MyInterface]",
        show_default=False,
    ),
    input_path: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="ABI JSON file ('-' or omitted: read stdin)",
    ),
    output_path: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write Solidity here instead of stdout",
    ),
    solidity_version: Optional[str] = typer.Option(
        None,
        "--solidity-version",
        "-V",
        help='Target compiler range, e.g. "^0.8.4" or ">=0.7.0 <0.9.0"',
        envvar="ABI_TO_SOL_SOLIDITY_VERSION",
    ),
    license: Optional[str] = typer.Option(
        None,
        "--license",
        "-L",
        help="SPDX license identifier for the header",
        envvar="ABI_TO_SOL_LICENSE",
    ),
    prettify: Optional[bool] = typer.Option(
        None,
        "--prettify/--no-prettify",
        help="Run prettier-plugin-solidity over the output when available",
        show_default=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Generate a Solidity interface valid across a compiler version range.
    """
    _configure_logging(verbose)
    log.debug("config: %s", load_config().as_dict())

    try:
        raw = _read_input(input_path)
    except OSError as e:
        _err.print(f"[red]error:[/red] cannot read ABI: {escape(str(e))}")
        raise typer.Exit(2)

    try:
        source = generate_solidity(
            raw,
            name=name,
            solidity_version=solidity_version,
            license=license,
            prettify_output=prettify,
        )
    except AbiToSolError as e:
        _err.print(f"[red]error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)

    if output_path is None:
        typer.echo(source, nl=not source.endswith("\n"))
        return

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(source, encoding="utf-8")
    except OSError as e:
        _err.print(f"[red]error:[/red] cannot write {output_path}: {escape(str(e))}")
        raise typer.Exit(2)
    log.info("wrote %s", output_path)


def run() -> None:
    app()
