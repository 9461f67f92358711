"""
lmasm - Little Man Assembler Command-Line Interface
===================================================

Usage Examples
--------------
Basic assembly (writes a.out):
    $ lmasm countdown.lmc

With output file:
    $ lmasm countdown.lmc -o countdown.bin

Generate listing and symbol files:
    $ lmasm countdown.lmc -l countdown.lst -s countdown.sym

Reject duplicate labels:
    $ lmasm --strict-labels countdown.lmc
"""

from pathlib import Path
from typing import Optional

import click

from littleman import __version__
from littleman.assembler import Assembler
from littleman.cli import setup_logging
from littleman.cli.errors import handle_cli_exception


DEFAULT_OUTPUT = Path("a.out")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT,
    show_default=True,
    help="Output image file",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "--strict-labels",
    is_flag=True,
    help="Treat a label defined twice as an error instead of using the later one",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="lmasm")
def main(
    input_file: Path,
    output: Path,
    listing: Optional[Path],
    symbols: Optional[Path],
    strict_labels: bool,
    verbose: bool,
) -> None:
    """
    Assemble Little Man source code into a load image.

    INPUT_FILE is the assembly source file to assemble.

    The image holds one little-endian 16-bit word per instruction and can
    be run with lmvm.

    \b
    Examples:
        lmasm prog.lmc                # Outputs a.out
        lmasm prog.lmc -o prog.bin    # Specify output file
        lmasm prog.lmc -l prog.lst    # Also write a listing
    """
    setup_logging(verbose)

    asm = Assembler(strict_labels=strict_labels)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        words = asm.assemble_file(input_file)
        size = asm.write_binary(output)
        if verbose:
            click.echo(f"Wrote {len(words)} words ({size} bytes) to {output}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            click.echo(f"Assembly complete: {len(words)} words, {len(asm.get_symbols())} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
