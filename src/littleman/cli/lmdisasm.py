"""
lmdisasm - Little Man Disassembler Command-Line Interface
=========================================================

Usage Examples
--------------
Disassemble an image:
    $ lmdisasm a.out

Disassemble an image loaded at mailbox 10:
    $ lmdisasm a.out --address 10

Output to file:
    $ lmdisasm a.out -o listing.txt
"""

from pathlib import Path
from typing import Optional

import click

from littleman import __version__
from littleman.cli import setup_logging
from littleman.cli.errors import handle_cli_exception
from littleman.disassembler import Disassembler
from littleman.image import read_image
from littleman.isa import MAX_ADDRESS


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
    help="Output file (default: stdout)",
)
@click.option(
    "-a", "--address",
    type=click.IntRange(0, MAX_ADDRESS),
    default=0,
    help="Mailbox of the first word. Default: 0",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of words to disassemble (default: all)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="lmdisasm")
def main(
    input_file: Path,
    output: Optional[Path],
    address: int,
    count: Optional[int],
    verbose: bool,
) -> None:
    """
    Disassemble a Little Man load image.

    INPUT_FILE is a file of little-endian 16-bit words, as written by lmasm.
    """
    setup_logging(verbose)

    try:
        words = read_image(input_file)

        lines = [
            f"; Disassembly of {input_file.name}",
            f"; Size: {len(words)} words",
            "",
            Disassembler().disassemble_to_text(words, start_address=address, count=count),
        ]
        result = "\n".join(lines) + "\n"

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
