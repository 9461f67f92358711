"""
lmvm - Little Man Virtual Machine Command-Line Interface
========================================================

Runs a load image produced by lmasm until it halts or fails.

Usage Examples
--------------
Run a program:
    $ lmvm a.out

Supply input values for read:
    $ lmvm a.out -i 7 -i -3

Limit execution (useful for programs that loop forever):
    $ lmvm a.out --max-steps 10000
"""

from pathlib import Path
from typing import Optional

import click

from littleman import __version__
from littleman.cli import setup_logging
from littleman.cli.errors import ExitCode, fail, handle_cli_exception
from littleman.emulator import Emulator, EmulatorConfig
from littleman.image import read_image
from littleman.isa import MAX_ADDRESS, WORD_MAX, WORD_MIN


def print_output(value: int) -> None:
    click.echo(f"OUTPUT: {value}")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "image_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-i", "--input", "inputs",
    multiple=True,
    type=click.IntRange(WORD_MIN, WORD_MAX),
    help="Input value for read (can be repeated; consumed in order)",
)
@click.option(
    "--offset",
    type=click.IntRange(0, MAX_ADDRESS),
    default=0,
    show_default=True,
    help="Mailbox where the image is loaded",
)
@click.option(
    "--entry",
    type=click.IntRange(0, MAX_ADDRESS),
    default=0,
    show_default=True,
    help="Initial instruction counter",
)
@click.option(
    "--max-steps",
    type=click.IntRange(min=1),
    default=None,
    help="Give up with exit status 4 after this many instructions (default: no limit)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (traces every instruction)",
)
@click.version_option(version=__version__, prog_name="lmvm")
def main(
    image_file: Path,
    inputs: tuple[int, ...],
    offset: int,
    entry: int,
    max_steps: Optional[int],
    verbose: bool,
) -> None:
    """
    Run a Little Man load image.

    IMAGE_FILE is a file of little-endian 16-bit words, as written by lmasm.
    Every print instruction writes a line "OUTPUT: <value>".

    Exits with status 0 when the program executes stop, 1 on any runtime
    error, and 4 when --max-steps runs out before a stop.
    """
    setup_logging(verbose)

    try:
        words = read_image(image_file)
        config = EmulatorConfig(
            program=tuple(words),
            offset=offset,
            entry_point=entry,
            inputs=inputs if inputs else None,
            max_steps=max_steps,
        )
        emu = Emulator(config, on_output=print_output)

        if verbose:
            click.echo(f"Loaded {len(words)} words at mailbox {offset}", err=True)

        result = emu.run()

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)

    if not result.halted:
        fail(f"Error: no stop after {result.steps} steps", ExitCode.STEP_LIMIT)

    if verbose:
        click.echo(f"Halted after {result.steps} steps", err=True)


if __name__ == "__main__":
    main()
