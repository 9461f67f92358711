"""
Little Man Command-Line Interface
=================================

This package provides the command-line tools:

- **lmasm**: assembler, source to load image
- **lmvm**: virtual machine, runs a load image
- **lmdisasm**: disassembler, load image to listing

Each tool is implemented as a Click-based CLI application.
"""

import logging


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


__all__ = ["lmasm", "lmvm", "lmdisasm", "setup_logging"]
