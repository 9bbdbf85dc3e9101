"""
babyasm - Baby Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the Baby assembler.
It assembles a source file and prints the resulting memory listing.

Usage Examples
--------------
Print the listing:
    $ babyasm program.asm

Write listing and symbol files:
    $ babyasm program.asm -l program.lst -s program.sym

Source written in the notation of the original machine:
    $ babyasm --original-notation program.asm

Verbose mode:
    $ babyasm -v program.asm

Word widths default to the environment (BABY_WORD_BITS,
BABY_INSTRUCTION_BITS, BABY_CHECK_SIZE) and can be overridden with options.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from baby_emulator import __version__
from baby_emulator.assembler import Assembler
from baby_emulator.cli.errors import handle_cli_exception
from baby_emulator.core.config import MachineConfig


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the listing to a file instead of stdout",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "--original-notation",
    is_flag=True,
    help='Source uses the original notation ("-S, C", "Test", ...)',
)
@click.option(
    "--word-bits",
    type=click.IntRange(min=8),
    default=None,
    help="Width of a memory word (default: 32)",
)
@click.option(
    "--instruction-bits",
    type=click.IntRange(min=8),
    default=None,
    help="Width of the instruction field (default: 16)",
)
@click.option(
    "--no-size-check",
    is_flag=True,
    help="Accept programs longer than 32 words (extra words are dropped)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="babyasm")
def main(
    input_file: Path,
    listing: Optional[Path],
    symbols: Optional[Path],
    original_notation: bool,
    word_bits: Optional[int],
    instruction_bits: Optional[int],
    no_size_check: bool,
    verbose: bool,
) -> None:
    """
    Assemble Baby source code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    \b
    Examples:
        babyasm loop.asm                  # Listing on stdout
        babyasm loop.asm -l loop.lst      # Listing to a file
        babyasm --original-notation a.asm # "-S, C" style source

    For more information about the Baby instruction set:
    https://en.wikipedia.org/wiki/Manchester_Baby
    """
    setup_logging(verbose)

    try:
        config = MachineConfig.from_env()
        if word_bits is not None:
            config.word_bits = word_bits
        if instruction_bits is not None:
            config.instruction_bits = instruction_bits
        if no_size_check:
            config.check_size = False

        asm = Assembler(
            original_notation=original_notation,
            word_format=config.word_format,
            check_size=config.check_size,
            verbose=verbose,
        )

        if verbose:
            click.echo(f"Assembling {input_file}...")

        asm.assemble_file(input_file)

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")
        else:
            click.echo(asm.get_listing(), nl=False)

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            click.echo(
                f"Assembly complete: {asm.get_program_length()} words, "
                f"{len(asm.get_symbols())} tags"
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
