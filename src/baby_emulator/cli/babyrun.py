"""
babyrun - Baby Emulator Command-Line Interface
==============================================

Assembles a Baby program, runs it on the machine model with a step budget
and prints why it halted followed by a core dump of the final state.

Usage Examples
--------------
Run with the default budget (BABY_MAX_STEPS or 1000 steps):
    $ babyrun program.asm

Limit the run and print every step:
    $ babyrun program.asm -n 50 --trace

Exit Codes
----------
    0  the program executed a STOP instruction
    1  the program failed to assemble
    2  invalid arguments or configuration
    4  the step budget ran out before the program stopped
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from baby_emulator import __version__
from baby_emulator.assembler import Assembler
from baby_emulator.cli.errors import ExitCode, handle_cli_exception
from baby_emulator.core.config import MachineConfig
from baby_emulator.core.model import BabyModel, HaltEvent, HaltReason


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def format_step(step: int, model: BabyModel) -> str:
    """One trace line: step number, address, instruction and accumulator."""
    return (
        f"{step:>5}  {model.instruction_address:#04x}  "
        f"{model.current_instruction().mnemonic():<8}  acc={model.accumulator}"
    )


def run_traced(model: BabyModel, max_steps: int) -> tuple[BabyModel, HaltEvent]:
    """
    Step ``model`` like BabyModel.run_loop(), echoing each instruction
    before it executes.
    """
    for step in range(max_steps):
        click.echo(format_step(step, model))
        result = model.execute()
        if isinstance(result, HaltEvent):
            return model, result
        model = result
    return model, HaltEvent(HaltReason.ITERATION_EXCEEDED, model=model, max_iter=max_steps)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--max-steps",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of instructions to execute (default: 1000)",
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
    "--trace",
    is_flag=True,
    help="Print every instruction as it executes",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="babyrun")
def main(
    input_file: Path,
    max_steps: Optional[int],
    original_notation: bool,
    word_bits: Optional[int],
    instruction_bits: Optional[int],
    trace: bool,
    verbose: bool,
) -> None:
    """
    Assemble and run a Baby program.

    INPUT_FILE is the assembly source file (.asm) to run.

    \b
    Examples:
        babyrun loop.asm               # Run up to 1000 steps
        babyrun loop.asm -n 20 --trace # Show the first 20 steps
    """
    setup_logging(verbose)

    try:
        config = MachineConfig.from_env()
        if word_bits is not None:
            config.word_bits = word_bits
        if instruction_bits is not None:
            config.instruction_bits = instruction_bits
        if max_steps is not None:
            config.max_steps = max_steps

        asm = Assembler(
            original_notation=original_notation,
            word_format=config.word_format,
            check_size=config.check_size,
            verbose=verbose,
        )
        asm.assemble_file(input_file)
        model = asm.build_model()

        if verbose:
            click.echo(
                f"Running {input_file} ({asm.get_program_length()} words), "
                f"at most {config.max_steps} steps"
            )

        if trace:
            final, event = run_traced(model, config.max_steps)
        else:
            final, event = model.run_loop(config.max_steps)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Run")

    click.echo(str(event))
    click.echo(final.core_dump(), nl=False)

    if event.reason is HaltReason.ITERATION_EXCEEDED:
        sys.exit(ExitCode.STEP_LIMIT)


if __name__ == "__main__":
    main()
