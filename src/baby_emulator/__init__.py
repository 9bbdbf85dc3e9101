"""
Baby Emulator - Manchester Baby (SSEM) Emulator and Assembler
=============================================================

This package reproduces the Manchester Small-Scale Experimental Machine
("Baby"), the first stored-program computer: a 32-word main store, one
accumulator and seven instructions.

Main Components
---------------
- **core**: Instruction codec and the immutable machine model
    Decodes/encodes instruction words and executes them one step at a time

- **assembler**: Two-pass assembler (babyasm)
    Parses Baby assembly, resolves tags and produces a main store image

- **cli**: Command-line tools (babyasm, babyrun)

Quick Start
-----------
Run the built-in example:
    >>> from baby_emulator import BabyModel
    >>> model = BabyModel.new_example_program()
    >>> final, event = model.run_loop(100)
    >>> final.accumulator, str(event)
    (-10, 'Program stop instruction encountered at 0x0004')

Assemble and run a program:
    >>> from baby_emulator import Assembler
    >>> asm = Assembler()
    >>> _ = asm.assemble('''
    ... :start
    ...     ldn $five
    ...     sub $five
    ...     stp
    ... :five
    ...     abs 0d5
    ... ''')
    >>> asm.build_model().run_loop(100)[0].accumulator
    -10

Or use the command-line tools:
    $ babyasm program.asm
    $ babyrun program.asm --max-steps 1000

Reference Documentation
-----------------------
- SSEM instruction set: https://en.wikipedia.org/wiki/Manchester_Baby
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from baby_emulator.core import (
    BabyInstruction,
    BabyModel,
    HaltEvent,
    HaltReason,
    InstructionKind,
    MachineConfig,
    WordFormat,
    MEMORY_WORDS,
)
from baby_emulator.assembler import Assembler, assemble, link
from baby_emulator.errors import (
    BabyError,
    AssemblerError,
    AssemblySyntaxError,
    InvalidValueError,
    UnknownInstructionError,
    TagNameError,
    LinkingError,
    UnknownTagNameError,
    ProgramSizeError,
    EmulatorError,
    MemoryImageError,
    ConfigurationError,
    SourceLocation,
)

__all__ = [
    "__version__",
    # Core
    "BabyInstruction",
    "BabyModel",
    "HaltEvent",
    "HaltReason",
    "InstructionKind",
    "MachineConfig",
    "WordFormat",
    "MEMORY_WORDS",
    # Assembler
    "Assembler",
    "assemble",
    "link",
    # Errors
    "BabyError",
    "AssemblerError",
    "AssemblySyntaxError",
    "InvalidValueError",
    "UnknownInstructionError",
    "TagNameError",
    "LinkingError",
    "UnknownTagNameError",
    "ProgramSizeError",
    "EmulatorError",
    "MemoryImageError",
    "ConfigurationError",
    "SourceLocation",
]
