"""
Baby Core Emulation
===================

The machine itself: instruction codec, execution engine and word format.

Main Components
---------------
- **BabyInstruction**: Symbolic instruction with encode/decode to words
- **BabyModel**: Immutable machine state advanced by pure transitions
- **HaltEvent / HaltReason**: Why execution stopped (STOP or step budget)
- **WordFormat / MachineConfig**: Word widths and run-time configuration

Example Usage
-------------
>>> from baby_emulator.core import BabyInstruction, BabyModel
>>> store = BabyInstruction.to_numbers([
...     BabyInstruction.negate(5),
...     BabyInstruction.subtract(5),
...     BabyInstruction.store(6),
...     BabyInstruction.negate(6),
...     BabyInstruction.stop(),
...     BabyInstruction.absolute_value(5),
... ])
>>> model = BabyModel.new_with_program(store)
>>> final, event = model.run_loop(100)
>>> final.accumulator
10
"""

from baby_emulator.core.config import (
    DEFAULT_WORD_FORMAT,
    MEMORY_WORDS,
    OPERAND_MASK,
    MachineConfig,
    WordFormat,
)
from baby_emulator.core.instructions import (
    BabyInstruction,
    InstructionKind,
    DECODE_TABLE,
    ENCODE_TABLE,
)
from baby_emulator.core.model import (
    BabyModel,
    HaltEvent,
    HaltReason,
)

__all__ = [
    "DEFAULT_WORD_FORMAT",
    "MEMORY_WORDS",
    "OPERAND_MASK",
    "MachineConfig",
    "WordFormat",
    "BabyInstruction",
    "InstructionKind",
    "DECODE_TABLE",
    "ENCODE_TABLE",
    "BabyModel",
    "HaltEvent",
    "HaltReason",
]
