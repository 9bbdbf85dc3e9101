"""
Baby Instruction Codec
======================

Bidirectional mapping between symbolic Baby instructions and the packed
binary words stored in the main store.

Word Layout
-----------
Only the instruction field (the low ``instruction_bits`` of a word, 16 by
default) is significant to the control unit:

    bit  15 14 13 12 ... 5  4  3  2  1  0
         [opcode ] [ unused ] [ operand  ]

The operand is always masked to 5 bits, so every address lands inside the
32-word store. Bits between the opcode and the operand are ignored when
decoding and zero when encoding.

Opcode Table
------------
| Binary   | Kind                  | Modern | Original  |
|----------|-----------------------|--------|-----------|
| 000      | JUMP                  | JMP S  | S, Cl     |
| 100      | RELATIVE_JUMP         | JRP S  | Add S, Cl |
| 010      | NEGATE                | LDN S  | -S, C     |
| 110      | STORE                 | STO S  | c, S      |
| 001, 101 | SUBTRACT              | SUB S  | SUB S     |
| 011      | SKIP_NEXT_IF_NEGATIVE | CMP    | Test      |
| 111      | STOP                  | STP    | Stop      |

SUBTRACT has two bit patterns because one opcode bit was not decoded for
it on the real machine. Decoding accepts both; encoding always emits 001,
so decode(encode(i)) is the identity for every kind while encode(decode(w))
is not for words carrying 101.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from baby_emulator.core.config import (
    DEFAULT_WORD_FORMAT,
    MEMORY_WORDS,
    OPERAND_MASK,
    WordFormat,
)


class InstructionKind(Enum):
    """Every entry that can appear in an assembled program."""
    JUMP = "jump"
    RELATIVE_JUMP = "relative jump"
    NEGATE = "negate"
    STORE = "store"
    SUBTRACT = "subtract"
    SKIP_NEXT_IF_NEGATIVE = "skip next if negative"
    STOP = "stop"
    # Program data, only meaningful during assembly
    ABSOLUTE_VALUE = "absolute value"

    @property
    def has_operand(self) -> bool:
        """True for kinds that address a memory word."""
        return self in ADDRESSING_KINDS


ADDRESSING_KINDS = frozenset({
    InstructionKind.JUMP,
    InstructionKind.RELATIVE_JUMP,
    InstructionKind.NEGATE,
    InstructionKind.STORE,
    InstructionKind.SUBTRACT,
})

# Many-to-one: both 001 and 101 decode to SUBTRACT. Unmapped values are STOP.
DECODE_TABLE: dict[int, InstructionKind] = {
    0b000: InstructionKind.JUMP,
    0b100: InstructionKind.RELATIVE_JUMP,
    0b010: InstructionKind.NEGATE,
    0b110: InstructionKind.STORE,
    0b001: InstructionKind.SUBTRACT,
    0b101: InstructionKind.SUBTRACT,
    0b011: InstructionKind.SKIP_NEXT_IF_NEGATIVE,
    0b111: InstructionKind.STOP,
}

# One-to-one: SUBTRACT always encodes as 001.
ENCODE_TABLE: dict[InstructionKind, int] = {
    InstructionKind.JUMP: 0b000,
    InstructionKind.RELATIVE_JUMP: 0b100,
    InstructionKind.NEGATE: 0b010,
    InstructionKind.STORE: 0b110,
    InstructionKind.SUBTRACT: 0b001,
    InstructionKind.SKIP_NEXT_IF_NEGATIVE: 0b011,
    InstructionKind.STOP: 0b111,
}

# Modern notation mnemonics, used for listings
MNEMONICS: dict[InstructionKind, str] = {
    InstructionKind.JUMP: "JMP",
    InstructionKind.RELATIVE_JUMP: "JRP",
    InstructionKind.NEGATE: "LDN",
    InstructionKind.STORE: "STO",
    InstructionKind.SUBTRACT: "SUB",
    InstructionKind.SKIP_NEXT_IF_NEGATIVE: "CMP",
    InstructionKind.STOP: "STP",
    InstructionKind.ABSOLUTE_VALUE: "ABS",
}


@dataclass(frozen=True)
class BabyInstruction:
    """
    A symbolic Baby instruction.

    For address-bearing kinds ``operand`` is the memory address (stored as
    given; get_operand() masks it). For ABSOLUTE_VALUE it is the raw data
    word. SKIP_NEXT_IF_NEGATIVE and STOP always carry 0.

    Example:
        >>> BabyInstruction.negate(5).to_number()
        16389
        >>> BabyInstruction.from_number(0xA01F)
        BabyInstruction(kind=<InstructionKind.SUBTRACT: 'subtract'>, operand=31)
    """
    kind: InstructionKind
    operand: int = 0

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def jump(cls, address: int) -> "BabyInstruction":
        return cls(InstructionKind.JUMP, address)

    @classmethod
    def relative_jump(cls, address: int) -> "BabyInstruction":
        return cls(InstructionKind.RELATIVE_JUMP, address)

    @classmethod
    def negate(cls, address: int) -> "BabyInstruction":
        return cls(InstructionKind.NEGATE, address)

    @classmethod
    def store(cls, address: int) -> "BabyInstruction":
        return cls(InstructionKind.STORE, address)

    @classmethod
    def subtract(cls, address: int) -> "BabyInstruction":
        return cls(InstructionKind.SUBTRACT, address)

    @classmethod
    def skip_next_if_negative(cls) -> "BabyInstruction":
        return cls(InstructionKind.SKIP_NEXT_IF_NEGATIVE)

    @classmethod
    def stop(cls) -> "BabyInstruction":
        return cls(InstructionKind.STOP)

    @classmethod
    def absolute_value(cls, value: int) -> "BabyInstruction":
        return cls(InstructionKind.ABSOLUTE_VALUE, value)

    @classmethod
    def with_operand(cls, kind: InstructionKind, value: int) -> "BabyInstruction":
        """
        Build an instruction of ``kind`` from a resolved operand value.

        Kinds without an operand ignore ``value``.
        """
        if kind.has_operand or kind is InstructionKind.ABSOLUTE_VALUE:
            return cls(kind, value)
        return cls(kind)

    # =========================================================================
    # Decoding / Encoding
    # =========================================================================

    @classmethod
    def from_number(
        cls,
        word: int,
        word_format: WordFormat = DEFAULT_WORD_FORMAT,
    ) -> "BabyInstruction":
        """
        Decode a word into an instruction.

        The opcode is taken from the top 3 bits of the instruction field
        and the operand from the low 5 bits; anything in between is
        ignored. Opcodes with no table entry decode to STOP.

        Args:
            word: Memory word or instruction register value
            word_format: Word layout (default: 32-bit word, 16-bit field)
        """
        field = word_format.instruction_field(word)
        opcode = field >> word_format.opcode_shift
        operand = field & OPERAND_MASK
        kind = DECODE_TABLE.get(opcode, InstructionKind.STOP)
        return cls.with_operand(kind, operand)

    def to_number(self, word_format: WordFormat = DEFAULT_WORD_FORMAT) -> int:
        """
        Encode the instruction into its packed word.

        ABSOLUTE_VALUE returns its literal unchanged. Kinds without an
        operand encode the operand bits as 0.
        """
        if self.kind is InstructionKind.ABSOLUTE_VALUE:
            return self.operand
        return (ENCODE_TABLE[self.kind] << word_format.opcode_shift) | self.get_operand()

    @staticmethod
    def to_numbers(
        instructions: Iterable["BabyInstruction"],
        word_format: WordFormat = DEFAULT_WORD_FORMAT,
    ) -> tuple[int, ...]:
        """
        Encode a sequence of instructions into a full main store image.

        Positions past the last instruction are zero; instructions past
        the 32nd are dropped.

        Example:
            >>> store = BabyInstruction.to_numbers([
            ...     BabyInstruction.negate(5),
            ...     BabyInstruction.stop(),
            ... ])
            >>> len(store), store[:3]
            (32, (16389, 57344, 0))
        """
        words = [word_format.to_word(i.to_number(word_format)) for i in instructions]
        words = words[:MEMORY_WORDS]
        return tuple(words + [0] * (MEMORY_WORDS - len(words)))

    def get_operand(self) -> int:
        """
        Memory address the instruction refers to, masked to 5 bits.

        Returns 0 for SKIP_NEXT_IF_NEGATIVE, STOP and ABSOLUTE_VALUE.
        """
        if self.kind.has_operand:
            return self.operand & OPERAND_MASK
        return 0

    # =========================================================================
    # Descriptions
    # =========================================================================

    def describe(self) -> str:
        """Short description, e.g. 'store instruction' or 'absolute value 5'."""
        if self.kind is InstructionKind.ABSOLUTE_VALUE:
            return f"absolute value {self.operand}"
        return f"{self.kind.value} instruction"

    def mnemonic(self) -> str:
        """Modern-notation text of the instruction, e.g. 'LDN 5'."""
        name = MNEMONICS[self.kind]
        if self.kind is InstructionKind.ABSOLUTE_VALUE:
            return f"{name} {self.operand}"
        if self.kind.has_operand:
            return f"{name} {self.get_operand()}"
        return name

    def __str__(self) -> str:
        return self.mnemonic()
