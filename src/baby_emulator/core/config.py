"""
Machine Configuration
=====================

Word format and run-time configuration for the Baby model.

The Baby always has a 32-word main store addressed by a 5-bit operand, but
the width of a word and of the instruction field inside it can be chosen:

    word_bits         Width of every memory word and of the accumulator.
                      Values are signed two's complement at this width.
    instruction_bits  Width of the instruction field (the low bits of a
                      word that the instruction register holds). The
                      opcode is the top 3 bits of this field, the operand
                      address the low 5 bits.

The historical machine used 32-bit words with a 16-bit instruction field
(opcode in bits 13-15), which is the default.

Configuration can come from:
- Default values (defined here)
- Environment variables (MachineConfig.from_env)
- Command-line options (applied on top by the CLI tools)
"""

from dataclasses import dataclass
import os

from baby_emulator.errors import ConfigurationError


# =============================================================================
# Machine Constants
# =============================================================================

# Number of words in the main store
MEMORY_WORDS = 32

# Mask applied to every memory address (5-bit address space)
OPERAND_MASK = 0x1F

# Width of the opcode at the top of the instruction field
OPCODE_BITS = 3

# Narrowest instruction field that still holds an opcode and an operand
MIN_INSTRUCTION_BITS = OPCODE_BITS + 5


@dataclass(frozen=True)
class WordFormat:
    """
    Bit layout of a Baby word.

    Attributes:
        word_bits: Width of a memory word (default 32)
        instruction_bits: Width of the instruction field (default 16)

    Example:
        >>> fmt = WordFormat(word_bits=16, instruction_bits=16)
        >>> fmt.to_word(0xE000)
        -8192
        >>> fmt.to_unsigned(-1)
        65535
    """
    word_bits: int = 32
    instruction_bits: int = 16

    def __post_init__(self) -> None:
        if self.instruction_bits < MIN_INSTRUCTION_BITS:
            raise ConfigurationError(
                f"instruction field must be at least {MIN_INSTRUCTION_BITS} "
                f"bits wide, got {self.instruction_bits}"
            )
        if self.word_bits < self.instruction_bits:
            raise ConfigurationError(
                f"word width ({self.word_bits} bits) is narrower than the "
                f"instruction field ({self.instruction_bits} bits)"
            )

    @property
    def opcode_shift(self) -> int:
        """Bit position of the lowest opcode bit."""
        return self.instruction_bits - OPCODE_BITS

    @property
    def instruction_mask(self) -> int:
        """Mask selecting the instruction field of a word."""
        return (1 << self.instruction_bits) - 1

    @property
    def word_mask(self) -> int:
        return (1 << self.word_bits) - 1

    @property
    def hex_digits(self) -> int:
        """Number of hex digits needed to print a full word."""
        return (self.word_bits + 3) // 4

    def instruction_field(self, word: int) -> int:
        """Extract the instruction field of a word (instruction register value)."""
        return word & self.instruction_mask

    def to_word(self, value: int) -> int:
        """Wrap an arbitrary integer into the signed range of a word."""
        value &= self.word_mask
        if value & (1 << (self.word_bits - 1)):
            value -= 1 << self.word_bits
        return value

    def to_unsigned(self, value: int) -> int:
        """Two's complement bit pattern of a word, as a non-negative int."""
        return value & self.word_mask


DEFAULT_WORD_FORMAT = WordFormat()


# =============================================================================
# Run-time Configuration
# =============================================================================

@dataclass
class MachineConfig:
    """
    Configuration for assembling and running Baby programs.

    Attributes:
        word_bits: Width of a memory word
        instruction_bits: Width of the instruction field
        max_steps: Step budget for bounded runs (default: 1000)
        check_size: Reject programs longer than the main store (default: True)
    """

    word_bits: int = DEFAULT_WORD_FORMAT.word_bits
    instruction_bits: int = DEFAULT_WORD_FORMAT.instruction_bits
    max_steps: int = 1000
    check_size: bool = True

    @property
    def word_format(self) -> WordFormat:
        """WordFormat built from the configured widths (validated)."""
        return WordFormat(self.word_bits, self.instruction_bits)

    @classmethod
    def from_env(cls) -> "MachineConfig":
        """
        Create MachineConfig from environment variables.

        Environment variables (all optional):
            BABY_WORD_BITS: Word width (integer)
            BABY_INSTRUCTION_BITS: Instruction field width (integer)
            BABY_MAX_STEPS: Step budget for bounded runs (integer)
            BABY_CHECK_SIZE: "0"/"false"/"no" disables the program size check

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        config = cls()

        if word_bits := os.environ.get("BABY_WORD_BITS"):
            config.word_bits = _parse_int_env("BABY_WORD_BITS", word_bits)

        if instruction_bits := os.environ.get("BABY_INSTRUCTION_BITS"):
            config.instruction_bits = _parse_int_env(
                "BABY_INSTRUCTION_BITS", instruction_bits
            )

        if max_steps := os.environ.get("BABY_MAX_STEPS"):
            config.max_steps = _parse_int_env("BABY_MAX_STEPS", max_steps)
            if config.max_steps < 0:
                raise ConfigurationError(
                    f"BABY_MAX_STEPS must not be negative, got {max_steps}"
                )

        if check_size := os.environ.get("BABY_CHECK_SIZE"):
            config.check_size = check_size.strip().lower() not in (
                "0", "false", "no", "off"
            )

        # Validates the widths; raises ConfigurationError
        WordFormat(config.word_bits, config.instruction_bits)
        return config


def _parse_int_env(name: str, value: str) -> int:
    try:
        return int(value.strip(), 0)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer, got '{value}'"
        ) from None
