"""
Baby Execution Engine
=====================

The machine model: main store, accumulator, program counter and
instruction register, advanced one instruction at a time.

Every transition is a pure function. A BabyModel is frozen; executing an
instruction returns a brand new model (with a new main store tuple when the
instruction writes memory) and leaves the original untouched.

The instruction register is fetched eagerly: after every transition it
already holds the instruction field of ``main_store[instruction_address]``.

Halting
-------
Stopping is not an error. ``execute()`` returns either the next model or a
HaltEvent with reason STOP; ``run_loop()`` also reports ITERATION_EXCEEDED
when its step budget runs out:

    >>> from baby_emulator.core.model import BabyModel, HaltReason
    >>> model = BabyModel.new_example_program()
    >>> final, event = model.run_loop(100)
    >>> event.reason is HaltReason.STOP, event.address
    (True, 4)
"""

from dataclasses import dataclass, field, replace
from enum import Enum, auto
import logging
from typing import Iterable, Optional, Union

from baby_emulator.core.config import (
    DEFAULT_WORD_FORMAT,
    MEMORY_WORDS,
    OPERAND_MASK,
    WordFormat,
)
from baby_emulator.core.instructions import BabyInstruction, InstructionKind
from baby_emulator.errors import MemoryImageError


logger = logging.getLogger(__name__)


# =============================================================================
# Halt Events
# =============================================================================

class HaltReason(Enum):
    """Why the machine stopped advancing."""
    STOP = auto()                # A STOP instruction was executed
    ITERATION_EXCEEDED = auto()  # The bounded runner used up its step budget


@dataclass(frozen=True)
class HaltEvent:
    """
    Information about why execution stopped.

    Attributes:
        reason: Why execution stopped
        address: Address of the STOP instruction (STOP only)
        model: Final model reached (ITERATION_EXCEEDED only)
        max_iter: Configured step budget (ITERATION_EXCEEDED only)
    """
    reason: HaltReason
    address: Optional[int] = None
    model: Optional["BabyModel"] = None
    max_iter: Optional[int] = None

    def __str__(self) -> str:
        if self.reason is HaltReason.STOP:
            return f"Program stop instruction encountered at {self.address:#06x}"
        return f"Exceeded the maximum of {self.max_iter} iterations"


ExecuteResult = Union["BabyModel", HaltEvent]


# =============================================================================
# Machine Model
# =============================================================================

@dataclass(frozen=True)
class BabyModel:
    """
    The registers and main store of the Baby.

    Attributes:
        main_store: The 32 memory words (originally a Williams tube)
        accumulator: Register holding negate/subtract results
        instruction_address: Address of the current instruction (program counter)
        instruction: Instruction register, the instruction field of the
            word at ``instruction_address``
        word_format: Word and instruction field widths

    ``BabyModel()`` is an all-zero machine; run as-is it jumps to address
    0 forever.
    """
    main_store: tuple[int, ...] = (0,) * MEMORY_WORDS
    accumulator: int = 0
    instruction_address: int = 0
    instruction: int = 0
    word_format: WordFormat = field(default=DEFAULT_WORD_FORMAT, repr=False)

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def new_with_program(
        cls,
        main_store: Iterable[int],
        word_format: WordFormat = DEFAULT_WORD_FORMAT,
    ) -> "BabyModel":
        """
        Create a model with ``main_store`` loaded, ready to execute word 0.

        Images shorter than 32 words are zero-padded; values are wrapped to
        the word width.

        Raises:
            MemoryImageError: If the image has more than 32 words
        """
        words = [word_format.to_word(w) for w in main_store]
        if len(words) > MEMORY_WORDS:
            raise MemoryImageError(len(words), MEMORY_WORDS)
        words += [0] * (MEMORY_WORDS - len(words))
        return cls(
            main_store=tuple(words),
            accumulator=0,
            instruction_address=0,
            instruction=word_format.instruction_field(words[0]),
            word_format=word_format,
        )

    @classmethod
    def new_example_program(cls) -> "BabyModel":
        """
        Create a model loaded with a short demonstration program.

        Negates -5 into the accumulator, subtracts -5 (giving 10), stores
        that in word 6, loads it back negated (-10) and stops at address 4.
        """
        program = [
            BabyInstruction.negate(5),
            BabyInstruction.subtract(5),
            BabyInstruction.store(6),
            BabyInstruction.negate(6),
            BabyInstruction.stop(),
            BabyInstruction.absolute_value(-5),
        ]
        return cls.new_with_program(BabyInstruction.to_numbers(program))

    # =========================================================================
    # Fetch / Decode / Execute
    # =========================================================================

    def decode_instruction(self) -> tuple[int, BabyInstruction]:
        """
        Decode the instruction register and dereference its operand.

        Returns:
            (operand_value, instruction) where operand_value is the word
            stored at the instruction's (masked) operand address
        """
        instruction = BabyInstruction.from_number(self.instruction, self.word_format)
        operand_value = self.main_store[instruction.get_operand()]
        return operand_value, instruction

    def execute(self) -> ExecuteResult:
        """
        Execute the instruction in the instruction register.

        Returns:
            The new model, with the next instruction already fetched, or a
            HaltEvent(STOP) carrying the address of the STOP instruction
        """
        operand_value, instruction = self.decode_instruction()
        return self.dispatch_instruction(instruction, operand_value)

    def dispatch_instruction(
        self,
        instruction: BabyInstruction,
        operand_value: int,
    ) -> ExecuteResult:
        """
        Apply ``instruction`` to the model.

        ``operand_value`` is the word read from the operand address; STORE
        writes to the operand address itself.
        """
        kind = instruction.kind
        if kind is InstructionKind.JUMP:
            return self.jump(operand_value)
        elif kind is InstructionKind.RELATIVE_JUMP:
            return self.relative_jump(operand_value)
        elif kind is InstructionKind.NEGATE:
            return self.negate(operand_value)
        elif kind is InstructionKind.STORE:
            return self.store(instruction.get_operand())
        elif kind is InstructionKind.SUBTRACT:
            return self.subtract(operand_value)
        elif kind is InstructionKind.SKIP_NEXT_IF_NEGATIVE:
            return self.test()
        elif kind is InstructionKind.STOP:
            return HaltEvent(HaltReason.STOP, address=self.instruction_address)
        # ABSOLUTE_VALUE never decodes from a word
        return self

    def run_loop(self, max_iter: int) -> tuple["BabyModel", HaltEvent]:
        """
        Execute instructions until STOP or until ``max_iter`` steps ran.

        Returns:
            (final_model, event). ``event.reason`` is STOP (with the
            address) or ITERATION_EXCEEDED (with the final model and
            ``max_iter``).
        """
        model = self
        for _ in range(max_iter):
            result = model.execute()
            if isinstance(result, HaltEvent):
                logger.debug(f"Stopped at {result.address:#06x}")
                return model, result
            model = result

        logger.debug(f"Step budget of {max_iter} exhausted at {model.instruction_address:#06x}")
        return model, HaltEvent(
            HaltReason.ITERATION_EXCEEDED,
            model=model,
            max_iter=max_iter,
        )

    # =========================================================================
    # Instruction Transitions
    # =========================================================================

    def _advance(
        self,
        instruction_address: int,
        accumulator: Optional[int] = None,
        main_store: Optional[tuple[int, ...]] = None,
    ) -> "BabyModel":
        """Build the successor model and fetch its instruction register."""
        instruction_address &= OPERAND_MASK
        store = self.main_store if main_store is None else main_store
        return replace(
            self,
            main_store=store,
            accumulator=self.accumulator if accumulator is None else accumulator,
            instruction_address=instruction_address,
            instruction=self.word_format.instruction_field(store[instruction_address]),
        )

    def jump(self, address: int) -> "BabyModel":
        """
        Jump to the low 5 bits of ``address``.

        ``address`` is the value read from memory, not the operand itself.
        """
        return self._advance(address)

    def relative_jump(self, offset: int) -> "BabyModel":
        """Jump to the program counter plus ``offset``, wrapping at 32."""
        return self._advance(self.instruction_address + offset)

    def negate(self, value: int) -> "BabyModel":
        """Load the negation of ``value`` into the accumulator."""
        return self._advance(
            self.instruction_address + 1,
            accumulator=self.word_format.to_word(-value),
        )

    def store(self, address: int) -> "BabyModel":
        """Store the accumulator at the low 5 bits of ``address``."""
        main_store = list(self.main_store)
        main_store[address & OPERAND_MASK] = self.accumulator
        return self._advance(
            self.instruction_address + 1,
            main_store=tuple(main_store),
        )

    def subtract(self, value: int) -> "BabyModel":
        """Subtract ``value`` from the accumulator."""
        return self._advance(
            self.instruction_address + 1,
            accumulator=self.word_format.to_word(self.accumulator - value),
        )

    def test(self) -> "BabyModel":
        """Skip the next instruction if the accumulator is negative."""
        step = 2 if self.accumulator < 0 else 1
        return self._advance(self.instruction_address + step)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def current_instruction(self) -> BabyInstruction:
        """The decoded instruction register."""
        return BabyInstruction.from_number(self.instruction, self.word_format)

    def core_dump(self) -> str:
        """
        Render the registers and the main store as text.

        Words are shown as two's complement hex at the word width:

            Accumulator: 0x0000000a; Instruction Register: 0x4006;
            Instruction Address: 0x0003; Main Store:
            0x00: 0x00004005; 0x01: 0x00002005; ...
        """
        fmt = self.word_format
        word_width = fmt.hex_digits + 2
        field_width = (fmt.instruction_bits + 3) // 4 + 2

        lines = [
            f"Accumulator: {fmt.to_unsigned(self.accumulator):#0{word_width}x}; "
            f"Instruction Register: {self.instruction:#0{field_width}x};",
            f"Instruction Address: {self.instruction_address:#06x}; Main Store:",
        ]
        for row in range(MEMORY_WORDS // 4):
            cells = []
            for column in range(4):
                address = row * 4 + column
                word = fmt.to_unsigned(self.main_store[address])
                cells.append(f"{address:#04x}: {word:#0{word_width}x};")
            lines.append(" ".join(cells))
        return "\n".join(lines) + "\n"
