"""
Baby Execution Engine Tests
===========================

Tests for the immutable machine model, covering:
- Construction and eager instruction fetch
- Every instruction transition
- Address and word wrapping
- The bounded runner and halt events
- The built-in example program
- Core dumps
"""

from dataclasses import FrozenInstanceError, replace

import pytest

from baby_emulator.core.config import WordFormat
from baby_emulator.core.instructions import BabyInstruction
from baby_emulator.core.model import BabyModel, HaltEvent, HaltReason
from baby_emulator.errors import MemoryImageError


def load(*instructions: BabyInstruction) -> BabyModel:
    """Build a model from a list of instructions."""
    return BabyModel.new_with_program(BabyInstruction.to_numbers(instructions))


# =============================================================================
# Construction
# =============================================================================

class TestConstruction:
    """Tests for building models."""

    def test_default_model(self):
        """The default model is all zeros."""
        model = BabyModel()
        assert model.main_store == (0,) * 32
        assert model.accumulator == 0
        assert model.instruction_address == 0
        assert model.instruction == 0

    def test_new_with_program_fetches_first_word(self):
        """The instruction register holds word 0 after loading."""
        model = BabyModel.new_with_program([5] * 32)
        assert model.instruction == 5

    def test_instruction_register_is_field_only(self):
        """Only the instruction field of word 0 is fetched."""
        model = BabyModel.new_with_program([0x12344005])
        assert model.instruction == 0x4005

    def test_short_image_padded(self):
        model = BabyModel.new_with_program([1, 2, 3])
        assert len(model.main_store) == 32
        assert model.main_store[:4] == (1, 2, 3, 0)

    def test_oversized_image_rejected(self):
        with pytest.raises(MemoryImageError) as exc_info:
            BabyModel.new_with_program([0] * 33)
        assert exc_info.value.size == 33

    def test_frozen(self):
        """Models cannot be mutated in place."""
        model = BabyModel()
        with pytest.raises(FrozenInstanceError):
            model.accumulator = 5

    def test_example_program(self):
        model = BabyModel.new_example_program()
        assert model.instruction == 16389
        assert model.main_store[5] == -5


# =============================================================================
# Instruction Transitions
# =============================================================================

class TestTransitions:
    """Tests for the individual instruction transitions."""

    def test_jump_uses_memory_value(self):
        """JUMP S moves to the address held in S, not to S."""
        model = load(BabyInstruction.jump(3), BabyInstruction.stop(),
                     BabyInstruction.stop(), BabyInstruction.absolute_value(7))
        result = model.execute()
        assert result.instruction_address == 7

    def test_jump_masks_address(self):
        model = BabyModel().jump(33)
        assert model.instruction_address == 1

    def test_relative_jump_wraps(self):
        """A relative jump past the end wraps to the start of memory."""
        model = BabyModel(main_store=tuple(range(32)), instruction_address=2)
        result = model.relative_jump(30)
        assert result.instruction_address == 0
        assert result.instruction == 0

    def test_relative_jump_negative_offset(self):
        model = BabyModel(main_store=tuple(range(32)), instruction_address=2)
        result = model.relative_jump(-3)
        assert result.instruction_address == 31
        assert result.instruction == 31

    def test_negate(self):
        result = BabyModel().negate(5)
        assert result.accumulator == -5
        assert result.instruction_address == 1

    def test_negate_wraps_most_negative(self):
        """Negating the most negative word gives the same word."""
        fmt = WordFormat(word_bits=8, instruction_bits=8)
        model = BabyModel.new_with_program([], fmt)
        assert model.negate(-128).accumulator == -128

    def test_subtract(self):
        model = replace(BabyModel(), accumulator=5)
        assert model.subtract(-5).accumulator == 10

    def test_subtract_wraps(self):
        model = replace(BabyModel(), accumulator=-(2 ** 31))
        assert model.subtract(1).accumulator == 2 ** 31 - 1

    def test_store_copies_memory(self):
        """STORE builds a new main store and leaves the old one alone."""
        model = replace(BabyModel(), accumulator=7)
        result = model.store(3)
        assert result.main_store[3] == 7
        assert model.main_store[3] == 0
        assert result.instruction_address == 1

    def test_store_masks_address(self):
        model = replace(BabyModel(), accumulator=7)
        assert model.store(35).main_store[3] == 7

    def test_store_writes_operand_address(self):
        """Executing STORE writes to the operand address itself."""
        model = replace(load(BabyInstruction.store(10), BabyInstruction.stop()), accumulator=42)
        result = model.execute()
        assert result.main_store[10] == 42

    def test_store_refetches_overwritten_instruction(self):
        """Storing over the next instruction changes what is fetched."""
        model = replace(load(BabyInstruction.store(1), BabyInstruction.stop()), accumulator=0x4003)
        result = model.execute()
        assert result.instruction == 0x4003

    def test_skip_when_negative(self):
        model = replace(BabyModel(), accumulator=-1)
        assert model.test().instruction_address == 2

    def test_no_skip_when_zero(self):
        assert BabyModel().test().instruction_address == 1

    def test_stop_reports_address(self):
        model = load(BabyInstruction.negate(0), BabyInstruction.stop())
        model = model.execute()
        event = model.execute()
        assert event == HaltEvent(HaltReason.STOP, address=1)

    def test_default_model_jumps_to_itself(self):
        """The all-zero machine is a JUMP to address 0."""
        model = BabyModel()
        assert model.execute() == model

    def test_decode_instruction(self):
        model = BabyModel.new_example_program()
        operand_value, instruction = model.decode_instruction()
        assert instruction == BabyInstruction.negate(5)
        assert operand_value == -5


# =============================================================================
# Immutability
# =============================================================================

class TestImmutability:
    """Executing never changes the model it is called on."""

    def test_execute_twice_is_equal(self):
        model = BabyModel.new_example_program()
        assert model.execute() == model.execute()

    def test_original_unchanged(self):
        model = BabyModel.new_example_program()
        snapshot = replace(model)
        model.run_loop(100)
        assert model == snapshot


# =============================================================================
# Example Program
# =============================================================================

class TestExampleProgram:
    """Step-by-step trace of the built-in example."""

    def test_trace(self):
        model = BabyModel.new_example_program()

        model = model.execute()
        assert model.accumulator == 5
        assert model.instruction_address == 1

        model = model.execute()
        assert model.accumulator == 10

        model = model.execute()
        assert model.main_store[6] == 10

        model = model.execute()
        assert model.accumulator == -10
        assert model.instruction_address == 4

        event = model.execute()
        assert isinstance(event, HaltEvent)
        assert event.reason is HaltReason.STOP
        assert event.address == 4

    def test_run_loop_to_stop(self):
        final, event = BabyModel.new_example_program().run_loop(100)
        assert event.reason is HaltReason.STOP
        assert event.address == 4
        assert final.accumulator == -10
        assert str(event) == "Program stop instruction encountered at 0x0004"


# =============================================================================
# Bounded Runner
# =============================================================================

class TestRunLoop:
    """Tests for run_loop()."""

    def test_single_step_budget(self):
        """run_loop(1) executes exactly one instruction."""
        model = BabyModel.new_example_program()
        final, event = model.run_loop(1)
        assert event.reason is HaltReason.ITERATION_EXCEEDED
        assert event.max_iter == 1
        assert event.model == final
        assert final == model.execute()
        assert final.accumulator == 5
        assert final.instruction_address == 1

    def test_zero_budget(self):
        model = BabyModel.new_example_program()
        final, event = model.run_loop(0)
        assert final == model
        assert event.reason is HaltReason.ITERATION_EXCEEDED

    def test_infinite_loop_hits_limit(self):
        final, event = BabyModel().run_loop(50)
        assert event.reason is HaltReason.ITERATION_EXCEEDED
        assert str(event) == "Exceeded the maximum of 50 iterations"


# =============================================================================
# Diagnostics
# =============================================================================

class TestCoreDump:
    """Tests for core_dump() and current_instruction()."""

    def test_layout(self):
        dump = BabyModel.new_example_program().core_dump()
        lines = dump.splitlines()
        assert lines[0] == "Accumulator: 0x00000000; Instruction Register: 0x4005;"
        assert lines[1] == "Instruction Address: 0x0000; Main Store:"
        assert len(lines) == 2 + 8
        assert lines[2].startswith("0x00: 0x00004005; 0x01: 0x00002005;")

    def test_negative_words_as_twos_complement(self):
        dump = BabyModel.new_example_program().core_dump()
        assert "0x05: 0xfffffffb;" in dump

    def test_current_instruction(self):
        model = BabyModel.new_example_program()
        assert model.current_instruction() == BabyInstruction.negate(5)
