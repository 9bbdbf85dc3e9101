"""
Configuration Tests
===================

Tests for WordFormat validation and wrapping, and for reading
MachineConfig from the environment.
"""

import pytest

from baby_emulator.core.config import DEFAULT_WORD_FORMAT, MachineConfig, WordFormat
from baby_emulator.errors import ConfigurationError


ENV_VARS = ("BABY_WORD_BITS", "BABY_INSTRUCTION_BITS", "BABY_MAX_STEPS", "BABY_CHECK_SIZE")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without BABY_* variables."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Word Format
# =============================================================================

class TestWordFormat:
    """Tests for WordFormat."""

    def test_defaults(self):
        assert DEFAULT_WORD_FORMAT.word_bits == 32
        assert DEFAULT_WORD_FORMAT.instruction_bits == 16
        assert DEFAULT_WORD_FORMAT.opcode_shift == 13
        assert DEFAULT_WORD_FORMAT.hex_digits == 8

    def test_to_word_wraps(self):
        fmt = WordFormat()
        assert fmt.to_word(0xFFFFFFFF) == -1
        assert fmt.to_word(2 ** 31) == -(2 ** 31)
        assert fmt.to_word(2 ** 32 + 5) == 5
        assert fmt.to_word(-5) == -5

    def test_to_unsigned(self):
        assert WordFormat().to_unsigned(-1) == 0xFFFFFFFF
        assert WordFormat(16, 16).to_unsigned(-1) == 0xFFFF

    def test_instruction_field(self):
        assert WordFormat().instruction_field(0x12344005) == 0x4005

    def test_field_too_narrow(self):
        with pytest.raises(ConfigurationError):
            WordFormat(word_bits=32, instruction_bits=7)

    def test_word_narrower_than_field(self):
        with pytest.raises(ConfigurationError):
            WordFormat(word_bits=8, instruction_bits=16)

    def test_smallest_format(self):
        fmt = WordFormat(word_bits=8, instruction_bits=8)
        assert fmt.opcode_shift == 5
        assert fmt.to_word(0xFF) == -1


# =============================================================================
# Environment Configuration
# =============================================================================

class TestMachineConfig:
    """Tests for MachineConfig.from_env()."""

    def test_defaults(self):
        config = MachineConfig.from_env()
        assert config.word_bits == 32
        assert config.instruction_bits == 16
        assert config.max_steps == 1000
        assert config.check_size is True
        assert config.word_format == DEFAULT_WORD_FORMAT

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("BABY_WORD_BITS", "16")
        monkeypatch.setenv("BABY_INSTRUCTION_BITS", "0x10")
        monkeypatch.setenv("BABY_MAX_STEPS", "50")
        monkeypatch.setenv("BABY_CHECK_SIZE", "false")
        config = MachineConfig.from_env()
        assert config.word_format == WordFormat(16, 16)
        assert config.max_steps == 50
        assert config.check_size is False

    def test_check_size_truthy(self, monkeypatch):
        monkeypatch.setenv("BABY_CHECK_SIZE", "yes")
        assert MachineConfig.from_env().check_size is True

    def test_not_an_integer(self, monkeypatch):
        monkeypatch.setenv("BABY_MAX_STEPS", "lots")
        with pytest.raises(ConfigurationError, match="BABY_MAX_STEPS"):
            MachineConfig.from_env()

    def test_negative_steps(self, monkeypatch):
        monkeypatch.setenv("BABY_MAX_STEPS", "-1")
        with pytest.raises(ConfigurationError):
            MachineConfig.from_env()

    def test_invalid_widths(self, monkeypatch):
        monkeypatch.setenv("BABY_WORD_BITS", "8")
        with pytest.raises(ConfigurationError):
            MachineConfig.from_env()
