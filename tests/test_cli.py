"""
Tests for babyasm and babyrun
=============================

These tests drive both command-line tools through click's CliRunner and
check their output and exit codes.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from baby_emulator import __version__
from baby_emulator.cli import babyasm, babyrun
from baby_emulator.cli.errors import ExitCode


EXAMPLES_DIR = Path(__file__).parent.parent / "examples"

EXAMPLE_SOURCE = """
    ldn $value
    sub $value
    sto $result
    ldn $result
    stp
:value
    abs 0d-5
:result
    abs 0d0
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def example_file(tmp_path):
    path = tmp_path / "example.asm"
    path.write_text(EXAMPLE_SOURCE)
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("BABY_WORD_BITS", "BABY_INSTRUCTION_BITS", "BABY_MAX_STEPS", "BABY_CHECK_SIZE"):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# babyasm
# =============================================================================

class TestBabyAsm:
    """Tests for the babyasm command."""

    def test_help(self, runner):
        result = runner.invoke(babyasm.main, ["--help"])
        assert result.exit_code == 0
        assert "Assemble Baby source code" in result.output

    def test_version(self, runner):
        result = runner.invoke(babyasm.main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_listing_to_stdout(self, runner, example_file):
        result = runner.invoke(babyasm.main, [str(example_file)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "0x00  0x00004005  LDN 5" in result.output
        assert "ABS -5" in result.output

    def test_listing_and_symbol_files(self, runner, example_file, tmp_path):
        listing = tmp_path / "out.lst"
        symbols = tmp_path / "out.sym"
        result = runner.invoke(babyasm.main, [
            str(example_file), "-l", str(listing), "-s", str(symbols),
        ])
        assert result.exit_code == ExitCode.SUCCESS
        assert "LDN 5" in listing.read_text()
        assert "value           0x05" in symbols.read_text()
        assert "LDN 5" not in result.output

    def test_original_notation(self, runner):
        result = runner.invoke(babyasm.main, [
            "--original-notation", str(EXAMPLES_DIR / "example_original.asm"),
        ])
        assert result.exit_code == ExitCode.SUCCESS
        assert "STO 6" in result.output

    def test_verbose(self, runner, example_file):
        result = runner.invoke(babyasm.main, ["-v", str(example_file)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "Assembly complete: 7 words, 2 tags" in result.output

    def test_syntax_error(self, runner, tmp_path):
        source = tmp_path / "bad.asm"
        source.write_text("stp\nhalt\n")
        result = runner.invoke(babyasm.main, [str(source)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "bad.asm:2:1: error: the instruction 'halt' is not known" in result.output

    def test_unknown_tag(self, runner, tmp_path):
        source = tmp_path / "bad.asm"
        source.write_text("jmp $missing\n")
        result = runner.invoke(babyasm.main, [str(source)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "'missing' is not declared" in result.output

    def test_program_too_large(self, runner, tmp_path):
        source = tmp_path / "big.asm"
        source.write_text("abs 0d0\n" * 33)
        result = runner.invoke(babyasm.main, [str(source)])
        assert result.exit_code == ExitCode.BUILD_ERROR

        result = runner.invoke(babyasm.main, ["--no-size-check", str(source)])
        assert result.exit_code == ExitCode.SUCCESS

    def test_size_check_from_env(self, runner, tmp_path):
        source = tmp_path / "big.asm"
        source.write_text("abs 0d0\n" * 33)
        result = runner.invoke(babyasm.main, [str(source)], env={"BABY_CHECK_SIZE": "0"})
        assert result.exit_code == ExitCode.SUCCESS

    def test_word_bits(self, runner, example_file):
        result = runner.invoke(babyasm.main, [
            "--word-bits", "16", "--instruction-bits", "8", str(example_file),
        ])
        assert result.exit_code == ExitCode.SUCCESS
        assert "0x0045  LDN 5" in result.output

    def test_invalid_word_format(self, runner, example_file):
        result = runner.invoke(babyasm.main, ["--word-bits", "8", str(example_file)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "Configuration error" in result.output

    def test_invalid_env(self, runner, example_file):
        result = runner.invoke(babyasm.main, [str(example_file)], env={"BABY_WORD_BITS": "wide"})
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_missing_input(self, runner, tmp_path):
        result = runner.invoke(babyasm.main, [str(tmp_path / "missing.asm")])
        assert result.exit_code == 2


# =============================================================================
# babyrun
# =============================================================================

class TestBabyRun:
    """Tests for the babyrun command."""

    def test_help(self, runner):
        result = runner.invoke(babyrun.main, ["--help"])
        assert result.exit_code == 0
        assert "Assemble and run a Baby program" in result.output

    def test_runs_to_stop(self, runner, example_file):
        result = runner.invoke(babyrun.main, [str(example_file)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "Program stop instruction encountered at 0x0004" in result.output
        assert "Accumulator: 0xfffffff6;" in result.output

    def test_step_limit(self, runner):
        result = runner.invoke(babyrun.main, [str(EXAMPLES_DIR / "countdown.asm"), "-n", "10"])
        assert result.exit_code == ExitCode.STEP_LIMIT
        assert "Exceeded the maximum of 10 iterations" in result.output
        assert "Main Store:" in result.output

    def test_countdown_completes(self, runner):
        result = runner.invoke(babyrun.main, [str(EXAMPLES_DIR / "countdown.asm")])
        assert result.exit_code == ExitCode.SUCCESS
        assert "encountered at 0x0007" in result.output

    def test_max_steps_from_env(self, runner):
        result = runner.invoke(
            babyrun.main,
            [str(EXAMPLES_DIR / "countdown.asm")],
            env={"BABY_MAX_STEPS": "5"},
        )
        assert result.exit_code == ExitCode.STEP_LIMIT
        assert "maximum of 5 iterations" in result.output

    def test_option_overrides_env(self, runner):
        result = runner.invoke(
            babyrun.main,
            [str(EXAMPLES_DIR / "countdown.asm"), "--max-steps", "1000"],
            env={"BABY_MAX_STEPS": "5"},
        )
        assert result.exit_code == ExitCode.SUCCESS

    def test_trace(self, runner, example_file):
        result = runner.invoke(babyrun.main, ["--trace", str(example_file)])
        assert result.exit_code == ExitCode.SUCCESS
        lines = result.output.splitlines()
        assert lines[0] == "    0  0x00  LDN 5     acc=0"
        assert lines[1] == "    1  0x01  SUB 5     acc=5"
        assert lines[4] == "    4  0x04  STP       acc=-10"

    def test_original_notation(self, runner):
        result = runner.invoke(babyrun.main, [
            "--original-notation", str(EXAMPLES_DIR / "example_original.asm"),
        ])
        assert result.exit_code == ExitCode.SUCCESS
        assert "encountered at 0x0004" in result.output

    def test_assembly_error(self, runner, tmp_path):
        source = tmp_path / "bad.asm"
        source.write_text("ldn\n")
        result = runner.invoke(babyrun.main, [str(source)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "hint: 'ldn' needs an operand" in result.output
