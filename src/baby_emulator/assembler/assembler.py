"""
Baby Assembler - Main Interface
===============================

This module provides the Assembler class, the primary interface for turning
Baby assembly source into a main store image. It coordinates the parser and
the linker and keeps the results around for listings and symbol reports.

Example Usage
-------------
>>> from baby_emulator.assembler import Assembler
>>>
>>> asm = Assembler()
>>> store = asm.assemble('''
... :start
...     ldn $value
...     stp
... :value
...     abs 0d-7
... ''')
>>> asm.get_symbols()
{'start': 0, 'value': 2}
>>> asm.build_model().run_loop(10)[0].accumulator
7

Command-Line Usage
------------------
    $ babyasm program.asm -l program.lst -s program.sym
    $ babyrun program.asm --max-steps 500
"""

import logging
from pathlib import Path
from typing import Optional

from baby_emulator.assembler.linker import LinkerData, link
from baby_emulator.assembler.parser import parse_asm_string
from baby_emulator.core.config import DEFAULT_WORD_FORMAT, MEMORY_WORDS, WordFormat
from baby_emulator.core.instructions import BabyInstruction
from baby_emulator.core.model import BabyModel
from baby_emulator.errors import AssemblerError


logger = logging.getLogger(__name__)


class Assembler:
    """
    Main Baby assembler class.

    Attributes:
        original_notation: Parse instructions in original notation
        word_format: Word layout used for encoding
        check_size: Reject programs longer than the main store
    """

    def __init__(self,
                 original_notation: bool = False,
                 word_format: Optional[WordFormat] = None,
                 check_size: bool = True,
                 verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            original_notation: Parse instructions in the notation of the
                original machine ("-S, C") instead of modern mnemonics
            word_format: Word layout (default: 32-bit words, 16-bit field)
            check_size: Raise ProgramSizeError for programs longer than
                32 words
            verbose: Log progress at INFO level
        """
        self.original_notation = original_notation
        self.word_format = word_format or DEFAULT_WORD_FORMAT
        self.check_size = check_size
        self._verbose = verbose
        self._linked: Optional[LinkerData] = None

    # =========================================================================
    # Assembly
    # =========================================================================

    def assemble(self, source: str, filename: str = "<input>") -> tuple[int, ...]:
        """
        Assemble source text.

        Args:
            source: Assembly source
            filename: Name used in error locations

        Returns:
            The 32-word main store image

        Raises:
            AssemblySyntaxError: If a line cannot be parsed
            LinkingError: If a tag cannot be resolved or the program is
                too large
        """
        self._linked = None
        lines = parse_asm_string(source, self.original_notation, filename)
        logger.debug(f"Parsed {len(lines)} lines from {filename}")

        self._linked = link(lines, self.word_format, self.check_size)
        if self._verbose:
            logger.info(
                f"Assembled {filename}: {len(self._linked)} words, "
                f"{len(self._linked.symbols)} tags"
            )
        return self._linked.main_store

    def assemble_file(self, path: str | Path) -> tuple[int, ...]:
        """
        Assemble a source file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        source = path.read_text(encoding="utf-8")
        return self.assemble(source, filename=str(path))

    def build_model(self) -> BabyModel:
        """Create a BabyModel loaded with the assembled program."""
        return BabyModel.new_with_program(self.get_code(), self.word_format)

    # =========================================================================
    # Results
    # =========================================================================

    def _require_linked(self) -> LinkerData:
        if self._linked is None:
            raise AssemblerError("no program has been assembled")
        return self._linked

    def get_code(self) -> tuple[int, ...]:
        """The 32-word main store image of the last assembly."""
        return self._require_linked().main_store

    def get_symbols(self) -> dict[str, int]:
        """Tag name -> position of the last assembly."""
        return dict(self._require_linked().symbols)

    def get_instructions(self) -> tuple[BabyInstruction, ...]:
        """Resolved instructions (ABSOLUTE_VALUE for data lines)."""
        return self._require_linked().instructions

    def get_program_length(self) -> int:
        """Number of words the program occupies."""
        return len(self._require_linked())

    # =========================================================================
    # Reports
    # =========================================================================

    def get_listing(self) -> str:
        """
        Render the assembled program, one line per memory word.

            ADDR  WORD        INSTR     TAG
            0x00  0x00004005  LDN 5     start
        """
        linked = self._require_linked()
        fmt = self.word_format
        width = fmt.hex_digits + 2
        tags_at = {position: name for name, position in linked.symbols.items()}

        lines = [f"{'ADDR':<6}{'WORD':<{width + 2}}{'INSTR':<10}TAG"]
        for address, instruction in enumerate(linked.instructions[:MEMORY_WORDS]):
            word = fmt.to_unsigned(fmt.to_word(instruction.to_number(fmt)))
            tag = tags_at.get(address, "")
            lines.append(
                f"{address:#04x}  {word:#0{width}x}  {instruction.mnemonic():<10}{tag}".rstrip()
            )
        return "\n".join(lines) + "\n"

    def get_symbol_report(self) -> str:
        """Render the symbol table sorted by position."""
        symbols = sorted(self.get_symbols().items(), key=lambda item: (item[1], item[0]))
        return "".join(f"{name:<16}{position:#04x}\n" for name, position in symbols)

    def write_listing(self, path: str | Path) -> None:
        """Write the listing produced by get_listing() to ``path``."""
        Path(path).write_text(self.get_listing(), encoding="utf-8")

    def write_symbols(self, path: str | Path) -> None:
        """Write the symbol report produced by get_symbol_report() to ``path``."""
        Path(path).write_text(self.get_symbol_report(), encoding="utf-8")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, original_notation: bool = False) -> tuple[int, ...]:
    """Assemble source text with default settings and return the image."""
    return Assembler(original_notation=original_notation).assemble(source)


def assemble_file(path: str | Path, original_notation: bool = False) -> tuple[int, ...]:
    """Assemble a source file with default settings and return the image."""
    return Assembler(original_notation=original_notation).assemble_file(path)
