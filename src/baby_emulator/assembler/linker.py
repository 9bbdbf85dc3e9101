"""
Baby Linker
===========

Resolves parsed lines into the final main store image.

Linking is two-pass:

1. **Symbol table**: tags are attached to the real line that follows them
   (``inline_tags``) and every tag is mapped to that line's position
   (``position_tags``). Because the table is complete before anything is
   resolved, forward references work.
2. **Resolution**: every value expression is resolved against the table
   and each line is converted to a word (``resolve_line``).

Tag Rules
---------
- A tag declaration is not a memory entry; it names the next real line.
- With several consecutive tags, only the one directly before the real
  line binds; the others are dropped, as is a tag at the end of the source.
- If the same tag name binds twice, the later position wins.

Errors are fail-fast: the first unknown tag raises UnknownTagNameError and
no image is produced. Programs with more real lines than the main store
raise ProgramSizeError unless the size check is disabled.

Example:
    >>> from baby_emulator.assembler.parser import parse_asm_string
    >>> lines = parse_asm_string('''
    ... :start
    ...     ldn 0d2
    ...     jmp $start
    ...     abs 0d5
    ... ''')
    >>> data = link(lines)
    >>> data.symbols
    {'start': 0}
    >>> data.words
    (16386, 0, 5)
"""

from dataclasses import dataclass
import difflib
import logging
from typing import Optional, Sequence

from baby_emulator.core.config import DEFAULT_WORD_FORMAT, MEMORY_WORDS, WordFormat
from baby_emulator.core.instructions import BabyInstruction
from baby_emulator.assembler.parser import (
    DataDeclaration,
    Literal,
    ParsedLine,
    RealLine,
    TagDeclaration,
    TagReference,
    ValueExpr,
)
from baby_emulator.errors import ProgramSizeError, UnknownTagNameError


logger = logging.getLogger(__name__)

SymbolTable = dict[str, int]


@dataclass(frozen=True)
class LinkerData:
    """
    Everything produced by a successful link.

    Attributes:
        instructions: Resolved program, ABSOLUTE_VALUE for data lines
        symbols: Tag name -> position
        word_format: Word layout used to encode the program
    """
    instructions: tuple[BabyInstruction, ...]
    symbols: SymbolTable
    word_format: WordFormat = DEFAULT_WORD_FORMAT

    @property
    def words(self) -> tuple[int, ...]:
        """The encoded program, one word per real line."""
        fmt = self.word_format
        return tuple(fmt.to_word(i.to_number(fmt)) for i in self.instructions)

    @property
    def main_store(self) -> tuple[int, ...]:
        """The full 32-word image, zero past the end of the program."""
        return BabyInstruction.to_numbers(self.instructions, self.word_format)

    def __len__(self) -> int:
        return len(self.instructions)


# =============================================================================
# Pass 1: Symbol Table
# =============================================================================

def inline_tags(lines: Sequence[ParsedLine]) -> list[tuple[Optional[str], RealLine]]:
    """
    Attach each tag to the real line directly after it.

    Returns:
        One (tag name or None, real line) pair per real line, in order
    """
    inlined: list[tuple[Optional[str], RealLine]] = []
    previous: Optional[ParsedLine] = None
    for line in lines:
        if not isinstance(line, TagDeclaration):
            tag = previous.name if isinstance(previous, TagDeclaration) else None
            inlined.append((tag, line))
        previous = line
    return inlined


def position_tags(inlined: Sequence[tuple[Optional[str], RealLine]]) -> SymbolTable:
    """
    Build the symbol table from inlined lines.

    A tag maps to the index of its line; a repeated tag keeps the last
    index.
    """
    tags: SymbolTable = {}
    for index, (tag, _) in enumerate(inlined):
        if tag is None:
            continue
        if tag in tags:
            logger.debug(f"Tag '{tag}' redeclared, moving from {tags[tag]} to {index}")
        tags[tag] = index
    return tags


# =============================================================================
# Pass 2: Resolution
# =============================================================================

def resolve_value(
    value: ValueExpr,
    tags: SymbolTable,
    line: Optional[RealLine] = None,
) -> int:
    """
    Resolve a value expression to an integer.

    Args:
        value: Literal or tag reference
        tags: Symbol table
        line: Line holding the value, used for error locations

    Raises:
        UnknownTagNameError: If a tag reference is not in the table
    """
    if isinstance(value, Literal):
        return value.value
    if isinstance(value, TagReference):
        try:
            return tags[value.name]
        except KeyError:
            raise UnknownTagNameError(
                value.name,
                location=line.location if line else None,
                source_line=line.source_line if line else None,
                similar_tags=difflib.get_close_matches(value.name, list(tags)),
            ) from None
    raise TypeError(f"not a value expression: {value!r}")


def resolve_instruction(line: RealLine, tags: SymbolTable) -> BabyInstruction:
    """
    Resolve a real line into a BabyInstruction.

    Data lines become ABSOLUTE_VALUE instructions.
    """
    if isinstance(line, DataDeclaration):
        return BabyInstruction.absolute_value(resolve_value(line.value, tags, line))
    return BabyInstruction.with_operand(line.kind, resolve_value(line.operand, tags, line))


def resolve_line(
    line: RealLine,
    tags: SymbolTable,
    word_format: WordFormat = DEFAULT_WORD_FORMAT,
) -> int:
    """
    Resolve a real line to its memory word.

    Data lines give the resolved value itself (wrapped to the word width);
    instruction lines give the opcode packed with the low 5 bits of the
    resolved operand.
    """
    instruction = resolve_instruction(line, tags)
    return word_format.to_word(instruction.to_number(word_format))


def link_tags(
    lines: Sequence[RealLine],
    tags: SymbolTable,
    check_size: bool = True,
) -> list[BabyInstruction]:
    """
    Resolve every real line against ``tags``.

    Raises:
        ProgramSizeError: If there are more lines than memory words and
            ``check_size`` is set
        UnknownTagNameError: On the first unresolvable tag reference
    """
    if check_size and len(lines) > MEMORY_WORDS:
        raise ProgramSizeError(len(lines), MEMORY_WORDS)
    return [resolve_instruction(line, tags) for line in lines]


def link(
    lines: Sequence[ParsedLine],
    word_format: WordFormat = DEFAULT_WORD_FORMAT,
    check_size: bool = True,
) -> LinkerData:
    """
    Link parsed lines into a program.

    Args:
        lines: Parsed lines in source order
        word_format: Word layout for encoding
        check_size: Reject programs longer than the main store. When
            disabled, words past the 32nd are left out of ``main_store``.

    Returns:
        LinkerData with the resolved instructions and the symbol table

    Raises:
        ProgramSizeError: If the program is too large (and checked)
        UnknownTagNameError: If a tag reference cannot be resolved
    """
    inlined = inline_tags(lines)
    tags = position_tags(inlined)
    logger.debug(f"Symbol table: {len(tags)} tags over {len(inlined)} words")

    instructions = link_tags([line for _, line in inlined], tags, check_size)
    if len(instructions) > MEMORY_WORDS:
        logger.warning(
            f"Program is {len(instructions)} words long; "
            f"only the first {MEMORY_WORDS} are loaded"
        )
    return LinkerData(tuple(instructions), tags, word_format)


def link_program(
    lines: Sequence[ParsedLine],
    word_format: WordFormat = DEFAULT_WORD_FORMAT,
    check_size: bool = True,
) -> tuple[int, ...]:
    """Link parsed lines and return only the 32-word main store image."""
    return link(lines, word_format, check_size).main_store
