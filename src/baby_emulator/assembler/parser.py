"""
Baby Assembly Language Parser
=============================

This module turns Baby assembly source into typed line records that the
linker consumes. It does not resolve tags; it only recognises syntax.

Line Types
----------
1. **TagDeclaration**: names the position of the next real line
   ```asm
   :start
   ```

2. **DataDeclaration**: an absolute value placed directly in memory
   ```asm
   abs 0d-5
   abs $start
   ```

3. **InstructionDeclaration**: one of the seven machine instructions
   ```asm
   ldn $value      ; modern notation
   -$value, C      ; original notation
   ```

Values
------
| Syntax   | Meaning            | Example          |
|----------|--------------------|------------------|
| 0x...    | Hexadecimal        | 0xA = 10         |
| 0d...    | Decimal            | 0d10 = 10        |
| 0o...    | Octal              | 0o12 = 10        |
| 0b...    | Binary             | 0b1010 = 10      |
| $name    | Tag reference      | $start           |

Comments start with ';' and run to the end of the line. Source is
case-insensitive; tag names are lower-cased.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from baby_emulator.core.instructions import InstructionKind
from baby_emulator.errors import (
    InvalidValueError,
    SourceLocation,
    TagNameError,
    UnknownInstructionError,
)


# =============================================================================
# Value Expressions
# =============================================================================

@dataclass(frozen=True)
class Literal:
    """A concrete integer value."""
    value: int


@dataclass(frozen=True)
class TagReference:
    """A reference to a tag, resolved by the linker (e.g. ``$start``)."""
    name: str


ValueExpr = Union[Literal, TagReference]


# =============================================================================
# Line Records
# =============================================================================

@dataclass
class Line:
    """Base class for parsed lines."""
    location: Optional[SourceLocation] = field(default=None, compare=False, kw_only=True)
    source_line: Optional[str] = field(default=None, compare=False, kw_only=True)


@dataclass
class TagDeclaration(Line):
    """Tag declaration, labels the next real line."""
    name: str


@dataclass
class DataDeclaration(Line):
    """Absolute value line, placed in memory unencoded."""
    value: ValueExpr


@dataclass
class InstructionDeclaration(Line):
    """
    Instruction line with an unresolved operand.

    SKIP_NEXT_IF_NEGATIVE and STOP carry ``Literal(0)``.
    """
    kind: InstructionKind
    operand: ValueExpr = Literal(0)


RealLine = Union[DataDeclaration, InstructionDeclaration]
ParsedLine = Union[TagDeclaration, DataDeclaration, InstructionDeclaration]


# =============================================================================
# Notation Tables
# =============================================================================

# Modern notation: mnemonic -> kind (operand follows after a space)
MODERN_OPERAND_MNEMONICS: dict[str, InstructionKind] = {
    "jmp": InstructionKind.JUMP,
    "jrp": InstructionKind.RELATIVE_JUMP,
    "ldn": InstructionKind.NEGATE,
    "sto": InstructionKind.STORE,
    "sub": InstructionKind.SUBTRACT,
}

MODERN_BARE_MNEMONICS: dict[str, InstructionKind] = {
    "cmp": InstructionKind.SKIP_NEXT_IF_NEGATIVE,
    "stp": InstructionKind.STOP,
}

# Original notation, checked in order: (prefix, suffix, kind).
# Relative jump must be tried before jump since both end in ", cl".
ORIGINAL_NOTATION_FORMS: list[tuple[str, str, InstructionKind]] = [
    ("add ", ", cl", InstructionKind.RELATIVE_JUMP),
    ("", ", cl", InstructionKind.JUMP),
    ("-", ", c", InstructionKind.NEGATE),
    ("c, ", "", InstructionKind.STORE),
    ("sub ", "", InstructionKind.SUBTRACT),
]

ORIGINAL_BARE_FORMS: dict[str, InstructionKind] = {
    "test": InstructionKind.SKIP_NEXT_IF_NEGATIVE,
    "stop": InstructionKind.STOP,
}

VALUE_RADIXES: dict[str, tuple[int, str]] = {
    "0x": (16, "hex"),
    "0d": (10, "decimal"),
    "0o": (8, "octal"),
    "0b": (2, "binary"),
}


# =============================================================================
# Parsing Functions
# =============================================================================

def strip_comments(line: str) -> str:
    """
    Remove a ';' comment from a line.

    >>> strip_comments("sub 0xA ;foo")
    'sub 0xA '
    """
    return line.split(";", 1)[0]


def parse_value(
    text: str,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> ValueExpr:
    """
    Parse a value expression.

    Raises:
        InvalidValueError: If the text is not a prefixed numeral or tag
    """
    value = text.strip()

    if value.startswith("$"):
        name = value[1:]
        if not name or any(c.isspace() for c in name):
            raise InvalidValueError(value, "tag name", location, source_line)
        return TagReference(name)

    prefix = value[:2].lower()
    if prefix in VALUE_RADIXES:
        base, radix_name = VALUE_RADIXES[prefix]
        digits = value[2:]
        negative = digits.startswith("-")
        if negative:
            digits = digits[1:]
        # int() tolerates '_' and a sign; neither is a valid numeral here
        if not digits or not all(c.isalnum() for c in digits):
            raise InvalidValueError(digits or value, radix_name, location, source_line)
        try:
            number = int(digits, base)
        except ValueError:
            raise InvalidValueError(digits, radix_name, location, source_line) from None
        return Literal(-number if negative else number)

    raise InvalidValueError(value, None, location, source_line)


def parse_tag(
    name: str,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> TagDeclaration:
    """Parse the name part of a ':name' tag declaration."""
    name = name.strip()
    if not name or any(c.isspace() for c in name):
        raise TagNameError(name, location, source_line)
    return TagDeclaration(name, location=location, source_line=source_line)


def parse_instruction(
    text: str,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> InstructionDeclaration:
    """
    Parse an instruction in modern notation.

    | Asm   | Description                                              |
    |-------|----------------------------------------------------------|
    | JMP S | Jump to the address held in S                            |
    | JRP S | Jump to the program counter plus the value held in S     |
    | LDN S | Load the negation of the value in S into the accumulator |
    | STO S | Store the accumulator in S                               |
    | SUB S | Subtract the value in S from the accumulator             |
    | CMP   | Skip the next instruction if the accumulator is negative |
    | STP   | Stop                                                     |
    """
    text = text.strip().lower()
    mnemonic, _, operand = text.partition(" ")

    if mnemonic in MODERN_BARE_MNEMONICS:
        return InstructionDeclaration(
            MODERN_BARE_MNEMONICS[mnemonic],
            location=location,
            source_line=source_line,
        )

    if mnemonic in MODERN_OPERAND_MNEMONICS and operand.strip():
        return InstructionDeclaration(
            MODERN_OPERAND_MNEMONICS[mnemonic],
            parse_value(operand, location, source_line),
            location=location,
            source_line=source_line,
        )

    hint = None
    if mnemonic in MODERN_OPERAND_MNEMONICS:
        hint = f"'{mnemonic}' needs an operand"
    raise UnknownInstructionError(text, location, hint, source_line)


def parse_instruction_original(
    text: str,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> InstructionDeclaration:
    """
    Parse an instruction in the notation used on the original machine.

    | Asm       | Modern |
    |-----------|--------|
    | S, Cl     | JMP S  |
    | Add S, Cl | JRP S  |
    | -S, C     | LDN S  |
    | c, S      | STO S  |
    | SUB S     | SUB S  |
    | Test      | CMP    |
    | Stop      | STP    |
    """
    text = text.strip().lower()

    if text in ORIGINAL_BARE_FORMS:
        return InstructionDeclaration(
            ORIGINAL_BARE_FORMS[text],
            location=location,
            source_line=source_line,
        )

    for prefix, suffix, kind in ORIGINAL_NOTATION_FORMS:
        if text.startswith(prefix) and text.endswith(suffix):
            operand = text[len(prefix):len(text) - len(suffix)]
            if not operand.strip():
                continue
            return InstructionDeclaration(
                kind,
                parse_value(operand, location, source_line),
                location=location,
                source_line=source_line,
            )

    raise UnknownInstructionError(text, location, None, source_line)


def parse_line(
    line: str,
    original_notation: bool = False,
    location: Optional[SourceLocation] = None,
) -> ParsedLine:
    """
    Parse one line of Baby assembly.

    Args:
        line: Source text (comments allowed)
        original_notation: Parse instructions in original rather than
            modern notation
        location: Source location for error messages

    Raises:
        AssemblySyntaxError: If the line cannot be parsed
    """
    source_line = line.rstrip("\n")
    text = strip_comments(line).strip().lower()

    if text.startswith(":"):
        return parse_tag(text[1:], location, source_line)
    if text.startswith("abs "):
        return DataDeclaration(
            parse_value(text[4:], location, source_line),
            location=location,
            source_line=source_line,
        )
    if original_notation:
        return parse_instruction_original(text, location, source_line)
    return parse_instruction(text, location, source_line)


def parse_asm_string(
    source: str,
    original_notation: bool = False,
    filename: str = "<input>",
) -> list[ParsedLine]:
    """
    Parse complete Baby assembly source.

    Blank and comment-only lines are skipped. Parsing stops at the first
    error.

    Args:
        source: Assembly source text
        original_notation: Parse instructions in original notation
        filename: Name used in error locations

    Returns:
        The parsed lines in source order

    Raises:
        AssemblySyntaxError: On the first line that cannot be parsed
    """
    lines: list[ParsedLine] = []
    for number, raw in enumerate(source.splitlines(), start=1):
        stripped = strip_comments(raw)
        if not stripped.strip():
            continue
        column = len(stripped) - len(stripped.lstrip()) + 1
        location = SourceLocation(filename, number, column)
        lines.append(parse_line(raw, original_notation, location))
    return lines
