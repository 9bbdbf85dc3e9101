"""
Baby Emulator Error Hierarchy
=============================

This module defines the exception hierarchy for the whole package. All
exceptions inherit from BabyError, allowing callers to catch every
package-related error with a single except clause.

Exception Hierarchy
-------------------
BabyError (base)
├── AssemblerError (assembler-related)
│   ├── AssemblySyntaxError - syntax errors in source
│   │   ├── InvalidValueError - malformed numeral or tag reference
│   │   ├── UnknownInstructionError - unrecognised mnemonic
│   │   └── TagNameError - invalid tag declaration
│   └── LinkingError - errors while resolving the program image
│       ├── UnknownTagNameError - reference to an undeclared tag
│       └── ProgramSizeError - program larger than the main store
├── EmulatorError (machine model)
│   └── MemoryImageError - image does not fit the main store
└── ConfigurationError - invalid word format or environment value

Stopping the machine is NOT an error. A STOP instruction or an exhausted
step budget is reported as a HaltEvent value by the execution engine, so
callers drive the machine with ordinary control flow.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class BabyError(Exception):
    """
    Base exception for all Baby emulator errors.

        try:
            assembler.assemble_file("program.asm")
        except BabyError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int = 1

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(BabyError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.asm:4:1: error: the tag reference 'strat' is not declared
                jmp $strat
                ^
            hint: did you mean 'start'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Raised by the parser when a line cannot be turned into a tag
    declaration, an absolute value or an instruction.
    """
    pass


class InvalidValueError(AssemblySyntaxError):
    """
    A value expression could not be parsed.

    Values must carry a radix prefix (0x, 0d, 0o, 0b) or be a tag
    reference ($name). The ``radix`` attribute names the numeral form
    that failed, or is None when no form was recognised at all.
    """

    def __init__(
        self,
        value: str,
        radix: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.value = value
        self.radix = radix

        if radix:
            message = f"'{value}' is not a valid {radix} value"
            hint = None
        else:
            message = f"'{value}' is not a valid value"
            hint = "use 0x, 0d, 0o or 0b prefixed numbers, or $tag references"

        super().__init__(message, location=location, hint=hint,
                         source_line=source_line)


class UnknownInstructionError(AssemblySyntaxError):
    """The instruction mnemonic is not part of the Baby instruction set."""

    def __init__(
        self,
        instruction: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.instruction = instruction
        super().__init__(
            f"the instruction '{instruction}' is not known",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class TagNameError(AssemblySyntaxError):
    """A tag declaration has an empty name or a name containing whitespace."""

    def __init__(
        self,
        tag_name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.tag_name = tag_name
        super().__init__(
            f"the tag name '{tag_name}' is invalid",
            location=location,
            hint="tag names must be non-empty and contain no whitespace",
            source_line=source_line,
        )


# =============================================================================
# Linker Exceptions
# =============================================================================

class LinkingError(AssemblerError):
    """
    Base exception for errors raised while linking parsed lines.

    Linking is fail-fast: the first error aborts the whole link and no
    partial memory image is produced.
    """
    pass


class UnknownTagNameError(LinkingError):
    """
    A tag reference could not be resolved against the symbol table.

    The linker suggests similarly-named tags when any exist, to help
    catch typos.
    """

    def __init__(
        self,
        tag_name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_tags: Optional[list[str]] = None,
    ):
        self.tag_name = tag_name
        self.similar_tags = similar_tags or []

        hint = None
        if self.similar_tags:
            suggestions = ", ".join(f"'{t}'" for t in self.similar_tags[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"the tag reference '{tag_name}' is not declared",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class ProgramSizeError(LinkingError):
    """
    The linked program has more words than the main store can hold.

    Attributes:
        linked_size: Number of words in the linked program
        capacity: Number of words available in the main store
    """

    def __init__(self, linked_size: int, capacity: int = 32):
        self.linked_size = linked_size
        self.capacity = capacity
        super().__init__(
            f"the linked program is {linked_size} words long, "
            f"maximum {capacity}",
            hint="remove lines or split the program",
        )


# =============================================================================
# Emulator Exceptions
# =============================================================================

class EmulatorError(BabyError):
    """Base exception for errors raised by the machine model."""
    pass


class MemoryImageError(EmulatorError):
    """A memory image handed to the machine does not fit the main store."""

    def __init__(self, size: int, capacity: int = 32):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"memory image has {size} words, the main store holds {capacity}"
        )


# =============================================================================
# Configuration Exceptions
# =============================================================================

class ConfigurationError(BabyError):
    """Invalid word format or configuration value."""
    pass
