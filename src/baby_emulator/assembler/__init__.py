"""
Baby Assembler
==============

Converts Baby assembly source into a 32-word main store image.

Main Components
---------------
- **Assembler**: Orchestrates parsing and linking, produces listings
- **parser**: Turns source lines into tag, data and instruction records
- **linker**: Builds the symbol table and resolves tag references

Assembly Process
----------------
1. **Parsing**: each non-blank line becomes a TagDeclaration,
   DataDeclaration or InstructionDeclaration.
2. **Linking** (two-pass):
   - Pass 1: attach tags to the following real line, build the symbol table
   - Pass 2: resolve every value expression and encode each line

Example Usage
-------------
>>> from baby_emulator.assembler import Assembler
>>> asm = Assembler()
>>> store = asm.assemble('''
...     ldn 0d5   ; load -(-5)
...     stp
...     abs 0d0
...     abs 0d0
...     abs 0d0
...     abs 0d-5
... ''')
>>> asm.build_model().run_loop(10)[0].accumulator
5

Supported Syntax
----------------
- Modern mnemonics: JMP, JRP, LDN, STO, SUB, CMP, STP
- Original notation: "S, Cl", "Add S, Cl", "-S, C", "c, S", "SUB S", "Test", "Stop"
- Tags (``:name``) and tag references (``$name``)
- Absolute values (``abs <value>``)
- Hex, decimal, octal and binary literals (0x, 0d, 0o, 0b)
- Comments (``;``)
"""

from baby_emulator.assembler.assembler import Assembler, assemble, assemble_file
from baby_emulator.assembler.parser import (
    DataDeclaration,
    InstructionDeclaration,
    Literal,
    TagDeclaration,
    TagReference,
    parse_asm_string,
    parse_line,
    parse_value,
)
from baby_emulator.assembler.linker import (
    LinkerData,
    inline_tags,
    link,
    link_program,
    position_tags,
    resolve_line,
    resolve_value,
)

__all__ = [
    "Assembler",
    "assemble",
    "assemble_file",
    "DataDeclaration",
    "InstructionDeclaration",
    "Literal",
    "TagDeclaration",
    "TagReference",
    "parse_asm_string",
    "parse_line",
    "parse_value",
    "LinkerData",
    "inline_tags",
    "link",
    "link_program",
    "position_tags",
    "resolve_line",
    "resolve_value",
]
