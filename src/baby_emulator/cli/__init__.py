"""
Baby Emulator Command-Line Interface
====================================

This package provides command-line tools for the Baby emulator:

- **babyasm**: Assembler, prints a listing and symbol table
- **babyrun**: Assembles a program and runs it on the machine model

Each tool is implemented as a Click-based CLI application with
help text and consistent error reporting.
"""

__all__ = ["babyasm", "babyrun"]
