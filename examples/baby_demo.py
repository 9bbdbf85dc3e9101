#!/usr/bin/env python3
"""
Manchester Baby Emulator Demo
=============================

This script demonstrates how to use the Baby emulator to:
1. Run the built-in example program step by step
2. Assemble a program from source
3. Run it with a step budget and inspect the halt event

Usage:
    source .venv/bin/activate
    python examples/baby_demo.py
"""

from pathlib import Path

from baby_emulator import Assembler, BabyModel, HaltEvent


def main():
    # ==========================================================================
    # 1. Step through the built-in example
    # ==========================================================================
    print("Built-in example program:")
    model = BabyModel.new_example_program()

    while True:
        instruction = model.current_instruction()
        result = model.execute()
        if isinstance(result, HaltEvent):
            print(f"  {result}")
            break
        print(f"  {instruction.mnemonic():<8} -> accumulator {result.accumulator}")
        model = result

    # ==========================================================================
    # 2. Assemble a program
    # ==========================================================================
    source = Path(__file__).with_name("countdown.asm")
    print(f"\nAssembling {source.name}...")

    asm = Assembler()
    asm.assemble_file(source)
    print(asm.get_listing())

    # ==========================================================================
    # 3. Run it
    # ==========================================================================
    final, event = asm.build_model().run_loop(1000)
    print(event)
    print(final.core_dump())


if __name__ == "__main__":
    main()
