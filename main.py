#!/usr/bin/env python3
"""
ARMv4T Disassembler — Main Entry Point

Дизассемблер машинного кода ARM7TDMI (ARM + Thumb), например ROM'ов GBA.

Использование:
    python main.py rom.gba                       # ARM, листинг в stdout
    python main.py rom.gba listing.txt           # Листинг в файл
    python main.py --thumb --base 0x08000000 code.bin
    python main.py --help                        # Справка
"""

import sys
import os

# Добавить корень проекта в path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from armdisasm.cli import main


if __name__ == "__main__":
    sys.exit(main() or 0)
