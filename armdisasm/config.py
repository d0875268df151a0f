"""
Configuration — параметры запуска дизассемблера.

Базовый адрес, режим (ARM / Thumb), шаблон строки вывода, пути.
"""

import os

from armdisasm.logger import LogLevel
from armdisasm.report import DEFAULT_FORMAT, validate_format


class Config:
    """
    Конфигурация дизассемблера.

    Значения по умолчанию:
        base_address  = 0
        thumb         = False (ARM, 32-бит)
        output_format = "{addr:08X}  {instr:08X}  {mnemonic}"
        output_path   = None (stdout)
    """

    def __init__(self, input_path=None, output_path=None):
        self.input_path = input_path
        self.output_path = output_path

        self.base_address = 0
        self.thumb = False
        self.output_format = DEFAULT_FORMAT

        self.log_level = LogLevel.INFO
        self.log_file = None

        self.warnings = []

    @property
    def instruction_size(self):
        """Размер инструкции в байтах: 2 для Thumb, 4 для ARM."""
        return 2 if self.thumb else 4

    @property
    def fetch_offset(self):
        """Насколько PC опережает адрес инструкции."""
        return 4 if self.thumb else 8

    @property
    def input_exists(self):
        return bool(self.input_path) and os.path.isfile(self.input_path)

    @property
    def mode_name(self):
        return "Thumb" if self.thumb else "ARM"

    def validate(self):
        """
        Проверить конфигурацию.

        Возвращает (ok: bool, errors: list[str]).
        Предупреждения (не ошибки) — в self.warnings.
        """
        errors = []
        self.warnings = []

        if not self.input_path:
            errors.append("No input file given")
        elif not self.input_exists:
            errors.append(f"Input file not found: {self.input_path}")

        if not 0 <= self.base_address <= 0xFFFFFFFF:
            errors.append(f"Base address out of 32-bit range: {self.base_address:#x}")
        elif self.base_address % self.instruction_size:
            # Допустимо, но PC-relative адреса будут странными
            self.warnings.append(
                f"Base address 0x{self.base_address:08X} is not "
                f"{self.instruction_size}-byte aligned"
            )

        try:
            validate_format(self.output_format)
        except ValueError as e:
            errors.append(str(e))

        ok = len(errors) == 0
        return ok, errors

    def get_info(self):
        """Сводка конфигурации для --info."""
        lines = ["=== Disassembler ==="]
        lines.append(f"  Mode:           {self.mode_name} "
                     f"({self.instruction_size}-byte, PC = addr + {self.fetch_offset})")
        lines.append(f"  Base address:   0x{self.base_address:08X}")
        lines.append(f"  Output format:  {self.output_format}")

        if self.input_exists:
            size = os.path.getsize(self.input_path)
            count = -(-size // self.instruction_size)
            lines.append(f"  Input:          {self.input_path} "
                         f"({size}B, {count} instructions)")
        else:
            lines.append(f"  Input:          {self.input_path}  (not found)")

        lines.append(f"  Output:         {self.output_path or '<stdout>'}")
        return '\n'.join(lines)

    def __repr__(self):
        return (f"Config(mode={self.mode_name}, "
                f"base=0x{self.base_address:08X}, "
                f"input={self.input_path})")
