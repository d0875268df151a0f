from __future__ import annotations

import string
from typing import Iterable, TextIO

from armdisasm.disassembler import Line


DEFAULT_FORMAT = "{addr:08X}  {instr:08X}  {mnemonic}"

FIELDS = ("addr", "instr", "mnemonic")

_SAMPLE = Line(address=0, raw=0, mnemonic="")


def format_line(template: str, line: Line) -> str:
    return template.format(addr=line.address, instr=line.raw, mnemonic=line.mnemonic)


def validate_format(template: str) -> None:
    try:
        parsed = list(string.Formatter().parse(template))
    except ValueError as exc:
        raise ValueError(f"Malformed output format {template!r}: {exc}") from exc

    for _, name, _, _ in parsed:
        if name is None:
            continue
        root = name.split(".")[0].split("[")[0]
        if root not in FIELDS:
            raise ValueError(
                f"Unknown field {{{name}}} in output format; "
                f"expected one of: {', '.join(FIELDS)}"
            )

    try:
        format_line(template, _SAMPLE)
    except (ValueError, TypeError, IndexError, KeyError, AttributeError) as exc:
        raise ValueError(f"Invalid output format {template!r}: {exc}") from exc


def write_report(lines: Iterable[Line], template: str, stream: TextIO) -> int:
    count = 0
    for line in lines:
        stream.write(format_line(template, line))
        stream.write("\n")
        count += 1
    return count
