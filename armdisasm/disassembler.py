from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from armdisasm.arm import ArmCategory, classify_arm, disassemble_arm
from armdisasm.logger import Logger
from armdisasm.thumb import ThumbCategory, classify_thumb, disassemble_thumb, next_link


ARM_WIDTH = 4
THUMB_WIDTH = 2

# PC опережает текущую инструкцию на две выборки (конвейер)
ARM_FETCH_OFFSET = 8
THUMB_FETCH_OFFSET = 4


@dataclass(frozen=True)
class Line:
    address: int
    raw: int
    mnemonic: str


def step_arm(word: int, address: int) -> Line:
    pc = (address + ARM_FETCH_OFFSET) & 0xFFFFFFFF
    return Line(address, word & 0xFFFFFFFF, disassemble_arm(word, pc))


def step_thumb(hw: int, address: int, lr: int) -> Tuple[Line, int]:
    pc = (address + THUMB_FETCH_OFFSET) & 0xFFFFFFFF
    line = Line(address, hw & 0xFFFF, disassemble_thumb(hw, pc, lr))
    return line, next_link(hw, address)


def thumb_links(words: Iterable[int], base: int = 0) -> List[int]:
    links = []
    lr = 0
    address = base & 0xFFFFFFFF
    for hw in words:
        links.append(lr)
        lr = next_link(hw, address)
        address = (address + THUMB_WIDTH) & 0xFFFFFFFF
    return links


class Disassembler:
    def __init__(self, thumb: bool = False, base: int = 0, logger: Optional[Logger] = None) -> None:
        self.thumb = thumb
        self.base = base & 0xFFFFFFFF
        self.logger = logger
        self.undefined_count = 0

    @property
    def width(self) -> int:
        return THUMB_WIDTH if self.thumb else ARM_WIDTH

    def disassemble(self, words: Iterable[int]) -> Iterator[Line]:
        if self.thumb:
            yield from self._disassemble_thumb(words)
        else:
            yield from self._disassemble_arm(words)

    def _disassemble_arm(self, words: Iterable[int]) -> Iterator[Line]:
        address = self.base
        for word in words:
            line = step_arm(word, address)
            self._record(line, classify_arm(word) is ArmCategory.UNDEFINED)
            yield line
            address = (address + ARM_WIDTH) & 0xFFFFFFFF

    def _disassemble_thumb(self, words: Iterable[int]) -> Iterator[Line]:
        address = self.base
        lr = 0
        for hw in words:
            line, lr = step_thumb(hw, address, lr)
            self._record(line, classify_thumb(hw) is ThumbCategory.UNDEFINED)
            if self.logger:
                self.logger.link(address, lr)
            yield line
            address = (address + THUMB_WIDTH) & 0xFFFFFFFF

    def _record(self, line: Line, undefined: bool) -> None:
        if undefined:
            self.undefined_count += 1
        if self.logger is None:
            return
        if undefined:
            self.logger.undefined(line.address, line.raw, self.width)
        self.logger.instruction(line, self.width)
