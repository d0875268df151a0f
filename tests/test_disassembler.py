import io
import unittest

from armdisasm.disassembler import (
    ARM_FETCH_OFFSET,
    THUMB_FETCH_OFFSET,
    Disassembler,
    Line,
    step_arm,
    step_thumb,
    thumb_links,
)
from armdisasm.logger import Logger, LogLevel
from armdisasm.thumb import disassemble_thumb


def asm(token: str, operands: str) -> str:
    return token.ljust(10) + operands


class ArmDriverTests(unittest.TestCase):
    def test_addresses_and_pc_offset(self) -> None:
        lines = list(Disassembler(base=0x1000).disassemble([0xE3A00005, 0xEAFFFFFE]))
        self.assertEqual([line.address for line in lines], [0x1000, 0x1004])
        self.assertEqual(lines[0], Line(0x1000, 0xE3A00005, asm("mov", "r0,0x5")))
        self.assertEqual(lines[1].mnemonic, asm("b", "0x1004"))

    def test_step_arm(self) -> None:
        self.assertEqual(ARM_FETCH_OFFSET, 8)
        self.assertEqual(step_arm(0xEB000000, 0x2000).mnemonic, asm("bl", "0x2008"))

    def test_order_independent(self) -> None:
        words = [0xE3A00005, 0xEB000000, 0xE12FFF1E]
        forward = [step_arm(w, 0x100 + 4 * i) for i, w in enumerate(words)]
        backward = [step_arm(w, 0x100 + 4 * i) for i, w in reversed(list(enumerate(words)))]
        self.assertEqual(forward, list(reversed(backward)))


class ThumbDriverTests(unittest.TestCase):
    def test_carried_link_fixture(self) -> None:
        words = [0x2005, 0x4770, 0xF800]
        self.assertEqual(thumb_links(words, 0x2000), [0, 0x7004, 0xFFF72006])

        lines = list(Disassembler(thumb=True, base=0x2000).disassemble(words))
        self.assertEqual([line.address for line in lines], [0x2000, 0x2002, 0x2004])
        self.assertEqual(lines[0].mnemonic, asm("mov", "r0,0x5"))
        self.assertEqual(lines[1].mnemonic, asm("bx", "lr"))
        self.assertEqual(lines[2].mnemonic, asm("bl", "0xFFF72006"))

    def test_long_branch_link_pair(self) -> None:
        lines = list(Disassembler(thumb=True, base=0x1000).disassemble([0xF000, 0xF802]))
        self.assertEqual(lines[0].mnemonic, asm("bl", "<setup>"))
        self.assertEqual(lines[1].mnemonic, asm("bl", "0x1008"))

    def test_long_branch_link_backwards(self) -> None:
        lines = list(Disassembler(thumb=True, base=0x1000).disassemble([0xF7FF, 0xFFFE]))
        self.assertEqual(lines[1].mnemonic, asm("bl", "0x1000"))

    def test_step_thumb_returns_next_link(self) -> None:
        self.assertEqual(THUMB_FETCH_OFFSET, 4)
        line, lr = step_thumb(0xF000, 0x1000, 0)
        self.assertEqual(line.raw, 0xF000)
        self.assertEqual(lr, 0x1004)

    def test_links_prepass_matches_sequential(self) -> None:
        words = [0x2005, 0xF001, 0xF802, 0x4770, 0xF7FF, 0xFFFE, 0xDF06]
        base = 0x08000000
        links = thumb_links(words, base)
        independent = [
            disassemble_thumb(hw, base + 2 * i + 4, links[i]) for i, hw in enumerate(words)
        ]
        sequential = [line.mnemonic for line in Disassembler(thumb=True, base=base).disassemble(words)]
        self.assertEqual(independent, sequential)

    def test_link_starts_at_zero(self) -> None:
        line = next(Disassembler(thumb=True, base=0x1000).disassemble([0xF802]))
        self.assertEqual(line.mnemonic, asm("bl", "0x4"))


class DriverLoggingTests(unittest.TestCase):
    def test_undefined_counted_and_traced(self) -> None:
        stream = io.StringIO()
        logger = Logger(level=LogLevel.TRACE, use_color=False, stream=stream)
        disassembler = Disassembler(thumb=True, base=0x1000, logger=logger)
        list(disassembler.disassemble([0xDE00, 0x2005]))

        self.assertEqual(disassembler.undefined_count, 1)
        output = stream.getvalue()
        self.assertIn("Undefined instruction 0xDE00 at 0x00001000", output)
        self.assertIn("LR after 0x00001002", output)
        self.assertIn("0x00001002: 2005", output)

    def test_quiet_logger(self) -> None:
        stream = io.StringIO()
        logger = Logger(level=LogLevel.WARN, use_color=False, stream=stream)
        list(Disassembler(base=0, logger=logger).disassemble([0xEE000000]))
        self.assertEqual(stream.getvalue(), "")


if __name__ == "__main__":
    unittest.main()
