import io
import os
import tempfile
import unittest

from armdisasm.disassembler import Line
from armdisasm.image import iter_words, load_image, pad_image
from armdisasm.report import DEFAULT_FORMAT, format_line, validate_format, write_report


class ImageTests(unittest.TestCase):
    def test_pad_image(self) -> None:
        self.assertEqual(pad_image(b"\x01\x02\x03", 4), b"\x01\x02\x03\x00")
        self.assertEqual(pad_image(b"\x01", 2), b"\x01\x00")
        self.assertEqual(pad_image(b"\x01\x02", 2), b"\x01\x02")
        self.assertEqual(pad_image(b"", 4), b"")

    def test_iter_words_little_endian(self) -> None:
        data = (0xE3A00005).to_bytes(4, "little") + (0xE12FFF1E).to_bytes(4, "little")
        self.assertEqual(list(iter_words(data, 4)), [0xE3A00005, 0xE12FFF1E])
        self.assertEqual(list(iter_words(b"\x70\x47\x05", 2)), [0x4770, 0x0005])

    def test_iter_words_rejects_width(self) -> None:
        with self.assertRaises(ValueError):
            list(iter_words(b"\x00" * 8, 8))

    def test_load_image(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "code.bin")
            with open(path, "wb") as handle:
                handle.write(b"\x05\x00\xa0\xe3")
            self.assertEqual(load_image(path), b"\x05\x00\xa0\xe3")

    def test_load_missing_image(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_image("/nonexistent/code.bin")


class ReportTests(unittest.TestCase):
    def test_default_format(self) -> None:
        line = Line(0x1000, 0xE3A00005, "mov       r0,0x5")
        self.assertEqual(format_line(DEFAULT_FORMAT, line), "00001000  E3A00005  mov       r0,0x5")

    def test_custom_format(self) -> None:
        line = Line(0x08000000, 0x4770, "bx        lr")
        self.assertEqual(format_line("{addr:X}:{instr:04X} {mnemonic}", line), "8000000:4770 bx        lr")

    def test_validate_format(self) -> None:
        validate_format(DEFAULT_FORMAT)
        validate_format("{mnemonic}")
        for template in ("{address}", "{addr", "{}", "{mnemonic:08X}"):
            with self.subTest(template=template):
                with self.assertRaises(ValueError):
                    validate_format(template)

    def test_write_report(self) -> None:
        stream = io.StringIO()
        lines = [Line(0, 1, "a"), Line(4, 2, "b")]
        self.assertEqual(write_report(lines, "{addr}:{instr}:{mnemonic}", stream), 2)
        self.assertEqual(stream.getvalue(), "0:1:a\n4:2:b\n")


if __name__ == "__main__":
    unittest.main()
