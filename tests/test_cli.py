import contextlib
import io
import os
import tempfile
import unittest

from armdisasm.cli import (
    EXIT_INPUT,
    EXIT_OK,
    EXIT_OPTIONS,
    EXIT_OUTPUT,
    build_config,
    main,
    parse_args,
)
from armdisasm.logger import LogLevel


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = self._tmp.name
        self.arm = self.path("arm.bin")
        with open(self.arm, "wb") as handle:
            handle.write((0xE3A00005).to_bytes(4, "little"))
            handle.write((0xEAFFFFFE).to_bytes(4, "little"))
        self.thumb = self.path("thumb.bin")
        with open(self.thumb, "wb") as handle:
            for hw in (0xF000, 0xF802):
                handle.write(hw.to_bytes(2, "little"))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def path(self, name: str) -> str:
        return os.path.join(self.dir, name)

    def run_main(self, *argv: str) -> "tuple[int, str, str]":
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_parse_args(self) -> None:
        args = parse_args(["-t", "-b", "0x08000000", "in.bin", "out.txt"])
        config = build_config(args)
        self.assertTrue(config.thumb)
        self.assertEqual(config.base_address, 0x08000000)
        self.assertEqual(config.output_path, "out.txt")
        self.assertIs(config.log_level, LogLevel.WARN)
        self.assertIs(build_config(parse_args(["--trace", "in.bin"])).log_level, LogLevel.TRACE)

    def test_arm_to_output_file(self) -> None:
        out = self.path("out.txt")
        code, _, _ = self.run_main("-b", "0x1000", self.arm, out)
        self.assertEqual(code, EXIT_OK)
        with open(out) as handle:
            self.assertEqual(handle.read().splitlines(), [
                "00001000  E3A00005  mov       r0,0x5",
                "00001004  EAFFFFFE  b         0x1004",
            ])

    def test_thumb_to_stdout(self) -> None:
        code, stdout, _ = self.run_main("-t", "-b", "0x1000", "-f", "{addr:X} {mnemonic}", self.thumb)
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(stdout.splitlines(), [
            "1000 bl        <setup>",
            "1002 bl        0x1008",
        ])

    def test_missing_input(self) -> None:
        code, stdout, stderr = self.run_main(self.path("absent.bin"))
        self.assertEqual(code, EXIT_INPUT)
        self.assertEqual(stdout, "")
        self.assertIn("Input file not found", stderr)

    def test_unwritable_output(self) -> None:
        code, _, stderr = self.run_main(self.arm, self.dir)
        self.assertEqual(code, EXIT_OUTPUT)
        self.assertIn("Cannot open file", stderr)

    def test_bad_format(self) -> None:
        code, stdout, _ = self.run_main("-f", "{address}", self.arm)
        self.assertEqual(code, EXIT_OPTIONS)
        self.assertEqual(stdout, "")

    def test_info(self) -> None:
        code, stdout, _ = self.run_main("--info", "-t", self.thumb)
        self.assertEqual(code, EXIT_OK)
        self.assertIn("Thumb", stdout)
        self.assertIn("2 instructions", stdout)

    def test_bad_base_rejected_by_argparse(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self.run_main("-b", "zzz", self.arm)
        self.assertNotEqual(ctx.exception.code, 0)


if __name__ == "__main__":
    unittest.main()
