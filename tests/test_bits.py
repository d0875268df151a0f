import unittest

from armdisasm.bits import bit, field, rotate_right, sign_extend, to_unsigned32


class FieldTests(unittest.TestCase):
    def test_extracts_low_bits(self) -> None:
        self.assertEqual(field(0xE3A00005, 0, 8), 0x05)
        self.assertEqual(field(0xE3A00005, 28, 4), 0xE)

    def test_extracts_middle_bits(self) -> None:
        self.assertEqual(field(0x0000F000, 12, 4), 0xF)
        self.assertEqual(field(0x12345678, 8, 16), 0x3456)

    def test_full_width(self) -> None:
        self.assertEqual(field(0xDEADBEEF, 0, 32), 0xDEADBEEF)

    def test_single_bit(self) -> None:
        self.assertEqual(bit(0x80000000, 31), 1)
        self.assertEqual(bit(0x80000000, 30), 0)

    def test_out_of_range_fails_fast(self) -> None:
        with self.assertRaises(ValueError):
            field(0, 30, 4)
        with self.assertRaises(ValueError):
            field(0, -1, 4)
        with self.assertRaises(ValueError):
            field(0, 0, 0)


class SignExtendTests(unittest.TestCase):
    def test_positive_values_unchanged(self) -> None:
        self.assertEqual(sign_extend(0x3FF, 11), 0x3FF)
        self.assertEqual(sign_extend(0x7F, 8), 0x7F)

    def test_negative_values(self) -> None:
        self.assertEqual(sign_extend(0x7FF, 11), -1)
        self.assertEqual(sign_extend(0x400, 11), -1024)
        self.assertEqual(sign_extend(0xFFFFFE, 24), -2)

    def test_ignores_bits_above_width(self) -> None:
        self.assertEqual(sign_extend(0xF801, 11), 1)

    def test_invalid_width(self) -> None:
        with self.assertRaises(ValueError):
            sign_extend(1, 0)


class RotateRightTests(unittest.TestCase):
    def test_rotate(self) -> None:
        self.assertEqual(rotate_right(0xFF, 8), 0xFF000000)
        self.assertEqual(rotate_right(0x1, 1), 0x80000000)

    def test_amount_modulo_32(self) -> None:
        self.assertEqual(rotate_right(0x12345678, 0), 0x12345678)
        self.assertEqual(rotate_right(0x12345678, 32), 0x12345678)
        self.assertEqual(rotate_right(0xFF, 40), 0xFF000000)

    def test_to_unsigned32(self) -> None:
        self.assertEqual(to_unsigned32(-1), 0xFFFFFFFF)
        self.assertEqual(to_unsigned32(0x100000004), 4)


if __name__ == "__main__":
    unittest.main()
