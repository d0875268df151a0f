"""
Bit-field helpers

Разбор машинных слов ARM / Thumb на поля.
Все входные значения трактуются как беззнаковые 32-битные.
"""


def to_unsigned32(value):
    """Привести целое (в т.ч. отрицательное) к 32-битному беззнаковому."""
    return value & 0xFFFFFFFF


def field(word, start, width):
    """
    Извлечь поле из word.

    start: номер младшего бита поля (бит 0 — младший)
    width: ширина поля в битах

    Диапазон start..start+width должен лежать внутри 32 бит,
    иначе ValueError.
    """
    if start < 0 or width < 1 or start + width > 32:
        raise ValueError(f"Bit range out of bounds: start={start}, width={width}")
    return (word >> start) & ((1 << width) - 1)


def bit(word, index):
    """Один бит как int (0 или 1)."""
    return field(word, index, 1)


def sign_extend(value, bits):
    """
    Знаковое расширение bits-битного значения.

    В отличие от ALU эмулятора возвращает знаковый int Python:
    sign_extend(0x7FF, 11) == -1.
    """
    if bits < 1:
        raise ValueError(f"Invalid sign width: {bits}")
    sign_bit = 1 << (bits - 1)
    value &= (1 << bits) - 1
    return (value ^ sign_bit) - sign_bit


def rotate_right(value, amount):
    """32-битный циклический сдвиг вправо, amount берётся по модулю 32."""
    value &= 0xFFFFFFFF
    amount %= 32
    if amount == 0:
        return value
    return ((value >> amount) | (value << (32 - amount))) & 0xFFFFFFFF
