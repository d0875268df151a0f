"""
Lexicon — статические таблицы имён для дизассемблера.

Регистры, суффиксы условий, типы сдвигов и каталог функций BIOS
(GBA SWI). Плюс мелкие хелперы форматирования операндов.
"""

from armdisasm.bits import field


REGISTER_NAMES = (
     "r0",  "r1",  "r2",  "r3",
     "r4",  "r5",  "r6",  "r7",
     "r8",  "r9", "r10", "r11",
    "r12",  "sp",  "lr",  "pc",
)

# Индекс 14 (AL, always): пустой суффикс, 15: зарезервированный "nv"
CONDITION_SUFFIXES = (
    "eq", "ne", "cs", "cc",
    "mi", "pl", "vs", "vc",
    "hi", "ls", "ge", "lt",
    "gt", "le",   "", "nv",
)

# Типы сдвигов (кодировка в инструкциях)
SHIFT_LSL = 0
SHIFT_LSR = 1
SHIFT_ASR = 2
SHIFT_ROR = 3

SHIFT_NAMES = ("lsl", "lsr", "asr", "ror")

BIOS_FUNCTIONS = (
    "SoftReset",
    "RegisterRamReset",
    "Halt",
    "Stop",
    "IntrWait",
    "VBlankIntrWait",
    "Div",
    "DivArm",
    "Sqrt",
    "ArcTan",
    "ArcTan2",
    "CpuSet",
    "CpuFastSet",
    "GetBiosChecksum",
    "BgAffineSet",
    "ObjAffineSet",
    "BitUnPack",
    "LZ77UnCompWram",
    "LZ77UnCompVram",
    "HuffUnComp",
    "RLUnCompReadNormalWram",
    "RLUnCompReadNormalVram",
    "Diff8bitUnFilterWram",
    "Diff8bitUnFilterVram",
    "Diff16bitUnFilter",
    "SoundBias",
    "SoundDriverInit",
    "SoundDriverMode",
    "SoundDriverMain",
    "SoundDriverVSync",
    "SoundChannelClear",
    "MidiKey2Freq",
    "MusicPlayerOpen",
    "MusicPlayerStart",
    "MusicPlayerStop",
    "MusicPlayerContinue",
    "MusicPlayerFadeOut",
    "MultiBoot",
    "HardReset",
    "CustomHalt",
    "SoundDriverVSyncOff",
    "SoundDriverVSyncOn",
    "SoundGetJumpList",
)

UNKNOWN_FUNCTION = "Unknown"
UNDEFINED = "Undefined"

# Ширина колонки под мнемонику (выравнивание операндов)
MNEMONIC_WIDTH = 10


def reg(n):
    """Имя регистра по номеру 0-15."""
    return REGISTER_NAMES[n & 0xF]


def condition(word):
    """Суффикс условия из битов 28-31 ARM инструкции."""
    return CONDITION_SUFFIXES[field(word, 28, 4)]


def hex_literal(value):
    """0x-литерал в верхнем регистре: 255 -> '0xFF'."""
    return f"0x{value:X}"


def register_list(mask):
    """
    Список регистров в фигурных скобках, по возрастанию номера.

    register_list(0) == '{}'
    register_list(0x8005) == '{r0,r2,pc}'
    """
    names = [REGISTER_NAMES[i] for i in range(16) if mask & (1 << i)]
    return "{" + ",".join(names) + "}"


def bios_function(index):
    """Имя функции BIOS, для индексов вне каталога — 'Unknown'."""
    if 0 <= index < len(BIOS_FUNCTIONS):
        return BIOS_FUNCTIONS[index]
    return UNKNOWN_FUNCTION


def mnemonic(token, operands):
    """Собрать строку: мнемоника, выровненная по колонке, затем операнды."""
    return f"{token:<{MNEMONIC_WIDTH - 1}} {operands}"
