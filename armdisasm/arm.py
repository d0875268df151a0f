"""
ARM (32-bit) instruction decoder / disassembler — ARMv4T.

Две стадии:
  1. classify_arm(word) — определить формат инструкции по битовому шаблону
     (ArmCategory), условие (биты 28-31) в классификации не участвует.
  2. disassemble_arm(word, pc) — отрисовать операнды формата в текст.

pc — значение PC, видимое инструкции: адрес инструкции + 8 (конвейер).
"""

from enum import Enum, auto

from armdisasm.bits import field, bit, sign_extend, rotate_right, to_unsigned32
from armdisasm.lexicon import (
    SHIFT_LSR, SHIFT_ASR, SHIFT_ROR, SHIFT_NAMES,
    UNDEFINED,
    reg, condition, hex_literal, register_list, bios_function, mnemonic,
)


class ArmCategory(Enum):
    """Форматы ARM инструкций."""
    BRANCH_EXCHANGE = auto()
    BRANCH_LINK = auto()
    DATA_PROCESSING = auto()
    STATUS_TRANSFER = auto()
    MULTIPLY = auto()
    MULTIPLY_LONG = auto()
    SINGLE_DATA_TRANSFER = auto()
    HALF_SIGNED_DATA_TRANSFER = auto()
    BLOCK_DATA_TRANSFER = auto()
    SINGLE_DATA_SWAP = auto()
    SOFTWARE_INTERRUPT = auto()
    UNDEFINED = auto()


# Data processing opcodes (биты 21-24)
OP_AND = 0x0
OP_EOR = 0x1
OP_SUB = 0x2
OP_RSB = 0x3
OP_ADD = 0x4
OP_ADC = 0x5
OP_SBC = 0x6
OP_RSC = 0x7
OP_TST = 0x8
OP_TEQ = 0x9
OP_CMP = 0xA
OP_CMN = 0xB
OP_ORR = 0xC
OP_MOV = 0xD
OP_BIC = 0xE
OP_MVN = 0xF

DATA_PROCESSING_NAMES = (
    "and", "eor", "sub", "rsb",
    "add", "adc", "sbc", "rsc",
    "tst", "teq", "cmp", "cmn",
    "orr", "mov", "bic", "mvn",
)

MULTIPLY_LONG_NAMES = ("umull", "umlal", "smull", "smlal")

# [load][P:U]: для load и store "ascending/descending" зеркальны
BLOCK_SUFFIXES = (
    ("ed", "ea", "fd", "fa"),
    ("fa", "fd", "ea", "ed"),
)


# ===============================================================
# Classification
# ===============================================================

def classify_arm(word):
    """
    Определить формат ARM инструкции.

    Порядок проверок повторяет таблицу кодировок ARMv4T: BX и
    пространство multiply/swap/halfword проверяются раньше общего
    data processing, PSR transfer — подмножество TST/TEQ/CMP/CMN без S.
    Для любого слова возвращает ровно одну категорию.
    """
    word = to_unsigned32(word)
    group = field(word, 25, 3)

    if group == 0b000:
        return _classify_group0(word)
    if group == 0b001:
        if _is_psr_space(word):
            # MSR immediate; с битом 21 == 0 кодировка не определена
            if bit(word, 21):
                return ArmCategory.STATUS_TRANSFER
            return ArmCategory.UNDEFINED
        return ArmCategory.DATA_PROCESSING
    if group == 0b010:
        return ArmCategory.SINGLE_DATA_TRANSFER
    if group == 0b011:
        # Register offset с битом 4: undefined instruction space
        if bit(word, 4):
            return ArmCategory.UNDEFINED
        return ArmCategory.SINGLE_DATA_TRANSFER
    if group == 0b100:
        return ArmCategory.BLOCK_DATA_TRANSFER
    if group == 0b101:
        return ArmCategory.BRANCH_LINK
    if group == 0b111 and bit(word, 24):
        return ArmCategory.SOFTWARE_INTERRUPT

    # 110 / 1110: сопроцессор, в ARMv4T без сопроцессоров
    return ArmCategory.UNDEFINED


def _classify_group0(word):
    """Биты 27-25 == 000: BX, multiply/swap/halfword, PSR, data processing."""
    if word & 0x0FFFFFF0 == 0x012FFF10:
        return ArmCategory.BRANCH_EXCHANGE

    if word & 0x90 == 0x90:
        # Бит 7 и бит 4: пространство multiply / extra load-store
        sh = field(word, 5, 2)
        if sh == 0b00:
            if word & 0x0FC000F0 == 0x00000090:
                return ArmCategory.MULTIPLY
            if word & 0x0F8000F0 == 0x00800090:
                return ArmCategory.MULTIPLY_LONG
            if word & 0x0FB000F0 == 0x01000090:
                return ArmCategory.SINGLE_DATA_SWAP
            return ArmCategory.UNDEFINED
        # Signed store (LDRD/STRD в v5TE)
        if not bit(word, 20) and sh & 0b10:
            return ArmCategory.UNDEFINED
        return ArmCategory.HALF_SIGNED_DATA_TRANSFER

    if _is_psr_space(word):
        # MRS / MSR register: биты 7-4 должны быть нулевыми
        if field(word, 4, 4) == 0:
            return ArmCategory.STATUS_TRANSFER
        return ArmCategory.UNDEFINED

    return ArmCategory.DATA_PROCESSING


def _is_psr_space(word):
    """TST/TEQ/CMP/CMN без установки флагов (биты 24-23 == 10, бит 20 == 0)."""
    return word & 0x0D900000 == 0x01000000


# ===============================================================
# Operand helpers
# ===============================================================

def shifted_register(data):
    """
    Операнд 'регистр со сдвигом' (биты 0-11).

    r1            — LSL #0
    r1,lsl 0x3    — сдвиг на константу
    r1,lsr r2     — сдвиг на регистр
    r1,lsr 0x20   — LSR/ASR #0 означает сдвиг на 32
    r1,rrx        — ROR #0 означает RRX
    """
    rm = field(data, 0, 4)
    shift = field(data, 5, 2)

    if bit(data, 4):
        rs = field(data, 8, 4)
        return f"{reg(rm)},{SHIFT_NAMES[shift]} {reg(rs)}"

    amount = field(data, 7, 5)
    if amount == 0:
        if shift in (SHIFT_LSR, SHIFT_ASR):
            amount = 32
        elif shift == SHIFT_ROR:
            return f"{reg(rm)},rrx"
        else:
            return reg(rm)

    return f"{reg(rm)},{SHIFT_NAMES[shift]} {hex_literal(amount)}"


def rotated_immediate(data):
    """8-битная константа, повёрнутая вправо на 2 * биты 8-11."""
    value = field(data, 0, 8)
    amount = field(data, 8, 4)
    return rotate_right(value, amount << 1)


# ===============================================================
# Renderers
# ===============================================================

def _render_branch_exchange(word, pc):
    rn = field(word, 0, 4)
    return mnemonic(f"bx{condition(word)}", reg(rn))


def _render_branch_link(word, pc):
    offset = sign_extend(field(word, 0, 24), 24) << 2
    link = bit(word, 24)
    token = ("bl" if link else "b") + condition(word)
    return mnemonic(token, hex_literal(to_unsigned32(pc + offset)))


def _render_data_processing(word, pc):
    rd = field(word, 12, 4)
    rn = field(word, 16, 4)
    setflags = bit(word, 20)
    opcode = field(word, 21, 4)
    imm_op = bit(word, 25)

    if imm_op:
        value = rotated_immediate(word)
        # Литерал относительно PC: показать абсолютный адрес
        if rn == 15:
            if opcode == OP_SUB:
                value = to_unsigned32(pc - value)
            elif opcode == OP_ADD:
                value = to_unsigned32(pc + value)
        operand = hex_literal(value)
    else:
        operand = shifted_register(word)

    # TST/TEQ/CMP/CMN всегда ставят флаги, суффикс 's' не пишется
    compare = OP_TST <= opcode <= OP_CMN
    token = (DATA_PROCESSING_NAMES[opcode]
             + ("s" if setflags and not compare else "")
             + condition(word))

    if opcode in (OP_ADD, OP_SUB) and rn == 15 and imm_op:
        return mnemonic(token, f"{reg(rd)},={operand}")
    if compare:
        return mnemonic(token, f"{reg(rn)},{operand}")
    if opcode in (OP_MOV, OP_MVN):
        return mnemonic(token, f"{reg(rd)},{operand}")
    return mnemonic(token, f"{reg(rd)},{reg(rn)},{operand}")


def _render_status_transfer(word, pc):
    psr = "spsr" if bit(word, 22) else "cpsr"

    if not bit(word, 21):
        # MRS Rd, PSR
        rd = field(word, 12, 4)
        return mnemonic(f"mrs{condition(word)}", f"{reg(rd)},{psr}")

    # MSR PSR_fields, Rm/#imm
    if bit(word, 25):
        operand = hex_literal(rotated_immediate(word))
    else:
        operand = reg(field(word, 0, 4))

    fields = ""
    for letter, index in (("f", 19), ("s", 18), ("x", 17), ("c", 16)):
        if bit(word, index):
            fields += letter
    if fields:
        fields = "_" + fields

    return mnemonic(f"msr{condition(word)}", f"{psr}{fields},{operand}")


def _render_multiply(word, pc):
    rm = field(word, 0, 4)
    rs = field(word, 8, 4)
    rn = field(word, 12, 4)
    rd = field(word, 16, 4)
    setflags = bit(word, 20)
    accumulate = bit(word, 21)

    token = ("mla" if accumulate else "mul") + ("s" if setflags else "") + condition(word)
    operands = f"{reg(rd)},{reg(rm)},{reg(rs)}"
    if accumulate:
        operands += f",{reg(rn)}"
    return mnemonic(token, operands)


def _render_multiply_long(word, pc):
    rm = field(word, 0, 4)
    rs = field(word, 8, 4)
    rdlo = field(word, 12, 4)
    rdhi = field(word, 16, 4)
    setflags = bit(word, 20)
    opcode = field(word, 21, 2)

    token = MULTIPLY_LONG_NAMES[opcode] + ("s" if setflags else "") + condition(word)
    return mnemonic(token, f"{reg(rdlo)},{reg(rdhi)},{reg(rm)},{reg(rs)}")


def _addressing(rd, rn, offset, increment, pre_index, writeback):
    """Операнды [Rn,±offset]{!} или [Rn],±offset."""
    sign = "" if increment else "-"
    if pre_index:
        return f"{reg(rd)},[{reg(rn)},{sign}{offset}]{'!' if writeback else ''}"
    return f"{reg(rd)},[{reg(rn)}],{sign}{offset}"


def _render_single_data_transfer(word, pc):
    rd = field(word, 12, 4)
    rn = field(word, 16, 4)
    load = bit(word, 20)
    writeback = bit(word, 21)
    byte = bit(word, 22)
    increment = bit(word, 23)
    pre_index = bit(word, 24)
    reg_op = bit(word, 25)

    # Здесь бит 25 == 1 означает регистровое смещение
    if reg_op:
        offset = shifted_register(word)
    else:
        offset = hex_literal(field(word, 0, 12))

    # Post-index с W: доступ с правами user mode (LDRT/STRBT)
    translate = not pre_index and writeback
    token = (("ldr" if load else "str")
             + ("b" if byte else "")
             + ("t" if translate else "")
             + condition(word))

    return mnemonic(token, _addressing(rd, rn, offset, increment, pre_index, writeback))


def _render_half_signed_data_transfer(word, pc):
    half = bit(word, 5)
    signed = bit(word, 6)
    rd = field(word, 12, 4)
    rn = field(word, 16, 4)
    load = bit(word, 20)
    writeback = bit(word, 21)
    imm_op = bit(word, 22)
    increment = bit(word, 23)
    pre_index = bit(word, 24)

    if imm_op:
        offset = hex_literal((field(word, 8, 4) << 4) | field(word, 0, 4))
    else:
        offset = reg(field(word, 0, 4))

    token = (("ldr" if load else "str")
             + ("s" if signed else "")
             + ("h" if half else "b")
             + condition(word))

    return mnemonic(token, _addressing(rd, rn, offset, increment, pre_index, writeback))


def _render_block_data_transfer(word, pc):
    rlist = field(word, 0, 16)
    rn = field(word, 16, 4)
    load = bit(word, 20)
    writeback = bit(word, 21)
    user_mode = bit(word, 22)
    mode = field(word, 23, 2)

    token = ("ldm" if load else "stm") + BLOCK_SUFFIXES[load][mode] + condition(word)
    operands = (f"{reg(rn)}{'!' if writeback else ''},"
                f"{register_list(rlist)}{'^' if user_mode else ''}")
    return mnemonic(token, operands)


def _render_single_data_swap(word, pc):
    rm = field(word, 0, 4)
    rd = field(word, 12, 4)
    rn = field(word, 16, 4)
    byte = bit(word, 22)

    token = "swp" + ("b" if byte else "") + condition(word)
    return mnemonic(token, f"{reg(rd)},{reg(rm)},[{reg(rn)}]")


def _render_software_interrupt(word, pc):
    # BIOS GBA в ARM режиме читает номер функции из битов 16-23
    comment = field(word, 16, 8)
    return mnemonic(f"swi{condition(word)}", bios_function(comment))


_RENDERERS = {
    ArmCategory.BRANCH_EXCHANGE: _render_branch_exchange,
    ArmCategory.BRANCH_LINK: _render_branch_link,
    ArmCategory.DATA_PROCESSING: _render_data_processing,
    ArmCategory.STATUS_TRANSFER: _render_status_transfer,
    ArmCategory.MULTIPLY: _render_multiply,
    ArmCategory.MULTIPLY_LONG: _render_multiply_long,
    ArmCategory.SINGLE_DATA_TRANSFER: _render_single_data_transfer,
    ArmCategory.HALF_SIGNED_DATA_TRANSFER: _render_half_signed_data_transfer,
    ArmCategory.BLOCK_DATA_TRANSFER: _render_block_data_transfer,
    ArmCategory.SINGLE_DATA_SWAP: _render_single_data_swap,
    ArmCategory.SOFTWARE_INTERRUPT: _render_software_interrupt,
}


def disassemble_arm(word, pc):
    """
    Дизассемблировать ARM инструкцию.

    word: 32-битное слово инструкции
    pc: адрес инструкции + 8

    Возвращает строку мнемоники; для неопределённых кодировок — 'Undefined'.
    """
    word = to_unsigned32(word)
    renderer = _RENDERERS.get(classify_arm(word))
    if renderer is None:
        return UNDEFINED
    return renderer(word, to_unsigned32(pc))
