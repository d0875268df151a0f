"""
Thumb (16-bit) instruction decoder / disassembler — ARMv4T.

classify_thumb(hw) определяет один из 19 форматов Thumb (или UNDEFINED)
по старшим битам полуслова, disassemble_thumb(hw, pc, lr) рисует текст.

pc — адрес инструкции + 4.
lr — "переносимое" значение для второй половины BL: его считает
next_link() после КАЖДОЙ инструкции, т.к. заранее неизвестно, какое
полуслово окажется первой половиной пары BL.
"""

from enum import Enum, auto

from armdisasm.bits import field, bit, sign_extend, to_unsigned32
from armdisasm.lexicon import (
    UNDEFINED,
    reg, hex_literal, register_list, bios_function, mnemonic,
)


class ThumbCategory(Enum):
    """Форматы Thumb инструкций."""
    MOVE_SHIFTED_REGISTER = auto()
    ADD_SUBTRACT = auto()
    IMMEDIATE_OPERATIONS = auto()
    ALU_OPERATIONS = auto()
    HIGH_REGISTER_OPERATIONS = auto()
    LOAD_PC_RELATIVE = auto()
    LOAD_STORE_REGISTER_OFFSET = auto()
    LOAD_STORE_BYTE_HALF = auto()
    LOAD_STORE_IMMEDIATE_OFFSET = auto()
    LOAD_STORE_HALF = auto()
    LOAD_STORE_SP_RELATIVE = auto()
    LOAD_RELATIVE_ADDRESS = auto()
    ADD_OFFSET_SP = auto()
    PUSH_POP_REGISTERS = auto()
    LOAD_STORE_MULTIPLE = auto()
    CONDITIONAL_BRANCH = auto()
    SOFTWARE_INTERRUPT = auto()
    UNCONDITIONAL_BRANCH = auto()
    LONG_BRANCH_LINK = auto()
    UNDEFINED = auto()


# Первая половина BL не знает адреса перехода
SETUP_TAG = "<setup>"

MOVE_SHIFTED_NAMES = ("lsl", "lsr", "asr", "???")
IMMEDIATE_NAMES = ("mov", "cmp", "add", "sub")

ALU_NAMES = (
    "and", "eor", "lsl", "lsr",
    "asr", "adc", "sbc", "ror",
    "tst", "neg", "cmp", "cmn",
    "orr", "mul", "bic", "mvn",
)

HIGH_REGISTER_NAMES = ("add", "cmp", "mov", "bx")
HIGH_OP_BX = 0b11

REGISTER_OFFSET_NAMES = ("str", "strb", "ldr", "ldrb")
BYTE_HALF_NAMES = ("strh", "ldrsb", "ldrh", "ldrsh")
IMMEDIATE_OFFSET_NAMES = ("str", "ldr", "strb", "ldrb")

BRANCH_NAMES = (
    "beq", "bne", "bcs", "bcc",
    "bmi", "bpl", "bvs", "bvc",
    "bhi", "bls", "bge", "blt",
    "bgt", "ble", "b", "b??",
)


# ===============================================================
# Classification
# ===============================================================

def classify_thumb(hw):
    """Определить формат Thumb инструкции (тотальная функция)."""
    hw &= 0xFFFF
    op_top = field(hw, 13, 3)

    if op_top == 0b000:
        if field(hw, 11, 2) == 0b11:
            return ThumbCategory.ADD_SUBTRACT
        return ThumbCategory.MOVE_SHIFTED_REGISTER
    if op_top == 0b001:
        return ThumbCategory.IMMEDIATE_OPERATIONS
    if op_top == 0b010:
        return _classify_010(hw)
    if op_top == 0b011:
        return ThumbCategory.LOAD_STORE_IMMEDIATE_OFFSET
    if op_top == 0b100:
        if bit(hw, 12):
            return ThumbCategory.LOAD_STORE_SP_RELATIVE
        return ThumbCategory.LOAD_STORE_HALF
    if op_top == 0b101:
        if not bit(hw, 12):
            return ThumbCategory.LOAD_RELATIVE_ADDRESS
        return _classify_misc(hw)
    if op_top == 0b110:
        if not bit(hw, 12):
            return ThumbCategory.LOAD_STORE_MULTIPLE
        cond = field(hw, 8, 4)
        if cond == 0b1111:
            return ThumbCategory.SOFTWARE_INTERRUPT
        if cond == 0b1110:
            return ThumbCategory.UNDEFINED
        return ThumbCategory.CONDITIONAL_BRANCH

    # 111
    if bit(hw, 12):
        return ThumbCategory.LONG_BRANCH_LINK
    if bit(hw, 11):
        # BLX suffix появился только в v5T
        return ThumbCategory.UNDEFINED
    return ThumbCategory.UNCONDITIONAL_BRANCH


def _classify_010(hw):
    """010xxx: ALU, high registers / BX, LDR literal, load/store register."""
    if bit(hw, 12):
        if bit(hw, 9):
            return ThumbCategory.LOAD_STORE_BYTE_HALF
        return ThumbCategory.LOAD_STORE_REGISTER_OFFSET
    if bit(hw, 11):
        return ThumbCategory.LOAD_PC_RELATIVE
    if bit(hw, 10):
        return ThumbCategory.HIGH_REGISTER_OPERATIONS
    return ThumbCategory.ALU_OPERATIONS


def _classify_misc(hw):
    """1011xxxx: ADD SP, PUSH/POP, остальное в v4T не определено."""
    sub_op = field(hw, 8, 4)
    if sub_op == 0b0000:
        return ThumbCategory.ADD_OFFSET_SP
    if sub_op in (0b0100, 0b0101, 0b1100, 0b1101):
        return ThumbCategory.PUSH_POP_REGISTERS
    return ThumbCategory.UNDEFINED


# ===============================================================
# Carried link (BL pair)
# ===============================================================

def next_link(hw, address):
    """
    Значение LR после первой половины BL, расположенной по address.

    (address + 4) + signExtend11(hw[0..10]) << 12, по модулю 2^32.
    Считается для любого полуслова, не только для BL.
    """
    offset = sign_extend(field(hw, 0, 11), 11) << 12
    return to_unsigned32(address + 4 + offset)


# ===============================================================
# Renderers
# ===============================================================

def _render_move_shifted_register(hw, pc, lr):
    rd = field(hw, 0, 3)
    rs = field(hw, 3, 3)
    amount = field(hw, 6, 5)
    opcode = field(hw, 11, 2)

    # LSR/ASR #0 кодирует сдвиг на 32
    if amount == 0 and opcode in (1, 2):
        amount = 32

    return mnemonic(MOVE_SHIFTED_NAMES[opcode],
                    f"{reg(rd)},{reg(rs)},{hex_literal(amount)}")


def _render_add_subtract(hw, pc, lr):
    rd = field(hw, 0, 3)
    rs = field(hw, 3, 3)
    rn = field(hw, 6, 3)
    sub = bit(hw, 9)
    imm_op = bit(hw, 10)

    # ADD Rd, Rs, #0 отображается как MOV Rd, Rs
    if imm_op and not sub and rn == 0:
        return mnemonic("mov", f"{reg(rd)},{reg(rs)}")

    operand = hex_literal(rn) if imm_op else reg(rn)
    return mnemonic("sub" if sub else "add", f"{reg(rd)},{reg(rs)},{operand}")


def _render_immediate_operations(hw, pc, lr):
    amount = field(hw, 0, 8)
    rd = field(hw, 8, 3)
    opcode = field(hw, 11, 2)
    return mnemonic(IMMEDIATE_NAMES[opcode], f"{reg(rd)},{hex_literal(amount)}")


def _render_alu_operations(hw, pc, lr):
    rd = field(hw, 0, 3)
    rs = field(hw, 3, 3)
    opcode = field(hw, 6, 4)
    return mnemonic(ALU_NAMES[opcode], f"{reg(rd)},{reg(rs)}")


def _render_high_register_operations(hw, pc, lr):
    # H1/H2 расширяют 3-битные номера до r0-r15
    rd = field(hw, 0, 3) | (bit(hw, 7) << 3)
    rs = field(hw, 3, 3) | (bit(hw, 6) << 3)
    opcode = field(hw, 8, 2)

    if opcode == HIGH_OP_BX:
        return mnemonic(HIGH_REGISTER_NAMES[opcode], reg(rs))
    return mnemonic(HIGH_REGISTER_NAMES[opcode], f"{reg(rd)},{reg(rs)}")


def _render_load_pc_relative(hw, pc, lr):
    offset = field(hw, 0, 8) << 2
    rd = field(hw, 8, 3)
    # PC выравнивается на слово
    address = to_unsigned32((pc & ~0x3) + offset)
    return mnemonic("ldr", f"{reg(rd)},[{hex_literal(address)}]")


def _render_load_store_register_offset(hw, pc, lr):
    rd = field(hw, 0, 3)
    rb = field(hw, 3, 3)
    ro = field(hw, 6, 3)
    opcode = field(hw, 10, 2)
    return mnemonic(REGISTER_OFFSET_NAMES[opcode], f"{reg(rd)},[{reg(rb)},{reg(ro)}]")


def _render_load_store_byte_half(hw, pc, lr):
    rd = field(hw, 0, 3)
    rb = field(hw, 3, 3)
    ro = field(hw, 6, 3)
    opcode = field(hw, 10, 2)
    return mnemonic(BYTE_HALF_NAMES[opcode], f"{reg(rd)},[{reg(rb)},{reg(ro)}]")


def _render_load_store_immediate_offset(hw, pc, lr):
    rd = field(hw, 0, 3)
    rb = field(hw, 3, 3)
    offset = field(hw, 6, 5)
    opcode = field(hw, 11, 2)

    # Смещение слова хранится в единицах по 4 байта, байта по 1
    if not opcode & 0b10:
        offset <<= 2

    return mnemonic(IMMEDIATE_OFFSET_NAMES[opcode],
                    f"{reg(rd)},[{reg(rb)},{hex_literal(offset)}]")


def _render_load_store_half(hw, pc, lr):
    rd = field(hw, 0, 3)
    rb = field(hw, 3, 3)
    offset = field(hw, 6, 5) << 1
    load = bit(hw, 11)
    return mnemonic("ldrh" if load else "strh",
                    f"{reg(rd)},[{reg(rb)},{hex_literal(offset)}]")


def _render_load_store_sp_relative(hw, pc, lr):
    offset = field(hw, 0, 8) << 2
    rd = field(hw, 8, 3)
    load = bit(hw, 11)
    return mnemonic("ldr" if load else "str", f"{reg(rd)},[sp,{hex_literal(offset)}]")


def _render_load_relative_address(hw, pc, lr):
    offset = field(hw, 0, 8) << 2
    rd = field(hw, 8, 3)

    if bit(hw, 11):
        return mnemonic("add", f"{reg(rd)},sp,{hex_literal(offset)}")

    address = to_unsigned32((pc & ~0x3) + offset)
    return mnemonic("add", f"{reg(rd)},={hex_literal(address)}")


def _render_add_offset_sp(hw, pc, lr):
    offset = field(hw, 0, 7) << 2
    sign = "-" if bit(hw, 7) else ""
    return mnemonic("add", f"sp,{sign}{hex_literal(offset)}")


def _render_push_pop_registers(hw, pc, lr):
    rlist = field(hw, 0, 8)
    pop = bit(hw, 11)

    # Бит R: PUSH добавляет LR, POP добавляет PC
    if bit(hw, 8):
        rlist |= 1 << (15 if pop else 14)

    return mnemonic("pop" if pop else "push", register_list(rlist))


def _render_load_store_multiple(hw, pc, lr):
    rlist = field(hw, 0, 8)
    rb = field(hw, 8, 3)
    load = bit(hw, 11)
    return mnemonic("ldmia" if load else "stmia", f"{reg(rb)}!,{register_list(rlist)}")


def _render_conditional_branch(hw, pc, lr):
    offset = sign_extend(field(hw, 0, 8), 8) << 1
    cond = field(hw, 8, 4)
    return mnemonic(BRANCH_NAMES[cond], hex_literal(to_unsigned32(pc + offset)))


def _render_software_interrupt(hw, pc, lr):
    return mnemonic("swi", bios_function(field(hw, 0, 8)))


def _render_unconditional_branch(hw, pc, lr):
    offset = sign_extend(field(hw, 0, 11), 11) << 1
    return mnemonic("b", hex_literal(to_unsigned32(pc + offset)))


def _render_long_branch_link(hw, pc, lr):
    offset = field(hw, 0, 11) << 1
    if not bit(hw, 11):
        return mnemonic("bl", SETUP_TAG)
    return mnemonic("bl", hex_literal(to_unsigned32(lr + offset)))


_RENDERERS = {
    ThumbCategory.MOVE_SHIFTED_REGISTER: _render_move_shifted_register,
    ThumbCategory.ADD_SUBTRACT: _render_add_subtract,
    ThumbCategory.IMMEDIATE_OPERATIONS: _render_immediate_operations,
    ThumbCategory.ALU_OPERATIONS: _render_alu_operations,
    ThumbCategory.HIGH_REGISTER_OPERATIONS: _render_high_register_operations,
    ThumbCategory.LOAD_PC_RELATIVE: _render_load_pc_relative,
    ThumbCategory.LOAD_STORE_REGISTER_OFFSET: _render_load_store_register_offset,
    ThumbCategory.LOAD_STORE_BYTE_HALF: _render_load_store_byte_half,
    ThumbCategory.LOAD_STORE_IMMEDIATE_OFFSET: _render_load_store_immediate_offset,
    ThumbCategory.LOAD_STORE_HALF: _render_load_store_half,
    ThumbCategory.LOAD_STORE_SP_RELATIVE: _render_load_store_sp_relative,
    ThumbCategory.LOAD_RELATIVE_ADDRESS: _render_load_relative_address,
    ThumbCategory.ADD_OFFSET_SP: _render_add_offset_sp,
    ThumbCategory.PUSH_POP_REGISTERS: _render_push_pop_registers,
    ThumbCategory.LOAD_STORE_MULTIPLE: _render_load_store_multiple,
    ThumbCategory.CONDITIONAL_BRANCH: _render_conditional_branch,
    ThumbCategory.SOFTWARE_INTERRUPT: _render_software_interrupt,
    ThumbCategory.UNCONDITIONAL_BRANCH: _render_unconditional_branch,
    ThumbCategory.LONG_BRANCH_LINK: _render_long_branch_link,
}


def disassemble_thumb(hw, pc, lr=0):
    """
    Дизассемблировать Thumb инструкцию.

    hw: 16-битное полуслово
    pc: адрес инструкции + 4
    lr: переносимое значение от предыдущей инструкции (см. next_link)
    """
    hw &= 0xFFFF
    renderer = _RENDERERS.get(classify_thumb(hw))
    if renderer is None:
        return UNDEFINED
    return renderer(hw, to_unsigned32(pc), to_unsigned32(lr))
