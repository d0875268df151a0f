"""ARMv4T disassembler - ARM (32-bit) and Thumb (16-bit) instruction decoding."""

from armdisasm.arm import ArmCategory, classify_arm, disassemble_arm
from armdisasm.thumb import ThumbCategory, classify_thumb, disassemble_thumb, next_link
from armdisasm.disassembler import (
    ARM_FETCH_OFFSET,
    THUMB_FETCH_OFFSET,
    Disassembler,
    Line,
    step_arm,
    step_thumb,
    thumb_links,
)

__all__ = [
    "ArmCategory",
    "classify_arm",
    "disassemble_arm",
    "ThumbCategory",
    "classify_thumb",
    "disassemble_thumb",
    "next_link",
    "ARM_FETCH_OFFSET",
    "THUMB_FETCH_OFFSET",
    "Disassembler",
    "Line",
    "step_arm",
    "step_thumb",
    "thumb_links",
]
