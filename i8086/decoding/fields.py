"""Bit-field extraction for 8086 opcode and mode bytes."""

from __future__ import annotations

from typing import Tuple

from .bind import OpcodeFamily

# first byte
DIRECTION = 0b0000_0010
WIDE = 0b0000_0001
IMM_REG_WIDE = 0b0000_1000
IMM_REG_REGISTER = 0b0000_0111

# mode byte
MODE = 0b1100_0000
REGISTER = 0b0011_1000
REG_MEM = 0b0000_0111

# (mask, pattern, family), checked in order
OPCODE_PATTERNS: Tuple[Tuple[int, int, OpcodeFamily], ...] = (
    (0b1111_1100, 0b1000_1000, OpcodeFamily.REGISTER_OR_MEMORY_TO_REGISTER),
    (0b1111_1110, 0b1100_0110, OpcodeFamily.IMMEDIATE_TO_REGISTER_OR_MEMORY),
    (0b1111_0000, 0b1011_0000, OpcodeFamily.IMMEDIATE_TO_REGISTER),
)


def opcode_family(byte: int) -> OpcodeFamily:
    for mask, pattern, family in OPCODE_PATTERNS:
        if byte & mask == pattern:
            return family
    return OpcodeFamily.UNRECOGNIZED


def direction_bit(byte: int) -> int:
    return (byte & DIRECTION) >> 1


def wide_bit(byte: int) -> int:
    return byte & WIDE


def immediate_register_wide_bit(byte: int) -> int:
    return (byte & IMM_REG_WIDE) >> 3


def immediate_register_field(byte: int) -> int:
    return byte & IMM_REG_REGISTER


def mode_bits(byte: int) -> int:
    return (byte & MODE) >> 6


def reg_bits(byte: int) -> int:
    return (byte & REGISTER) >> 3


def rm_bits(byte: int) -> int:
    return byte & REG_MEM


def sign_extend_byte(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


def signed_word(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value
