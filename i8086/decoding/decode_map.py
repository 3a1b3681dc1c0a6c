from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict

from . import fields
from .bind import AddressingMode, DecodeState, Direction, OpcodeFamily, Phase
from .errors import Exhausted, InvalidFieldCombination, TruncatedInstruction, UnrecognizedOpcode
from .reader import ByteCursor

OpcodeHandler = Callable[[DecodeState, int], DecodeState]

MNEMONICS: Dict[OpcodeFamily, str] = {
    OpcodeFamily.REGISTER_OR_MEMORY_TO_REGISTER: "mov",
    OpcodeFamily.IMMEDIATE_TO_REGISTER_OR_MEMORY: "mov",
    OpcodeFamily.IMMEDIATE_TO_REGISTER: "mov",
}


def _begin_rm_reg(state: DecodeState, byte: int) -> DecodeState:
    direction = (
        Direction.DESTINATION_IS_REGISTER
        if fields.direction_bit(byte)
        else Direction.SOURCE_IS_REGISTER
    )
    return replace(
        state,
        direction=direction,
        width=bool(fields.wide_bit(byte)),
        phase=Phase.AWAITING_MODE_BYTE,
    )


def _begin_imm_rm(state: DecodeState, byte: int) -> DecodeState:
    return replace(
        state,
        width=bool(fields.wide_bit(byte)),
        phase=Phase.AWAITING_MODE_BYTE,
    )


def _begin_imm_reg(state: DecodeState, byte: int) -> DecodeState:
    wide = bool(fields.immediate_register_wide_bit(byte))
    return replace(
        state,
        width=wide,
        reg_field=fields.immediate_register_field(byte),
        addressing_mode=AddressingMode.REGISTER_DIRECT,
        pending_immediate=2 if wide else 1,
        phase=Phase.AWAITING_OPERAND_BYTES,
    )


OPCODE_HANDLERS: Dict[OpcodeFamily, OpcodeHandler] = {
    OpcodeFamily.REGISTER_OR_MEMORY_TO_REGISTER: _begin_rm_reg,
    OpcodeFamily.IMMEDIATE_TO_REGISTER_OR_MEMORY: _begin_imm_rm,
    OpcodeFamily.IMMEDIATE_TO_REGISTER: _begin_imm_reg,
}


def _mode_for(mode: int, rm: int) -> AddressingMode:
    if mode == 0:
        if rm == 6:
            return AddressingMode.DIRECT_ADDRESS
        return AddressingMode.MEMORY_NO_DISPLACEMENT
    if mode == 1:
        return AddressingMode.MEMORY_BYTE_DISPLACEMENT
    if mode == 2:
        return AddressingMode.MEMORY_WORD_DISPLACEMENT
    return AddressingMode.REGISTER_DIRECT


def _complete_if_done(state: DecodeState) -> DecodeState:
    if state.pending_displacement or state.pending_immediate:
        return replace(state, phase=Phase.AWAITING_OPERAND_BYTES)
    return replace(state, phase=Phase.COMPLETE)


def parse_opcode_byte(byte: int, offset: int = 0) -> DecodeState:
    """Start a new instruction from its first byte."""
    family = fields.opcode_family(byte)
    handler = OPCODE_HANDLERS.get(family)
    if handler is None:
        raise UnrecognizedOpcode(offset, byte)
    state = DecodeState(offset=offset, opcode=byte, family=family)
    return handler(state, byte)


def parse_mode_byte(state: DecodeState, byte: int) -> DecodeState:
    if state.phase is not Phase.AWAITING_MODE_BYTE:
        raise ValueError(f"Mode byte not expected in phase {state.phase.value}")
    if state.addressing_mode is not None:
        raise ValueError("Addressing mode already decoded for this instruction")

    reg = fields.reg_bits(byte)
    rm = fields.rm_bits(byte)
    mode = _mode_for(fields.mode_bits(byte), rm)
    pending_immediate = 0
    if state.family is OpcodeFamily.IMMEDIATE_TO_REGISTER_OR_MEMORY:
        if reg != 0:
            raise InvalidFieldCombination(
                state.offset,
                state.opcode,
                f"reg field {reg} in mode byte 0x{byte:02X} is not a MOV form",
            )
        pending_immediate = 2 if state.wide else 1

    return _complete_if_done(
        replace(
            state,
            reg_field=reg,
            rm_field=rm,
            addressing_mode=mode,
            pending_displacement=mode.displacement_bytes,
            pending_immediate=pending_immediate,
        )
    )


def apply_displacement(state: DecodeState, raw: int) -> DecodeState:
    """Store the displacement, sign-extending it from the pending width."""
    if state.pending_displacement == 1:
        value = fields.sign_extend_byte(raw)
    elif state.pending_displacement == 2:
        value = fields.signed_word(raw)
    else:
        raise ValueError("No displacement bytes pending")
    return _complete_if_done(replace(state, displacement=value, pending_displacement=0))


def apply_immediate(state: DecodeState, raw: int) -> DecodeState:
    if state.pending_displacement:
        raise ValueError("Displacement bytes precede the immediate")
    if state.pending_immediate == 1:
        value = fields.sign_extend_byte(raw)
    elif state.pending_immediate == 2:
        value = fields.signed_word(raw)
    else:
        raise ValueError("No immediate bytes pending")
    return _complete_if_done(replace(state, immediate=value, pending_immediate=0))


def _read_field(
    cursor: ByteCursor, key: str, kind: str, size: int, *, signed: bool = False
) -> int:
    start = cursor.pos
    if signed:
        raw = cursor.read_s8() if size == 1 else cursor.read_s16()
    else:
        raw = cursor.read_byte() if size == 1 else cursor.read_word()
    cursor.record_operand(key, kind, offset=start, length_bytes=size)
    return raw


def decode_state(cursor: ByteCursor) -> DecodeState:
    """
    Consume exactly one instruction from `cursor` and return its COMPLETE state.

    `Exhausted` propagates only when the cursor is already at the end; running
    out of bytes after the opcode raises `TruncatedInstruction`.
    """
    start = cursor.pos
    opcode = _read_field(cursor, "opcode", "opcode", 1)
    state = parse_opcode_byte(opcode, start)
    try:
        if state.phase is Phase.AWAITING_MODE_BYTE:
            state = parse_mode_byte(state, _read_field(cursor, "modrm", "modrm", 1))
        if state.pending_displacement:
            size = state.pending_displacement
            state = apply_displacement(
                state, _read_field(cursor, "disp", f"disp{size * 8}", size, signed=True)
            )
        if state.pending_immediate:
            size = state.pending_immediate
            state = apply_immediate(
                state, _read_field(cursor, "imm", f"imm{size * 8}", size, signed=True)
            )
    except Exhausted as exc:
        raise TruncatedInstruction(exc.offset, start, opcode) from exc
    return state
