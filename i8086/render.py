"""Turn completed decode states into instruction text and listings."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Tuple

from .decoding.bind import DecodedInstruction, DecodeState, Direction, OpcodeFamily
from .decoding.decode_map import MNEMONICS
from .decoding.reader import LayoutEntry
from .decoding.registers import immediate_operand, reg_operand, rm_operand
from .tokens import TInstr, TSep, Token, asm_str

BITS_DIRECTIVE = "bits 16"


def operand_tokens(state: DecodeState) -> Tuple[List[Token], List[Token]]:
    """Return (destination, source) tokens for a completed state."""
    if not state.is_complete:
        raise ValueError(
            f"Instruction at offset {state.offset} still needs {state.pending_bytes} bytes"
        )
    family = state.family
    if family is OpcodeFamily.REGISTER_OR_MEMORY_TO_REGISTER:
        reg = reg_operand(state)
        other = rm_operand(state)
        if state.direction is Direction.DESTINATION_IS_REGISTER:
            return reg, other
        return other, reg
    if family is OpcodeFamily.IMMEDIATE_TO_REGISTER_OR_MEMORY:
        dst = rm_operand(state)
        sized = state.addressing_mode is not None and state.addressing_mode.is_memory
        return dst, immediate_operand(state, sized=sized)
    if family is OpcodeFamily.IMMEDIATE_TO_REGISTER:
        return reg_operand(state), immediate_operand(state)
    raise ValueError(f"Cannot render opcode family {family}")


def instruction_tokens(state: DecodeState) -> List[Token]:
    dst, src = operand_tokens(state)
    return [TInstr(MNEMONICS[state.family]), TSep(" "), *dst, TSep(", "), *src]


def render_instruction(
    state: DecodeState, length: int = 0, layout: Tuple[LayoutEntry, ...] = ()
) -> DecodedInstruction:
    dst, src = operand_tokens(state)
    return DecodedInstruction(
        mnemonic=MNEMONICS[state.family],
        destination=asm_str(dst),
        source=asm_str(src),
        offset=state.offset,
        length=length,
        layout=layout,
    )


def format_listing(
    instructions: Iterable[DecodedInstruction], source_name: Optional[str] = None
) -> Iterator[str]:
    if source_name:
        yield f"; {source_name}"
    yield BITS_DIRECTIVE
    yield ""
    for instr in instructions:
        yield str(instr)
