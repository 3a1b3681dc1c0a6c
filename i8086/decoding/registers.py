from __future__ import annotations

from typing import List, Tuple

from ..tokens import TAddr, TBegMem, TEndMem, TInt, TReg, TSep, TText, Token
from .bind import AddressingMode, DecodeState

BYTE_REGS: Tuple[str, ...] = ("al", "cl", "dl", "bl", "ah", "ch", "dh", "bh")
WIDE_REGS: Tuple[str, ...] = ("ax", "cx", "dx", "bx", "sp", "bp", "si", "di")

# r/m -> base expression for the memory modes. Entry 6 is only reached with a
# displacement; mode 0 with r/m 6 is the direct-address form.
EA_BASES: Tuple[Tuple[str, ...], ...] = (
    ("bx", "si"),
    ("bx", "di"),
    ("bp", "si"),
    ("bp", "di"),
    ("si",),
    ("di",),
    ("bp",),
    ("bx",),
)


def register_name(index: int, wide: bool) -> str:
    if not 0 <= index <= 7:
        raise ValueError(f"Register index out of range: {index}")
    return WIDE_REGS[index] if wide else BYTE_REGS[index]


def effective_address(rm: int) -> str:
    if not 0 <= rm <= 7:
        raise ValueError(f"r/m field out of range: {rm}")
    return " + ".join(EA_BASES[rm])


def _base_tokens(rm: int) -> List[Token]:
    parts: List[Token] = []
    for i, reg in enumerate(EA_BASES[rm]):
        if i:
            parts.append(TSep(" + "))
        parts.append(TReg(reg))
    return parts


def reg_operand(state: DecodeState) -> List[Token]:
    return [TReg(register_name(state.reg_field, state.wide))]


def rm_operand(state: DecodeState) -> List[Token]:
    """Tokens for the operand selected by the mode and r/m fields."""
    mode = state.addressing_mode
    if mode is None:
        raise ValueError("Addressing mode has not been decoded yet")
    if mode is AddressingMode.REGISTER_DIRECT:
        return [TReg(register_name(state.rm_field, state.wide))]
    if mode is AddressingMode.DIRECT_ADDRESS:
        return [TBegMem(), TAddr(state.displacement), TEndMem()]
    parts: List[Token] = [TBegMem(), *_base_tokens(state.rm_field)]
    if mode is not AddressingMode.MEMORY_NO_DISPLACEMENT:
        parts += [TSep(" + "), TInt(state.displacement)]
    parts.append(TEndMem())
    return parts


def immediate_operand(state: DecodeState, *, sized: bool = False) -> List[Token]:
    if state.immediate is None:
        raise ValueError("Instruction has no immediate operand")
    parts: List[Token] = []
    if sized:
        parts.append(TText("word " if state.wide else "byte "))
    parts.append(TInt(state.immediate))
    return parts
