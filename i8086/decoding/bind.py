from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .reader import LayoutEntry


class OpcodeFamily(str, Enum):
    """Instruction families recognised from the first byte."""

    REGISTER_OR_MEMORY_TO_REGISTER = "rm_reg"
    IMMEDIATE_TO_REGISTER_OR_MEMORY = "imm_rm"
    IMMEDIATE_TO_REGISTER = "imm_reg"
    UNRECOGNIZED = "unrecognized"


class Direction(Enum):
    SOURCE_IS_REGISTER = 0
    DESTINATION_IS_REGISTER = 1


class AddressingMode(Enum):
    REGISTER_DIRECT = "reg"
    MEMORY_NO_DISPLACEMENT = "mem"
    MEMORY_BYTE_DISPLACEMENT = "mem8"
    MEMORY_WORD_DISPLACEMENT = "mem16"
    DIRECT_ADDRESS = "direct"

    @property
    def displacement_bytes(self) -> int:
        return _DISPLACEMENT_BYTES[self]

    @property
    def is_memory(self) -> bool:
        return self is not AddressingMode.REGISTER_DIRECT


_DISPLACEMENT_BYTES = {
    AddressingMode.REGISTER_DIRECT: 0,
    AddressingMode.MEMORY_NO_DISPLACEMENT: 0,
    AddressingMode.MEMORY_BYTE_DISPLACEMENT: 1,
    AddressingMode.MEMORY_WORD_DISPLACEMENT: 2,
    AddressingMode.DIRECT_ADDRESS: 2,
}


class Phase(Enum):
    AWAITING_OPCODE_BYTE = "opcode"
    AWAITING_MODE_BYTE = "mode"
    AWAITING_OPERAND_BYTES = "operands"
    COMPLETE = "complete"


@dataclass(frozen=True, slots=True)
class DecodeState:
    """
    Accumulator for one instruction.

    Transition functions in `decode_map` return a new state for every byte
    consumed; nothing here is mutated in place.
    """

    offset: int = 0
    opcode: int = 0
    phase: Phase = Phase.AWAITING_OPCODE_BYTE
    family: Optional[OpcodeFamily] = None
    direction: Optional[Direction] = None
    width: Optional[bool] = None
    addressing_mode: Optional[AddressingMode] = None
    reg_field: int = 0
    rm_field: int = 0
    displacement: int = 0
    immediate: Optional[int] = None
    pending_displacement: int = 0
    pending_immediate: int = 0

    def __post_init__(self) -> None:
        for label, val in (("reg_field", self.reg_field), ("rm_field", self.rm_field)):
            if not 0 <= val <= 7:
                raise ValueError(f"{label} out of range: {val}")
        if not -0x8000 <= self.displacement <= 0x7FFF:
            raise ValueError(f"Displacement out of range: {self.displacement}")
        if not 0 <= self.opcode <= 0xFF:
            raise ValueError(f"Opcode byte out of range: {self.opcode:#x}")

    @property
    def wide(self) -> bool:
        if self.width is None:
            raise ValueError("Operand width is unknown before the opcode byte is parsed")
        return self.width

    @property
    def pending_bytes(self) -> int:
        mode_byte = 1 if self.phase is Phase.AWAITING_MODE_BYTE else 0
        return mode_byte + self.pending_displacement + self.pending_immediate

    @property
    def is_complete(self) -> bool:
        return self.phase is Phase.COMPLETE


@dataclass(frozen=True, slots=True)
class DecodedInstruction:
    mnemonic: str
    destination: str
    source: str
    offset: int = field(default=0, compare=False)
    length: int = field(default=0, compare=False)
    layout: Tuple[LayoutEntry, ...] = field(default=(), compare=False)

    def __str__(self) -> str:
        return f"{self.mnemonic} {self.destination}, {self.source}"
