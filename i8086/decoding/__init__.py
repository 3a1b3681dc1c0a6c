"""
Decoding of 8086 MOV-family instruction bytes.

`decode_state` walks one instruction through the opcode, mode and operand
phases and returns the completed `DecodeState`; rendering to text lives in
`i8086.render`.
"""

from .bind import (  # noqa: F401
    AddressingMode,
    DecodedInstruction,
    DecodeState,
    Direction,
    OpcodeFamily,
    Phase,
)
from .errors import (  # noqa: F401
    DecodeError,
    Exhausted,
    InvalidFieldCombination,
    TruncatedInstruction,
    UnrecognizedOpcode,
)
from .reader import ByteCursor, LayoutEntry  # noqa: F401
from .decode_map import decode_state  # noqa: F401

__all__ = [
    "AddressingMode",
    "ByteCursor",
    "DecodeError",
    "DecodeState",
    "DecodedInstruction",
    "Direction",
    "Exhausted",
    "InvalidFieldCombination",
    "LayoutEntry",
    "OpcodeFamily",
    "Phase",
    "TruncatedInstruction",
    "UnrecognizedOpcode",
    "decode_state",
]
