"""8086 MOV-family disassembler."""

from .decoding import (  # noqa: F401
    ByteCursor,
    DecodeError,
    DecodedInstruction,
    Exhausted,
    InvalidFieldCombination,
    TruncatedInstruction,
    UnrecognizedOpcode,
)
from .disasm import decode_all, decode_one, disassemble, iter_instructions, write_listing  # noqa: F401

__all__ = [
    "ByteCursor",
    "DecodeError",
    "DecodedInstruction",
    "Exhausted",
    "InvalidFieldCombination",
    "TruncatedInstruction",
    "UnrecognizedOpcode",
    "decode_all",
    "decode_one",
    "disassemble",
    "iter_instructions",
    "write_listing",
]
