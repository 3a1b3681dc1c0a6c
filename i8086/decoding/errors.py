from __future__ import annotations

from typing import Optional


class Exhausted(EOFError):
    """Raised when a read needs more bytes than the buffer still holds."""

    def __init__(self, offset: int, needed: int, available: int) -> None:
        super().__init__(
            f"Insufficient bytes at offset {offset}: need {needed}, "
            f"have {available} remaining"
        )
        self.offset = offset
        self.needed = needed
        self.available = available


class DecodeError(Exception):
    """Base class for errors that abort decoding of a stream."""

    def __init__(self, message: str, offset: int, byte: Optional[int] = None) -> None:
        super().__init__(message)
        self.offset = offset
        self.byte = byte


class TruncatedInstruction(DecodeError):
    def __init__(self, offset: int, start: int, opcode: int) -> None:
        super().__init__(
            f"Input ends at offset {offset} inside the instruction starting at "
            f"offset {start} (opcode 0x{opcode:02X})",
            offset,
            opcode,
        )
        self.start = start


class UnrecognizedOpcode(DecodeError):
    def __init__(self, offset: int, byte: int, reason: Optional[str] = None) -> None:
        message = f"Unrecognized opcode 0x{byte:02X} at offset {offset}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, offset, byte)


class InvalidFieldCombination(UnrecognizedOpcode):
    """An encoding whose fields fall outside the forms the decoder models."""
