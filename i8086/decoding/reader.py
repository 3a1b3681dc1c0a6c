from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Dict, List

from .errors import Exhausted


@dataclass(frozen=True)
class LayoutEntry:
    key: str
    kind: str
    meta: Dict[str, object]


@dataclass
class ByteCursor:
    """
    Forward-only reader over an immutable byte buffer.

    Reads past the end raise `Exhausted` without consuming anything, so a word
    read never leaves the cursor halfway through a value.
    """

    data: bytes
    pos: int = 0
    record_layout: bool = False
    _layout: List[LayoutEntry] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.data = bytes(self.data)
        if not 0 <= self.pos <= len(self.data):
            raise ValueError(
                f"Cursor position {self.pos} outside buffer of {len(self.data)} bytes"
            )

    def _unpack(self, fmt: str) -> int:
        size = struct.calcsize(fmt)
        if len(self.data) - self.pos < size:
            raise Exhausted(self.pos, size, len(self.data) - self.pos)
        (value,) = struct.unpack_from("<" + fmt, self.data, self.pos)
        self.pos += size
        return value

    def record_operand(self, key: str, kind: str, **meta) -> None:
        if not self.record_layout:
            return
        self._layout.append(LayoutEntry(key=key, kind=kind, meta=dict(meta)))

    def read_byte(self) -> int:
        return self._unpack("B")

    def read_word(self) -> int:
        return self._unpack("H")

    def read_s8(self) -> int:
        return self._unpack("b")

    def read_s16(self) -> int:
        return self._unpack("h")

    def is_exhausted(self) -> bool:
        return self.pos >= len(self.data)

    def remaining(self) -> int:
        return len(self.data) - self.pos

    def snapshot_layout(self) -> tuple[LayoutEntry, ...]:
        return tuple(self._layout)
