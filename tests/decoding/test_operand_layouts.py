from __future__ import annotations

from typing import Iterable

from i8086.decoding import decode_map
from i8086.decoding.reader import LayoutEntry, ByteCursor


def _capture_layout(data: Iterable[int]) -> tuple[LayoutEntry, ...]:
    cursor = ByteCursor(bytes(data), record_layout=True)
    decode_map.decode_state(cursor)
    return cursor.snapshot_layout()


def test_register_move_layout() -> None:
    layout = _capture_layout([0x89, 0xD8])
    assert [entry.key for entry in layout] == ["opcode", "modrm"]


def test_byte_displacement_layout() -> None:
    opcode, modrm, disp = _capture_layout([0x8B, 0x4E, 0x02])
    assert opcode.meta["offset"] == 0
    assert modrm.meta["offset"] == 1
    assert disp.kind == "disp8"
    assert disp.meta["offset"] == 2
    assert disp.meta["length_bytes"] == 1


def test_immediate_to_memory_layout_orders_disp_before_imm() -> None:
    layout = _capture_layout([0xC7, 0x85, 0x85, 0x03, 0x5B, 0x01])
    assert [entry.kind for entry in layout] == ["opcode", "modrm", "disp16", "imm16"]
    assert layout[2].meta["offset"] == 2
    assert layout[3].meta["offset"] == 4
    assert layout[3].meta["length_bytes"] == 2


def test_immediate_to_register_has_no_modrm() -> None:
    layout = _capture_layout([0xB1, 0x0C])
    assert [entry.kind for entry in layout] == ["opcode", "imm8"]
