import io
import logging

import pytest

from i8086 import (
    ByteCursor,
    DecodedInstruction,
    TruncatedInstruction,
    UnrecognizedOpcode,
    decode_all,
    decode_one,
    disassemble,
    iter_instructions,
    write_listing,
)
from i8086.config import DisasmConfig

QUIET = DisasmConfig(trace=False, record_layout=False)

LISTING_0038 = bytes.fromhex(
    "89d9" "88e5" "89da" "89de" "89fb" "88c8" "88ed" "89c3" "89f3" "89fc" "89c5"
)


def test_empty_stream_decodes_to_nothing() -> None:
    assert decode_all(b"", QUIET) == []
    assert disassemble(b"", config=QUIET) == ["bits 16", ""]


def test_many_register_moves() -> None:
    assert [str(i) for i in decode_all(LISTING_0038, QUIET)] == [
        "mov cx, bx",
        "mov ch, ah",
        "mov dx, bx",
        "mov si, bx",
        "mov bx, di",
        "mov al, cl",
        "mov ch, ch",
        "mov bx, ax",
        "mov bx, si",
        "mov sp, di",
        "mov bp, ax",
    ]


def test_offsets_and_lengths_track_the_stream() -> None:
    data = bytes([0x89, 0xD8, 0x8B, 0x4E, 0x02, 0xC7, 0x85, 0x85, 0x03, 0x5B, 0x01])
    instrs = decode_all(data, QUIET)
    assert [(i.offset, i.length) for i in instrs] == [(0, 2), (2, 3), (5, 6)]


def test_decode_one_leaves_cursor_at_next_instruction() -> None:
    cursor = ByteCursor(bytes([0x8A, 0x00, 0x89, 0xD8]))
    assert decode_one(cursor) == DecodedInstruction("mov", "al", "[bx + si]")
    assert cursor.pos == 2
    assert decode_one(cursor) == DecodedInstruction("mov", "ax", "bx")
    assert cursor.is_exhausted()


def test_iter_instructions_accepts_cursor() -> None:
    cursor = ByteCursor(bytes([0x89, 0xD8]))
    assert list(iter_instructions(cursor, QUIET)) == [
        DecodedInstruction("mov", "ax", "bx")
    ]


def test_truncated_stream_yields_nothing_partial() -> None:
    gen = iter_instructions(bytes([0x89, 0xD8, 0x8B]), QUIET)
    assert next(gen) == DecodedInstruction("mov", "ax", "bx")
    with pytest.raises(TruncatedInstruction) as info:
        next(gen)
    assert info.value.offset == 3


def test_disassemble_fails_without_partial_listing() -> None:
    with pytest.raises(UnrecognizedOpcode) as info:
        disassemble(bytes([0x89, 0xD8, 0xF4]), config=QUIET)
    assert info.value.offset == 2
    assert info.value.byte == 0xF4


def test_write_listing() -> None:
    sink = io.StringIO()
    count = write_listing(bytes([0x89, 0xD8, 0xB1, 0x0C]), sink, "sample", QUIET)
    assert count == 2
    assert sink.getvalue() == "; sample\nbits 16\n\nmov ax, bx\nmov cl, 12\n"


def test_trace_logs_each_instruction(caplog: pytest.LogCaptureFixture) -> None:
    config = DisasmConfig(trace=True, record_layout=False)
    with caplog.at_level(logging.DEBUG, logger="i8086.disasm"):
        decode_all(bytes([0x89, 0xD8, 0xB1, 0x0C]), config)
    assert "0000: mov ax, bx (2 bytes)" in caplog.text
    assert "0002: mov cl, 12 (2 bytes)" in caplog.text


def test_record_layout_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("I8086_RECORD_LAYOUT", "1")
    first, second = decode_all(bytes([0x89, 0xD8, 0x8B, 0x4E, 0x02]))
    assert [entry.key for entry in first.layout] == ["opcode", "modrm"]
    assert [entry.kind for entry in second.layout] == ["opcode", "modrm", "disp8"]
    assert second.layout[2].meta["offset"] == 4


def test_layout_empty_when_not_recording(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("I8086_RECORD_LAYOUT", raising=False)
    (instr,) = decode_all(bytes([0x89, 0xD8]))
    assert instr.layout == ()
