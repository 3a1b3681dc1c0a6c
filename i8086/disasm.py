"""Stream driver: bytes in, decoded instructions or listing lines out."""

from __future__ import annotations

import logging
from typing import IO, Iterator, List, Optional, Union

from .config import DisasmConfig, load_config
from .decoding.bind import DecodedInstruction
from .decoding.decode_map import decode_state
from .decoding.reader import ByteCursor
from .render import format_listing, render_instruction

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


def decode_one(cursor: ByteCursor) -> DecodedInstruction:
    start = cursor.pos
    recorded = len(cursor.snapshot_layout())
    state = decode_state(cursor)
    return render_instruction(
        state,
        length=cursor.pos - start,
        layout=cursor.snapshot_layout()[recorded:],
    )


def iter_instructions(
    source: Union[BytesLike, ByteCursor], config: Optional[DisasmConfig] = None
) -> Iterator[DecodedInstruction]:
    """
    Yield instructions until the input is exhausted.

    Decode errors propagate from the generator; instructions yielded before
    the failing one are complete.
    """
    if config is None:
        config = load_config()
    if isinstance(source, ByteCursor):
        cursor = source
    else:
        cursor = ByteCursor(bytes(source), record_layout=config.record_layout)
    while not cursor.is_exhausted():
        instr = decode_one(cursor)
        if config.trace:
            logger.debug(
                "%04X: %s (%d bytes)", instr.offset, instr, instr.length
            )
        yield instr


def decode_all(
    data: BytesLike, config: Optional[DisasmConfig] = None
) -> List[DecodedInstruction]:
    return list(iter_instructions(data, config))


def disassemble(
    data: BytesLike,
    source_name: Optional[str] = None,
    config: Optional[DisasmConfig] = None,
) -> List[str]:
    """Decode the whole buffer and return the listing lines."""
    instructions = decode_all(data, config)
    return list(format_listing(instructions, source_name))


def write_listing(
    data: BytesLike,
    sink: IO[str],
    source_name: Optional[str] = None,
    config: Optional[DisasmConfig] = None,
) -> int:
    """Write the listing for `data` to `sink`; returns the instruction count."""
    lines = disassemble(data, source_name, config)
    for line in lines:
        sink.write(line + "\n")
    header = 3 if source_name else 2
    return len(lines) - header


__all__ = [
    "decode_all",
    "decode_one",
    "disassemble",
    "iter_instructions",
    "write_listing",
]
