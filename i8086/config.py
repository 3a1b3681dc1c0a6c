from __future__ import annotations

from dataclasses import dataclass
import os


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().casefold()
    return normalized not in {"0", "false", "off", ""}


@dataclass(frozen=True)
class DisasmConfig:
    trace: bool
    record_layout: bool
    output_prefix: str = "decoded_"


def load_config() -> DisasmConfig:
    return DisasmConfig(
        trace=_env_flag("I8086_TRACE", default=False),
        record_layout=_env_flag("I8086_RECORD_LAYOUT", default=False),
        output_prefix=os.getenv("I8086_OUTPUT_PREFIX", "decoded_"),
    )


__all__ = ["DisasmConfig", "load_config"]
