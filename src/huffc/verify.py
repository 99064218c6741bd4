"""Verification helpers for huffc containers.

Policy: light by default, --full decodes every symbol.

  - light: parse the container, rebuild the tree from the stored
    frequencies and check that the bitstream length matches the exact
    bit budget the table implies
  - full: light + strict decode, output length == frequency sum
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from huffc.engine.container import ContainerInfo, decompress, inspect_container
from huffc.errors import CorruptPayload, HuffcError, InternalError, TruncatedStream


@dataclass(frozen=True)
class VerifyReport:
    target: str
    full: bool
    info: ContainerInfo
    decoded_size: int | None = None


def verify_container_bytes(blob: bytes, *, full: bool = False, target: str = "<bytes>") -> VerifyReport:
    info = inspect_container(blob)

    if info.n_symbols == 0 and info.bit_length:
        raise CorruptPayload("empty frequency table followed by bitstream bytes")

    if info.bit_length < info.expected_bit_length:
        raise TruncatedStream(
            f"bitstream holds {info.bit_length} bit(s), frequency table needs {info.expected_bit_length}"
        )
    if info.bit_length > info.expected_bit_length:
        raise CorruptPayload(
            f"bitstream holds {info.bit_length} bit(s), frequency table needs {info.expected_bit_length}"
        )

    decoded_size = None
    if full:
        decoded_size = len(decompress(blob))

    return VerifyReport(target=target, full=full, info=info, decoded_size=decoded_size)


def verify_container_file(path: Path, *, full: bool = False) -> VerifyReport:
    p = Path(path)
    if not p.is_file():
        raise HuffcError(f"file not found: {p}")
    return verify_container_bytes(p.read_bytes(), full=full, target=str(p))


def verify_roundtrip(original: bytes, blob: bytes) -> None:
    """Decode `blob` and require it to reproduce `original` byte for byte."""
    back = decompress(blob)
    if back != bytes(original):
        raise InternalError(
            f"roundtrip mismatch: {len(original)} byte(s) in, {len(back)} byte(s) back"
        )
