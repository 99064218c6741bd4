from __future__ import annotations

from pathlib import Path

import pytest

from huffc.engine.container import compress
from huffc.errors import CorruptPayload, HuffcError, InternalError, TruncatedStream
from huffc.verify import verify_container_bytes, verify_container_file, verify_roundtrip


def test_verify_light_and_full(tmp_path: Path) -> None:
    data = b"FATTURA N. 1\nRIGA ARTICOLO: vite M3 qty=10 prezzo=1.20\nTOTALE 12.00\n"
    p = tmp_path / "a.huf"
    p.write_bytes(compress(data))

    light = verify_container_file(p, full=False)
    assert light.decoded_size is None
    assert light.info.original_size == len(data)

    full = verify_container_file(p, full=True)
    assert full.decoded_size == len(data)


def test_verify_empty_container() -> None:
    rep = verify_container_bytes(compress(b""), full=True)
    assert rep.info.n_symbols == 0
    assert rep.decoded_size == 0


def test_verify_detects_bit_budget_mismatch() -> None:
    data = b"hello hello hello"
    parts = bytearray(compress(data))
    pad_idx = 2 + 5 * len(set(data))
    # any other padding value moves bit_length away from what the table needs
    parts[pad_idx] = 6 if parts[pad_idx] == 7 else 7
    with pytest.raises((TruncatedStream, CorruptPayload)):
        verify_container_bytes(bytes(parts))


def test_verify_detects_extra_bytes() -> None:
    blob = compress(b"hello hello hello") + b"\x00\x00"
    with pytest.raises(CorruptPayload):
        verify_container_bytes(blob)


def test_verify_missing_file(tmp_path: Path) -> None:
    with pytest.raises(HuffcError, match="not found"):
        verify_container_file(tmp_path / "nope.huf")


def test_verify_roundtrip_ok_and_mismatch() -> None:
    data = b"roundtrip"
    verify_roundtrip(data, compress(data))
    with pytest.raises(InternalError):
        verify_roundtrip(b"something else", compress(data))
