"""Reference byte compressors used to put huffc sizes in context.

Informational only: nothing here is ever written into a huffc container.
"""

from __future__ import annotations

import zlib
from dataclasses import dataclass

try:
    import zstandard as zstd  # type: ignore
except Exception:  # pragma: no cover
    zstd = None


def have_zstd() -> bool:
    return zstd is not None


@dataclass
class BaselineZlib:
    """zlib/DEFLATE at a fixed level."""

    level: int = 9
    name: str = "zlib"

    def __post_init__(self) -> None:
        if not (0 <= self.level <= 9):
            raise ValueError(f"zlib level must be 0..9, got {self.level}")

    def compress(self, data: bytes) -> bytes:
        return zlib.compress(bytes(data), self.level)

    def decompress(self, comp: bytes) -> bytes:
        return zlib.decompress(bytes(comp))


@dataclass
class BaselineZstd:
    """
    zstandard frame.

    "tight" drops the content size and checksum from the frame header.
    """

    level: int = 19
    tight: bool = False
    name: str = "zstd"

    def _require(self) -> None:
        if zstd is None:
            raise RuntimeError(
                "Module 'zstandard' not available. Install with: python3 -m pip install zstandard"
            )

    def compress(self, data: bytes) -> bytes:
        self._require()
        if self.tight:
            c = zstd.ZstdCompressor(
                level=int(self.level),
                write_content_size=False,
                write_checksum=False,
            )
        else:
            c = zstd.ZstdCompressor(level=int(self.level))
        return c.compress(bytes(data))

    def decompress(self, comp: bytes, out_size: int | None = None) -> bytes:
        self._require()
        d = zstd.ZstdDecompressor()
        if out_size is None:
            return d.decompress(bytes(comp))
        return d.decompress(bytes(comp), max_output_size=int(out_size))


def default_baselines() -> list[BaselineZlib | BaselineZstd]:
    out: list[BaselineZlib | BaselineZstd] = [BaselineZlib(level=9)]
    if have_zstd():
        out.append(BaselineZstd(level=19))
        out.append(BaselineZstd(level=19, tight=True, name="zstd_tight"))
    return out
