"""huffc: static Huffman file compressor."""

from __future__ import annotations

from huffc.engine.container import compress, decompress, decompress_stream, inspect_container

__all__ = ["compress", "decompress", "decompress_stream", "inspect_container"]
