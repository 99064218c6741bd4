from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from huffc.core.huffman import Code, HuffmanNode
from huffc.errors import (
    CorruptPayload,
    MalformedTree,
    TruncatedContainer,
    TruncatedStream,
    UnknownSymbol,
)


@dataclass(frozen=True)
class PackedBits:
    """
    Bit sequence packed MSB-first, 8 bits per byte.

    The last byte is zero-filled; bit_length counts only the real bits.
    """

    data: bytes
    bit_length: int

    def __post_init__(self) -> None:
        if self.bit_length < 0 or self.bit_length > len(self.data) * 8:
            raise ValueError(
                f"bit_length {self.bit_length} does not fit in {len(self.data)} byte(s)"
            )
        if len(self.data) != (self.bit_length + 7) // 8:
            raise ValueError("data must hold exactly ceil(bit_length / 8) bytes")

    @property
    def padding(self) -> int:
        return (8 - self.bit_length % 8) % 8

    @classmethod
    def from_padded(cls, data: bytes, padding: int) -> "PackedBits":
        """Build from a padded byte run, stripping `padding` trailing bits."""
        if not 0 <= padding <= 7:
            raise CorruptPayload(f"padding must be 0..7, got {padding}")
        if padding and not data:
            raise TruncatedContainer("padding bits announced but bitstream is empty")
        return cls(data=bytes(data), bit_length=len(data) * 8 - padding)

    def iter_bits(self):
        n = self.bit_length
        for i, byte in enumerate(self.data):
            base = i * 8
            for bit_index in range(8):
                if base + bit_index >= n:
                    return
                yield (byte >> (7 - bit_index)) & 1


def encode_symbols(data: bytes, codes: Mapping[int, Code]) -> PackedBits:
    """data -> bit sequence, one code per input byte, in input order."""
    if not data:
        return PackedBits(b"", 0)

    # (value, length) per symbol: append a whole code at once
    packed_codes: dict[int, tuple[int, int]] = {}
    for sym, code in codes.items():
        if not code:
            raise MalformedTree(f"zero-length code for symbol {sym}")
        value = 0
        for bit in code:
            value = (value << 1) | bit
        packed_codes[sym] = (value, len(code))

    out_bytes = bytearray()
    acc = 0
    acc_bits = 0
    total_bits = 0

    for b in data:
        entry = packed_codes.get(b)
        if entry is None:
            raise UnknownSymbol(f"byte 0x{b:02x} has no code in the table")
        value, length = entry
        acc = (acc << length) | value
        acc_bits += length
        total_bits += length
        while acc_bits >= 8:
            acc_bits -= 8
            out_bytes.append((acc >> acc_bits) & 0xFF)
        acc &= (1 << acc_bits) - 1

    if acc_bits > 0:
        out_bytes.append((acc << (8 - acc_bits)) & 0xFF)

    return PackedBits(bytes(out_bytes), total_bits)


def decode_bits(
    root: HuffmanNode,
    bits: PackedBits,
    *,
    expected: int | None = None,
    lenient: bool = False,
) -> bytes:
    """
    Walk the tree one bit at a time (0 -> left, 1 -> right), emit a symbol at
    every leaf and restart from the root.

    strict (default):
      - bits ending away from the root -> TruncatedStream
      - decoded count != expected      -> TruncatedStream / CorruptPayload
    lenient:
      - a partial trailing symbol is dropped
      - output is capped at `expected` symbols
    """
    if root.is_leaf:
        raise MalformedTree("root is a leaf: its code would be zero bits long")

    out = bytearray()
    node = root

    for bit in bits.iter_bits():
        nxt = node.left if bit == 0 else node.right
        if nxt is None:
            raise MalformedTree("internal node with fewer than two children")
        node = nxt
        if node.is_leaf:
            if node.is_placeholder:
                raise CorruptPayload("bitstream reaches the placeholder leaf")
            out.append(node.symbol)  # type: ignore[arg-type]
            node = root

    if node is not root and not lenient:
        raise TruncatedStream(
            f"bitstream ends inside a code (after {len(out)} symbol(s))"
        )

    if expected is not None and len(out) != expected:
        if lenient:
            return bytes(out[:expected])
        if len(out) < expected:
            raise TruncatedStream(f"expected {expected} symbol(s), decoded {len(out)}")
        raise CorruptPayload(f"expected {expected} symbol(s), bitstream holds {len(out)}")

    return bytes(out)
