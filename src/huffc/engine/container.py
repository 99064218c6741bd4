from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import BinaryIO

from huffc.core.bitstream import PackedBits, decode_bits, encode_symbols
from huffc.core.huffman import (
    ALPHABET_SIZE,
    FreqTable,
    build_code_table,
    build_freq_table,
    build_huffman_tree,
    code_lengths,
    encoded_bit_length,
)
from huffc.errors import ContainerOverflow, CorruptPayload, TruncatedContainer

# -------------------
# Container (little-endian)
# [COUNT(u16)] + COUNT * [SYM(u8)|FREQ(u32)] + [PADDING(u8)] + [BITSTREAM...]
# -------------------
ENDIAN = "little"
COUNT_SIZE = 2
ENTRY_SIZE = 1 + 4
PADDING_SIZE = 1
U32_MAX = 0xFFFFFFFF

EMPTY_CONTAINER = b"\x00\x00\x00"


@dataclass(frozen=True)
class ParsedContainer:
    freq: FreqTable
    bits: PackedBits
    header_size: int  # frequency section + padding byte


def pack_freq_table(freq: Mapping[int, int]) -> bytes:
    if len(freq) > ALPHABET_SIZE:
        raise ContainerOverflow(f"too many symbols: {len(freq)} (max {ALPHABET_SIZE})")

    out = bytearray()
    out += len(freq).to_bytes(COUNT_SIZE, ENDIAN)
    for sym in sorted(freq):
        f = int(freq[sym])
        if not (0 <= sym < ALPHABET_SIZE):
            raise ValueError(f"symbol out of range: {sym}")
        if f > U32_MAX:
            raise ContainerOverflow(f"frequency of symbol {sym} overflows u32: {f}")
        out.append(sym)
        out += f.to_bytes(4, ENDIAN)
    return bytes(out)


def unpack_freq_table(blob: bytes, idx: int = 0) -> tuple[FreqTable, int]:
    if idx + COUNT_SIZE > len(blob):
        raise TruncatedContainer("container truncated (symbol count)")
    count = int.from_bytes(blob[idx:idx + COUNT_SIZE], ENDIAN)
    idx += COUNT_SIZE

    if count > ALPHABET_SIZE:
        raise CorruptPayload(f"symbol count {count} exceeds {ALPHABET_SIZE}")

    freq: FreqTable = {}
    for _ in range(count):
        if idx + ENTRY_SIZE > len(blob):
            raise TruncatedContainer("container truncated (frequency entries)")
        sym = blob[idx]
        f = int.from_bytes(blob[idx + 1:idx + ENTRY_SIZE], ENDIAN)
        idx += ENTRY_SIZE
        if sym in freq:
            raise CorruptPayload(f"symbol 0x{sym:02x} listed twice")
        if f == 0:
            raise CorruptPayload(f"symbol 0x{sym:02x} has zero frequency")
        freq[sym] = f

    return dict(sorted(freq.items())), idx


def pack_container(freq: Mapping[int, int], bits: PackedBits) -> bytes:
    out = bytearray()
    out += pack_freq_table(freq)
    out.append(bits.padding)
    out += bits.data
    return bytes(out)


def unpack_container(blob: bytes) -> ParsedContainer:
    freq, idx = unpack_freq_table(blob, 0)

    if idx + PADDING_SIZE > len(blob):
        raise TruncatedContainer("container truncated (padding byte)")
    padding = blob[idx]
    idx += PADDING_SIZE

    bits = PackedBits.from_padded(blob[idx:], padding)
    return ParsedContainer(freq=freq, bits=bits, header_size=idx)


# -------------------
# compress / decompress
# -------------------
def compress(data: bytes) -> bytes:
    """bytes -> container. Empty input gives the empty container (no tree)."""
    data = bytes(data)
    freq = build_freq_table(data)
    if not freq:
        return pack_container({}, PackedBits(b"", 0))

    root = build_huffman_tree(freq)
    codes = build_code_table(root)
    bits = encode_symbols(data, codes)
    return pack_container(freq, bits)


def decompress(blob: bytes, *, lenient: bool = False) -> bytes:
    parsed = unpack_container(bytes(blob))

    if not parsed.freq:
        if parsed.bits.bit_length:
            raise CorruptPayload("empty frequency table followed by bitstream bytes")
        return b""

    root = build_huffman_tree(parsed.freq)
    expected = sum(parsed.freq.values())
    return decode_bits(root, parsed.bits, expected=expected, lenient=lenient)


def decompress_stream(fp: BinaryIO, *, lenient: bool = False) -> bytes:
    """Read a whole container from a binary file object and decode it."""
    return decompress(fp.read(), lenient=lenient)


# -------------------
# inspection
# -------------------
@dataclass(frozen=True)
class ContainerInfo:
    container_size: int
    header_size: int
    n_symbols: int
    original_size: int
    padding: int
    bit_length: int
    expected_bit_length: int
    freq: FreqTable = field(default_factory=dict)
    code_lengths: dict[int, int] = field(default_factory=dict)

    @property
    def payload_size(self) -> int:
        return self.container_size - self.header_size

    @property
    def bits_match(self) -> bool:
        return self.bit_length == self.expected_bit_length


def inspect_container(blob: bytes) -> ContainerInfo:
    """Parse the container and derive the code lengths without decoding."""
    blob = bytes(blob)
    parsed = unpack_container(blob)

    lengths: dict[int, int] = {}
    expected_bits = 0
    if parsed.freq:
        codes = build_code_table(build_huffman_tree(parsed.freq))
        lengths = code_lengths(codes)
        expected_bits = encoded_bit_length(parsed.freq, codes)

    return ContainerInfo(
        container_size=len(blob),
        header_size=parsed.header_size,
        n_symbols=len(parsed.freq),
        original_size=sum(parsed.freq.values()),
        padding=parsed.bits.padding,
        bit_length=parsed.bits.bit_length,
        expected_bit_length=expected_bits,
        freq=parsed.freq,
        code_lengths=lengths,
    )
