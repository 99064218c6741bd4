"""Static Huffman: frequency analysis, tree construction, code tables.

Tie-break policy (fixed, so a tree rebuilt from stored frequencies is
identical to the one used at compress time):
  - the heap is keyed by (freq, seq)
  - leaves get seq in ascending symbol order, combined nodes get the next seq
  - the first node popped becomes the left child
"""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Optional

from huffc.errors import EmptyAlphabet, MalformedTree

ALPHABET_SIZE = 256

Code = tuple[int, ...]
FreqTable = dict[int, int]
CodeTable = dict[int, Code]


# -------------------
# Strutture di base Huffman
# -------------------
@dataclass
class HuffmanNode:
    freq: int
    symbol: Optional[int] = None  # 0-255 per foglie, None per interni
    left: Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    @property
    def is_placeholder(self) -> bool:
        # sibling added for single-symbol alphabets; never emitted
        return self.is_leaf and self.freq == 0


def build_freq_table(data: bytes) -> FreqTable:
    """bytes -> {symbol: count}, only symbols that occur, ascending order."""
    freq = [0] * ALPHABET_SIZE
    for b in data:
        freq[b] += 1
    return {sym: f for sym, f in enumerate(freq) if f > 0}


def build_huffman_tree(freq: Mapping[int, int]) -> HuffmanNode:
    if not freq:
        raise EmptyAlphabet("cannot build a Huffman tree from an empty frequency table")

    heap: list[tuple[int, int, HuffmanNode]] = []
    counter = itertools.count()

    for sym in sorted(freq):
        f = int(freq[sym])
        if not (0 <= sym < ALPHABET_SIZE):
            raise ValueError(f"symbol out of range: {sym}")
        if f <= 0:
            raise ValueError(f"frequency must be >= 1 (symbol {sym}: {f})")
        heapq.heappush(heap, (f, next(counter), HuffmanNode(freq=f, symbol=sym)))

    # Caso speciale: un solo simbolo => aggiungo un segnaposto a freq 0
    if len(heap) == 1:
        only = heap[0][2]
        dummy = HuffmanNode(freq=0, symbol=(only.symbol + 1) % ALPHABET_SIZE)
        heapq.heappush(heap, (0, next(counter), dummy))

    while len(heap) > 1:
        f1, _, n1 = heapq.heappop(heap)
        f2, _, n2 = heapq.heappop(heap)
        parent = HuffmanNode(freq=f1 + f2, symbol=None, left=n1, right=n2)
        heapq.heappush(heap, (parent.freq, next(counter), parent))

    return heap[0][2]


def _walk(node: HuffmanNode, path: Code) -> Iterator[tuple[int, Code]]:
    if node.is_leaf:
        if node.symbol is None:
            raise MalformedTree("leaf without a symbol")
        if not path:
            raise MalformedTree("root is a leaf: its code would be zero bits long")
        if not node.is_placeholder:
            yield node.symbol, path
        return
    if node.left is None or node.right is None:
        raise MalformedTree("internal node with fewer than two children")
    yield from _walk(node.left, path + (0,))
    yield from _walk(node.right, path + (1,))


def build_code_table(root: HuffmanNode) -> CodeTable:
    """Depth-first walk: left appends 0, right appends 1."""
    codes: CodeTable = {}
    for sym, code in _walk(root, ()):
        if sym in codes:
            raise MalformedTree(f"symbol {sym} appears in more than one leaf")
        codes[sym] = code
    return codes


def code_lengths(codes: Mapping[int, Code]) -> dict[int, int]:
    return {sym: len(codes[sym]) for sym in sorted(codes)}


def encoded_bit_length(freq: Mapping[int, int], codes: Mapping[int, Code]) -> int:
    """Exact number of payload bits the frequency table implies."""
    total = 0
    for sym, f in freq.items():
        code = codes.get(sym)
        if code is None:
            raise MalformedTree(f"no code for symbol {sym}")
        total += f * len(code)
    return total
