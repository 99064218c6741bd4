"""Size comparison: huffc container vs. general-purpose baselines."""

from __future__ import annotations

import time
from dataclasses import dataclass

from huffc.core.baselines import default_baselines
from huffc.engine.container import compress, decompress


@dataclass(frozen=True)
class BenchRow:
    codec: str
    size: int
    ratio: float
    seconds: float
    roundtrip_ok: bool


def _ratio(size: int, original: int) -> float:
    return (size / original) if original > 0 else 0.0


def bench_bytes(data: bytes) -> list[BenchRow]:
    data = bytes(data)
    rows: list[BenchRow] = []

    t0 = time.perf_counter()
    blob = compress(data)
    ok = decompress(blob) == data
    rows.append(
        BenchRow("huffc", len(blob), _ratio(len(blob), len(data)), time.perf_counter() - t0, ok)
    )

    for codec in default_baselines():
        t0 = time.perf_counter()
        comp = codec.compress(data)
        if codec.name.startswith("zstd"):
            # tight frames carry no content size
            back = codec.decompress(comp, out_size=max(len(data), 1))
        else:
            back = codec.decompress(comp)
        rows.append(
            BenchRow(
                codec.name,
                len(comp),
                _ratio(len(comp), len(data)),
                time.perf_counter() - t0,
                back == data,
            )
        )

    return rows


def render_bench_table(rows: list[BenchRow], original_size: int) -> str:
    lines = [f"{'codec':<12} {'size':>10} {'ratio':>7} {'ms':>9}  ok"]
    lines.append("-" * 44)
    for r in rows:
        lines.append(
            f"{r.codec:<12} {r.size:>10} {r.ratio:>7.3f} {r.seconds * 1000:>9.1f}  {'yes' if r.roundtrip_ok else 'NO'}"
        )
    lines.append("-" * 44)
    lines.append(f"{'original':<12} {original_size:>10}")
    return "\n".join(lines)
