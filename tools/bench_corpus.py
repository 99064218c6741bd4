#!/usr/bin/env python3
"""Corpus benchmark: huffc vs. zlib/zstd over every file in a directory.

Runs compress -> decompress -> compare per file, collecting sizes, timing
and peak RSS.

Usage example:
  python tools/bench_corpus.py /path/to/corpus --json report.json

Notes:
- Uses internal APIs (no subprocess). Run inside repo venv.
"""

from __future__ import annotations

import argparse
import json
import resource
import sys
from pathlib import Path
from typing import Any


def _peak_rss_kb() -> int:
    # Linux: ru_maxrss is KB
    return int(resource.getrusage(resource.RUSAGE_SELF).ru_maxrss)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="bench_corpus.py", description="huffc corpus benchmark")
    ap.add_argument("input_dir", type=Path)
    ap.add_argument("--max-bytes", type=int, default=64 * 1024 * 1024, help="Skip larger files")
    ap.add_argument("--json", type=Path, default=None, help="Write a JSON report here")
    ns = ap.parse_args(argv)

    repo = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo / "src"))

    from huffc.bench import bench_bytes  # noqa: E402

    inp = ns.input_dir.resolve()
    if not inp.is_dir():
        raise SystemExit(f"input_dir not valid: {inp}")

    totals: dict[str, int] = {}
    original_total = 0
    files: list[dict[str, Any]] = []
    failures = 0

    for p in sorted(q for q in inp.rglob("*") if q.is_file()):
        if p.stat().st_size > ns.max_bytes:
            continue
        data = p.read_bytes()
        rows = bench_bytes(data)
        original_total += len(data)
        for r in rows:
            totals[r.codec] = totals.get(r.codec, 0) + r.size
            if not r.roundtrip_ok:
                failures += 1
                print(f"[bench] ROUNDTRIP FAIL {r.codec}: {p}", file=sys.stderr)
        files.append(
            {
                "rel": p.relative_to(inp).as_posix(),
                "size": len(data),
                "codecs": {r.codec: r.size for r in rows},
            }
        )

    print(f"files   : {len(files)}")
    print(f"original: {original_total} bytes")
    for codec, size in totals.items():
        ratio = (size / original_total) if original_total else 0.0
        print(f"{codec:<10}: {size} bytes ({ratio:.3f})")
    print(f"peak RSS: {_peak_rss_kb()} KB")

    if ns.json is not None:
        report = {
            "input_dir": str(inp),
            "original_total": original_total,
            "totals": totals,
            "files": files,
            "peak_rss_kb": _peak_rss_kb(),
        }
        ns.json.write_text(json.dumps(report, indent=2) + "\n", encoding="utf-8")

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
