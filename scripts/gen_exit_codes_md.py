#!/usr/bin/env python3
"""Generate docs/exit_codes.md from src/huffc/errors.py (single source of truth).

--check: do not write, exit 1 if the committed file is stale (CI).
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="gen_exit_codes_md.py")
    ap.add_argument("--check", action="store_true", help="Fail if docs/exit_codes.md is stale")
    ns = ap.parse_args(argv)

    repo = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo / "src"))

    from huffc import errors  # noqa: E402

    out = repo / "docs" / "exit_codes.md"
    want = errors.render_exit_codes_markdown()

    if ns.check:
        have = out.read_text(encoding="utf-8") if out.is_file() else ""
        if have != want:
            print(f"[huffc] stale: {out} (run scripts/gen_exit_codes_md.py)", file=sys.stderr)
            return 1
        print(f"[huffc] up to date: {out}")
        return 0

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(want, encoding="utf-8")
    print(f"[huffc] wrote {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
