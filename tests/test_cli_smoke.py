from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from huffc.errors import EXIT_CORRUPT, EXIT_GENERIC, EXIT_TRUNCATED, EXIT_USAGE

pytestmark = pytest.mark.p1

SRC_DIR = Path(__file__).resolve().parents[1] / "src"


def _run_cli(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run huffc CLI through a python -c wrapper.

    This avoids assuming the console-script entrypoint is installed.
    """
    cmd = [
        sys.executable,
        "-c",
        "from huffc.cli import main; raise SystemExit(main())",
        *args,
    ]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_DIR), env.get("PYTHONPATH")]))
    return subprocess.run(
        cmd,
        cwd=str(cwd) if cwd else None,
        env=env,
        text=True,
        capture_output=True,
    )


def test_cli_file_roundtrip(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    out = tmp_path / "out.huf"
    back = tmp_path / "back.txt"

    data = "HELLO 123\nRIGA ARTICOLO: vite M3 qty=10 prezzo=1.20\n"
    inp.write_text(data, encoding="utf-8")

    r = _run_cli("file", "compress", str(inp), str(out), "--verify")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert "=== huffc container ===" in r.stdout

    r = _run_cli("file", "verify", str(out), "--full")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert "OK" in r.stdout

    r = _run_cli("file", "decompress", str(out), str(back))
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert back.read_text(encoding="utf-8") == data


def test_cli_empty_file_roundtrip(tmp_path: Path) -> None:
    inp = tmp_path / "empty.bin"
    out = tmp_path / "empty.huf"
    back = tmp_path / "empty.back"
    inp.write_bytes(b"")

    assert _run_cli("file", "compress", str(inp), str(out)).returncode == 0
    assert out.read_bytes() == b"\x00\x00\x00"
    assert _run_cli("file", "decompress", str(out), str(back)).returncode == 0
    assert back.read_bytes() == b""


def test_cli_truncated_container_exit_code(tmp_path: Path) -> None:
    inp = tmp_path / "in.bin"
    out = tmp_path / "out.huf"
    back = tmp_path / "back.bin"
    inp.write_bytes(b"aaabbc" * 10)

    assert _run_cli("file", "compress", str(inp), str(out)).returncode == 0
    out.write_bytes(out.read_bytes()[:-1])

    r = _run_cli("file", "decompress", str(out), str(back))
    assert r.returncode == EXIT_TRUNCATED
    assert "[huffc]" in r.stderr
    assert not back.exists()


def test_cli_lenient_flag_and_profile(tmp_path: Path) -> None:
    out = tmp_path / "cut.huf"
    back = tmp_path / "back.bin"
    # 'aaabbc' table, no padding, 8 bits = a a a b b + a dangling '1'
    out.write_bytes(bytes.fromhex("0300" "6103000000" "6202000000" "6301000000" "00" "1f"))

    r = _run_cli("file", "decompress", str(out), str(back))
    assert r.returncode == EXIT_TRUNCATED

    r = _run_cli("file", "decompress", str(out), str(back), "--lenient")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert back.read_bytes() == b"aaabb"

    back.unlink()
    profile = json.dumps({"spec": "huffc.profile.v1", "decode": "lenient"})
    r = _run_cli("file", "decompress", str(out), str(back), "--profile", profile)
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert back.read_bytes() == b"aaabb"


def test_cli_corrupt_padding_exit_code(tmp_path: Path) -> None:
    out = tmp_path / "bad.huf"
    out.write_bytes(bytes.fromhex("0100" "4104000000" "09" "f0"))
    r = _run_cli("file", "verify", str(out))
    assert r.returncode == EXIT_CORRUPT
    assert "[huffc]" in r.stderr


def test_cli_bad_profile_exit_2(tmp_path: Path) -> None:
    r = _run_cli("file", "profile-validate", "{}")
    assert r.returncode == EXIT_USAGE
    assert "[huffc]" in r.stderr

    inp = tmp_path / "in.bin"
    inp.write_bytes(b"x")
    r = _run_cli("file", "compress", str(inp), str(tmp_path / "o.huf"), "--profile", "{}")
    assert r.returncode == EXIT_USAGE


def test_cli_profile_validate_ok() -> None:
    r = _run_cli("file", "profile-validate", json.dumps({"spec": "huffc.profile.v1"}))
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert "OK" in r.stdout


def test_cli_missing_input(tmp_path: Path) -> None:
    r = _run_cli("file", "compress", str(tmp_path / "nope"), str(tmp_path / "o.huf"))
    assert r.returncode == EXIT_GENERIC
    assert "not found" in r.stderr


def test_cli_show(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    out = tmp_path / "out.huf"
    inp.write_bytes(b"aaabbc")
    assert _run_cli("file", "compress", str(inp), str(out)).returncode == 0

    r = _run_cli("file", "show", str(out))
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert "Symbols        : 3" in r.stdout
    assert "Original size  : 6 bytes" in r.stdout


def test_cli_verify_json(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    out = tmp_path / "out.huf"
    inp.write_bytes(b"json verify")
    assert _run_cli("file", "compress", str(inp), str(out)).returncode == 0

    r = _run_cli("file", "verify", str(out), "--json")
    assert r.returncode == 0, (r.stdout, r.stderr)
    obj = json.loads(r.stdout.strip())
    assert obj["schema"] == "huffc.verify.v1"
    assert obj["ok"] is True
    assert obj["full"] is False


def test_cli_verify_json_error_on_missing_file(tmp_path: Path) -> None:
    missing = tmp_path / "missing.huf"
    r = _run_cli("file", "verify", str(missing), "--json")
    assert r.returncode != 0
    assert r.stdout.strip() == ""

    obj = json.loads(r.stderr.strip())
    assert obj["ok"] is False
    assert obj["target"] == str(missing)
    err = obj["error"]
    assert isinstance(err["type"], str) and err["type"]
    assert isinstance(err["category"], str) and err["category"]
    assert int(err["exit_code"]) == r.returncode


def test_cli_version() -> None:
    r = _run_cli("--version")
    assert r.returncode == 0
    assert r.stdout.startswith("huffc ")
