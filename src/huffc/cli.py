"""huffc CLI.

This is the stable CLI entrypoint (console-script: ``huffc``).

The CLI is the only place that touches files or prints. The core
(``huffc.core`` / ``huffc.engine``) works on in-memory buffers and
raises typed errors (``huffc.errors``), mapped here to exit codes.

Notes:
  - --version is supported at top-level.
  - verify supports --json (machine-readable output).
  - --profile takes a codec profile (``@file.json`` or inline JSON).
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from huffc.errors import EXIT_GENERIC, HuffcError, exit_code_info
from huffc.profile_spec import DEFAULT_PROFILE, ProfileSpecV1, load_profile_spec


def _pkg_version() -> str:
    try:
        from importlib.metadata import PackageNotFoundError, version

        try:
            return version("huffc")
        except PackageNotFoundError:
            # running from a source checkout without metadata
            return "0+unknown"
    except Exception:
        return "0+unknown"


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")


def _load_profile(profile_arg: str | None) -> ProfileSpecV1:
    if profile_arg is None:
        return DEFAULT_PROFILE
    return load_profile_spec(profile_arg)


def _read_input(path: Path) -> bytes:
    if not path.is_file():
        raise HuffcError(f"input file not found: {path}")
    return path.read_bytes()


def _ratio(out_size: int, in_size: int) -> float:
    return (out_size / in_size) if in_size > 0 else 0.0


def _file_compress(input_path: Path, output_path: Path, *, profile: ProfileSpecV1, verify: bool) -> int:
    from huffc.engine.container import compress
    from huffc.verify import verify_roundtrip

    data = _read_input(input_path)
    blob = compress(data)
    if verify or profile.verify_after_compress:
        verify_roundtrip(data, blob)
    output_path.write_bytes(blob)

    print("=== huffc container ===")
    print(f"Profile        : {profile.name}")
    print(f"Original file  : {input_path} ({len(data)} bytes)")
    print(f"Compressed file: {output_path} ({len(blob)} bytes)")
    print(f"Ratio          : {_ratio(len(blob), len(data)):.3f} (1.0 = no compression)")
    print("=======================")
    return 0


def _file_decompress(input_path: Path, output_path: Path, *, lenient: bool) -> int:
    from huffc.engine.container import decompress_stream

    if not input_path.is_file():
        raise HuffcError(f"input file not found: {input_path}")
    with input_path.open("rb") as fp:
        data = decompress_stream(fp, lenient=lenient)
    output_path.write_bytes(data)
    print(f"Decompressed: {output_path} ({len(data)} bytes)")
    return 0


def _print_verify_json(target: Path, *, full: bool) -> None:
    print(
        json.dumps(
            {
                "schema": "huffc.verify.v1",
                "ok": True,
                "kind": "file",
                "target": str(target),
                "full": bool(full),
                "version": _pkg_version(),
            },
            ensure_ascii=False,
            separators=(",", ":"),
        )
    )


def _print_verify_json_error(target: Path, *, full: bool, err: Exception) -> int:
    """Emit JSON on stderr for verify errors when --json is used. Returns the exit code."""
    code = int(getattr(err, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    info = exit_code_info(code)
    obj = {
        "schema": "huffc.verify.v1",
        "ok": False,
        "kind": "file",
        "target": str(target),
        "full": bool(full),
        "version": _pkg_version(),
        "error": {
            "type": type(err).__name__,
            "category": info.name if info else "GENERIC",
            "message": str(err),
            "exit_code": code,
        },
    }
    print(json.dumps(obj, ensure_ascii=False, sort_keys=True), file=sys.stderr)
    return code


def _file_verify(input_path: Path, *, full: bool, as_json: bool) -> int:
    from huffc.verify import verify_container_file

    if not as_json:
        verify_container_file(input_path, full=full)
        print("OK")
        return 0

    try:
        verify_container_file(input_path, full=full)
    except HuffcError as e:
        return _print_verify_json_error(input_path, full=full, err=e)
    _print_verify_json(input_path, full=full)
    return 0


def _file_show(input_path: Path) -> int:
    from huffc.engine.container import inspect_container

    info = inspect_container(_read_input(input_path))

    print(f"=== {input_path} ===")
    print(f"Container size : {info.container_size} bytes")
    print(f"Header size    : {info.header_size} bytes")
    print(f"Payload size   : {info.payload_size} bytes")
    print(f"Original size  : {info.original_size} bytes")
    print(f"Symbols        : {info.n_symbols}")
    print(f"Bit length     : {info.bit_length} (padding {info.padding})")
    if not info.bits_match:
        print(f"WARNING        : frequency table implies {info.expected_bit_length} bits")
    if info.n_symbols:
        print()
        print(f"{'sym':>5} {'char':>5} {'freq':>12} {'bits':>5}")
        for sym, f in info.freq.items():
            ch = chr(sym) if 0x20 <= sym < 0x7F else "."
            print(f"{sym:>5} {ch:>5} {f:>12} {info.code_lengths[sym]:>5}")
    return 0


def _file_bench(input_path: Path) -> int:
    from huffc.bench import bench_bytes, render_bench_table

    data = _read_input(input_path)
    print(render_bench_table(bench_bytes(data), len(data)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="huffc", description="Static Huffman file compressor")
    p.add_argument("--version", action="version", version=f"%(prog)s {_pkg_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_file = sub.add_parser("file", help="Single-file operations")
    sub_file = p_file.add_subparsers(dest="file_cmd", required=True)

    p_c = sub_file.add_parser("compress", help="Lossless compress")
    p_c.add_argument("input", type=Path)
    p_c.add_argument("output", type=Path)
    p_c.add_argument(
        "--profile",
        default=None,
        help="Codec profile (JSON). Use '@file.json' to load from file, or pass JSON inline.",
    )
    p_c.add_argument(
        "--verify", action="store_true", help="Decode the result before writing it"
    )
    _add_common_args(p_c)

    p_d = sub_file.add_parser("decompress", help="Lossless decompress")
    p_d.add_argument("input", type=Path)
    p_d.add_argument("output", type=Path)
    p_d.add_argument("--profile", default=None, help="Codec profile (JSON)")
    p_d.add_argument(
        "--lenient",
        action="store_true",
        help="Drop a partial trailing symbol instead of failing",
    )
    _add_common_args(p_d)

    p_v = sub_file.add_parser("verify", help="Verify a container file")
    p_v.add_argument("input", type=Path)
    p_v.add_argument("--full", action="store_true", help="Decode every symbol")
    p_v.add_argument("--json", action="store_true", help="Machine-readable output")
    _add_common_args(p_v)

    p_s = sub_file.add_parser("show", help="Show frequency table and code lengths")
    p_s.add_argument("input", type=Path)
    _add_common_args(p_s)

    p_b = sub_file.add_parser("bench", help="Compare container size with zlib/zstd")
    p_b.add_argument("input", type=Path)
    _add_common_args(p_b)

    p_pv = sub_file.add_parser("profile-validate", help="Validate a codec profile (v1)")
    p_pv.add_argument("profile", help="Profile JSON (@file.json or inline JSON)")
    _add_common_args(p_pv)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    try:
        if ns.cmd == "file":
            if ns.file_cmd == "compress":
                profile = _load_profile(ns.profile)
                return _file_compress(ns.input, ns.output, profile=profile, verify=bool(ns.verify))
            if ns.file_cmd == "decompress":
                profile = _load_profile(ns.profile)
                return _file_decompress(
                    ns.input, ns.output, lenient=bool(ns.lenient) or profile.lenient
                )
            if ns.file_cmd == "verify":
                return _file_verify(ns.input, full=bool(ns.full), as_json=bool(ns.json))
            if ns.file_cmd == "show":
                return _file_show(ns.input)
            if ns.file_cmd == "bench":
                return _file_bench(ns.input)
            if ns.file_cmd == "profile-validate":
                load_profile_spec(str(ns.profile))
                print("OK")
                return 0
            raise AssertionError("unreachable")

        raise AssertionError("unreachable")

    except SystemExit:
        raise
    except HuffcError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[huffc] {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[huffc] error: {e}", file=sys.stderr)
        return EXIT_GENERIC


if __name__ == "__main__":
    raise SystemExit(main())
