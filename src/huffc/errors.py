"""Typed errors for huffc.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- The core raises them; it never prints.
- The CLI maps errors to stable exit codes (see EXIT_* constants).
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_CORRUPT = 11
EXIT_TRUNCATED = 12
EXIT_INTERNAL = 13


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage/config error (invalid args, invalid profile, etc.)"),
    ExitCodeInfo(EXIT_GENERIC, "GENERIC", "Generic failure (I/O error, unexpected error, etc.)"),
    ExitCodeInfo(EXIT_CORRUPT, "CORRUPT", "Corrupt container (bad padding, duplicated symbol, etc.)"),
    ExitCodeInfo(EXIT_TRUNCATED, "TRUNCATED", "Truncated container or bitstream"),
    ExitCodeInfo(
        EXIT_INTERNAL, "INTERNAL", "Internal invariant violated (malformed tree, unknown symbol)"
    ),
)

_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE - do not edit manually.\n")
    lines.append("> Source of truth: `src/huffc/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_exit_codes_md.py`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Notes\n")
    lines.append("- Every core error extends `HuffcError` and carries an `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    lines.append(
        "- `--json` on `verify` prints a JSON object to stdout (ok) or stderr (error), and returns the same exit code.\n"
    )
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class HuffcError(Exception):
    """Base error for huffc."""

    exit_code: int = EXIT_GENERIC


class UsageError(HuffcError):
    exit_code = EXIT_USAGE


class CorruptPayload(HuffcError):
    exit_code = EXIT_CORRUPT


class TruncatedContainer(CorruptPayload):
    """Deserialization ran out of bytes before a field was complete."""

    exit_code = EXIT_TRUNCATED


class TruncatedStream(CorruptPayload):
    """The bit sequence did not end exactly on a symbol boundary."""

    exit_code = EXIT_TRUNCATED


class ContainerOverflow(HuffcError):
    """A value does not fit its fixed-width container field."""


class InternalError(HuffcError):
    exit_code = EXIT_INTERNAL


class EmptyAlphabet(InternalError):
    pass


class MalformedTree(InternalError):
    pass


class UnknownSymbol(InternalError):
    pass
