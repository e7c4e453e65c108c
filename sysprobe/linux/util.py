"""Parsing helpers for procfs text files."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from pathlib import Path

_UINT64_MAX = (1 << 64) - 1
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_DIGITS = {10: re.compile(r"[0-9]+"), 16: re.compile(r"[0-9a-fA-F]+")}
_SIGNED = re.compile(r"[+-]?[0-9]+")


def _text(content: str | bytes) -> str:
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


def _parse_uint(text: str, base: int = 10, max_value: int = _UINT64_MAX) -> int:
    """Parse an unsigned integer strictly, with no sign, prefix or spaces."""
    if not _DIGITS[base].fullmatch(text):
        raise ValueError(f"invalid unsigned integer {text!r}")
    value = int(text, base)
    if value > max_value:
        raise ValueError(f"value {text!r} out of range")
    return value


def _parse_int(text: str) -> int:
    """Parse a signed 64-bit decimal integer strictly."""
    if not _SIGNED.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    value = int(text, 10)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"value {text!r} out of range")
    return value


def parse_key_value(content: str | bytes, separator: str) -> Iterator[tuple[str, str]]:
    """Yield ``(key, value)`` for each line holding ``separator``; the value is stripped."""
    for line in _text(content).splitlines():
        key, sep, value = line.partition(separator)
        if not sep:
            continue
        yield key, value.strip()


def find_value(filename: str | Path, separator: str, key: str) -> str:
    """Return the stripped value of the first line of ``filename`` starting with ``key``."""
    content = Path(filename).read_text(errors="replace")
    line = next((ln for ln in content.splitlines() if ln.startswith(key)), "")
    if not line:
        raise ValueError(f"{key} not found")
    _, sep, value = line.partition(separator)
    if not sep:
        raise ValueError(f"unexpected line format for {line!r}")
    return value.strip()


def decode_bitmap(s: str, lookup_name: Callable[[int], str]) -> list[str]:
    """Name every bit set in the 64-bit hexadecimal mask ``s``, lowest first."""
    mask = _parse_uint(s, 16)
    return [lookup_name(bit) for bit in range(64) if mask & (1 << bit)]


def parse_bytes_or_number(data: str | bytes) -> int:
    """Parse a number optionally followed by the unit ``kB``."""
    parts = _text(data).split()
    if not parts:
        raise ValueError("empty value")
    try:
        num = _parse_uint(parts[0])
    except ValueError as exc:
        raise ValueError(f"failed to parse value: {exc}") from exc

    multiplier = 1
    if len(parts) >= 2:
        if parts[1] != "kB":
            raise ValueError(f"unhandled unit {parts[1]}")
        multiplier = 1024
    return (num * multiplier) & _UINT64_MAX