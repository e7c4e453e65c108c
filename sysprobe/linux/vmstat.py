"""Parsing of /proc/vmstat."""

from __future__ import annotations

from sysprobe.linux.util import parse_bytes_or_number, parse_key_value


def parse_vmstat(content: str | bytes) -> dict[str, int]:
    """Return the counters of a /proc/vmstat file, keyed by their names."""
    stats: dict[str, int] = {}
    for key, value in parse_key_value(content, " "):
        try:
            stats[key] = parse_bytes_or_number(value)
        except ValueError as exc:
            raise ValueError(f"failed to parse {key} value of {value}: {exc}") from exc
    return stats