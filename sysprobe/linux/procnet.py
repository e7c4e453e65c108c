"""Parsing of /proc/net/snmp and /proc/net/netstat."""

from __future__ import annotations

from dataclasses import dataclass, field

from sysprobe.linux.util import _UINT64_MAX, _parse_int, _parse_uint, _text

_SNMP_SECTIONS = frozenset({"Ip", "Icmp", "IcmpMsg", "Tcp", "Udp", "UdpLite"})
_NETSTAT_SECTIONS = frozenset({"TcpExt", "IpExt"})


@dataclass
class NetworkCountersInfo:
    """Network counters grouped by protocol section, then by counter name."""

    snmp: dict[str, dict[str, int]] = field(default_factory=dict)
    netstat: dict[str, dict[str, int]] = field(default_factory=dict)


def parse_entry(line1: str, line2: str) -> dict[str, int]:
    """Pair a line of counter names with a line of values.

    Negative values (such as Tcp MaxConn) are stored as their unsigned
    64-bit two's-complement form.
    """
    keys = line1.strip().split(" ")
    values = line2.strip().split(" ")
    if len(keys) != len(values):
        raise ValueError("key and value lines are mismatched")

    counters: dict[str, int] = {}
    for key, value in zip(keys, values):
        try:
            if "-" in value:
                parsed = _parse_int(value) & _UINT64_MAX
            else:
                parsed = _parse_uint(value)
        except ValueError as exc:
            raise ValueError(f"error parsing string to int in line: {values!r}") from exc
        counters[key] = parsed
    return counters


def parse_net_file(body: str) -> dict[str, dict[str, int]]:
    """Parse a file made of two-line sections: ``Proto: names`` then ``Proto: values``."""
    lines = body.strip().split("\n")
    if len(lines) % 2 != 0:
        raise ValueError(f"badly parsed body: {body}")

    metrics: dict[str, dict[str, int]] = {}
    pairs = iter(lines)
    for key_line, value_line in zip(pairs, pairs):
        keys_split = key_line.split(":")
        values_split = value_line.split(":")
        if len(keys_split) != 2 or len(values_split) != 2:
            raise ValueError(f"wrong number of keys: {keys_split!r}")
        try:
            counters = parse_entry(keys_split[1], values_split[1])
        except ValueError as exc:
            raise ValueError(f"error parsing lines: {exc}") from exc
        metrics[values_split[0]] = counters
    return metrics


def _select(data: dict[str, dict[str, int]], sections: frozenset[str]) -> dict[str, dict[str, int]]:
    return {name: values for name, values in data.items() if name in sections}


def get_net_snmp_stats(raw: str | bytes) -> dict[str, dict[str, int]]:
    """Return the SNMP sections of a /proc/net/snmp file."""
    try:
        data = parse_net_file(_text(raw))
    except ValueError as exc:
        raise ValueError(f"error parsing SNMP: {exc}") from exc
    return _select(data, _SNMP_SECTIONS)


def get_netstat_stats(raw: str | bytes) -> dict[str, dict[str, int]]:
    """Return the extended sections of a /proc/net/netstat file."""
    try:
        data = parse_net_file(_text(raw))
    except ValueError as exc:
        raise ValueError(f"error parsing netstat: {exc}") from exc
    return _select(data, _NETSTAT_SECTIONS)