"""Parsing of /proc/meminfo."""

from __future__ import annotations

from dataclasses import dataclass, field

from sysprobe.linux.util import _UINT64_MAX, parse_bytes_or_number, parse_key_value


@dataclass
class HostMemoryInfo:
    """Host memory usage in bytes, with any extra counters in ``metrics``."""

    total: int = 0
    used: int = 0
    available: int = 0
    free: int = 0
    virtual_total: int = 0
    virtual_used: int = 0
    virtual_free: int = 0
    metrics: dict[str, int] = field(default_factory=dict)


_FIELDS = {
    "MemTotal": "total",
    "MemAvailable": "available",
    "MemFree": "free",
    "SwapTotal": "virtual_total",
    "SwapFree": "virtual_free",
}


def parse_meminfo(content: str | bytes) -> HostMemoryInfo:
    """Build a :class:`HostMemoryInfo` from the contents of /proc/meminfo."""
    info = HostMemoryInfo()
    has_available = False

    for key, value in parse_key_value(content, ":"):
        try:
            num = parse_bytes_or_number(value)
        except ValueError as exc:
            raise ValueError(f"failed to parse {key} value of {value}: {exc}") from exc

        attr = _FIELDS.get(key)
        if attr is None:
            info.metrics[key] = num
            continue
        if key == "MemAvailable":
            has_available = True
        setattr(info, attr, num)

    info.used = (info.total - info.free) & _UINT64_MAX
    info.virtual_used = (info.virtual_total - info.virtual_free) & _UINT64_MAX

    # MemAvailable appeared in kernel 3.14; approximate it on older kernels.
    if not has_available:
        info.available = (
            info.free + info.metrics.get("Buffers", 0) + info.metrics.get("Cached", 0)
        ) & _UINT64_MAX

    return info