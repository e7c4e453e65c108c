import pytest

from sysprobe.linux.memory import HostMemoryInfo, parse_meminfo

MEMINFO = """MemTotal:        4042048 kB
MemFree:          400000 kB
MemAvailable:    2000000 kB
Buffers:          100000 kB
Cached:           500000 kB
SwapTotal:       1000000 kB
SwapFree:         900000 kB
Slab:              80000 kB
HugePages_Total:       0
"""

OLD_MEMINFO = """MemTotal:        1000 kB
MemFree:          200 kB
Buffers:          30 kB
Cached:           40 kB
"""


def test_total_from_kb():
    info = parse_meminfo(MEMINFO)
    assert info.total == 4139057152


def test_known_keys_not_in_metrics():
    info = parse_meminfo(MEMINFO.encode())
    assert "MemTotal" not in info.metrics
    assert "MemFree" not in info.metrics
    assert "Slab" in info.metrics
    assert info.metrics["HugePages_Total"] == 0


def test_used_and_virtual_invariants():
    info = parse_meminfo(MEMINFO)
    assert info.used == info.total - info.free
    assert info.virtual_used == info.virtual_total - info.virtual_free
    assert info.available == parse_meminfo("MemAvailable: 2000000 kB").available


def test_available_fallback():
    info = parse_meminfo(OLD_MEMINFO)
    assert info.available == info.free + info.metrics["Buffers"] + info.metrics["Cached"]
    assert info.available < info.total


def test_empty_content():
    assert parse_meminfo("") == HostMemoryInfo()


def test_bad_unit():
    with pytest.raises(ValueError, match="failed to parse MemTotal"):
        parse_meminfo("MemTotal: 5 MB\n")


def test_empty_value():
    with pytest.raises(ValueError):
        parse_meminfo("MemFree:\n")