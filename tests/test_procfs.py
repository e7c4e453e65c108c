import os
from datetime import datetime, timezone

import pytest

from sysprobe.linux.procfs import ProcFS, ProcStat

STAT = """cpu  100 20 30 400 5 6 7 8 0 0
cpu0 100 20 30 400 5 6 7 8 0 0
intr 12345 0 0
ctxt 9999
btime 1500000000
processes 321
procs_running 2
procs_blocked 0
"""


@pytest.fixture
def proc_root(tmp_path):
    (tmp_path / "stat").write_text(STAT)
    return tmp_path


def test_path_joins_onto_mount_point(tmp_path):
    fs = ProcFS(tmp_path)
    assert fs.path("1", "status") == os.path.join(str(tmp_path), "1", "status")
    assert fs.path() == str(tmp_path)


def test_default_mount_point():
    assert ProcFS().path("stat") == os.path.join("/proc", "stat")


def test_read_stat_boot_time(proc_root):
    stat = ProcFS(proc_root).read_stat()
    assert isinstance(stat, ProcStat)
    assert stat.boot_time == 1500000000


def test_read_stat_cpu_total_in_seconds(proc_root):
    cpu = ProcFS(proc_root).read_stat().cpu_total
    assert cpu["user"] == pytest.approx(1.0)
    assert cpu["idle"] > cpu["system"] > cpu["nice"]
    assert set(cpu) >= {"user", "nice", "system", "idle", "iowait", "irq", "softirq", "steal"}


def test_read_stat_short_cpu_line_fills_zeros(tmp_path):
    (tmp_path / "stat").write_text("cpu 100 0 0 100\nbtime 10\n")
    cpu = ProcFS(tmp_path).read_stat().cpu_total
    assert cpu["steal"] == 0.0
    assert cpu["iowait"] == 0.0


def test_read_stat_bad_cpu_value(tmp_path):
    (tmp_path / "stat").write_text("cpu 1 x 2 3\nbtime 10\n")
    with pytest.raises(ValueError):
        ProcFS(tmp_path).read_stat()


def test_read_stat_bad_btime(tmp_path):
    (tmp_path / "stat").write_text("btime soon\n")
    with pytest.raises(ValueError):
        ProcFS(tmp_path).read_stat()


def test_read_stat_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ProcFS(tmp_path).read_stat()


def test_boot_time(proc_root):
    assert ProcFS(proc_root).boot_time() == datetime.fromtimestamp(1500000000, timezone.utc)


def test_boot_time_is_cached(proc_root):
    fs = ProcFS(proc_root)
    first = fs.boot_time()
    (proc_root / "stat").write_text("btime 1600000000\n")
    assert fs.boot_time() == first


def test_pids_lists_numeric_entries(tmp_path):
    for name in ("42", "1", "300", "self", "net"):
        (tmp_path / name).mkdir()
    (tmp_path / "stat").write_text(STAT)
    assert ProcFS(tmp_path).pids() == [1, 42, 300]