"""Details of a single process read from a procfs tree."""

from __future__ import annotations

import mmap
import os
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

from sysprobe.linux.capabilities import CapabilityInfo, read_capabilities
from sysprobe.linux.procfs import USER_HZ, ProcFS
from sysprobe.linux.procnet import NetworkCountersInfo, get_net_snmp_stats, get_netstat_stats
from sysprobe.linux.seccomp import SeccompInfo, read_seccomp_fields
from sysprobe.linux.util import parse_key_value

_MICROSECONDS_PER_TICK = 1_000_000 // USER_HZ

# Positions in /proc/[pid]/stat, counted from the field after the command name.
_PPID = 1
_UTIME = 11
_STIME = 12
_STARTTIME = 19
_VSIZE = 20
_RSS = 21


@dataclass
class CPUTimes:
    """CPU time spent in each mode."""

    user: timedelta = timedelta(0)
    system: timedelta = timedelta(0)
    idle: timedelta = timedelta(0)
    iowait: timedelta = timedelta(0)
    irq: timedelta = timedelta(0)
    nice: timedelta = timedelta(0)
    softirq: timedelta = timedelta(0)
    steal: timedelta = timedelta(0)

    def total(self) -> timedelta:
        """Return the sum of every mode."""
        return sum(
            (self.user, self.system, self.idle, self.iowait,
             self.irq, self.nice, self.softirq, self.steal),
            timedelta(0),
        )


@dataclass
class ProcessInfo:
    """Static description of a process."""

    name: str = ""
    pid: int = 0
    ppid: int = 0
    cwd: str = ""
    exe: str = ""
    args: list[str] = field(default_factory=list)
    start_time: datetime = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass
class MemoryInfo:
    """Memory used by a process, in bytes."""

    resident: int = 0
    virtual: int = 0
    metrics: dict[str, int] = field(default_factory=dict)


@dataclass
class UserInfo:
    """Real, effective and saved user and group ids of a process."""

    uid: str = ""
    euid: str = ""
    suid: str = ""
    gid: str = ""
    egid: str = ""
    sgid: str = ""


@dataclass
class _PidStat:
    comm: str
    fields: list[int]


def ticks_to_duration(ticks: int) -> timedelta:
    """Convert clock ticks of USER_HZ per second into a duration."""
    return timedelta(microseconds=ticks * _MICROSECONDS_PER_TICK)


def _parse_pid_stat(text: str) -> _PidStat:
    start = text.find("(")
    end = text.rfind(")")
    if start < 0 or end < start:
        raise ValueError(f"unexpected process stat format: {text[:80]!r}")
    comm = text[start + 1 : end]
    parts = text[end + 1 :].split()
    if len(parts) <= _RSS:
        raise ValueError("process stat holds too few fields")
    try:
        # The first field is the one-letter state; the rest are numbers.
        numbers = [0] + [int(part) for part in parts[1 : _RSS + 1]]
    except ValueError as exc:
        raise ValueError(f"unexpected process stat field: {exc}") from exc
    return _PidStat(comm=comm, fields=numbers)


class LinuxProcess:
    """A process in a procfs tree."""

    def __init__(self, pid: int, fs: ProcFS) -> None:
        if not os.path.isdir(fs.path(str(pid))):
            raise ProcessLookupError(f"no such process: {pid}")
        self.pid = pid
        self._fs = fs
        self._info: ProcessInfo | None = None

    def __repr__(self) -> str:
        return f"LinuxProcess(pid={self.pid}, fs={self._fs!r})"

    def _path(self, *parts: str) -> str:
        return self._fs.path(str(self.pid), *parts)

    def _read_stat(self) -> _PidStat:
        return _parse_pid_stat(Path(self._path("stat")).read_text(errors="replace"))

    def _read_status(self) -> bytes:
        return Path(self._path("status")).read_bytes()

    def _executable(self) -> str:
        try:
            return os.readlink(self._path("exe"))
        except FileNotFoundError:
            return ""

    def _cmdline(self) -> list[str]:
        data = Path(self._path("cmdline")).read_bytes()
        if not data:
            return []
        return [arg.decode("utf-8", errors="replace") for arg in data.rstrip(b"\x00").split(b"\x00")]

    def parent(self) -> LinuxProcess:
        """Return the parent process."""
        return LinuxProcess(self.info().ppid, self._fs)

    def cwd(self) -> str:
        """Return the working directory, or an empty string if it is unknown."""
        try:
            return os.readlink(self._path("cwd"))
        except FileNotFoundError:
            return ""

    def info(self) -> ProcessInfo:
        """Return the process description, read once and then remembered."""
        if self._info is None:
            stat = self._read_stat()
            exe = self._executable()
            args = self._cmdline()
            cwd = self.cwd()
            boot = self._fs.boot_time()
            self._info = ProcessInfo(
                name=stat.comm,
                pid=self.pid,
                ppid=stat.fields[_PPID],
                cwd=cwd,
                exe=exe,
                args=args,
                start_time=boot + ticks_to_duration(stat.fields[_STARTTIME]),
            )
        return replace(self._info, args=list(self._info.args))

    def memory(self) -> MemoryInfo:
        """Return the resident and virtual memory sizes."""
        stat = self._read_stat()
        return MemoryInfo(
            resident=stat.fields[_RSS] * mmap.PAGESIZE,
            virtual=stat.fields[_VSIZE],
        )

    def cpu_time(self) -> CPUTimes:
        """Return the user and system CPU time used so far."""
        stat = self._read_stat()
        return CPUTimes(
            user=ticks_to_duration(stat.fields[_UTIME]),
            system=ticks_to_duration(stat.fields[_STIME]),
        )

    def _fd_names(self) -> list[str]:
        return sorted(os.listdir(self._path("fd")), key=lambda name: (len(name), name))

    def open_handles(self) -> list[str]:
        """Return the targets of the open file descriptors."""
        targets = []
        for name in self._fd_names():
            try:
                targets.append(os.readlink(self._path("fd", name)))
            except OSError:
                continue
        return targets

    def open_handle_count(self) -> int:
        """Return the number of open file descriptors."""
        return len(self._fd_names())

    def environment(self) -> dict[str, str]:
        """Return the environment variables the process was started with."""
        content = Path(self._path("environ")).read_bytes()
        env: dict[str, str] = {}
        for pair in content.split(b"\x00"):
            key, sep, value = pair.decode("utf-8", errors="replace").partition("=")
            if not sep:
                continue
            key = key.strip()
            if not key:
                continue
            env[key] = value
        return env

    def seccomp(self) -> SeccompInfo:
        """Return the seccomp state."""
        return read_seccomp_fields(self._read_status())

    def capabilities(self) -> CapabilityInfo:
        """Return the capability sets."""
        return read_capabilities(self._read_status())

    def user(self) -> UserInfo:
        """Return the user and group ids."""
        user = UserInfo()
        for key, value in parse_key_value(self._read_status(), ":"):
            ids = value.split("\t")
            if len(ids) < 3:
                continue
            if key == "Uid":
                user.uid, user.euid, user.suid = ids[:3]
            elif key == "Gid":
                user.gid, user.egid, user.sgid = ids[:3]
        return user

    def network_counters(self) -> NetworkCountersInfo:
        """Return the network counters seen from this process's namespace."""
        snmp = get_net_snmp_stats(Path(self._path("net", "snmp")).read_bytes())
        netstat = get_netstat_stats(Path(self._path("net", "netstat")).read_bytes())
        return NetworkCountersInfo(snmp=snmp, netstat=netstat)