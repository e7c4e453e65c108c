"""Host and process provider for Linux, reading a procfs tree."""

from __future__ import annotations

import os
import socket
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import TypeVar

from sysprobe.linux.container import is_containerized
from sysprobe.linux.kernel import architecture, kernel_version
from sysprobe.linux.machineid import machine_id
from sysprobe.linux.memory import HostMemoryInfo, parse_meminfo
from sysprobe.linux.osrelease import OSInfo, operating_system
from sysprobe.linux.process import CPUTimes, LinuxProcess
from sysprobe.linux.procfs import DEFAULT_MOUNT_POINT, ProcFS, ProcStat
from sysprobe.linux.procnet import NetworkCountersInfo, get_net_snmp_stats, get_netstat_stats
from sysprobe.linux.vmstat import parse_vmstat
from sysprobe.network import network

_T = TypeVar("_T")


@dataclass
class HostInfo:
    """Static description of the host."""

    architecture: str = ""
    boot_time: datetime | None = None
    containerized: bool | None = None
    hostname: str = ""
    ips: list[str] = field(default_factory=list)
    kernel_version: str = ""
    macs: list[str] = field(default_factory=list)
    os: OSInfo | None = None
    timezone: str = ""
    timezone_offset_sec: int = 0
    unique_id: str = ""


class LinuxHost:
    """The host whose kernel exposes the given procfs tree."""

    def __init__(
        self,
        fs: ProcFS,
        stat: ProcStat | None = None,
        info: HostInfo | None = None,
    ) -> None:
        self._fs = fs
        self.stat = stat if stat is not None else ProcStat()
        self._info = info if info is not None else HostInfo()

    def __repr__(self) -> str:
        return f"LinuxHost(fs={self._fs!r})"

    def info(self) -> HostInfo:
        """Return the host description gathered when the host was created."""
        return self._info

    def memory(self) -> HostMemoryInfo:
        """Return memory usage from meminfo."""
        return parse_meminfo(Path(self._fs.path("meminfo")).read_bytes())

    def vmstat(self) -> dict[str, int]:
        """Return the virtual memory counters from vmstat."""
        return parse_vmstat(Path(self._fs.path("vmstat")).read_bytes())

    def network_counters(self) -> NetworkCountersInfo:
        """Return the network counters from net/snmp and net/netstat."""
        snmp = get_net_snmp_stats(Path(self._fs.path("net", "snmp")).read_bytes())
        netstat = get_netstat_stats(Path(self._fs.path("net", "netstat")).read_bytes())
        return NetworkCountersInfo(snmp=snmp, netstat=netstat)

    def cpu_time(self) -> CPUTimes:
        """Return the CPU time spent by the whole host in each mode."""
        cpu = self._fs.read_stat().cpu_total

        def spent(name: str) -> timedelta:
            return timedelta(seconds=cpu.get(name, 0.0))

        return CPUTimes(
            user=spent("user"),
            system=spent("system"),
            idle=spent("idle"),
            iowait=spent("iowait"),
            irq=spent("irq"),
            nice=spent("nice"),
            softirq=spent("softirq"),
            steal=spent("steal"),
        )


class _Collector:
    """Gathers the failures of the individual host readings."""

    def __init__(self) -> None:
        self.errors: list[Exception] = []

    def read(self, reading: Callable[[], _T]) -> _T | None:
        try:
            return reading()
        except NotImplementedError:
            return None
        except Exception as exc:  # every reading failure is reported together
            self.errors.append(exc)
            return None


def _local_zone() -> tuple[str, int]:
    now = datetime.now().astimezone()
    offset = now.utcoffset() or timedelta(0)
    return now.tzname() or "", int(offset.total_seconds())


def new_host(fs: ProcFS) -> LinuxHost:
    """Describe the host seen through ``fs``.

    Readings that fail are collected; if any did, an ExceptionGroup is raised
    whose ``host`` attribute holds the partially filled host.
    """
    try:
        stat = fs.read_stat()
    except (OSError, ValueError) as exc:
        exc.add_note("failed to read proc stat")
        raise

    info = HostInfo()
    collector = _Collector()

    if (value := collector.read(architecture)) is not None:
        info.architecture = value
    if (boot := collector.read(fs.boot_time)) is not None:
        info.boot_time = boot
    if (containerized := collector.read(is_containerized)) is not None:
        info.containerized = containerized
    if (hostname := collector.read(socket.gethostname)) is not None:
        info.hostname = hostname
    if (addresses := collector.read(network)) is not None:
        info.ips, info.macs = addresses
    if (release := collector.read(kernel_version)) is not None:
        info.kernel_version = release
    if (os_info := collector.read(operating_system)) is not None:
        info.os = os_info
    info.timezone, info.timezone_offset_sec = _local_zone()
    if (unique := collector.read(machine_id)) is not None:
        info.unique_id = unique

    host = LinuxHost(fs, stat=stat, info=info)
    if collector.errors:
        group = ExceptionGroup("failed to read host information", collector.errors)
        group.host = host
        raise group
    return host


class LinuxSystem:
    """Host and process provider backed by the procfs under ``host_fs``."""

    def __init__(self, host_fs: str | os.PathLike[str] = "") -> None:
        base = os.fspath(host_fs)
        mount_point = os.path.join(base, DEFAULT_MOUNT_POINT.lstrip("/")) if base else DEFAULT_MOUNT_POINT
        self.fs = ProcFS(mount_point)

    def __repr__(self) -> str:
        return f"LinuxSystem(fs={self.fs!r})"

    def host(self) -> LinuxHost:
        """Describe the host; see :func:`new_host`."""
        return new_host(self.fs)

    def processes(self) -> list[LinuxProcess]:
        """Return every process currently present, by ascending pid."""
        found = []
        for pid in self.fs.pids():
            try:
                found.append(LinuxProcess(pid, self.fs))
            except ProcessLookupError:
                continue
        return found

    def process(self, pid: int) -> LinuxProcess:
        """Return the process ``pid``; raises ProcessLookupError if it is absent."""
        return LinuxProcess(pid, self.fs)

    def current(self) -> LinuxProcess:
        """Return the process reading this tree, as named by its ``self`` link."""
        target = os.readlink(self.fs.path("self"))
        try:
            pid = int(os.path.basename(target))
        except ValueError as exc:
            raise ValueError(f"unexpected target of {self.fs.path('self')}: {target!r}") from exc
        return LinuxProcess(pid, self.fs)