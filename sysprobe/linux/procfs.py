"""Access to a procfs mount: paths, /proc/stat and the list of processes."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

DEFAULT_MOUNT_POINT = "/proc"

# Clock ticks per second used by the kernel for user-visible counters.
USER_HZ = 100

_CPU_FIELDS = (
    "user",
    "nice",
    "system",
    "idle",
    "iowait",
    "irq",
    "softirq",
    "steal",
    "guest",
    "guest_nice",
)
_MIN_CPU_FIELDS = 4


@dataclass
class ProcStat:
    """System-wide figures from /proc/stat.

    ``boot_time`` is in seconds since the epoch; ``cpu_total`` holds the
    aggregate CPU times in seconds, keyed by field name.
    """

    boot_time: int = 0
    cpu_total: dict[str, float] = field(default_factory=dict)


def _parse_cpu_line(values: list[str]) -> dict[str, float]:
    if len(values) < _MIN_CPU_FIELDS:
        raise ValueError(f"couldn't parse cpu line: {' '.join(values)!r}")
    try:
        seconds = [float(value) / USER_HZ for value in values[: len(_CPU_FIELDS)]]
    except ValueError as exc:
        raise ValueError(f"couldn't parse cpu line: {exc}") from exc
    seconds += [0.0] * (len(_CPU_FIELDS) - len(seconds))
    return dict(zip(_CPU_FIELDS, seconds))


def _parse_stat(text: str) -> ProcStat:
    stat = ProcStat(cpu_total=dict.fromkeys(_CPU_FIELDS, 0.0))
    for line in text.splitlines():
        parts = line.split()
        if not parts:
            continue
        if parts[0] == "cpu":
            stat.cpu_total = _parse_cpu_line(parts[1:])
        elif parts[0] == "btime":
            if len(parts) < 2 or not parts[1].isdigit():
                raise ValueError(f"couldn't parse btime line: {line!r}")
            stat.boot_time = int(parts[1])
    return stat


class ProcFS:
    """A procfs tree mounted at ``mount_point``."""

    def __init__(self, mount_point: str | os.PathLike[str] = DEFAULT_MOUNT_POINT) -> None:
        self.mount_point = os.fspath(mount_point)
        self._boot_time: datetime | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"ProcFS({self.mount_point!r})"

    def path(self, *args: str) -> str:
        """Join ``args`` onto the mount point."""
        return os.path.join(self.mount_point, *args)

    def read_stat(self) -> ProcStat:
        """Read and parse the stat file of this tree."""
        return _parse_stat(Path(self.path("stat")).read_text(errors="replace"))

    def boot_time(self) -> datetime:
        """Return the boot time, read once and then remembered."""
        with self._lock:
            if self._boot_time is not None:
                return self._boot_time
            value = datetime.fromtimestamp(self.read_stat().boot_time, tz=timezone.utc)
            if value.timestamp() != 0:
                self._boot_time = value
            return value

    def pids(self) -> list[int]:
        """Return the ids of every process in this tree, ascending."""
        return sorted(int(name) for name in os.listdir(self.mount_point) if name.isdigit())