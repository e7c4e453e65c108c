"""Detection of whether the host runs inside a container."""

from __future__ import annotations

from pathlib import Path

PROC_ONE_CGROUP = "/proc/1/cgroup"

_MARKERS = ("docker", ".slice", "lxc", "kubepods")


def is_containerized(path: str | Path = PROC_ONE_CGROUP) -> bool:
    """Tell from init's cgroup file whether this system is containerized."""
    try:
        data = Path(path).read_bytes()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise OSError(f"failed to read process cgroups: {exc}") from exc
    return is_containerized_cgroup(data)


def is_containerized_cgroup(data: str | bytes) -> bool:
    """Return True if any cgroup line names a container runtime."""
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    return any(marker in line for line in text.splitlines() for marker in _MARKERS)