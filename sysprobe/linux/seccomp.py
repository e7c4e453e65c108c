"""Seccomp state of a process, as reported in /proc/[pid]/status."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from sysprobe.linux.util import _parse_uint, parse_key_value

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class SeccompMode(IntEnum):
    """The seccomp modes known to the kernel."""

    DISABLED = 0
    STRICT = 1
    FILTER = 2

    def __str__(self) -> str:
        return self.name.lower()


@dataclass
class SeccompInfo:
    """Seccomp mode name and the no_new_privs flag, when reported."""

    mode: str = ""
    no_new_privs: bool | None = None


def _mode_name(value: int) -> str:
    try:
        return str(SeccompMode(value))
    except ValueError:
        return str(value)


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"invalid boolean {text!r}")


def read_seccomp_fields(content: str | bytes) -> SeccompInfo:
    """Read the ``Seccomp`` and ``NoNewPrivs`` fields of a status file."""
    info = SeccompInfo()
    for key, value in parse_key_value(content, ":"):
        if key == "Seccomp":
            info.mode = _mode_name(_parse_uint(value, 10, 0xFF))
        elif key == "NoNewPrivs":
            info.no_new_privs = _parse_bool(value)
    return info