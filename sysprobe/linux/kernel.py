"""Machine architecture and kernel release from uname."""

from __future__ import annotations

import os


def _field(value: str) -> str:
    return value.split("\x00", 1)[0]


def architecture() -> str:
    """Return the machine hardware name, e.g. ``x86_64``."""
    try:
        return _field(os.uname().machine)
    except OSError as exc:
        raise OSError(f"architecture: {exc}") from exc


def kernel_version() -> str:
    """Return the kernel release string."""
    try:
        return _field(os.uname().release)
    except OSError as exc:
        raise OSError(f"kernel version: {exc}") from exc