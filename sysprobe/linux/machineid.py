"""Lookup of the host's machine id."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

MACHINE_ID_FILES = ("/etc/machine-id", "/var/lib/dbus/machine-id", "/var/db/dbus/machine-id")


def machine_id(paths: Iterable[str | Path] = MACHINE_ID_FILES) -> str:
    """Return the contents of the first machine-id file found, stripped.

    Raises NotImplementedError when none of the files exists.
    """
    for path in paths:
        try:
            contents = Path(path).read_bytes()
        except FileNotFoundError:
            continue
        except OSError as exc:
            raise OSError(f"failed to read {path}: {exc}") from exc
        return contents.strip().decode("utf-8", errors="replace")
    raise NotImplementedError("no machine-id file found")