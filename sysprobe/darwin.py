"""Host and process details of macOS systems."""

from __future__ import annotations

import os
import plistlib
import struct
from dataclasses import dataclass, field
from pathlib import Path
from xml.parsers.expat import ExpatError

from sysprobe.linux.osrelease import OSInfo, _atoi

SYSTEM_VERSION_PLIST = "/System/Library/CoreServices/SystemVersion.plist"

PLIST_PRODUCT_NAME = "ProductName"
PLIST_PRODUCT_VERSION = "ProductVersion"
PLIST_PRODUCT_BUILD_VERSION = "ProductBuildVersion"

_ARGC = struct.Struct("<i")


@dataclass
class ProcArgs:
    """Executable path, arguments and environment of a process."""

    exe: str = ""
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)


def operating_system(path: str | os.PathLike[str] = SYSTEM_VERSION_PLIST) -> OSInfo:
    """Describe the running macOS release from its SystemVersion.plist."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise OSError(exc.errno, f"failed to read plist file {path}") from exc
    return parse_os_info(data)


def _required(attrs: dict[str, object], key: str) -> str:
    if key not in attrs:
        raise LookupError(f"plist key {key} not found")
    value = attrs[key]
    if not isinstance(value, str):
        raise ValueError(f"plist key {key} is not a string")
    return value


def parse_os_info(data: bytes) -> OSInfo:
    """Build an :class:`OSInfo` from the contents of SystemVersion.plist."""
    try:
        attrs = plistlib.loads(data)
    except (plistlib.InvalidFileException, ExpatError, ValueError) as exc:
        raise ValueError(f"failed to unmarshal plist data: {exc}") from exc
    if not isinstance(attrs, dict):
        raise ValueError("failed to unmarshal plist data: not a dictionary")

    product_name = _required(attrs, PLIST_PRODUCT_NAME)
    version = _required(attrs, PLIST_PRODUCT_VERSION)
    build = _required(attrs, PLIST_PRODUCT_BUILD_VERSION)

    parts = version.split(".", 2)
    parts += [""] * (3 - len(parts))
    major, minor, patch = (_atoi(part) for part in parts)

    return OSInfo(
        type="macos",
        family="darwin",
        platform="darwin",
        name=product_name,
        version=version,
        major=major,
        minor=minor,
        patch=patch,
        build=build,
    )


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def parse_procargs(data: bytes) -> ProcArgs:
    """Parse a KERN_PROCARGS2 buffer: argc, executable path, arguments, environment."""
    if len(data) < _ARGC.size:
        raise ValueError("procargs buffer too short to hold argc")
    (argc,) = _ARGC.unpack_from(data)

    fields = data[_ARGC.size :].split(b"\x00")
    exe = _decode(fields[0])
    rest = iter(fields[1:])

    # The executable path is padded with NUL bytes before the arguments start.
    remaining = list(rest)
    start = next((i for i, item in enumerate(remaining) if item), len(remaining))
    remaining = remaining[start:]

    if argc < 0 or argc > len(remaining):
        raise ValueError(f"procargs buffer holds fewer than {argc} arguments")
    args = [_decode(item) for item in remaining[:argc]]

    env: dict[str, str] = {}
    for item in remaining[argc:]:
        if not item:
            break
        key, _, value = _decode(item).partition("=")
        env[key] = value

    return ProcArgs(exe=exe, args=args, env=env)