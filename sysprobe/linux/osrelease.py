"""Identification of a Linux distribution from its release files."""

from __future__ import annotations

import os
import re
import stat
from dataclasses import dataclass
from pathlib import Path

from sysprobe.linux.util import _INT64_MAX, _INT64_MIN, _text

OS_RELEASE = "/etc/os-release"
LSB_RELEASE = "/etc/lsb-release"
_RELEASE_DIR = "/etc"
_DISTRIB_RELEASE_GLOB = "*-release"

_VERSION_GROK = (
    r"(?P<version>(?P<major>[0-9]+)\.?(?P<minor>[0-9]+)?\.?(?P<patch>\w+)?)"
    r"(?: \((?P<codename>\w+)\))?"
)

# Parses the first line of /etc/<distrib>-release. See man lsb-release.
_DISTRIB_RELEASE_RE = re.compile(r"(?P<name>[\w]+).* " + _VERSION_GROK, re.ASCII)

# Parses version numbers such as 6, 6.1, 6.1.0 or 6.1.0_20150102.
_VERSION_RE = re.compile(_VERSION_GROK, re.ASCII)

_FAMILIES = {
    "redhat": ("redhat", "fedora", "centos", "scientific", "oraclelinux", "ol", "amzn", "rhel"),
    "debian": ("debian", "ubuntu", "raspbian", "linuxmint"),
    "suse": ("suse", "sles", "opensuse"),
}

_PLATFORM_TO_FAMILY = {
    platform: family for family, platforms in _FAMILIES.items() for platform in platforms
}

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
}
_HEX_ESCAPE_WIDTHS = {"x": 2, "u": 4, "U": 8}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_OCTAL_DIGITS = frozenset("01234567")
_SIGNED_DECIMAL = re.compile(r"[+-]?[0-9]+")


@dataclass
class OSInfo:
    """Description of an operating system release."""

    type: str = ""
    family: str = ""
    platform: str = ""
    name: str = ""
    version: str = ""
    major: int = 0
    minor: int = 0
    patch: int = 0
    build: str = ""
    codename: str = ""


def _atoi(text: str | None) -> int:
    """Parse a decimal integer leniently: anything unparsable counts as 0."""
    if not text or not _SIGNED_DECIMAL.fullmatch(text):
        return 0
    return max(_INT64_MIN, min(_INT64_MAX, int(text, 10)))


def _unquote(value: str) -> str | None:
    """Interpret a double-, single- or back-quoted literal; None if it is not one."""
    if len(value) < 2:
        return None
    quote = value[0]
    if quote not in "\"'`" or value[-1] != quote:
        return None
    body = value[1:-1]

    if quote == "`":
        if "`" in body:
            return None
        return body.replace("\r", "")

    if "\n" in body:
        return None

    out: list[str] = []
    pos = 0
    while pos < len(body):
        char = body[pos]
        if char == quote:
            return None
        if char != "\\":
            out.append(char)
            pos += 1
            continue
        if pos + 1 >= len(body):
            return None
        escape = body[pos + 1]
        pos += 2
        if escape in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[escape])
        elif escape == quote:
            out.append(escape)
        elif escape in _HEX_ESCAPE_WIDTHS:
            width = _HEX_ESCAPE_WIDTHS[escape]
            digits = body[pos : pos + width]
            if len(digits) < width or not set(digits) <= _HEX_DIGITS:
                return None
            code = int(digits, 16)
            if escape != "x" and (code > 0x10FFFF or 0xD800 <= code <= 0xDFFF):
                return None
            out.append(chr(code))
            pos += width
        elif escape in _OCTAL_DIGITS:
            digits = body[pos - 1 : pos + 2]
            if len(digits) < 3 or not set(digits) <= _OCTAL_DIGITS:
                return None
            code = int(digits, 8)
            if code > 0xFF:
                return None
            out.append(chr(code))
            pos += 2
        else:
            return None

    result = "".join(out)
    if quote == "'" and len(result) != 1:
        return None
    return result


def _under(base_dir: str | os.PathLike[str], path: str) -> str:
    """Place the absolute ``path`` under ``base_dir`` (or leave it when there is none)."""
    base = os.fspath(base_dir)
    if not base:
        return path
    return os.path.join(base, path.lstrip("/"))


def _family(platform: str) -> str:
    return _PLATFORM_TO_FAMILY.get(platform.lower(), "")


def operating_system() -> OSInfo:
    """Describe the running Linux distribution."""
    return get_os_info("")


def get_os_info(base_dir: str | os.PathLike[str] = "") -> OSInfo:
    """Describe the distribution whose root file system is at ``base_dir``.

    os-release is preferred; the /etc/<distrib>-release files are the fallback,
    and also supply the full version of the redhat family.
    """
    try:
        info = _read_os_release(base_dir)
    except (OSError, ValueError):
        return find_distrib_release(base_dir)

    if info.family != "redhat":
        return info

    dist = find_distrib_release(base_dir)
    info.major = dist.major
    info.minor = dist.minor
    info.patch = dist.patch
    info.codename = dist.codename
    return info


def _read_os_release(base_dir: str | os.PathLike[str]) -> OSInfo:
    try:
        lsb = Path(_under(base_dir, LSB_RELEASE)).read_bytes()
    except OSError:
        lsb = b""

    os_rel = Path(_under(base_dir, OS_RELEASE)).read_bytes()
    if not os_rel:
        raise ValueError(f"{OS_RELEASE} is empty")
    return parse_os_release(lsb + os_rel)


def parse_os_release(content: str | bytes) -> OSInfo:
    """Parse ``KEY=value`` lines of os-release (and lsb-release) data."""
    fields: dict[str, str] = {}
    for raw_line in _text(content).split("\n"):
        line = raw_line.removesuffix("\r")
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        value = value.strip()
        unquoted = _unquote(value)
        fields[key] = unquoted.strip() if unquoted is not None else value

    return make_os_info(fields)


def make_os_info(fields: dict[str, str]) -> OSInfo:
    """Build an :class:`OSInfo` from parsed os-release fields."""
    info = OSInfo(
        type="linux",
        platform=fields.get("ID", ""),
        name=fields.get("NAME", ""),
        version=fields.get("VERSION", ""),
        build=fields.get("BUILD_ID", ""),
        codename=fields.get("VERSION_CODENAME", ""),
    )

    if not info.codename:
        # Some releases use their own key (UBUNTU_CODENAME) or lsb-release's DISTRIB_CODENAME.
        info.codename = next((v for k, v in fields.items() if "CODENAME" in k), "")

    if not info.platform:
        info.platform = info.name.split(" ", 1)[0].lower()

    if info.version:
        match = _VERSION_RE.search(info.version)
        if match:
            info.major = _atoi(match["major"])
            info.minor = _atoi(match["minor"])
            info.patch = _atoi(match["patch"])
            if not info.codename:
                info.codename = match["codename"] or ""

    info.family = _family(info.platform)
    return info


def find_distrib_release(base_dir: str | os.PathLike[str] = "") -> OSInfo:
    """Describe the distribution from the first usable /etc/<distrib>-release file.

    Raises LookupError when no such file can be parsed.
    """
    problems: list[str] = []
    directory = Path(_under(base_dir, _RELEASE_DIR))
    for path in sorted(directory.glob(_DISTRIB_RELEASE_GLOB), key=str):
        posix = path.as_posix()
        if posix.endswith(OS_RELEASE) or posix.endswith(LSB_RELEASE):
            continue

        try:
            st = path.stat()
        except OSError:
            continue
        if stat.S_ISDIR(st.st_mode) or st.st_size == 0:
            continue

        try:
            return _read_distrib_release(path)
        except (OSError, ValueError) as exc:
            problems.append(f"in {path}: {exc}")

    detail = "; ".join(problems)
    message = "no valid /etc/<distrib>-release file found"
    raise LookupError(f"{message}: {detail}" if detail else message)


def _read_distrib_release(path: Path) -> OSInfo:
    data = path.read_bytes()
    first_line, sep, _ = data.partition(b"\n")
    if not sep:
        raise ValueError(f"failed to parse {path}")
    platform = path.name.split("-", 1)[0].lower()
    return parse_distrib_release(platform, first_line)


def parse_distrib_release(platform: str, content: str | bytes) -> OSInfo:
    """Parse the first line of a /etc/<distrib>-release file."""
    line = _text(content).strip()
    info = OSInfo(type="linux", platform=platform)

    match = _DISTRIB_RELEASE_RE.search(line)
    if match:
        info.name = match["name"]
        info.version = match["version"]
        info.major = _atoi(match["major"])
        info.minor = _atoi(match["minor"])
        info.patch = _atoi(match["patch"])
        codename = match["codename"] or ""
        info.version += f" ({codename})"
        info.codename = codename

    info.family = _family(info.platform)
    return info