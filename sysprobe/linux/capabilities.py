"""Capability sets of a process, as reported in /proc/[pid]/status."""

from __future__ import annotations

from dataclasses import dataclass, field

from sysprobe.linux.util import decode_bitmap, parse_key_value

_CAPABILITY_NAMES = (
    "chown",
    "dac_override",
    "dac_read_search",
    "fowner",
    "fsetid",
    "kill",
    "setgid",
    "setuid",
    "setpcap",
    "linux_immutable",
    "net_bind_service",
    "net_broadcast",
    "net_admin",
    "net_raw",
    "ipc_lock",
    "ipc_owner",
    "sys_module",
    "sys_rawio",
    "sys_chroot",
    "sys_ptrace",
    "sys_pacct",
    "sys_admin",
    "sys_boot",
    "sys_nice",
    "sys_resource",
    "sys_time",
    "sys_tty_config",
    "mknod",
    "lease",
    "audit_write",
    "audit_control",
    "setfcap",
    "mac_override",
    "mac_admin",
    "syslog",
    "wake_alarm",
    "block_suspend",
    "audit_read",
)

_FIELDS = {
    "CapInh": "inheritable",
    "CapPrm": "permitted",
    "CapEff": "effective",
    "CapBnd": "bounding",
    "CapAmb": "ambient",
}


@dataclass
class CapabilityInfo:
    """Names of the capabilities in each of a process's capability sets."""

    inheritable: list[str] = field(default_factory=list)
    permitted: list[str] = field(default_factory=list)
    effective: list[str] = field(default_factory=list)
    bounding: list[str] = field(default_factory=list)
    ambient: list[str] = field(default_factory=list)


def capability_name(num: int) -> str:
    """Return the name of capability ``num``, or the number itself if unknown."""
    if 0 <= num < len(_CAPABILITY_NAMES):
        return _CAPABILITY_NAMES[num]
    return str(num)


def read_capabilities(content: str | bytes) -> CapabilityInfo:
    """Decode the ``Cap*`` hexadecimal masks of a status file."""
    info = CapabilityInfo()
    for key, value in parse_key_value(content, ":"):
        attr = _FIELDS.get(key)
        if attr is not None:
            setattr(info, attr, decode_bitmap(value, capability_name))
    return info