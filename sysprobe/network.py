"""Addresses of the host's network interfaces."""

from __future__ import annotations

import ipaddress
import socket

import psutil


def _format_ip(address: str, netmask: str | None) -> str:
    ip = ipaddress.ip_address(address.split("%", 1)[0])
    if netmask:
        mask = ipaddress.ip_address(netmask.split("%", 1)[0])
        prefix = bin(int(mask)).count("1")
    else:
        prefix = ip.max_prefixlen
    return f"{ip}/{prefix}"


def _format_mac(address: str | None) -> str:
    if not address:
        return ""
    mac = address.replace("-", ":").lower()
    if all(part.strip("0") == "" for part in mac.split(":")):
        return ""
    return mac


def network() -> tuple[list[str], list[str]]:
    """Return the host's IP addresses in CIDR form and its MAC addresses."""
    ips: list[str] = []
    macs: list[str] = []
    for addrs in psutil.net_if_addrs().values():
        for addr in addrs:
            if addr.family in (socket.AF_INET, socket.AF_INET6):
                ips.append(_format_ip(addr.address, addr.netmask))
            elif addr.family == psutil.AF_LINK:
                mac = _format_mac(addr.address)
                if mac:
                    macs.append(mac)
    return ips, macs