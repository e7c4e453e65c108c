"""Process-wide registry of the host and process providers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HostProvider(Protocol):
    """Something that can describe the host it runs on."""

    def host(self) -> Any: ...


@runtime_checkable
class ProcessProvider(Protocol):
    """Something that can enumerate and describe processes."""

    def processes(self) -> list[Any]: ...

    def process(self, pid: int) -> Any: ...

    def current(self) -> Any: ...


class ProviderAlreadyRegisteredError(RuntimeError):
    """Raised when a second provider of the same kind is registered."""


@dataclass
class _Registry:
    host: HostProvider | None = None
    process: ProcessProvider | None = None


_registry = _Registry()


def register(provider: object) -> None:
    """Register ``provider`` as host and/or process provider, by the methods it has."""
    if isinstance(provider, HostProvider):
        if _registry.host is not None:
            raise ProviderAlreadyRegisteredError(
                f"HostProvider already registered: {_registry.host!r}"
            )
        _registry.host = provider

    if isinstance(provider, ProcessProvider):
        if _registry.process is not None:
            raise ProviderAlreadyRegisteredError(
                f"ProcessProvider already registered: {_registry.process!r}"
            )
        _registry.process = provider


def get_host_provider() -> HostProvider | None:
    """Return the registered host provider, if any."""
    return _registry.host


def get_process_provider() -> ProcessProvider | None:
    """Return the registered process provider, if any."""
    return _registry.process


def reset() -> None:
    """Forget every registered provider."""
    _registry.host = None
    _registry.process = None