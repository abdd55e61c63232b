"""Shared protocol definitions."""

from typing import Protocol


class DefaultProxyProbe(Protocol):
    """Protocol for locating the per-user default proxy file."""

    def default_proxy(self) -> str | None: ...
