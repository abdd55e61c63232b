"""HTTP client construction from trust settings and timeout."""

from typing import Any

import httpx

from core.request_types import TrustConfig


def client_options(trust: TrustConfig, timeout: int) -> dict[str, Any]:
    """Build kwargs for httpx.Client.

    A timeout of 0 means no timeout. Default trust leaves ``verify``
    untouched so the stock trust store and environment proxies apply.
    """
    options: dict[str, Any] = {
        "timeout": float(timeout) if timeout > 0 else None,
        "follow_redirects": True,
    }
    if not trust.is_default:
        options["verify"] = trust.ssl_context()
    return options


def build_client(trust: TrustConfig, timeout: int) -> httpx.Client:
    """Create the client for a single round trip."""
    return httpx.Client(**client_options(trust, timeout))
