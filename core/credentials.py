"""Client credential resolution from arguments, environment and the proxy file convention."""

import os
from collections.abc import Mapping

from core.protocols import DefaultProxyProbe
from core.request_types import CredentialSource, KeyCertPair, NoCredentials, ProxyFile

PROXY_ENV = "X509_USER_PROXY"
KEY_ENV = "X509_USER_KEY"
CERT_ENV = "X509_USER_CERT"
DEFAULT_PROXY_TEMPLATE = "/tmp/x509up_u{uid}"


class PosixProxyProbe:
    """Look for the grid proxy file that voms-proxy-init writes for the current user."""

    def __init__(self, template: str = DEFAULT_PROXY_TEMPLATE):
        self.template = template

    def default_proxy(self) -> str | None:
        """Return the per-user proxy path if it exists on disk."""
        getuid = getattr(os, "getuid", None)
        if getuid is None:
            # No numeric uid on this platform, so no convention either
            return None
        path = self.template.format(uid=getuid())
        if os.path.exists(path):
            return path
        return None


def resolve_credentials(
    key: str | None = None,
    cert: str | None = None,
    environ: Mapping[str, str] | None = None,
    probe: DefaultProxyProbe | None = None,
) -> CredentialSource:
    """Pick the client credential source for this invocation.

    Each slot takes its highest-priority non-empty value:

    - proxy: $X509_USER_PROXY, then the probe's default proxy file
    - key: explicit ``key``, then $X509_USER_KEY
    - cert: explicit ``cert``, then $X509_USER_CERT

    A proxy wins over a key/cert pair. Without a proxy or a key there are
    no credentials at all.
    """
    env = os.environ if environ is None else environ
    probe = probe or PosixProxyProbe()

    proxy = env.get(PROXY_ENV) or probe.default_proxy()
    user_key = key or env.get(KEY_ENV)
    user_cert = cert or env.get(CERT_ENV)

    if not proxy and not user_key:
        return NoCredentials()
    if proxy:
        return ProxyFile(proxy)
    # A single PEM holding both key and certificate is common
    return KeyCertPair(key_path=user_key, cert_path=user_cert or user_key)
