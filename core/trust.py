"""TLS trust configuration: client certificates, root CA pool and verification mode."""

import logging
import re
from datetime import UTC, datetime

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from core.exceptions import CredentialError, KeyPairError, ProxyParseError, RootCAError
from core.request_types import (
    ClientCertificate,
    CredentialSource,
    KeyCertPair,
    NoCredentials,
    ProxyFile,
    TrustConfig,
)

logger = logging.getLogger(__name__)

_PRIVATE_KEY_BLOCK = re.compile(
    rb"-----BEGIN ([A-Z0-9 ]*PRIVATE KEY)-----\r?\n.*?-----END \1-----",
    re.DOTALL,
)


def private_key_block(data: bytes) -> bytes | None:
    """Return the first PEM private key block in ``data``, if any."""
    match = _PRIVATE_KEY_BLOCK.search(data)
    return match.group(0) if match else None


def build_trust_config(
    source: CredentialSource,
    root_ca: str | None = None,
    insecure: bool = False,
) -> TrustConfig:
    """Load and validate credentials into a TrustConfig."""
    certificates: tuple[ClientCertificate, ...] = ()
    if isinstance(source, ProxyFile):
        certificates = (load_proxy(source.path),)
    elif isinstance(source, KeyCertPair):
        certificates = (load_key_pair(source.cert_path, source.key_path),)
    elif not isinstance(source, NoCredentials):
        raise CredentialError(f"Unknown credential source: {source!r}")

    root_count = 0
    if root_ca:
        root_count = load_root_ca(root_ca)

    for cert in certificates:
        if cert.not_valid_after < datetime.now(UTC):
            logger.warning("Client certificate %s expired at %s", cert.subject, cert.not_valid_after)

    if insecure:
        logger.warning("Server certificate verification is disabled")

    return TrustConfig(
        certificates=certificates,
        root_ca=root_ca or None,
        root_ca_count=root_count,
        skip_verify=insecure,
    )


def load_proxy(path: str) -> ClientCertificate:
    """Parse a grid proxy bundle: leaf certificate, private key, then optional chain."""
    data = _read(path, ProxyParseError, "X509 proxy")
    try:
        # the leaf comes first, any further certificates are its chain
        leaf, *chain = x509.load_pem_x509_certificates(data)
    except ValueError as e:
        raise ProxyParseError(f"failed to parse X509 proxy {path}: {e}", path=path) from e

    key_block = private_key_block(data)
    if key_block is None:
        raise ProxyParseError(f"failed to parse X509 proxy {path}: no private key found", path=path)
    try:
        key = serialization.load_pem_private_key(key_block, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ProxyParseError(f"failed to parse X509 proxy {path}: {e}", path=path) from e

    if not _key_matches(leaf, key):
        raise ProxyParseError(
            f"failed to parse X509 proxy {path}: private key does not match certificate",
            path=path,
        )
    logger.debug("Loaded X509 proxy %s with %d chain certificate(s)", path, len(chain))
    return _client_certificate(leaf, path, None)


def load_key_pair(cert_path: str, key_path: str) -> ClientCertificate:
    """Load a PEM certificate and its private key."""
    cert_data = _read(cert_path, KeyPairError, "user X509 certificate")
    key_data = cert_data if key_path == cert_path else _read(key_path, KeyPairError, "user X509 key")

    try:
        cert = x509.load_pem_x509_certificates(cert_data)[0]
    except ValueError as e:
        raise KeyPairError(
            f"failed to parse user X509 certificate {cert_path}: {e}", path=cert_path
        ) from e

    key_block = private_key_block(key_data)
    if key_block is None:
        raise KeyPairError(
            f"failed to parse user X509 key {key_path}: no private key found", path=key_path
        )
    try:
        key = serialization.load_pem_private_key(key_block, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyPairError(f"failed to parse user X509 key {key_path}: {e}", path=key_path) from e

    if not _key_matches(cert, key):
        raise KeyPairError(
            f"failed to parse user X509 certificate: key {key_path} does not match {cert_path}",
            path=cert_path,
        )
    return _client_certificate(cert, cert_path, key_path)


def load_root_ca(path: str) -> int:
    """Validate a PEM CA bundle and return how many certificates it holds."""
    data = _read(path, RootCAError, "root CA")
    try:
        certificates = x509.load_pem_x509_certificates(data)
    except ValueError as e:
        raise RootCAError(f"failed to parse root CA {path}: {e}", path=path) from e
    logger.debug("Loaded %d root CA certificate(s) from %s", len(certificates), path)
    return len(certificates)


def _read(path: str, error: type[CredentialError], what: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise error(f"Unable to read {what} {path}: {e}", path=path) from e


def _key_matches(cert: x509.Certificate, key) -> bool:
    """Compare the certificate's public key with the private key's."""
    spki = serialization.PublicFormat.SubjectPublicKeyInfo
    der = serialization.Encoding.DER
    return cert.public_key().public_bytes(der, spki) == key.public_key().public_bytes(der, spki)


def _client_certificate(
    cert: x509.Certificate, cert_file: str, key_file: str | None
) -> ClientCertificate:
    return ClientCertificate(
        cert_file=cert_file,
        key_file=key_file,
        subject=cert.subject.rfc4514_string(),
        not_valid_after=cert.not_valid_after_utc,
    )
