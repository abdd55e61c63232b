"""Shared fixtures: throw-away certificates, keys and proxy bundles."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID


def new_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


def make_certificate(
    common_name: str,
    key: ec.EllipticCurvePrivateKey,
    issuer: x509.Certificate | None = None,
    issuer_key: ec.EllipticCurvePrivateKey | None = None,
    not_after: datetime | None = None,
    ca: bool = False,
) -> x509.Certificate:
    now = datetime.now(UTC)
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    return (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer.subject if issuer else subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=2))
        .not_valid_after(not_after or now + timedelta(days=1))
        .add_extension(x509.BasicConstraints(ca=ca, path_length=None), critical=True)
        .sign(issuer_key or key, hashes.SHA256())
    )


def cert_pem(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.PEM)


def key_pem(key: ec.EllipticCurvePrivateKey) -> bytes:
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


@dataclass
class KeyPairFiles:
    key: Path
    cert: Path


class StaticProbe:
    """Default-proxy probe with a fixed answer."""

    def __init__(self, path: str | None = None):
        self.path = path

    def default_proxy(self) -> str | None:
        return self.path


@pytest.fixture
def key_pair(tmp_path: Path) -> KeyPairFiles:
    key = new_key()
    cert = make_certificate("alice", key)
    files = KeyPairFiles(key=tmp_path / "userkey.pem", cert=tmp_path / "usercert.pem")
    files.key.write_bytes(key_pem(key))
    files.cert.write_bytes(cert_pem(cert))
    return files


@pytest.fixture
def proxy_file(tmp_path: Path) -> Path:
    """Proxy bundle in grid order: proxy cert, proxy key, issuing user cert."""
    user_key = new_key()
    user_cert = make_certificate("alice", user_key, ca=True)
    proxy_key = new_key()
    proxy_cert = make_certificate("alice proxy", proxy_key, issuer=user_cert, issuer_key=user_key)
    path = tmp_path / "x509up_u1000"
    path.write_bytes(cert_pem(proxy_cert) + key_pem(proxy_key) + cert_pem(user_cert))
    return path


@pytest.fixture
def ca_bundle(tmp_path: Path) -> Path:
    path = tmp_path / "ca.pem"
    first = make_certificate("Test Root CA 1", new_key(), ca=True)
    second = make_certificate("Test Root CA 2", new_key(), ca=True)
    path.write_bytes(cert_pem(first) + cert_pem(second))
    return path


@pytest.fixture
def no_probe() -> StaticProbe:
    return StaticProbe(None)
