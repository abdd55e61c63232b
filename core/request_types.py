"""Shared request data types."""

import ssl
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.exceptions import CredentialError, RootCAError

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")
BODYLESS_METHODS = ("GET", "DELETE")


class RequestSpec(BaseModel):
    """Everything needed to build and send one request."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1)
    method: str = "GET"
    data: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    forms: dict[str, str] = Field(default_factory=dict)
    output: str | None = None
    timeout: int = Field(default=0, ge=0)
    verbose: int = Field(default=0, ge=0)

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.strip().upper()


@dataclass(frozen=True)
class NoCredentials:
    """No client certificate is presented."""


@dataclass(frozen=True)
class ProxyFile:
    """Grid proxy bundle holding certificate, key and optional chain."""

    path: str


@dataclass(frozen=True)
class KeyCertPair:
    """Separate PEM key and certificate files."""

    key_path: str
    cert_path: str


CredentialSource = NoCredentials | ProxyFile | KeyCertPair


@dataclass(frozen=True)
class ClientCertificate:
    """Validated client identity ready to be loaded into an SSL context."""

    cert_file: str
    key_file: str | None
    subject: str
    not_valid_after: datetime


@dataclass(frozen=True)
class TrustConfig:
    """TLS settings for the outgoing connection."""

    certificates: tuple[ClientCertificate, ...] = ()
    root_ca: str | None = None
    root_ca_count: int = 0
    skip_verify: bool = False

    @property
    def is_default(self) -> bool:
        """True when the transport needs no TLS customization."""
        return not self.certificates and self.root_ca is None and not self.skip_verify

    def ssl_context(self) -> ssl.SSLContext:
        """Build the SSL context for httpx from this configuration."""
        try:
            ctx = ssl.create_default_context(cafile=self.root_ca)
        except (OSError, ssl.SSLError) as e:
            raise RootCAError(f"Unable to load root CA {self.root_ca}: {e}", path=self.root_ca) from e
        for cert in self.certificates:
            try:
                ctx.load_cert_chain(cert.cert_file, cert.key_file)
            except (OSError, ssl.SSLError) as e:
                raise CredentialError(
                    f"Unable to load client certificate {cert.cert_file}: {e}",
                    path=cert.cert_file,
                ) from e
        if self.skip_verify:
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
        return ctx
