"""Custom exception hierarchy for gridcurl."""


class GridCurlError(Exception):
    """Base exception for all gridcurl errors.

    Attributes:
        exit_code: Process exit status reported by the CLI
    """

    exit_code = 1


class InputError(GridCurlError):
    """Raised when a command-line argument is malformed."""

    exit_code = 2


class ConfigurationError(InputError):
    """Raised when the configuration file is missing or invalid."""


class CredentialError(GridCurlError):
    """Raised when TLS credentials cannot be read or parsed.

    Attributes:
        message: Error message
        path: File the credential was loaded from (optional)
    """

    exit_code = 3

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ProxyParseError(CredentialError):
    """Raised when an X509 proxy bundle cannot be parsed."""


class KeyPairError(CredentialError):
    """Raised when a PEM certificate/key pair cannot be loaded."""


class RootCAError(CredentialError):
    """Raised when the root CA bundle is unreadable or empty."""


class BuildError(GridCurlError):
    """Raised when a request cannot be constructed."""

    exit_code = 4


class TransportError(GridCurlError):
    """Raised when the HTTP round trip fails.

    Attributes:
        message: Error message
        url: Target URL (optional)
    """

    exit_code = 5

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class TransportTimeoutError(TransportError):
    """Raised when the request exceeds the configured timeout."""


class FileIOError(GridCurlError):
    """Raised when an input or output file cannot be accessed.

    Attributes:
        message: Error message
        path: File that failed
    """

    exit_code = 6

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class InputFileError(FileIOError):
    """Raised when a data or form file cannot be read."""


class OutputFileError(FileIOError):
    """Raised when the response body cannot be written."""
