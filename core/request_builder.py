"""Outgoing request construction: raw bodies, multipart forms and headers."""

import logging
import os
from contextlib import ExitStack
from typing import BinaryIO

import httpx

from core.exceptions import BuildError, InputError, InputFileError
from core.request_types import BODYLESS_METHODS, SUPPORTED_METHODS, RequestSpec

logger = logging.getLogger(__name__)

FILE_MARKER = "@"
FILE_FIELD = "file"
USER_AGENT = "gridcurl/0.1.0"

FormPart = tuple[str, tuple[str | None, str | BinaryIO]]


def read_data(value: str) -> bytes:
    """Return the body for ``value``: file contents for an existing ``@path``, else the literal."""
    if value.startswith(FILE_MARKER):
        path = value[len(FILE_MARKER):]
        if os.path.exists(path):
            try:
                with open(path, "rb") as f:
                    return f.read()
            except OSError as e:
                raise InputFileError(
                    f"Unable to read data from file: {value}, error: {e}", path=path
                ) from e
    return value.encode("utf-8")


def order_form_fields(forms: dict[str, str]) -> list[tuple[str, str]]:
    """Keep the given order except that a field named ``file`` goes last."""
    fields = [(name, value) for name, value in forms.items() if name != FILE_FIELD]
    if FILE_FIELD in forms:
        fields.append((FILE_FIELD, forms[FILE_FIELD]))
    return fields


def form_parts(
    fields: list[tuple[str, str]], stack: ExitStack, verbose: int = 0
) -> list[FormPart]:
    """Turn fields into httpx ``files`` entries; ``@path`` values are opened on ``stack``."""
    parts: list[FormPart] = []
    for name, value in fields:
        if not value.startswith(FILE_MARKER):
            if verbose > 2:
                logger.info("read %d bytes from %s=%s", len(value.encode("utf-8")), name, value)
            parts.append((name, (None, value)))
            continue

        path = value[len(FILE_MARKER):]
        try:
            f = stack.enter_context(open(path, "rb"))
            size = os.fstat(f.fileno()).st_size
        except OSError as e:
            raise InputFileError(f"Unable to read form file {path}: {e}", path=path) from e
        if verbose > 2:
            logger.info("read %d bytes from %s", size, path)
        parts.append((name, (path.rsplit("/", 1)[-1], f)))
    return parts


def encode_headers(headers: dict[str, str]) -> list[tuple[bytes, bytes]]:
    """Encode caller headers: names must be ASCII, values are sent as UTF-8."""
    encoded = []
    for name, value in headers.items():
        try:
            raw_name = name.encode("ascii")
        except UnicodeEncodeError as e:
            raise InputError(f"HTTP header name must be ASCII: {name!r}") from e
        encoded.append((raw_name, value.encode("utf-8")))
    return encoded


class RequestBuilder:
    """Build an httpx.Request from a RequestSpec."""

    def __init__(self, boundary: str | None = None):
        self.boundary = boundary

    def build(self, spec: RequestSpec) -> httpx.Request:
        """Return the fully formed request for ``spec``."""
        if spec.method not in SUPPORTED_METHODS:
            raise BuildError(f"HTTP method {spec.method} is not implemented")

        headers: list[tuple[bytes, bytes]] = []
        if not any(name.lower() == "user-agent" for name in spec.headers):
            headers.append((b"User-Agent", USER_AGENT.encode("ascii")))
        headers.extend(encode_headers(spec.headers))

        if spec.method in BODYLESS_METHODS:
            if spec.data or spec.forms:
                logger.debug("%s request sends no body, ignoring data and forms", spec.method)
            return self._request(spec, headers)

        if spec.data:
            return self._request(spec, headers, content=read_data(spec.data))

        if spec.forms:
            if spec.method == "POST":
                return self._multipart_request(spec, headers)
            logger.warning("Form fields are only sent with POST, %s sends an empty body", spec.method)

        return self._request(spec, headers, content=b"")

    def _multipart_request(
        self, spec: RequestSpec, headers: list[tuple[bytes, bytes]]
    ) -> httpx.Request:
        # Caller content types go after the multipart one, never replacing it
        caller_types = [(k, v) for k, v in headers if k.lower() == b"content-type"]
        headers = [(k, v) for k, v in headers if k.lower() != b"content-type"]
        if self.boundary:
            content_type = f"multipart/form-data; boundary={self.boundary}"
            headers.insert(0, (b"Content-Type", content_type.encode("ascii")))

        with ExitStack() as stack:
            files = form_parts(order_form_fields(spec.forms), stack, spec.verbose)
            request = self._request(spec, headers, files=files)
            try:
                request.read()
            except OSError as e:
                raise InputFileError(f"Unable to read form files: {e}") from e

        if caller_types:
            request.headers = httpx.Headers(list(request.headers.raw) + caller_types)
        return request

    def _request(
        self, spec: RequestSpec, headers: list[tuple[bytes, bytes]], **body
    ) -> httpx.Request:
        try:
            return httpx.Request(spec.method, spec.url, headers=headers, **body)
        except httpx.InvalidURL as e:
            raise BuildError(f"Invalid URL {spec.url!r}: {e}") from e


def build_request(spec: RequestSpec) -> httpx.Request:
    """Build the request for ``spec`` with a random multipart boundary."""
    return RequestBuilder().build(spec)
