"""Send one request and write the response body."""

import logging
import sys
from pathlib import Path
from time import monotonic
from typing import BinaryIO

import httpx

from core.exceptions import OutputFileError, TransportError, TransportTimeoutError
from core.request_types import RequestSpec

logger = logging.getLogger(__name__)


def dump_request(request: httpx.Request) -> str:
    """Render the request as it goes on the wire: request line, headers, body."""
    target = request.url.raw_path.decode("ascii")
    lines = [f"{request.method} {target} HTTP/1.1"]
    lines.extend(_header_lines(request.headers))
    body = request.content.decode("utf-8", errors="replace")
    return "\r\n".join(lines) + "\r\n\r\n" + body


def dump_response(response: httpx.Response, body: bytes) -> str:
    """Render the response: status line, headers, body."""
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
    lines.extend(_header_lines(response.headers))
    return "\r\n".join(lines) + "\r\n\r\n" + body.decode("utf-8", errors="replace")


def send(
    client: httpx.Client, request: httpx.Request, timeout: int = 0
) -> tuple[httpx.Response, bytes]:
    """Perform the blocking round trip and return the response with its whole body.

    The client applies ``timeout`` to each connect, write and read. A positive
    ``timeout`` here is also a deadline for the whole exchange, checked as body
    chunks arrive.
    """
    url = str(request.url)
    deadline = monotonic() + timeout if timeout > 0 else None
    try:
        response = client.send(request, stream=True)
        try:
            chunks = []
            for chunk in response.iter_bytes():
                chunks.append(chunk)
                if deadline is not None and monotonic() > deadline:
                    raise TransportTimeoutError(
                        f"Request to {url} timed out: no complete response within {timeout}s",
                        url=url,
                    )
        finally:
            response.close()
    except httpx.TimeoutException as e:
        raise TransportTimeoutError(f"Request to {url} timed out: {e}", url=url) from e
    except httpx.RequestError as e:
        raise TransportError(f"Request to {url} failed: {e}", url=url) from e
    return response, b"".join(chunks)


def write_output(body: bytes, output: str | None, stdout: BinaryIO | None = None) -> None:
    """Write ``body`` to ``output`` or, without one, to stdout followed by a newline."""
    if output:
        try:
            Path(output).write_bytes(body)
        except OSError as e:
            raise OutputFileError(f"Unable to write, file: {output}, error: {e}", path=output) from e
        return

    stream = stdout or sys.stdout.buffer
    stream.write(body + b"\n")
    stream.flush()


def execute(
    client: httpx.Client,
    request: httpx.Request,
    spec: RequestSpec,
    stdout: BinaryIO | None = None,
) -> httpx.Response:
    """Send ``request`` and write its body; HTTP error statuses are not failures."""
    if spec.verbose > 1:
        logger.info("http request url %s, dump\n%s", spec.url, dump_request(request))

    response, body = send(client, request, spec.timeout)

    if spec.verbose > 1:
        logger.info("http response url %s, dump\n%s", spec.url, dump_response(response, body))
    logger.info("HTTP %d %s from %s", response.status_code, response.reason_phrase, spec.url)

    write_output(body, spec.output, stdout)
    return response


def _header_lines(headers: httpx.Headers) -> list[str]:
    # raw keeps header names as sent
    return [
        f"{name.decode('latin-1')}: {value.decode('utf-8', errors='replace')}"
        for name, value in headers.raw
    ]
