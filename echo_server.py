"""Echo server for trying gridcurl against a local endpoint."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from ui.log_utils import setup_logging

logger = logging.getLogger(__name__)

ECHO_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]
DEFAULT_PORT = 9999


def describe_request(method: str, path: str, headers: dict[str, str], body: bytes) -> str:
    """One-line summary of an incoming request."""
    header_str = ", ".join(f"{k}: {v}" for k, v in headers.items())
    return f"{method} method, path {path}, headers {{{header_str}}}, body {len(body)} bytes"


def create_app() -> FastAPI:
    """Create the echo application."""
    app = FastAPI(title="gridcurl echo server", version="0.1.0")

    @app.api_route("/{path:path}", methods=ECHO_METHODS)
    async def echo(request: Request, path: str) -> PlainTextResponse:
        body = await request.body()
        data = describe_request(request.method, f"/{path}", dict(request.headers), body)
        logger.info(data)
        return PlainTextResponse(data)

    return app


def main(port: int = DEFAULT_PORT) -> None:
    """Run the echo server on localhost."""
    import uvicorn

    setup_logging(1)
    uvicorn.run(create_app(), host="127.0.0.1", port=port, log_level="warning")


if __name__ == "__main__":
    main()
