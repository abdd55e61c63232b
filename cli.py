"""CLI entry point for gridcurl."""

import argparse
import logging
import sys

from pydantic import ValidationError

from core.config import load_config
from core.credentials import PosixProxyProbe, resolve_credentials
from core.exceptions import GridCurlError, InputError
from core.parsing import parse_forms, parse_headers
from core.request_builder import build_request
from core.request_types import RequestSpec
from core.trust import build_trust_config
from services.executor import execute
from services.transport import build_client
from ui.log_utils import log_pairs, print_error, setup_logging

logger = logging.getLogger("gridcurl")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; -h is the header flag, so help is --help only."""
    p = argparse.ArgumentParser(
        prog="gridcurl",
        description="Send one HTTP request, optionally with X509 client credentials.",
        add_help=False,
        allow_abbrev=False,
    )
    p.add_argument("--help", action="help", help="Show this help message and exit")
    p.add_argument("-url", "--url", "-u", dest="url", default="", help="input url")
    p.add_argument("-method", "--method", "-m", dest="method", default="GET", help="HTTP method")
    p.add_argument("-data", "--data", "-d", dest="data", default="", help="input data or @data-file")
    p.add_argument(
        "-header", "--header", "-h",
        dest="header",
        action="append",
        default=[],
        help="HTTP header, e.g. Content-Type:application/json (repeatable)",
    )
    p.add_argument(
        "-form", "--form", "-f",
        dest="form",
        action="append",
        default=[],
        help="HTTP form key-value pair, e.g. key=value or file=@path (repeatable)",
    )
    p.add_argument("-key", "--key", "-k", dest="key", default="", help="X509 key file name")
    p.add_argument("-cert", "--cert", "-c", dest="cert", default="", help="X509 cert file name")
    p.add_argument("-rootCA", "--rootCA", dest="root_ca", default="", help="rootCA file name")
    p.add_argument("-out", "--out", "-o", dest="out", default="", help="output file name")
    p.add_argument("-timeout", "--timeout", "-t", dest="timeout", type=int, default=None,
                   help="HTTP timeout in seconds, 0 means none")
    p.add_argument("-verbose", "--verbose", "-v", dest="verbose", type=int, default=None,
                   help="verbosity level")
    p.add_argument("-insecure", "--insecure", dest="insecure", action="store_true",
                   help="skip server certificate verification")
    p.add_argument("-config", "--config", dest="config", default=None, help="config file name")
    return p


def run(args: argparse.Namespace) -> int:
    """Run the request workflow; errors propagate as GridCurlError."""
    config = load_config(args.config)
    verbose = args.verbose if args.verbose is not None else config.defaults.verbose
    timeout = args.timeout if args.timeout is not None else config.defaults.timeout
    setup_logging(verbose)

    if not args.url:
        raise InputError("no input url")

    headers = parse_headers(args.header)
    forms = parse_forms(args.form)
    if verbose > 0:
        log_pairs("HTTP headers", headers)
        log_pairs("HTTP form pairs", forms)

    try:
        spec = RequestSpec(
            url=args.url,
            method=args.method,
            data=args.data,
            headers=headers,
            forms=forms,
            output=args.out or None,
            timeout=timeout,
            verbose=verbose,
        )
    except ValidationError as e:
        raise InputError(f"invalid request options: {e}") from e

    source = resolve_credentials(
        args.key or None,
        args.cert or None,
        probe=PosixProxyProbe(config.tls.default_proxy),
    )
    logger.debug("Credential source: %s", source)
    trust = build_trust_config(
        source,
        root_ca=args.root_ca or config.tls.root_ca,
        insecure=args.insecure or config.tls.insecure,
    )

    request = build_request(spec)
    with build_client(trust, spec.timeout) as client:
        execute(client, request, spec)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except GridCurlError as e:
        print_error(str(e))
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
