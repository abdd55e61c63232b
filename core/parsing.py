"""Parsing of repeated ``Name:value`` header and ``name=value`` form arguments."""

from collections.abc import Iterable

from core.exceptions import InputError


def parse_headers(values: Iterable[str]) -> dict[str, str]:
    """Parse ``Name:value`` pairs, splitting at the first colon."""
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.strip().partition(":")
        name = name.strip()
        if not sep or not name:
            raise InputError(f"fail to parse input HTTP header: {raw!r}")
        headers[name] = value.strip()
    return headers


def parse_forms(values: Iterable[str]) -> dict[str, str]:
    """Parse ``name=value`` pairs, keeping the order they were given in."""
    forms: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition("=")
        if not sep:
            raise InputError(f"fail to parse input form: {raw!r}")
        forms[name] = value
    return forms
