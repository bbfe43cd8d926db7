"""
Request descriptor and input validation.

Turns raw command-line strings into an immutable RequestDescriptor.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import base64
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

import httpx

from httpreq.errors import InputError


logger = logging.getLogger(__name__)

DEFAULT_METHOD = "GET"


@dataclass(frozen=True)
class AuthCredentials:
    """Basic authentication credentials."""
    username: str
    password: str

    @classmethod
    def parse(cls, value: str) -> "AuthCredentials":
        """Build credentials from a 'username:password' string."""
        parts = value.split(":", 1)
        if len(parts) != 2:
            raise InputError(f"Invalid auth credentials '{value}'")
        return cls(username=parts[0], password=parts[1])

    @property
    def header_value(self) -> str:
        """Value for the Authorization header."""
        token = base64.b64encode(f"{self.username}:{self.password}".encode("utf-8"))
        return f"Basic {token.decode('ascii')}"

    def __repr__(self) -> str:
        return f"AuthCredentials(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class HeaderEntry:
    """A single request header from the command line."""
    name: str
    value: str

    @classmethod
    def parse(cls, value: str) -> "HeaderEntry":
        """Parse a 'Name: Value' argument, trimming both sides."""
        parts = value.split(":", 1)
        if len(parts) != 2 or not parts[0].strip():
            raise InputError(f"Invalid header '{value}'")
        return cls(name=parts[0].strip(), value=parts[1].strip())


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to perform one HTTP exchange.

    ``headers`` maps each name to a single value. Names are compared
    case-insensitively and the last occurrence wins. The descriptor owns
    ``body`` and closes it in ``close()``.
    """
    url: str
    method: str = DEFAULT_METHOD
    headers: dict[str, str] = field(default_factory=dict)
    body: BinaryIO | None = None
    body_path: Path | None = None
    follow_redirects: bool = False
    auth: AuthCredentials | None = None

    def close(self) -> None:
        """Release the request body stream."""
        if self.body is not None and not self.body.closed:
            self.body.close()

    def __enter__(self) -> "RequestDescriptor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def validate_url(url: str) -> str:
    """Check that the URL is non-empty and parses as a URI reference."""
    if not url:
        raise InputError("URL must not be empty")
    try:
        httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise InputError(f"Invalid URL '{url}': {e}") from e
    return url


def open_body(path: str) -> BinaryIO:
    """Open a file to be streamed as the request body."""
    try:
        return open(path, "rb")
    except OSError as e:
        raise InputError(f"Could not read file '{path}': {e.strerror or e}") from e


def parse_auth(value: str) -> AuthCredentials:
    """Parse 'username:password' into credentials."""
    return AuthCredentials.parse(value)


def parse_header(value: str) -> HeaderEntry:
    """Parse a single 'Name: Value' header argument."""
    return HeaderEntry.parse(value)


def parse_headers(header_strings: list[str]) -> dict[str, str]:
    """Parse header arguments into a name -> value mapping.

    Later entries replace earlier ones with the same name, regardless of
    case. The surviving entry keeps the spelling of its last occurrence.
    """
    headers: dict[str, str] = {}
    for h in header_strings:
        entry = parse_header(h)
        lookup = entry.name.lower()
        for existing in [name for name in headers if name.lower() == lookup]:
            del headers[existing]
        headers[entry.name] = entry.value
    return headers


def build_descriptor(
    url: str,
    method: str = DEFAULT_METHOD,
    body_file: str | None = None,
    follow_redirects: bool = False,
    auth: str | None = None,
    headers: list[str] | tuple[str, ...] = (),
) -> RequestDescriptor:
    """Validate raw CLI input and build a RequestDescriptor.

    Checks run in order: URL, body file, auth, headers. The body file is
    closed again if a later check fails.
    """
    validate_url(url)

    body = open_body(body_file) if body_file else None
    try:
        credentials = parse_auth(auth) if auth else None
        parsed_headers = parse_headers(list(headers))
    except InputError:
        if body is not None:
            body.close()
        raise

    descriptor = RequestDescriptor(
        url=url,
        method=method or DEFAULT_METHOD,
        headers=parsed_headers,
        body=body,
        body_path=Path(body_file) if body_file else None,
        follow_redirects=follow_redirects,
        auth=credentials,
    )
    logger.debug(
        "Built request %s %s (headers=%s, body=%s, follow=%s, auth=%s)",
        descriptor.method, descriptor.url, list(parsed_headers),
        descriptor.body_path, follow_redirects, credentials is not None,
    )
    return descriptor
