"""
Response rendering: status line, headers and pretty-printed JSON body.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable

import click
import httpx
from rich.console import Console
from rich.syntax import Syntax

from httpreq.client import Deadline
from httpreq.errors import BodyReadError


logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Outcome of rendering one response."""
    status_code: int
    body_size: int = 0
    body_printed: bool = False
    json_error: str | None = None


def format_protocol(http_version: str) -> str:
    """Normalize an HTTP version to HTTP/<major>.<minor>."""
    prefix, _, version = http_version.partition("/")
    if prefix.upper() != "HTTP" or not version:
        return http_version
    major, _, minor = version.partition(".")
    return f"HTTP/{major}.{minor or '0'}"


def format_status_line(response: httpx.Response) -> str:
    """Format e.g. 'HTTP/1.1 200 OK'."""
    reason = response.reason_phrase or httpx.codes.get_reason_phrase(response.status_code)
    line = f"{format_protocol(response.http_version)} {response.status_code} {reason}"
    return line.rstrip()


def format_header_lines(response: httpx.Response) -> list[str]:
    """Format headers as 'Name: value', keeping only the first value per name."""
    encoding = response.headers.encoding
    seen: set[str] = set()
    lines = []
    for raw_name, raw_value in response.headers.raw:
        name = raw_name.decode(encoding)
        if name.lower() in seen:
            continue
        seen.add(name.lower())
        lines.append(f"{name}: {raw_value.decode(encoding)}")
    return lines


def reject_constant(name: str) -> Any:
    """Refuse NaN and Infinity, which are not part of JSON."""
    raise ValueError(f"invalid JSON value '{name}'")


def format_json(data: Any, indent: int = 2) -> str:
    """Format JSON data for display."""
    return json.dumps(data, indent=indent, ensure_ascii=False)


class ResponseRenderer:
    """Writes a response to standard output."""

    def __init__(
        self,
        echo: Callable[[str], None] = click.echo,
        console: Console | None = None,
        raw_on_error: bool = False,
        highlight: bool | None = None,
    ):
        self.echo = echo
        self.console = console or Console(soft_wrap=True)
        self.raw_on_error = raw_on_error
        self.highlight = self.console.is_terminal if highlight is None else highlight

    def read_body(self, response: httpx.Response, deadline: Deadline | None = None) -> bytes:
        """Drain the response stream, chunk by chunk, within the deadline."""
        chunks = []
        try:
            for chunk in response.iter_bytes():
                chunks.append(chunk)
                if deadline is not None and deadline.expired:
                    raise BodyReadError(
                        f"Request timed out after {deadline.seconds:g}s while reading response body"
                    )
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise BodyReadError(f"Error reading response body: {e}") from e
        return b"".join(chunks)

    def render(self, response: httpx.Response, deadline: Deadline | None = None) -> RenderResult:
        """Print status line, headers, a blank line and the JSON body.

        A body that is not JSON is reported and not printed, unless
        raw_on_error is set.
        """
        self.echo(format_status_line(response))
        for line in format_header_lines(response):
            self.echo(line)
        self.echo("")

        body = self.read_body(response, deadline)
        result = RenderResult(status_code=response.status_code, body_size=len(body))
        logger.debug("Read %d byte response body", len(body))

        try:
            data = json.loads(body, parse_constant=reject_constant)
        except ValueError as e:
            result.json_error = str(e)
            self.echo(f"Error decoding JSON: {e}")
            if self.raw_on_error:
                self.echo(body.decode(response.encoding or "utf-8", errors="replace"))
                result.body_printed = True
            return result

        formatted = format_json(data)
        if self.highlight:
            self.console.print(Syntax(formatted, "json", theme="monokai", line_numbers=False))
        else:
            self.echo(formatted)
        result.body_printed = True
        return result
