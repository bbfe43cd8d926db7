"""
Error taxonomy for httpreq.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a failure in the request pipeline."""
    USAGE = "usage"                      # Missing required flag
    INPUT = "input"                      # Bad URL, auth, header or body file
    TRANSPORT = "transport"              # Connect, TLS, timeout, request build
    BODY_READ = "body_read"              # Stream error while draining the body
    RESPONSE_FORMAT = "response_format"  # Body is not JSON (reported, not raised)


class HttpReqError(Exception):
    """Base error for everything that aborts a request run."""

    kind: ErrorKind = ErrorKind.INPUT

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InputError(HttpReqError):
    """Raised when CLI input cannot be turned into a request."""
    kind = ErrorKind.INPUT


class TransportError(HttpReqError):
    """Raised when the HTTP exchange itself fails."""
    kind = ErrorKind.TRANSPORT


class BodyReadError(HttpReqError):
    """Raised when the response body cannot be read to completion."""
    kind = ErrorKind.BODY_READ
