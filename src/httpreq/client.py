"""
HTTP client that performs the single request/response exchange.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging
import time

import httpx

from httpreq.config import Settings
from httpreq.errors import TransportError
from httpreq.request import RequestDescriptor


logger = logging.getLogger(__name__)


class Deadline:
    """Monotonic deadline covering a whole exchange, body included."""

    def __init__(self, seconds: float):
        self.seconds = seconds
        self.expires_at = time.monotonic() + seconds

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(self.expires_at - time.monotonic(), 0.0)

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at


class HTTPClient:
    """Thin wrapper around httpx.Client configured from Settings."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.settings = settings or Settings()
        self._transport = transport
        self._client: httpx.Client | None = None
        self.deadline: Deadline | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.settings.timeout),
                verify=self.settings.verify_ssl,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            self._client.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def build_request(
        self,
        descriptor: RequestDescriptor,
        timeout: float | None = None,
    ) -> httpx.Request:
        """Build the outgoing request.

        Explicit headers are applied first, then Authorization is set from
        the credentials so it replaces any user-supplied value.
        """
        client = self._get_client()
        try:
            request = client.build_request(
                method=descriptor.method,
                url=descriptor.url,
                headers=descriptor.headers,
                content=descriptor.body,
                timeout=httpx.Timeout(timeout) if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except (httpx.HTTPError, httpx.InvalidURL, TypeError, ValueError) as e:
            raise TransportError(f"Error creating request object: {e}") from e

        if descriptor.auth is not None:
            request.headers["Authorization"] = descriptor.auth.header_value

        return request

    def _timed_out(self) -> TransportError:
        return TransportError(f"Request timed out after {self.settings.timeout:g}s")

    def _send_once(self, request: httpx.Request, url: str) -> httpx.Response:
        """Send a single hop without following redirects."""
        client = self._get_client()
        try:
            return client.send(request, stream=True, follow_redirects=False)
        except httpx.TimeoutException as e:
            raise self._timed_out() from e
        except httpx.ConnectError as e:
            raise TransportError(f"Connection failed: {e}") from e
        except httpx.UnsupportedProtocol as e:
            raise TransportError(f"Unsupported URL '{url}': {e}") from e
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise TransportError(f"Error making request: {e}") from e

    def send(self, descriptor: RequestDescriptor) -> httpx.Response:
        """Send the request and return the response with its body unread.

        Redirects are followed here, hop by hop, when the descriptor asks
        for it. A redirect that would have to send the file body again is
        returned as-is since the body stream cannot be replayed.

        The caller owns the returned response and must close it. The
        exchange deadline stays available on ``self.deadline`` so the body
        can be drained under the same limit.
        """
        self.deadline = Deadline(self.settings.timeout)
        request = self.build_request(descriptor, timeout=self.deadline.remaining())
        logger.debug(
            "Sending %s %s (headers: %s)",
            request.method, request.url,
            ", ".join(name for name in request.headers.keys() if name != "authorization"),
        )

        response = self._send_once(request, descriptor.url)
        history: list[httpx.Response] = []

        while descriptor.follow_redirects and response.next_request is not None:
            next_request = response.next_request
            if descriptor.body is not None and next_request.method == request.method:
                logger.debug(
                    "Not following %s to %s: request body cannot be resent",
                    response.status_code, next_request.url,
                )
                break
            if len(history) >= self.settings.max_redirects:
                response.close()
                raise TransportError(
                    f"Too many redirects: stopped after {self.settings.max_redirects} redirects"
                )

            response.close()
            if self.deadline.expired:
                raise self._timed_out()
            logger.debug("Redirected: %s %s", response.status_code, next_request.url)

            history.append(response)
            next_request.extensions["timeout"] = httpx.Timeout(self.deadline.remaining()).as_dict()
            request = next_request
            response = self._send_once(request, str(request.url))

        response.history = history
        if self.deadline.expired:
            response.close()
            raise self._timed_out()

        logger.debug("Received %s %s", response.status_code, response.reason_phrase)
        return response
