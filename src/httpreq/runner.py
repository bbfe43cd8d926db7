"""
Request runner: send one request and render its response.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import httpx

from httpreq.client import HTTPClient
from httpreq.config import Settings
from httpreq.render import RenderResult, ResponseRenderer
from httpreq.request import RequestDescriptor


def run(
    descriptor: RequestDescriptor,
    settings: Settings | None = None,
    renderer: ResponseRenderer | None = None,
    transport: httpx.BaseTransport | None = None,
) -> RenderResult:
    """Perform the exchange described by descriptor and print the result.

    The whole exchange, body included, runs under one deadline. The body
    file, the response stream and the client are released on every path
    out of this function.
    """
    renderer = renderer or ResponseRenderer()

    with descriptor, HTTPClient(settings, transport=transport) as client:
        response = client.send(descriptor)
        try:
            return renderer.render(response, deadline=client.deadline)
        finally:
            response.close()
