"""
httpreq - a minimal command-line HTTP client.

Builds one HTTP request from flags, sends it, and prints the status line,
response headers and a pretty-printed JSON body.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "0.1.0"
__author__ = "DNS Science.io"
__copyright__ = "Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company"
