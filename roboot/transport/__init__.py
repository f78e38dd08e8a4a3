"""
HTTP Transport Layer

This package sends the request for each test case and returns the
decoded response. Transport failures are reported as values, not raised.

Usage:
    from roboot.transport import HTTPTransport, HTTPRequest

    async with HTTPTransport() as transport:
        response = await transport.send(HTTPRequest("GET", "https://api.example.com/posts"))
        if response.success:
            print(response.status, response.body)
        else:
            print(response.error.message)
"""

# Base class
from .base import BaseTransport

# Implementations
from .http import HTTPTransport

# Models
from .models import HTTPError, HTTPErrorKind, HTTPRequest, HTTPResponse

__all__ = [
    # Base
    "BaseTransport",
    # Implementations
    "HTTPTransport",
    # Models
    "HTTPError",
    "HTTPErrorKind",
    "HTTPRequest",
    "HTTPResponse",
]
