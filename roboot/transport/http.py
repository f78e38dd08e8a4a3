"""
HTTP transport for test case requests.

This module sends one request per test case with aiohttp and decodes the
response body as JSON when possible, falling back to the raw text.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any

import aiohttp

from .base import BaseTransport
from .models import HTTPError, HTTPRequest, HTTPResponse

logger = logging.getLogger(__name__)

CONTENT_TYPE = "Content-Type"
JSON_CONTENT_TYPE = "application/json"

# Methods sent without a request body
BODYLESS_METHODS = {"GET", "HEAD", "OPTIONS"}


class HTTPTransport(BaseTransport):
    """
    aiohttp-backed transport.

    Example:
        async with HTTPTransport() as transport:
            response = await transport.send(HTTPRequest("GET", "https://api.example.com/posts/1"))
            if response.success:
                print(response.status, response.body)
    """

    def __init__(self, session: aiohttp.ClientSession | None = None):
        """
        Args:
            session: Optional externally managed session (not closed on disconnect)
        """
        self._session = session
        self._owns_session = session is None
        self._connected = session is not None

    @property
    def is_connected(self) -> bool:
        return self._connected and self._session is not None

    async def connect(self) -> None:
        """Create the HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        self._connected = True

    async def disconnect(self) -> None:
        """Close the HTTP session if this transport created it."""
        if self._session and self._owns_session:
            await self._session.close()
            self._session = None
        self._connected = False

    async def send(self, request: HTTPRequest) -> HTTPResponse:
        """
        Send a request.

        Args:
            request: The request to send

        Returns:
            HTTPResponse with decoded body, or with error set
        """
        if not self.is_connected:
            return HTTPResponse.from_error(
                HTTPError.connection_error("Transport not connected. Call connect() first.")
            )

        method = request.method.upper()
        timeout = aiohttp.ClientTimeout(total=request.timeout_ms / 1000)
        body = request.json_body if method not in BODYLESS_METHODS else None
        started = time.perf_counter()

        logger.debug("%s %s params=%s", method, request.url, request.params)

        try:
            async with self._session.request(
                method,
                request.url,
                headers=request.headers,
                params=request.params or None,
                json=body,
                timeout=timeout,
            ) as resp:
                text = await resp.text()
                elapsed_ms = (time.perf_counter() - started) * 1000
                logger.debug("HTTP %s from %s in %.0fms", resp.status, request.url, elapsed_ms)
                return HTTPResponse(
                    status=resp.status,
                    headers=dict(resp.headers),
                    body=_decode_body(text, resp.headers.get(CONTENT_TYPE, "")),
                    text=text,
                    elapsed_ms=elapsed_ms,
                )

        except asyncio.TimeoutError:
            return HTTPResponse.from_error(
                HTTPError.timeout_error(
                    f"Request timed out after {request.timeout_ms}ms",
                    data={"url": request.url, "method": method},
                )
            )
        except aiohttp.ClientConnectorError as e:
            return HTTPResponse.from_error(
                HTTPError.connection_error(
                    f"Connection failed: {e}",
                    data={"url": request.url},
                )
            )
        except aiohttp.ClientError as e:
            return HTTPResponse.from_error(
                HTTPError.client_error(
                    f"HTTP error: {e}",
                    data={"url": request.url},
                )
            )
        except Exception as e:
            return HTTPResponse.from_error(
                HTTPError.internal_error(
                    f"Unexpected error: {type(e).__name__}: {e}",
                )
            )

    def __repr__(self) -> str:
        status = "connected" if self.is_connected else "disconnected"
        return f"HTTPTransport(status={status})"


def _decode_body(text: str, content_type: str) -> Any:
    """Decode JSON bodies; anything else is returned as text."""
    if not text:
        return None
    looks_json = JSON_CONTENT_TYPE in content_type.lower() or text.lstrip()[:1] in ("{", "[")
    if not looks_json:
        return text
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Response declared JSON but could not be decoded: %s", e)
        return text
