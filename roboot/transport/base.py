"""
Base transport interface for sending test case requests.

This module defines the abstract base class that all transport
implementations must follow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import HTTPRequest, HTTPResponse


class BaseTransport(ABC):
    """
    Abstract base class for transports.

    A transport turns an HTTPRequest into an HTTPResponse. Failures to
    get a response are reported in ``HTTPResponse.error``, never raised.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Acquire whatever the transport needs (e.g. a client session)."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the resources acquired by connect()."""
        pass

    @abstractmethod
    async def send(self, request: HTTPRequest) -> HTTPResponse:
        """
        Send a request and return the response.

        Args:
            request: The request to send

        Returns:
            HTTPResponse with either a body or an error
        """
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Return True if the transport is currently connected."""
        pass

    async def __aenter__(self) -> BaseTransport:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.disconnect()
