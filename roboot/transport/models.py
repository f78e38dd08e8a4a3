"""
Transport layer models for HTTP communication.

This module defines the data structures for outgoing requests,
received responses, and transport-level errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class HTTPErrorKind(str, Enum):
    """Categories of transport failure."""
    CONNECTION = "connection"
    TIMEOUT = "timeout"
    CLIENT = "client"
    INTERNAL = "internal"


@dataclass
class HTTPError:
    """A request that did not produce a response."""
    kind: HTTPErrorKind
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.data is not None:
            result["data"] = self.data
        return result

    @classmethod
    def connection_error(cls, message: str, data: Any = None) -> HTTPError:
        return cls(HTTPErrorKind.CONNECTION, message, data)

    @classmethod
    def timeout_error(cls, message: str, data: Any = None) -> HTTPError:
        return cls(HTTPErrorKind.TIMEOUT, message, data)

    @classmethod
    def client_error(cls, message: str, data: Any = None) -> HTTPError:
        return cls(HTTPErrorKind.CLIENT, message, data)

    @classmethod
    def internal_error(cls, message: str, data: Any = None) -> HTTPError:
        return cls(HTTPErrorKind.INTERNAL, message, data)


@dataclass
class HTTPRequest:
    """A fully built request for one test case."""
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)
    json_body: Any = None
    timeout_ms: int = 30000

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict (for reports)."""
        return {
            "method": self.method,
            "url": self.url,
            "headers": dict(self.headers),
            "params": dict(self.params),
            "body": self.json_body,
        }


@dataclass
class HTTPResponse:
    """Represents the result of sending a request."""
    status: int | None = None
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None  # decoded JSON, or the text when the body is not JSON
    text: str = ""
    elapsed_ms: float | None = None
    error: HTTPError | None = None

    @property
    def success(self) -> bool:
        """True when a response was received (whatever its status code)."""
        return self.error is None

    @property
    def ok(self) -> bool:
        return self.success and self.status is not None and 200 <= self.status < 300

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        if self.success:
            return {
                "success": True,
                "status": self.status,
                "elapsed_ms": self.elapsed_ms,
            }
        return {
            "success": False,
            "error": self.error.to_dict() if self.error else None,
        }

    @classmethod
    def from_error(cls, error: HTTPError) -> HTTPResponse:
        """Create a response from a transport-level error."""
        return cls(error=error)
