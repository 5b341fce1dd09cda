"""Adapter-specific exceptions."""

from __future__ import annotations


class AdapterError(Exception):
    """Base exception for adapter errors."""


class ConfigurationError(AdapterError):
    """Raised when adapter configuration is invalid."""


class SourceError(AdapterError):
    """Raised when a query against a search service fails."""


class TransportError(SourceError):
    """Raised on connection failure, timeout, or an I/O failure while reading the body."""


class ProtocolError(SourceError):
    """Raised when the service answers with an HTTP status outside the accepted set."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Service returned HTTP error: {status_code}, HTTP payload: {body}")
        self.status_code = status_code
        self.body = body


class ParseError(SourceError):
    """Raised when the response body is not well-formed XML or no XML parser is available."""

    MALFORMED = "malformed"
    PARSER_UNAVAILABLE = "parser unavailable"

    def __init__(self, message: str, kind: str = MALFORMED) -> None:
        super().__init__(message)
        self.kind = kind
