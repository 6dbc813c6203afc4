"""Exceptions raised while processing a feed."""

from __future__ import annotations


class FeedFilterError(Exception):
    """Base class for failures surfaced to the caller as an error response."""


class NetworkError(FeedFilterError):
    """The feed could not be fetched (timeout, connection or HTTP status)."""


class ParseError(FeedFilterError):
    """The response body is not well-formed feed XML."""


class SerializationError(FeedFilterError):
    """The filtered feed could not be written back to XML."""
