"""Error taxonomy shared by the catalog services."""
from __future__ import annotations


class StreamviewError(Exception):
    """Base class for all catalog-layer errors."""


class NetworkFailure(StreamviewError):
    """The upstream request did not complete (transport error, bad status, bad JSON)."""


class NotFound(StreamviewError):
    """The upstream answered but holds no data for the request."""


class StorageError(StreamviewError, OSError):
    """A persistent read or write failed."""


class InvalidInput(StreamviewError, ValueError):
    """Malformed identifier or credentials."""


class InvalidStateError(StreamviewError):
    """Operation not allowed in the current state (e.g. hide outside edit mode)."""
