"""Error types raised by the combotable client."""

from __future__ import annotations


class CombotableError(Exception):
    """Base class for every error raised by the client."""


class MalformedGesture(CombotableError, ValueError):
    """Raised when a drag payload or drop target cannot be decoded."""


class UnknownTarget(CombotableError, LookupError):
    """Raised when the pointer is not over any recognised drop zone."""


class StaleSnapshot(CombotableError, LookupError):
    """Raised when a combination referenced by a drag is no longer on the table."""

    def __init__(self, combination_name: str) -> None:
        super().__init__(f"Combination not in snapshot: {combination_name!r}")
        self.combination_name = combination_name


class TransportUnavailable(CombotableError, ConnectionError):
    """Raised by a transport that cannot hand an intent to the server."""


class SnapshotError(CombotableError, ValueError):
    """Raised when a server state document cannot be turned into a snapshot."""
