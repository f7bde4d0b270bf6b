"""Typed error kinds raised by the RaceLog core.

The HTTP layer maps these to status codes; the core itself never deals in
codes.  ``NotFoundError`` is used both for missing records and for records
owned by somebody else so that existence is never leaked across accounts.
"""

from __future__ import annotations

from pathlib import Path


class RaceLogError(Exception):
    """Base class for all core errors."""


class NotFoundError(RaceLogError):
    """A record id does not resolve under the caller's ownership."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class ValidationError(RaceLogError, ValueError):
    """Caller-correctable bad input (missing field, malformed envelope, ...)."""


class CorruptStoreError(RaceLogError):
    """A persisted collection could not be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Collection file {path} is unreadable: {reason}")


class AuthenticationError(RaceLogError):
    """Credentials did not verify."""
