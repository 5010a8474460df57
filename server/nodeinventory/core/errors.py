"""Errors raised while turning store content into inventory models.

Store access errors live with the store clients in
``services.store_service``; these cover content that was fetched but
cannot be decoded.
"""

from typing import Optional


class HardwareDecodeError(ValueError):
    """Base class for node hardware decode failures.

    ``node_id`` is filled in by the tree decoder once the failing node is
    known, so callers can report which node was corrupt.
    """

    node_id: Optional[str] = None


class MissingDataError(HardwareDecodeError):
    """Raised when a node subtree is absent."""


class MalformedFieldError(HardwareDecodeError):
    """Raised when a recognised leaf value fails type conversion."""

    def __init__(self, key: str, value: str, reason: str):
        super().__init__(f"invalid value {value!r} for '{key}': {reason}")
        self.key = key
        self.value = value
        self.reason = reason


class InvalidShapeError(HardwareDecodeError):
    """Raised when a key is a directory where a leaf is expected, or the reverse."""

    def __init__(self, key: str, message: str):
        super().__init__(message)
        self.key = key
