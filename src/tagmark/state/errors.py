"""Catalog persistence errors."""


class StateError(Exception):
    """Base exception for catalog store operations."""


class DecodeError(StateError):
    """Raised when a stored catalog cannot be read or parsed."""


class EncodeError(StateError):
    """Raised when a catalog cannot be serialized or written."""
