"""Catalog errors."""


class CatalogError(Exception):
    """Base exception for catalog operations."""


class NotFoundError(CatalogError):
    """Raised when a referenced tag, file, alias, or path is absent."""


class DuplicateAliasError(CatalogError):
    """Raised when a bookmark alias is already taken."""


class InvalidAliasError(CatalogError):
    """Raised when a bookmark alias is empty or contains a path separator."""


class InvalidPathError(CatalogError):
    """Raised when a directory is missing, not a directory, or not UTF-8."""


class CatalogIntegrityError(CatalogError):
    """Raised when the key order and the key index disagree."""
