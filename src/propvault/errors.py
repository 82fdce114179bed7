"""
Error types raised by the property store and the breach checker.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from pathlib import Path


class PropvaultError(RuntimeError):
    """Base error for propvault."""


# =============================================================================
# Secret Store
# =============================================================================

class StoreError(PropvaultError):
    """Base error for store operations. Carries the store path."""

    def __init__(self, message: str, path: str | Path | None = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class NotFound(StoreError):
    """No store file exists at the path."""


class PathUnwritable(StoreError):
    """The store location cannot be written."""


class DecryptionFailed(StoreError):
    """The blob could not be decrypted under the current protection identity."""


class CorruptStore(StoreError):
    """Decrypted content is not a valid property document."""


class SerializationFailed(StoreError):
    """The document holds data that cannot be serialized."""


class PropertyNotFound(StoreError):
    """The named property is not present in the store."""

    def __init__(self, name: str, path: str | Path | None = None):
        super().__init__(f"Property not found: {name}", path)
        self.name = name


class InvalidPropertyName(PropvaultError, ValueError):
    """Property names must be non-empty strings."""


# =============================================================================
# Secret Generator
# =============================================================================

class InvalidLength(PropvaultError, ValueError):
    """Requested secret length is not positive."""


# =============================================================================
# Breach Checker
# =============================================================================

class BreachCheckError(PropvaultError):
    """Base error for breach checks."""


class TransportUnavailable(BreachCheckError):
    """The range request could not be completed."""


class MalformedIndexResponse(BreachCheckError):
    """A range response line is not SUFFIX:COUNT."""
