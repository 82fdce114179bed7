"""
In-memory property document.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from typing import Any, Iterator

from propvault.errors import InvalidPropertyName


class SecretDocument:
    """Ordered mapping of property names to string values.

    Insertion order is kept so a saved document reads back the same way,
    but equality ignores order.
    """

    def __init__(self, properties: dict[str, str] | None = None):
        self._properties: dict[str, str] = {}
        for name, value in (properties or {}).items():
            self.set(name, value)

    @staticmethod
    def _check_name(name: str) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidPropertyName("Property name must be a non-empty string")

    def contains(self, name: str) -> bool:
        return name in self._properties

    def get(self, name: str, default: str | None = None) -> str | None:
        return self._properties.get(name, default)

    def set(self, name: str, value: str) -> None:
        """Insert or overwrite a property."""
        self._check_name(name)
        self._properties[name] = value

    def remove(self, name: str) -> bool:
        """Remove a property.

        Returns:
            True if removed, False if it was not present
        """
        if name not in self._properties:
            return False
        del self._properties[name]
        return True

    def names(self) -> list[str]:
        return list(self._properties)

    def items(self) -> list[tuple[str, str]]:
        return list(self._properties.items())

    def copy(self) -> "SecretDocument":
        return SecretDocument(self._properties)

    def to_dict(self) -> dict[str, str]:
        """Convert to a plain dictionary."""
        return dict(self._properties)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SecretDocument":
        """Create a document from parsed JSON.

        Raises:
            TypeError: If data is not a flat str -> str mapping
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")
        for name, value in data.items():
            if not isinstance(value, str):
                raise TypeError(f"Property {name!r} has a non-string value")
        return cls(data)

    def __contains__(self, name: object) -> bool:
        return name in self._properties

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretDocument):
            return NotImplemented
        return self._properties == other._properties

    def __repr__(self) -> str:
        # Never show values
        return f"SecretDocument(names={self.names()!r})"
