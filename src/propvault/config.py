"""
Configuration for the property store and breach checker.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_PWNED_ENDPOINT = "https://api.pwnedpasswords.com/range"


def _default_home() -> Path:
    return Path.home() / ".propvault"


@dataclass
class VaultConfig:
    """Configuration for propvault."""

    # Store file (encrypted blob)
    store_path: str | Path | None = None

    # Per-user key file used on platforms without DPAPI
    key_path: str | Path | None = None

    # Breach checker
    pwned_endpoint: str = DEFAULT_PWNED_ENDPOINT
    pwned_timeout: float = 15.0

    # Auto-generated secrets
    default_secret_length: int = 32

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Load configuration from environment variables."""
        try:
            timeout = float(os.environ.get("PROPVAULT_PWNED_TIMEOUT", "15"))
        except ValueError:
            timeout = 15.0

        try:
            length = int(os.environ.get("PROPVAULT_SECRET_LENGTH", "32"))
        except ValueError:
            length = 32

        return cls(
            store_path=os.environ.get("PROPVAULT_STORE_PATH"),
            key_path=os.environ.get("PROPVAULT_KEY_PATH"),
            pwned_endpoint=os.environ.get("PROPVAULT_PWNED_ENDPOINT", DEFAULT_PWNED_ENDPOINT),
            pwned_timeout=timeout,
            default_secret_length=length,
        )

    def get_store_path(self) -> Path:
        """Get store file path."""
        if self.store_path:
            return Path(self.store_path).expanduser()
        return _default_home() / "properties.vault"

    def get_key_path(self) -> Path:
        """Get user key file path."""
        if self.key_path:
            return Path(self.key_path).expanduser()
        return _default_home() / "user.key"

    def validate(self) -> list[str]:
        """Validate configuration. Returns list of errors."""
        errors = []

        if not self.pwned_endpoint.lower().startswith("https://"):
            errors.append("Breach check endpoint must use HTTPS")
        if self.pwned_timeout <= 0:
            errors.append("Breach check timeout must be positive")
        if self.default_secret_length <= 0:
            errors.append("Default secret length must be positive")

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "store_path": str(self.get_store_path()),
            "key_path": str(self.get_key_path()),
            "pwned_endpoint": self.pwned_endpoint,
            "pwned_timeout": self.pwned_timeout,
            "default_secret_length": self.default_secret_length,
        }
