"""
Data models for Pwned Passwords range lookups.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class RiskLevel(str, Enum):
    """Risk level based on password exposure."""

    SAFE = "safe"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# (exclusive upper bound of times_seen, level); anything above is CRITICAL
RISK_BANDS = (
    (1, RiskLevel.SAFE),
    (10, RiskLevel.LOW),
    (100, RiskLevel.MEDIUM),
    (10000, RiskLevel.HIGH),
)


@dataclass(frozen=True)
class RangeEntry:
    """One SUFFIX:COUNT line of a range response."""

    suffix: str
    count: int


@dataclass
class BreachVerdict:
    """Result of checking a password against Pwned Passwords."""

    is_breached: bool = False
    times_seen: int = 0
    checked_at: datetime = field(default_factory=datetime.now)
    # Never store the actual password or full hash!
    hash_prefix: str = ""  # Only first 5 chars of SHA-1

    def __post_init__(self) -> None:
        if self.times_seen < 0:
            raise ValueError("times_seen must not be negative")
        if self.is_breached != (self.times_seen > 0):
            raise ValueError("is_breached must be true exactly when times_seen > 0")

    @classmethod
    def from_count(cls, times_seen: int, hash_prefix: str = "") -> "BreachVerdict":
        """Create a verdict from an occurrence count."""
        return cls(
            is_breached=times_seen > 0,
            times_seen=times_seen,
            hash_prefix=hash_prefix,
        )

    @property
    def risk_level(self) -> RiskLevel:
        """Band the exposure count."""
        for upper, level in RISK_BANDS:
            if self.times_seen < upper:
                return level
        return RiskLevel.CRITICAL

    @property
    def risk_description(self) -> str:
        """Advice for a secret with this exposure count."""
        if self.risk_level == RiskLevel.SAFE:
            return "Not present in the breach index. Fine to keep as a stored secret."
        if self.risk_level == RiskLevel.LOW:
            return (
                f"Present in {self.times_seen} breach records. Replace it the next "
                "time the account allows."
            )
        if self.risk_level == RiskLevel.MEDIUM:
            return (
                f"Present in {self.times_seen} breach records. Replace it with a "
                "generated value (propvault store auto)."
            )
        return (
            f"Present in {self.times_seen:,} breach records and on common cracking "
            "lists. Replace it now with a generated value (propvault store auto)."
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "is_breached": self.is_breached,
            "times_seen": self.times_seen,
            "risk_level": self.risk_level.value,
            "risk_description": self.risk_description,
            "hash_prefix": self.hash_prefix,
            "checked_at": self.checked_at.isoformat(),
        }
