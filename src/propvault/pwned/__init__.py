"""
Pwned Passwords integration module.

Password breach checking with k-anonymity: only a 5 character SHA-1
prefix is ever sent to the remote index.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from propvault.pwned.models import (
    BreachVerdict,
    RangeEntry,
    RiskLevel,
)
from propvault.pwned.client import PwnedPasswordsClient, check

__all__ = [
    "PwnedPasswordsClient",
    "check",
    "BreachVerdict",
    "RangeEntry",
    "RiskLevel",
]
