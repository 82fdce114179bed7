"""
propvault - encrypted local property store with password breach checking.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "1.0.0"

from propvault.config import VaultConfig

__all__ = [
    "__version__",
    "VaultConfig",
]
