"""
Encrypted local property store.

A small set of named string secrets kept in one encrypted file that only
the same user on the same host can decrypt.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from propvault.store.document import SecretDocument
from propvault.store.protector import (
    Protector,
    FernetProtector,
    UserKeyProtector,
    DPAPIProtector,
    default_protector,
)
from propvault.store.store import (
    DeleteOutcome,
    create_store,
    read_store,
    write_store,
    get_property,
    list_properties,
    set_property,
    auto_set_property,
    delete_property,
)

__all__ = [
    "SecretDocument",
    "Protector",
    "FernetProtector",
    "UserKeyProtector",
    "DPAPIProtector",
    "default_protector",
    "DeleteOutcome",
    "create_store",
    "read_store",
    "write_store",
    "get_property",
    "list_properties",
    "set_property",
    "auto_set_property",
    "delete_property",
]
