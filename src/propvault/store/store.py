"""
Encrypted property store.

The store is one file holding base64 text of protected JSON:

    base64(protect(utf8(json({"name": "value", ...}))))

Every operation is a full load -> mutate -> save cycle with nothing kept
in memory between calls. Writes go to a temp file in the same directory
and are renamed over the store, so a crash leaves either the old or the
new content. Concurrent writers are not arbitrated: the last save wins.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import base64
import binascii
import json
import logging
import os
import tempfile
from enum import Enum
from pathlib import Path

from propvault import generator
from propvault.errors import (
    CorruptStore,
    DecryptionFailed,
    InvalidPropertyName,
    NotFound,
    PathUnwritable,
    PropertyNotFound,
    SerializationFailed,
)
from propvault.store.document import SecretDocument
from propvault.store.protector import Protector, default_protector

logger = logging.getLogger(__name__)


class DeleteOutcome(str, Enum):
    """Result of deleting a property."""
    DELETED = "deleted"
    PROPERTY_NOT_FOUND = "property_not_found"


def _protector(protector: Protector | None) -> Protector:
    return protector if protector is not None else default_protector()


def _serialize(path: Path, document: SecretDocument) -> bytes:
    for name, value in document.items():
        if not isinstance(value, str):
            raise SerializationFailed(
                f"Property {name!r} has a non-string value", path
            )
    try:
        return json.dumps(document.to_dict(), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError, UnicodeEncodeError) as e:
        raise SerializationFailed(f"Cannot serialize store: {e}", path) from e


def _parse(path: Path, plaintext: bytes) -> SecretDocument:
    try:
        data = json.loads(plaintext.decode("utf-8"))
        return SecretDocument.from_dict(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptStore(f"Store content is not valid JSON: {e}", path) from e
    except (TypeError, InvalidPropertyName) as e:
        raise CorruptStore(f"Store content is not a property map: {e}", path) from e


def _atomic_write(path: Path, data: bytes) -> None:
    try:
        path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise PathUnwritable(f"Cannot write store: {e}", path) from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise PathUnwritable(f"Cannot write store: {e}", path) from e
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


# =============================================================================
# Load / Save
# =============================================================================

def create_store(path: str | Path, protector: Protector | None = None) -> None:
    """Create a store holding no properties.

    Overwrites any existing store at the path.

    Args:
        path: Store file path
        protector: Protector (default: platform protector)
    """
    write_store(path, SecretDocument(), protector)
    logger.info(f"Created store at {path}")


def read_store(path: str | Path, protector: Protector | None = None) -> SecretDocument:
    """Load and decrypt a store.

    Args:
        path: Store file path
        protector: Protector (default: platform protector)

    Returns:
        The decrypted document

    Raises:
        NotFound: No file at path
        DecryptionFailed: Blob cannot be read or decrypted by this identity
        CorruptStore: Decrypted content is not a property map
    """
    path = Path(path)
    try:
        blob = path.read_bytes()
    except FileNotFoundError as e:
        raise NotFound(f"Store not found: {path}", path) from e
    except IsADirectoryError as e:
        raise NotFound(f"Store path is a directory: {path}", path) from e
    except PermissionError as e:
        raise DecryptionFailed(f"Store is not readable by this user: {path}", path) from e
    except OSError as e:
        raise DecryptionFailed(f"Store cannot be read: {e}", path) from e

    try:
        token = base64.b64decode(blob.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecryptionFailed(f"Store is not a valid encrypted blob: {path}", path) from e

    try:
        plaintext = _protector(protector).unprotect(token)
    except DecryptionFailed as e:
        raise DecryptionFailed(str(e), path) from e

    document = _parse(path, plaintext)
    logger.debug(f"Loaded {len(document)} properties from {path}")
    return document


def write_store(
    path: str | Path,
    document: SecretDocument,
    protector: Protector | None = None,
) -> None:
    """Encrypt and save a document, replacing the store atomically.

    Args:
        path: Store file path
        document: Document to save
        protector: Protector (default: platform protector)

    Raises:
        SerializationFailed: Document holds non-string data
        PathUnwritable: Location cannot be written
    """
    path = Path(path)
    plaintext = _serialize(path, document)
    token = _protector(protector).protect(plaintext)
    _atomic_write(path, base64.b64encode(token))
    logger.debug(f"Saved {len(document)} properties to {path}")


# =============================================================================
# Property Operations
# =============================================================================

def get_property(
    path: str | Path,
    name: str,
    protector: Protector | None = None,
) -> str:
    """Get a property value.

    Raises:
        PropertyNotFound: Name is not in the store
    """
    document = read_store(path, protector)
    if not document.contains(name):
        raise PropertyNotFound(name, path)
    return document.get(name)


def list_properties(path: str | Path, protector: Protector | None = None) -> list[str]:
    """List property names (not values)."""
    return read_store(path, protector).names()


def set_property(
    path: str | Path,
    name: str,
    value: str,
    protector: Protector | None = None,
) -> SecretDocument:
    """Insert or overwrite a property.

    Args:
        path: Store file path
        name: Property name
        value: Property value
        protector: Protector (default: platform protector)

    Returns:
        The saved document
    """
    protector = _protector(protector)
    document = read_store(path, protector)
    existed = document.contains(name)
    document.set(name, value)
    write_store(path, document, protector)

    logger.info(f"{'Updated' if existed else 'Added'} property {name} in {path}")
    return document


def auto_set_property(
    path: str | Path,
    name: str,
    length: int,
    protector: Protector | None = None,
    use_special_characters: bool = False,
) -> str:
    """Set a property to a freshly generated secret.

    Returns:
        The generated value
    """
    value = generator.generate(length, use_special_characters)
    set_property(path, name, value, protector)
    return value


def delete_property(
    path: str | Path,
    name: str,
    protector: Protector | None = None,
) -> DeleteOutcome:
    """Delete a property.

    Confirmation is the caller's responsibility. When the name is absent
    the store file is left untouched.

    Returns:
        DeleteOutcome.DELETED or DeleteOutcome.PROPERTY_NOT_FOUND
    """
    protector = _protector(protector)
    document = read_store(path, protector)
    if not document.remove(name):
        logger.debug(f"Property {name} not in {path}; nothing deleted")
        return DeleteOutcome.PROPERTY_NOT_FOUND

    write_store(path, document, protector)
    logger.info(f"Deleted property {name} from {path}")
    return DeleteOutcome.DELETED
