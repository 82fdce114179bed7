"""
Per-user data protection for the store blob.

The store never handles raw key material directly. A Protector turns
plaintext into ciphertext that only the same user on the same host can
turn back:

- Windows: DPAPI (CryptProtectData / CryptUnprotectData), user scope
- POSIX: Fernet with a key derived from a 0600 per-user key file and
  the host identity

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import base64
import hashlib
import logging
import os
import secrets
import socket
import sys
from abc import ABC, abstractmethod
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from propvault.config import VaultConfig
from propvault.errors import DecryptionFailed, PathUnwritable

logger = logging.getLogger(__name__)

USER_SECRET_LEN = 32
MACHINE_ID_PATHS = ("/etc/machine-id", "/var/lib/dbus/machine-id")


class Protector(ABC):
    """Encrypts and decrypts bytes under a protection identity."""

    @abstractmethod
    def protect(self, data: bytes) -> bytes:
        """Encrypt data for the current identity."""
        pass

    @abstractmethod
    def unprotect(self, token: bytes) -> bytes:
        """Decrypt data.

        Raises:
            DecryptionFailed: If the token was produced under another
                identity or the key is unavailable
        """
        pass


class FernetProtector(Protector):
    """Fernet over an explicit key."""

    def __init__(self, key: bytes | str):
        self._fernet = Fernet(key)

    @classmethod
    def generate(cls) -> "FernetProtector":
        """Create a protector with a fresh random key."""
        return cls(Fernet.generate_key())

    def protect(self, data: bytes) -> bytes:
        return self._fernet.encrypt(data)

    def unprotect(self, token: bytes) -> bytes:
        try:
            return self._fernet.decrypt(token)
        except InvalidToken as e:
            raise DecryptionFailed("Data was protected under a different identity") from e


def host_identity() -> str:
    """Get a stable identifier for this host."""
    for candidate in MACHINE_ID_PATHS:
        try:
            machine_id = Path(candidate).read_text().strip()
        except OSError:
            continue
        if machine_id:
            return machine_id
    return socket.gethostname()


def current_user() -> str:
    """Get the account name of the process owner.

    Read from the password database rather than $USER or $LOGNAME, so the
    environment cannot change it. A uid with no passwd entry (common in
    containers) is identified by the number itself.
    """
    if sys.platform == "win32":
        import getpass

        return getpass.getuser()

    import pwd

    uid = os.getuid()
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


class UserKeyProtector(Protector):
    """Fernet keyed to the current user and host.

    A random user secret lives in a key file readable only by its owner.
    The Fernet key is derived from that secret, salted with the host
    identity and user name, so a copied blob and key file still fail on
    another host or under another account.
    """

    def __init__(
        self,
        key_path: str | Path,
        iterations: int = 480000,
        identity: str | None = None,
    ):
        """Initialize the protector.

        Args:
            key_path: Path to the per-user key file
            iterations: PBKDF2 iterations
            identity: Protection identity (default: host identity and user name)
        """
        self.key_path = Path(key_path)
        self.iterations = iterations
        self.identity = identity or f"{host_identity()}:{current_user()}"
        self._fernet: Fernet | None = None

    def _read_secret(self) -> bytes | None:
        try:
            secret = self.key_path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise DecryptionFailed(f"User key unavailable: {e}", self.key_path) from e
        if len(secret) != USER_SECRET_LEN:
            raise DecryptionFailed("User key file is invalid", self.key_path)
        return secret

    def _create_secret(self) -> bytes:
        secret = secrets.token_bytes(USER_SECRET_LEN)
        try:
            self.key_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            fd = os.open(self.key_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        except FileExistsError:
            # Another process created it first
            return self._read_secret()
        except OSError as e:
            raise PathUnwritable(f"Cannot create user key: {e}", self.key_path) from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(secret)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            # A partial key file would be rejected on every later read
            self.key_path.unlink(missing_ok=True)
            raise PathUnwritable(f"Cannot create user key: {e}", self.key_path) from e
        except BaseException:
            self.key_path.unlink(missing_ok=True)
            raise

        logger.info(f"Created user key at {self.key_path}")
        return secret

    def _derive(self, secret: bytes) -> Fernet:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=hashlib.sha256(self.identity.encode()).digest(),
            iterations=self.iterations,
        )
        return Fernet(base64.urlsafe_b64encode(kdf.derive(secret)))

    def _get_fernet(self, create: bool) -> Fernet:
        if self._fernet is not None:
            return self._fernet

        secret = self._read_secret()
        if secret is None:
            if not create:
                raise DecryptionFailed("User key not found", self.key_path)
            secret = self._create_secret()

        self._fernet = self._derive(secret)
        return self._fernet

    def protect(self, data: bytes) -> bytes:
        return self._get_fernet(create=True).encrypt(data)

    def unprotect(self, token: bytes) -> bytes:
        fernet = self._get_fernet(create=False)
        try:
            return fernet.decrypt(token)
        except InvalidToken as e:
            raise DecryptionFailed(
                "Data was protected by another user or host"
            ) from e


class DPAPIProtector(Protector):
    """Windows Data Protection API, current-user scope."""

    DESCRIPTION = "propvault"

    def __init__(self):
        import pywintypes
        import win32crypt

        self._win32crypt = win32crypt
        self._error = pywintypes.error

    def protect(self, data: bytes) -> bytes:
        return self._win32crypt.CryptProtectData(data, self.DESCRIPTION, None, None, None, 0)

    def unprotect(self, token: bytes) -> bytes:
        try:
            _, data = self._win32crypt.CryptUnprotectData(token, None, None, None, 0)
        except self._error as e:
            raise DecryptionFailed(f"DPAPI could not decrypt: {e}") from e
        return data


def default_protector(config: VaultConfig | None = None) -> Protector:
    """Get the platform protector for the current user."""
    if sys.platform == "win32":
        return DPAPIProtector()

    config = config or VaultConfig.from_env()
    return UserKeyProtector(config.get_key_path())
