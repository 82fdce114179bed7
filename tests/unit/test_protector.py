from __future__ import annotations

import errno
import os
import stat
import sys
from types import SimpleNamespace

import pytest

from propvault.config import VaultConfig
from propvault.errors import DecryptionFailed, PathUnwritable
from propvault.store import protector as protector_mod
from propvault.store.protector import (
    FernetProtector,
    UserKeyProtector,
    default_protector,
)

FAST = 1000


def test_fernet_round_trip():
    p = FernetProtector.generate()
    assert p.unprotect(p.protect(b"payload")) == b"payload"


def test_fernet_rejects_foreign_token():
    token = FernetProtector.generate().protect(b"payload")
    with pytest.raises(DecryptionFailed):
        FernetProtector.generate().unprotect(token)


def test_user_key_created_on_first_protect(tmp_path):
    key_path = tmp_path / "keys" / "user.key"
    p = UserKeyProtector(key_path, iterations=FAST, identity="host-a:alice")

    token = p.protect(b"payload")

    assert key_path.exists()
    assert len(key_path.read_bytes()) == 32
    assert p.unprotect(token) == b"payload"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
def test_user_key_file_is_private(tmp_path):
    key_path = tmp_path / "user.key"
    UserKeyProtector(key_path, iterations=FAST, identity="h:u").protect(b"x")
    assert stat.S_IMODE(key_path.stat().st_mode) == 0o600


def test_same_key_file_same_identity_decrypts(tmp_path):
    key_path = tmp_path / "user.key"
    token = UserKeyProtector(key_path, iterations=FAST, identity="host-a:alice").protect(b"x")
    again = UserKeyProtector(key_path, iterations=FAST, identity="host-a:alice")
    assert again.unprotect(token) == b"x"


@pytest.mark.parametrize("identity", ["host-b:alice", "host-a:bob"])
def test_other_identity_cannot_decrypt(tmp_path, identity):
    key_path = tmp_path / "user.key"
    token = UserKeyProtector(key_path, iterations=FAST, identity="host-a:alice").protect(b"x")
    other = UserKeyProtector(key_path, iterations=FAST, identity=identity)
    with pytest.raises(DecryptionFailed):
        other.unprotect(token)


def test_missing_key_is_decryption_failure(tmp_path):
    token = FernetProtector.generate().protect(b"x")
    p = UserKeyProtector(tmp_path / "absent.key", iterations=FAST, identity="h:u")
    with pytest.raises(DecryptionFailed):
        p.unprotect(token)
    assert not (tmp_path / "absent.key").exists()


def test_truncated_key_file(tmp_path):
    key_path = tmp_path / "user.key"
    key_path.write_bytes(b"short")
    with pytest.raises(DecryptionFailed):
        UserKeyProtector(key_path, iterations=FAST, identity="h:u").protect(b"x")


def test_failed_key_write_leaves_no_key_file(tmp_path, monkeypatch):
    key_path = tmp_path / "user.key"
    real_fdopen = os.fdopen

    class FullDisk:
        def __init__(self, fd, mode):
            self._f = real_fdopen(fd, mode)

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            self._f.close()

        def write(self, data):
            self._f.write(data[:4])
            raise OSError(errno.ENOSPC, "No space left on device")

    monkeypatch.setattr(protector_mod.os, "fdopen", FullDisk)
    p = UserKeyProtector(key_path, iterations=FAST, identity="h:u")

    with pytest.raises(PathUnwritable):
        p.protect(b"x")
    assert not key_path.exists()

    monkeypatch.setattr(protector_mod.os, "fdopen", real_fdopen)
    token = p.protect(b"x")
    assert len(key_path.read_bytes()) == 32
    assert p.unprotect(token) == b"x"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX account lookup")
def test_identity_ignores_user_environment(tmp_path, monkeypatch):
    pwd = pytest.importorskip("pwd")
    monkeypatch.setattr(protector_mod, "host_identity", lambda: "box")
    monkeypatch.setattr(pwd, "getpwuid", lambda uid: SimpleNamespace(pw_name="alice"))
    monkeypatch.setenv("USER", "mallory")
    monkeypatch.setenv("LOGNAME", "mallory")

    p = UserKeyProtector(tmp_path / "user.key", iterations=FAST)
    assert p.identity == "box:alice"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX account lookup")
def test_identity_for_uid_without_passwd_entry(tmp_path, monkeypatch):
    pwd = pytest.importorskip("pwd")

    def no_entry(uid):
        raise KeyError(f"getpwuid(): uid not found: {uid}")

    monkeypatch.setattr(protector_mod, "host_identity", lambda: "box")
    monkeypatch.setattr(pwd, "getpwuid", no_entry)
    monkeypatch.delenv("USER", raising=False)
    monkeypatch.delenv("LOGNAME", raising=False)

    p = UserKeyProtector(tmp_path / "user.key", iterations=FAST)
    assert p.identity == f"box:{os.getuid()}"


def test_host_identity_falls_back_to_hostname(monkeypatch):
    monkeypatch.setattr(protector_mod, "MACHINE_ID_PATHS", ("/nonexistent/machine-id",))
    monkeypatch.setattr(protector_mod.socket, "gethostname", lambda: "box.example")
    assert protector_mod.host_identity() == "box.example"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX binding")
def test_default_protector_uses_configured_key_path(tmp_path):
    config = VaultConfig(key_path=tmp_path / "user.key")
    p = default_protector(config)
    assert isinstance(p, UserKeyProtector)
    assert p.key_path == tmp_path / "user.key"
