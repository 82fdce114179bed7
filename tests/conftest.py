from __future__ import annotations

import pytest

from propvault.config import VaultConfig
from propvault.store.protector import FernetProtector


@pytest.fixture
def protector() -> FernetProtector:
    return FernetProtector.generate()


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "vault" / "properties.vault"


@pytest.fixture
def config(tmp_path) -> VaultConfig:
    return VaultConfig(
        store_path=tmp_path / "vault" / "properties.vault",
        key_path=tmp_path / "vault" / "user.key",
        pwned_endpoint="https://pwned.test/range",
    )
