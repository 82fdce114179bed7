from __future__ import annotations

from pathlib import Path

from propvault.config import DEFAULT_PWNED_ENDPOINT, VaultConfig


def test_defaults(monkeypatch):
    for var in (
        "PROPVAULT_STORE_PATH",
        "PROPVAULT_KEY_PATH",
        "PROPVAULT_PWNED_ENDPOINT",
        "PROPVAULT_PWNED_TIMEOUT",
        "PROPVAULT_SECRET_LENGTH",
    ):
        monkeypatch.delenv(var, raising=False)

    config = VaultConfig.from_env()

    assert config.get_store_path() == Path.home() / ".propvault" / "properties.vault"
    assert config.get_key_path() == Path.home() / ".propvault" / "user.key"
    assert config.pwned_endpoint == DEFAULT_PWNED_ENDPOINT
    assert config.pwned_timeout == 15.0
    assert config.default_secret_length == 32
    assert config.validate() == []


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("PROPVAULT_STORE_PATH", str(tmp_path / "s.vault"))
    monkeypatch.setenv("PROPVAULT_KEY_PATH", str(tmp_path / "k.key"))
    monkeypatch.setenv("PROPVAULT_PWNED_ENDPOINT", "https://mirror.example/range")
    monkeypatch.setenv("PROPVAULT_PWNED_TIMEOUT", "3.5")
    monkeypatch.setenv("PROPVAULT_SECRET_LENGTH", "48")

    config = VaultConfig.from_env()

    assert config.get_store_path() == tmp_path / "s.vault"
    assert config.get_key_path() == tmp_path / "k.key"
    assert config.pwned_endpoint == "https://mirror.example/range"
    assert config.pwned_timeout == 3.5
    assert config.default_secret_length == 48


def test_bad_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("PROPVAULT_PWNED_TIMEOUT", "soon")
    monkeypatch.setenv("PROPVAULT_SECRET_LENGTH", "long")
    config = VaultConfig.from_env()
    assert config.pwned_timeout == 15.0
    assert config.default_secret_length == 32


def test_validate_reports_errors():
    config = VaultConfig(
        pwned_endpoint="http://plain.example/range",
        pwned_timeout=0,
        default_secret_length=-1,
    )
    errors = config.validate()
    assert len(errors) == 3


def test_to_dict_has_paths(tmp_path):
    config = VaultConfig(store_path=tmp_path / "s.vault")
    data = config.to_dict()
    assert data["store_path"] == str(tmp_path / "s.vault")
    assert "pwned_endpoint" in data
