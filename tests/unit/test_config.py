import pytest

from cosmic_sdk import ClientConfig, CosmicClient
from cosmic_sdk.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, read_credentials
from cosmic_sdk.exceptions import ConfigurationError


def test_from_env(monkeypatch):
    monkeypatch.setenv("COSMIC_BUCKET_SLUG", "env-bucket")
    monkeypatch.setenv("COSMIC_READ_KEY", "env-rk")
    monkeypatch.setenv("COSMIC_TIMEOUT", "5")
    cfg = ClientConfig.from_env()
    assert cfg.bucket_slug == "env-bucket"
    assert cfg.read_key == "env-rk"
    assert cfg.write_key is None
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.timeout == 5.0


def test_file_values_win_over_env(tmp_path, monkeypatch):
    creds = tmp_path / "credentials.txt"
    creds.write_text(
        "# local bucket\n"
        "COSMIC_BUCKET_SLUG=file-bucket\n"
        "COSMIC_READ_KEY=file-rk\n"
        "COSMIC_WRITE_KEY=\n"
    )
    monkeypatch.setenv("COSMIC_BUCKET_SLUG", "env-bucket")
    monkeypatch.setenv("COSMIC_WRITE_KEY", "env-wk")
    values = read_credentials(creds)
    assert values["COSMIC_BUCKET_SLUG"] == "file-bucket"
    # empty file values fall back to the environment
    assert values["COSMIC_WRITE_KEY"] == "env-wk"


def test_missing_read_key(monkeypatch):
    monkeypatch.setenv("COSMIC_BUCKET_SLUG", "b")
    with pytest.raises(ConfigurationError):
        ClientConfig.from_env()


def test_invalid_timeout(monkeypatch):
    monkeypatch.setenv("COSMIC_BUCKET_SLUG", "b")
    monkeypatch.setenv("COSMIC_READ_KEY", "rk")
    monkeypatch.setenv("COSMIC_TIMEOUT", "soon")
    with pytest.raises(ConfigurationError):
        ClientConfig.from_env()


def test_repr_redacts_keys():
    cfg = ClientConfig("b", "secret-read", "secret-write")
    text = repr(cfg)
    assert "secret-read" not in text
    assert "secret-write" not in text
    assert cfg.timeout == DEFAULT_TIMEOUT


def test_client_from_config_strips_trailing_slash():
    client = CosmicClient.from_config(ClientConfig("b", "rk", base_url="https://api.example.com/"))
    assert client.config.base_url == "https://api.example.com"
    assert client.bucket_slug == "b"
