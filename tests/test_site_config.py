import pytest
from pydantic import ValidationError

from menu_site.utils.site_config_loader import load_site_config

YAML = """
merch:
  cache_ttl_seconds: 60
  block_out_of_stock_at_checkout: false
checkout:
  currency: USD
  redirect_url: https://example.test/thanks
square:
  environment: sandbox
  api_version: "2024-10-17"
spotify:
  artist_id: ARTIST
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "SQUARE_ACCESS_TOKEN",
        "SQUARE_ENV",
        "SQUARE_LOCATION_ID",
        "SPOTIFY_CLIENT_ID",
        "SPOTIFY_CLIENT_SECRET",
        "SITE_CONFIG_PATH",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "site_config.yml"
    path.write_text(YAML, encoding="utf-8")
    return path


def test_yaml_values_are_loaded(config_file):
    cfg = load_site_config(config_file)

    assert cfg.merch.cache_ttl_seconds == 60
    assert cfg.merch.block_out_of_stock_at_checkout is False
    assert cfg.merch.assume_in_stock_without_inventory is True
    assert cfg.checkout.redirect_url == "https://example.test/thanks"
    assert cfg.spotify.artist_id == "ARTIST"
    assert cfg.square.base_url == "https://connect.squareupsandbox.com"
    assert cfg.square.location_id is None


def test_environment_overrides_credentials_and_host(config_file, monkeypatch):
    monkeypatch.setenv("SQUARE_ACCESS_TOKEN", " tok ")
    monkeypatch.setenv("SQUARE_ENV", "Production")
    monkeypatch.setenv("SQUARE_LOCATION_ID", "LOC1")
    monkeypatch.setenv("SPOTIFY_CLIENT_ID", "cid")
    monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "csecret")

    cfg = load_site_config(config_file)

    assert cfg.square.access_token == "tok"
    assert cfg.square.environment == "production"
    assert cfg.square.base_url == "https://connect.squareup.com"
    assert cfg.square.location_id == "LOC1"
    assert (cfg.spotify.client_id, cfg.spotify.client_secret) == ("cid", "csecret")


def test_unknown_square_env_falls_back_to_sandbox(config_file, monkeypatch):
    monkeypatch.setenv("SQUARE_ENV", "staging")

    assert load_site_config(config_file).square.environment == "sandbox"


def test_missing_file_uses_defaults(tmp_path):
    cfg = load_site_config(tmp_path / "missing.yml")

    assert cfg.merch.cache_ttl_seconds == 300
    assert cfg.checkout.currency == "USD"


def test_config_path_from_environment(config_file, monkeypatch):
    monkeypatch.setenv("SITE_CONFIG_PATH", str(config_file))

    assert load_site_config().merch.cache_ttl_seconds == 60


def test_invalid_values_are_rejected(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("merch:\n  cache_ttl_seconds: -5\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_site_config(path)
