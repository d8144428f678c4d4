"""
Site configuration loader (merch cache, checkout, Square, Spotify).

Tunables live in ``config/site_config.yml``; credentials and deployment
selectors come from the environment (``.env`` is honoured via python-dotenv).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

load_dotenv()

logger = logging.getLogger(__name__)

SQUARE_BASE_URLS = {
    "production": "https://connect.squareup.com",
    "sandbox": "https://connect.squareupsandbox.com",
}


class MerchConfig(BaseModel):
    cache_ttl_seconds: float = Field(default=300.0, gt=0)
    assume_in_stock_without_inventory: bool = True
    block_out_of_stock_at_checkout: bool = True


class CheckoutConfig(BaseModel):
    currency: str = Field(default="USD", min_length=3, max_length=3)
    redirect_url: str = "https://menuband.com"


class SquareConfig(BaseModel):
    environment: Literal["sandbox", "production"] = "sandbox"
    access_token: str = ""
    location_id: Optional[str] = None
    api_version: str = "2024-10-17"
    timeout_seconds: float = Field(default=15.0, gt=0)

    @property
    def base_url(self) -> str:
        return SQUARE_BASE_URLS[self.environment]


class SpotifyConfig(BaseModel):
    client_id: str = ""
    client_secret: str = ""
    artist_id: str = "3K0KJBedbI1lEoTHc1zBPa"
    market: str = "US"
    timeout_seconds: float = Field(default=10.0, gt=0)


class SiteConfig(BaseModel):
    merch: MerchConfig = Field(default_factory=MerchConfig)
    checkout: CheckoutConfig = Field(default_factory=CheckoutConfig)
    square: SquareConfig = Field(default_factory=SquareConfig)
    spotify: SpotifyConfig = Field(default_factory=SpotifyConfig)


def _default_config_path() -> Path:
    override = os.getenv("SITE_CONFIG_PATH")
    if override:
        return Path(override)
    return Path(__file__).parent.parent.parent / "config" / "site_config.yml"


def _apply_env(data: dict) -> dict:
    square = dict(data.get("square") or {})
    env_name = os.getenv("SQUARE_ENV", "").strip().lower()
    if env_name:
        square["environment"] = "production" if env_name == "production" else "sandbox"
    if os.getenv("SQUARE_ACCESS_TOKEN"):
        square["access_token"] = os.environ["SQUARE_ACCESS_TOKEN"].strip()
    if os.getenv("SQUARE_LOCATION_ID"):
        square["location_id"] = os.environ["SQUARE_LOCATION_ID"].strip()

    spotify = dict(data.get("spotify") or {})
    if os.getenv("SPOTIFY_CLIENT_ID"):
        spotify["client_id"] = os.environ["SPOTIFY_CLIENT_ID"].strip()
    if os.getenv("SPOTIFY_CLIENT_SECRET"):
        spotify["client_secret"] = os.environ["SPOTIFY_CLIENT_SECRET"].strip()

    return {**data, "square": square, "spotify": spotify}


def load_site_config(config_path: Optional[Path] = None) -> SiteConfig:
    """
    Load and validate the site configuration.

    A missing YAML file is not fatal: defaults plus environment variables are
    enough to run in mock mode.

    Raises:
        ValidationError: If the YAML or environment values don't match the schema
    """
    if config_path is None:
        config_path = _default_config_path()

    data: dict = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.warning("Site config file not found at %s; using defaults", config_path)

    try:
        cfg = SiteConfig(**_apply_env(data))
    except ValidationError as e:
        logger.error("Site config validation failed: %s", e)
        raise

    if not cfg.square.location_id:
        logger.warning("SQUARE_LOCATION_ID is not set; inventory will default to in stock")
    logger.info("Loaded site config from %s (square env=%s)", config_path, cfg.square.environment)
    return cfg
