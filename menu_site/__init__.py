"""MENU band site backend: merch listing, checkout and latest release."""

__version__ = "1.0.0"
