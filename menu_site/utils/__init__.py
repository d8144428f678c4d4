"""
Utility modules for the site backend
"""
from .site_config_loader import SiteConfig, load_site_config
from .single_flight import SingleFlight

__all__ = [
    'SiteConfig',
    'load_site_config',
    'SingleFlight',
]
