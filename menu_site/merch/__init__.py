from .catalog_cache import CatalogCache
from .lookup import MerchLookupService
from .normalizer import ASSUME_IN_STOCK_WHEN_UNTRACKED, normalize

__all__ = ["CatalogCache", "MerchLookupService", "ASSUME_IN_STOCK_WHEN_UNTRACKED", "normalize"]
