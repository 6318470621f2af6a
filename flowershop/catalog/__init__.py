"""
Catalog data access and projection assembly.

Example:
    >>> from flowershop.catalog import CatalogRepository
    >>> repo = CatalogRepository()
    >>> bouquets = await repo.list_bouquets(BouquetListParams(featured=True))
"""

from flowershop.catalog.normalizer import (
    ResponseNormalizer,
    normalize_bouquet_batch,
    normalizer,
)
from flowershop.catalog.repository import CatalogRepository, get_repository

__all__ = [
    "CatalogRepository",
    "get_repository",
    "ResponseNormalizer",
    "normalizer",
    "normalize_bouquet_batch",
]
