"""Catalog system - book store with author and category indices."""

from .types import Book, normalize
from .registry import CatalogRegistry, IndexInvariantError
from .loader import CatalogLoader, load_catalog

__all__ = [
    "Book",
    "normalize",
    "CatalogRegistry",
    "IndexInvariantError",
    "CatalogLoader",
    "load_catalog",
]
