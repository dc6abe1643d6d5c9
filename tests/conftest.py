"""Shared test fixtures for the library catalog."""

from pathlib import Path

import pytest

from library_catalog.catalog.registry import CatalogRegistry
from library_catalog.catalog.types import Book


SAMPLE_CATALOG = Path(__file__).parent.parent / "sample_catalog.yaml"


@pytest.fixture
def dune() -> Book:
    return Book(
        key="001",
        title="Dune",
        authors=("Frank Herbert",),
        year=1965,
        categories=("Sci-Fi",),
    )


@pytest.fixture
def registry(dune) -> CatalogRegistry:
    """A small catalog with overlapping authors and categories."""
    reg = CatalogRegistry()
    reg.insert(dune)
    reg.insert(Book(
        key="002",
        title="Dune Messiah",
        authors=("Frank Herbert",),
        year=1969,
        categories=("Sci-Fi", "Classics"),
    ))
    reg.insert(Book(
        key="ABC-1",
        title="Good Omens",
        authors=("Terry Pratchett", "Neil Gaiman"),
        year=1990,
        categories=("Fantasy", "Comedy"),
    ))
    return reg


@pytest.fixture
def sample_catalog_path() -> Path:
    """Path to the sample catalog shipped at the repo root."""
    return SAMPLE_CATALOG
