"""Catalog loader - seeds a catalog from YAML/JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .registry import CatalogRegistry
from .types import Book


logger = logging.getLogger(__name__)


def split_values(raw: Any) -> list[str]:
    """Accept a list or a ';'-separated string; trim and drop empties."""
    if raw is None:
        return []
    if isinstance(raw, str):
        items = raw.split(";")
    elif isinstance(raw, (list, tuple)):
        items = raw
    else:
        items = [raw]
    return [str(item).strip() for item in items if str(item).strip()]


class CatalogLoader:
    """
    Loads book definitions from YAML or JSON files.

    File format:
    ```yaml
    "978-0441013593":
      title: Dune
      authors: [Frank Herbert]
      year: 1965
      categories: [Sci-Fi, Classics]

    "978-0307474278":
      title: One Hundred Years of Solitude
      authors: "Gabriel Garcia Marquez"
      year: 1967
      categories: "Fiction; Magical Realism"
    ```
    """

    def load_file(self, path: str | Path, registry: CatalogRegistry | None = None) -> CatalogRegistry:
        """Load books from a YAML or JSON file."""
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        if data is not None and not isinstance(data, dict):
            raise ValueError(f"Catalog file must contain a mapping of ISBN to book: {path}")

        return self.load_dict(data or {}, registry)

    def load_dict(self, data: dict[str, Any], registry: CatalogRegistry | None = None) -> CatalogRegistry:
        """Load books from a dictionary."""
        registry = registry if registry is not None else CatalogRegistry()

        loaded = 0
        for key, book_data in data.items():
            book = self._parse_book(str(key), book_data)
            if registry.insert(book):
                loaded += 1
                logger.debug(f"Loaded book: {book.key}")
            else:
                logger.warning(f"Skipped book '{key}': blank or duplicate ISBN")

        logger.info(f"Loaded {loaded} books ({registry.count()} in catalog)")
        return registry

    def _parse_book(self, key: str, data: dict[str, Any] | None) -> Book:
        """Parse a single book from dictionary."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Book '{key}' must be a mapping of fields, got {type(data).__name__}")

        title = data.get("title")
        year = data.get("year", 0)
        try:
            year = int(year)
        except (TypeError, ValueError):
            logger.warning(f"Invalid year '{year}' for {key}, defaulting to 0")
            year = 0

        return Book.from_fields(
            key=key,
            title="" if title is None else str(title),
            authors=split_values(data.get("authors")),
            year=year,
            categories=split_values(data.get("categories")),
        )

    def load_directory(self, directory: str | Path, registry: CatalogRegistry | None = None) -> CatalogRegistry:
        """
        Load books from all YAML/JSON files in a directory.

        Files are loaded in alphabetical order. An ISBN already loaded from
        an earlier file is skipped, never overwritten.
        """
        directory = Path(directory)
        registry = registry if registry is not None else CatalogRegistry()

        if not directory.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")

        files = sorted(directory.glob("*.yaml")) + sorted(directory.glob("*.yml")) + sorted(directory.glob("*.json"))

        for file_path in files:
            logger.info(f"Loading catalog file: {file_path}")
            self.load_file(file_path, registry)

        return registry


def load_catalog(source: str | Path | dict) -> CatalogRegistry:
    """
    Convenience function to load a catalog.

    Args:
        source: File path, directory path, or dictionary

    Returns:
        CatalogRegistry with loaded books
    """
    loader = CatalogLoader()

    if isinstance(source, dict):
        return loader.load_dict(source)

    path = Path(source)
    if path.is_dir():
        return loader.load_directory(path)
    else:
        return loader.load_file(path)


def build_registry(seed: str | Path | None) -> CatalogRegistry:
    """Create a catalog, seeded from a file or directory when one is given."""
    if seed:
        return load_catalog(seed)
    return CatalogRegistry()
