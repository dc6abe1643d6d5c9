"""Catalog registry - primary book store plus author and category indices."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .types import Book, is_blank, normalize

logger = logging.getLogger(__name__)


class IndexInvariantError(AssertionError):
    """A secondary index references a key missing from the primary store."""


@dataclass
class CatalogRegistry:
    """
    Thread-safe in-memory catalog of books.

    Supports:
    - Unique, case-insensitive primary key (the ISBN)
    - Secondary indices by author and by category
    - Case-insensitive title substring search

    One lock guards the primary store and both indices, so an insert is
    never observable half-applied. Index sets are dicts used as ordered
    sets; results come back in insertion order.
    """
    _books: dict[str, Book] = field(default_factory=dict)  # normalized key -> book
    _by_author: dict[str, dict[str, None]] = field(default_factory=dict)  # normalized author -> keys
    _by_category: dict[str, dict[str, None]] = field(default_factory=dict)  # normalized category -> keys
    _author_names: dict[str, str] = field(default_factory=dict)  # normalized -> first-seen spelling
    _category_names: dict[str, str] = field(default_factory=dict)
    _lock: threading.RLock = field(default_factory=threading.RLock)

    def insert(self, book: Book | None) -> bool:
        """
        Insert a book and index it by author and category.

        Returns False, leaving the catalog untouched, when the book is
        missing, its key is blank, or the key already exists.
        """
        if book is None:
            logger.debug("Rejected insert: no book")
            return False
        if is_blank(book.key):
            logger.debug("Rejected insert: blank key")
            return False

        key = book.normalized_key
        authors = [(normalize(a), a) for a in book.authors]
        categories = [(normalize(c), c) for c in book.categories]

        with self._lock:
            if key in self._books:
                logger.debug(f"Rejected insert: duplicate key {book.key!r}")
                return False

            self._books[key] = book
            for norm, name in authors:
                self._by_author.setdefault(norm, {})[key] = None
                self._author_names.setdefault(norm, name)
            for norm, name in categories:
                self._by_category.setdefault(norm, {})[key] = None
                self._category_names.setdefault(norm, name)

        logger.debug(f"Inserted book {book.key!r}")
        return True

    def insert_many(self, books: Iterable[Book]) -> int:
        """Insert multiple books under one lock hold. Returns the number accepted."""
        accepted = 0
        with self._lock:
            for book in books:
                if self.insert(book):
                    accepted += 1
        return accepted

    def get(self, key: str) -> Book | None:
        """Get a book by key (case-insensitive, exact, no trimming)."""
        if not key:
            return None
        with self._lock:
            return self._books.get(normalize(key))

    def exists(self, key: str) -> bool:
        """Check if a key is in the catalog."""
        return self.get(key) is not None

    def search_title(self, fragment: str) -> list[Book]:
        """Books whose title contains the fragment, ignoring case. Blank matches nothing."""
        if is_blank(fragment):
            return []
        needle = normalize(fragment)
        with self._lock:
            return [b for b in self._books.values() if needle in normalize(b.title)]

    def list_by_author(self, author: str) -> list[Book]:
        """Books indexed under an author."""
        return self._resolve(self._by_author, author, "author")

    def list_by_category(self, category: str) -> list[Book]:
        """Books indexed under a category."""
        return self._resolve(self._by_category, category, "category")

    def all_books(self) -> list[Book]:
        """Get all books in insertion order."""
        with self._lock:
            return list(self._books.values())

    def authors(self) -> list[str]:
        """Every indexed author, as first spelled."""
        with self._lock:
            return list(self._author_names.values())

    def categories(self) -> list[str]:
        """Every indexed category, as first spelled."""
        with self._lock:
            return list(self._category_names.values())

    def count(self) -> int:
        """Get the number of books."""
        with self._lock:
            return len(self._books)

    # Operation names used by front ends
    lookup_by_key = get
    search_by_title_substring = search_title
    list_all = all_books

    def validate_indices(self) -> list[str]:
        """Check that both indices are the exact inverse of the stored books.

        Returns:
            List of error messages (empty if consistent).
        """
        errors = []
        with self._lock:
            indices = (
                ("author", self._by_author, Book.has_author),
                ("category", self._by_category, Book.has_category),
            )
            for label, index, has_value in indices:
                for value, keys in index.items():
                    if not keys:
                        errors.append(f"{label} '{value}': empty index entry")
                    for key in keys:
                        book = self._books.get(key)
                        if book is None:
                            errors.append(f"{label} '{value}': key '{key}' not in catalog")
                        elif not has_value(book, value):
                            errors.append(f"{book.key}: stale {label} index entry '{value}'")

            for key, book in self._books.items():
                for author in book.authors:
                    if key not in self._by_author.get(normalize(author), {}):
                        errors.append(f"{book.key}: missing from author index '{author}'")
                for category in book.categories:
                    if key not in self._by_category.get(normalize(category), {}):
                        errors.append(f"{book.key}: missing from category index '{category}'")
        return errors

    def _resolve(self, index: dict[str, dict[str, None]], value: str, label: str) -> list[Book]:
        if is_blank(value):
            return []
        with self._lock:
            keys = index.get(normalize(value))
            if not keys:
                return []
            books = []
            for key in keys:
                book = self._books.get(key)
                if book is None:
                    raise IndexInvariantError(
                        f"{label} index entry {value!r} references missing key {key!r}"
                    )
                books.append(book)
            return books

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: str) -> bool:
        return self.exists(key)

    def __iter__(self) -> Iterator[Book]:
        return iter(self.all_books())
