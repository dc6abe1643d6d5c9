"""Catalog types - books and case-insensitive normalization."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable


def normalize(value: str) -> str:
    """Canonical form used for every case-insensitive comparison."""
    return value.lower()


def is_blank(value: str | None) -> bool:
    """True for None, empty, or whitespace-only strings."""
    return value is None or not value.strip()


def dedupe(values: Iterable[str] | None) -> tuple[str, ...]:
    """
    Deduplicate strings case-insensitively, dropping blank values.

    The first-seen spelling wins and the original order is preserved, so
    a set like ["Sci-Fi", "sci-fi", "", "Drama"] becomes ("Sci-Fi", "Drama").
    Blank values are never indexed.
    """
    seen: set[str] = set()
    result: list[str] = []
    for value in values or ():
        if is_blank(value):
            continue
        norm = normalize(value)
        if norm in seen:
            continue
        seen.add(norm)
        result.append(value)
    return tuple(result)


@dataclass(frozen=True, slots=True)
class Book:
    """
    A single catalog entry.

    `key` is the book's natural identifier (its ISBN). Authors and categories
    behave as case-insensitive sets; the constructor deduplicates them so the
    invariant holds for any Book, however it was built.
    """
    key: str
    title: str = ""
    authors: tuple[str, ...] = field(default_factory=tuple)
    year: int = 0
    categories: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # frozen + slots: bypass the generated __setattr__
        object.__setattr__(self, "authors", dedupe(self.authors))
        object.__setattr__(self, "categories", dedupe(self.categories))

    @property
    def normalized_key(self) -> str:
        return normalize(self.key)

    def has_author(self, author: str) -> bool:
        norm = normalize(author)
        return any(normalize(a) == norm for a in self.authors)

    def has_category(self, category: str) -> bool:
        norm = normalize(category)
        return any(normalize(c) == norm for c in self.categories)

    @classmethod
    def from_fields(
        cls,
        key: str | None,
        title: str | None,
        authors: Iterable[str] | None = None,
        year: int = 0,
        categories: Iterable[str] | None = None,
    ) -> Book:
        """Build a Book from raw caller values, trimming key and title."""
        return cls(
            key=(key or "").strip(),
            title=(title or "").strip(),
            authors=tuple(authors or ()),
            year=year,
            categories=tuple(categories or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "key": self.key,
            "title": self.title,
            "authors": list(self.authors),
            "year": self.year,
            "categories": list(self.categories),
        }

    def __str__(self) -> str:
        authors = ", ".join(self.authors) if self.authors else "N/A"
        categories = ", ".join(self.categories) if self.categories else "N/A"
        return (
            f"ISBN: {self.key} | Title: {self.title} | Authors: {authors} "
            f"| Year: {self.year} | Categories: {categories}"
        )
