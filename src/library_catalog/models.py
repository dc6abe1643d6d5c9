"""
Pydantic models for the catalog API.

Provides request/response models for the book endpoints.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .catalog.types import Book


class BookModel(BaseModel):
    """Book representation for API responses."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "key": "978-0441013593",
                "title": "Dune",
                "authors": ["Frank Herbert"],
                "year": 1965,
                "categories": ["Sci-Fi"],
            }
        }
    )

    key: str = Field(..., description="ISBN, unique and case-insensitive")
    title: str = Field("", description="Book title")
    authors: List[str] = Field(default_factory=list, description="Authors, deduplicated ignoring case")
    year: int = Field(0, description="Publication year")
    categories: List[str] = Field(default_factory=list, description="Categories, deduplicated ignoring case")

    @classmethod
    def from_book(cls, book: Book) -> "BookModel":
        return cls(**book.to_dict())


class CreateBookRequest(BaseModel):
    """Request model for adding a book."""

    key: str = Field(..., description="ISBN (must be unique)")
    title: str = Field("", description="Book title")
    authors: List[str] = Field(default_factory=list, description="Authors")
    year: int = Field(0, description="Publication year")
    categories: List[str] = Field(default_factory=list, description="Categories")

    def to_book(self) -> Book:
        return Book.from_fields(
            key=self.key,
            title=self.title,
            authors=[a.strip() for a in self.authors if a.strip()],
            year=self.year,
            categories=[c.strip() for c in self.categories if c.strip()],
        )


class BookListResponse(BaseModel):
    """Response model for any multi-book query."""

    books: List[BookModel]
    count: int
    latency_ms: float = Field(0.0, description="Time spent in the catalog call")


class HealthResponse(BaseModel):
    status: str
    book_count: int
    index_errors: List[str] = []
