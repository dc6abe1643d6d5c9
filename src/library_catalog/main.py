"""FastAPI application - Library Catalog Service.

Exposes the in-memory catalog over HTTP. The catalog lives on app.state,
so each app built by create_app() owns its own registry.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request

from .catalog.registry import CatalogRegistry
from .catalog.types import Book, is_blank
from .catalog.loader import build_registry
from .config import Config
from .models import BookListResponse, BookModel, CreateBookRequest, HealthResponse
from .timing import timed


logger = logging.getLogger(__name__)


def _catalog(request: Request) -> CatalogRegistry:
    return request.app.state.catalog


def _book_list(books: list[Book], latency_ms: float) -> BookListResponse:
    return BookListResponse(
        books=[BookModel.from_book(b) for b in books],
        count=len(books),
        latency_ms=latency_ms,
    )


def create_app(registry: CatalogRegistry | None = None, config: Config | None = None) -> FastAPI:
    """Build the API around a catalog (seeded from config when none is given)."""
    config = config or Config()
    if registry is None:
        registry = build_registry(config.catalog.seed_file)

    app = FastAPI(
        title="Library Catalog Service",
        description="In-memory book catalog with author and category indices.",
        version="0.1.0",
    )
    app.state.catalog = registry
    app.state.config = config

    @app.get("/")
    async def root():
        """Root endpoint with service info."""
        return {
            "service": "Library Catalog Service",
            "version": "0.1.0",
            "endpoints": {
                "/books": "GET - list all books (?title= to search), POST - add a book",
                "/books/{key}": "Look up a book by ISBN",
                "/authors/{author}/books": "List books by author",
                "/categories/{category}/books": "List books by category",
                "/health": "Health check",
            },
        }

    @app.get("/health", response_model=HealthResponse)
    async def health(request: Request):
        """Health check endpoint."""
        catalog = _catalog(request)
        errors = catalog.validate_indices()
        return HealthResponse(
            status="healthy" if not errors else "degraded",
            book_count=catalog.count(),
            index_errors=errors,
        )

    @app.post("/books", response_model=BookModel, status_code=201)
    async def add_book(request: Request, body: CreateBookRequest):
        """
        Add a book to the catalog.

        Rejects a blank ISBN (422) or one already in the catalog (409).
        """
        book = body.to_book()
        if is_blank(book.key):
            raise HTTPException(status_code=422, detail="ISBN must not be blank")

        added, ms = timed(_catalog(request).insert, book)
        if not added:
            raise HTTPException(status_code=409, detail=f"Book already exists: {book.key}")

        logger.info(f"Added book {book.key} in {ms:.2f}ms")
        return BookModel.from_book(book)

    @app.get("/books", response_model=BookListResponse)
    async def list_books(
        request: Request,
        title: Optional[str] = Query(None, description="Title fragment to search for"),
    ):
        """List every book, or those whose title contains `title`."""
        catalog = _catalog(request)
        if title is not None:
            return _book_list(*timed(catalog.search_by_title_substring, title))
        return _book_list(*timed(catalog.list_all))

    @app.get("/books/{key}", response_model=BookModel)
    async def get_book(request: Request, key: str):
        """Look up a single book by ISBN."""
        book = _catalog(request).lookup_by_key(key)
        if book is None:
            raise HTTPException(status_code=404, detail=f"Book not found: {key}")
        return BookModel.from_book(book)

    @app.get("/authors/{author}/books", response_model=BookListResponse)
    async def books_by_author(request: Request, author: str):
        """List books written by an author."""
        return _book_list(*timed(_catalog(request).list_by_author, author))

    @app.get("/categories/{category}/books", response_model=BookListResponse)
    async def books_by_category(request: Request, category: str):
        """List books in a category."""
        return _book_list(*timed(_catalog(request).list_by_category, category))

    return app


def run(config_path: str | None = None):
    """Run the service with uvicorn."""
    import uvicorn

    config = Config.from_file(config_path) if config_path else Config()
    config.logging.apply()

    logger.info("Starting library catalog service...")
    app = create_app(config=config)
    logger.info(f"Catalog ready with {app.state.catalog.count()} books")

    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
    )


if __name__ == "__main__":
    run()
