"""Tests for the catalog registry."""

import threading

import pytest

from library_catalog.catalog.registry import CatalogRegistry, IndexInvariantError
from library_catalog.catalog.types import Book


def snapshot(reg: CatalogRegistry):
    """Copy of every internal structure, for unchanged-state assertions."""
    return (
        dict(reg._books),
        {k: list(v) for k, v in reg._by_author.items()},
        {k: list(v) for k, v in reg._by_category.items()},
    )


class TestInsert:
    def test_insert_and_get(self, registry):
        book = registry.get("001")
        assert book is not None
        assert book.title == "Dune"

    def test_insert_returns_true(self):
        reg = CatalogRegistry()
        assert reg.insert(Book(key="x", title="X")) is True
        assert reg.count() == 1

    def test_reject_none(self):
        reg = CatalogRegistry()
        assert reg.insert(None) is False
        assert reg.count() == 0

    @pytest.mark.parametrize("key", ["", "   ", "\t"])
    def test_reject_blank_key(self, key):
        reg = CatalogRegistry()
        assert reg.insert(Book(key=key, title="Nameless", authors=("Anon",))) is False
        assert reg.count() == 0
        assert reg.list_by_author("Anon") == []

    def test_reject_duplicate_any_case(self, registry):
        before = snapshot(registry)
        dup = Book(key="abc-1", title="Other", authors=("Someone Else",), categories=("Drama",))

        assert registry.insert(dup) is False
        assert snapshot(registry) == before
        assert registry.get("ABC-1").title == "Good Omens"
        assert registry.list_by_author("Someone Else") == []
        assert registry.list_by_category("Drama") == []

    def test_insert_many(self, dune):
        reg = CatalogRegistry()
        accepted = reg.insert_many([
            dune,
            Book(key="001", title="Duplicate"),
            Book(key="", title="Blank"),
            Book(key="003", title="Children of Dune"),
        ])
        assert accepted == 2
        assert [b.key for b in reg.all_books()] == ["001", "003"]

    def test_book_without_authors_or_categories(self):
        reg = CatalogRegistry()
        assert reg.insert(Book(key="bare", title="Untitled"))
        assert reg.authors() == []
        assert reg.categories() == []
        assert reg.validate_indices() == []

    def test_blank_authors_and_categories_not_indexed(self):
        reg = CatalogRegistry()
        book = Book(key="b1", title="Anonymous", authors=("", "Homer", "  "), categories=("\t",))
        assert reg.insert(book)
        assert reg.authors() == ["Homer"]
        assert reg.categories() == []
        assert "" not in reg._by_author
        for author in book.authors:
            assert reg.list_by_author(author) == [book]

    def test_keys_differing_beyond_case_are_distinct(self):
        reg = CatalogRegistry()
        assert reg.insert(Book(key="STRASSE", title="Main Street"))
        assert reg.insert(Book(key="straße", title="Die Straße")) is True
        assert reg.count() == 2
        assert reg.get("Strasse").title == "Main Street"
        assert reg.get("STRAßE").title == "Die Straße"
        assert [b.key for b in reg.search_title("ss")] == []


class TestLookup:
    def test_case_insensitive(self, registry):
        assert registry.get("ABC-1") is registry.get("abc-1")
        assert registry.get("Abc-1").title == "Good Omens"

    def test_unknown_key(self, registry):
        assert registry.get("nope") is None

    def test_blank_key(self, registry):
        assert registry.get("") is None
        assert registry.get("   ") is None

    def test_no_trimming(self, registry):
        assert registry.get(" 001 ") is None

    def test_exists_and_contains(self, registry):
        assert registry.exists("001")
        assert "abc-1" in registry
        assert "missing" not in registry

    def test_operation_aliases(self, registry):
        assert registry.lookup_by_key("001") is registry.get("001")
        assert registry.search_by_title_substring("dune") == registry.search_title("dune")
        assert registry.list_all() == registry.all_books()


class TestTitleSearch:
    def test_substring_case_insensitive(self, registry):
        titles = [b.title for b in registry.search_title("DUNE")]
        assert titles == ["Dune", "Dune Messiah"]

    def test_inner_fragment(self, registry):
        assert [b.key for b in registry.search_title("men")] == ["ABC-1"]

    def test_blank_fragment_matches_nothing(self, registry):
        assert registry.search_title("") == []
        assert registry.search_title("  ") == []

    def test_no_match(self, registry):
        assert registry.search_title("zzz") == []


class TestIndices:
    def test_list_by_author(self, registry):
        keys = [b.key for b in registry.list_by_author("frank herbert")]
        assert keys == ["001", "002"]

    def test_list_by_author_co_author(self, registry):
        assert [b.key for b in registry.list_by_author("NEIL GAIMAN")] == ["ABC-1"]

    def test_list_by_category(self, registry):
        assert [b.key for b in registry.list_by_category("sci-fi")] == ["001", "002"]
        assert [b.key for b in registry.list_by_category("Classics")] == ["002"]

    def test_unknown_value(self, registry):
        assert registry.list_by_author("Nobody") == []
        assert registry.list_by_category("drama") == []

    def test_blank_value(self, registry):
        assert registry.list_by_author("") == []
        assert registry.list_by_category("") == []

    def test_index_completeness(self, registry):
        for book in registry.all_books():
            for author in book.authors:
                matches = [b for b in registry.list_by_author(author.upper()) if b == book]
                assert len(matches) == 1
            for category in book.categories:
                matches = [b for b in registry.list_by_category(category.lower()) if b == book]
                assert len(matches) == 1

    def test_index_exclusivity(self, registry):
        for author in registry.authors():
            for book in registry.list_by_author(author):
                assert book.has_author(author)
        for category in registry.categories():
            for book in registry.list_by_category(category):
                assert book.has_category(category)

    def test_case_variants_share_one_index_entry(self):
        reg = CatalogRegistry()
        reg.insert(Book(key="1", authors=("Ursula K. Le Guin",)))
        reg.insert(Book(key="2", authors=("ursula k. le guin",)))
        assert reg.authors() == ["Ursula K. Le Guin"]
        assert len(reg.list_by_author("URSULA K. LE GUIN")) == 2

    def test_validate_indices_clean(self, registry):
        assert registry.validate_indices() == []

    def test_broken_index_raises(self, registry):
        registry._by_author["frank herbert"]["ghost"] = None

        with pytest.raises(IndexInvariantError):
            registry.list_by_author("Frank Herbert")
        assert any("ghost" in e for e in registry.validate_indices())

    def test_validate_detects_missing_entry(self, registry):
        del registry._by_category["comedy"]
        errors = registry.validate_indices()
        assert errors == ["ABC-1: missing from category index 'Comedy'"]


class TestListing:
    def test_list_all_insertion_order(self, registry):
        assert [b.key for b in registry.all_books()] == ["001", "002", "ABC-1"]

    def test_list_all_idempotent(self, registry):
        assert registry.all_books() == registry.all_books()

    def test_results_are_new_lists(self, registry):
        books = registry.all_books()
        books.clear()
        assert registry.count() == 3

    def test_len_and_iter(self, registry):
        assert len(registry) == 3
        assert [b.key for b in registry] == ["001", "002", "ABC-1"]

    def test_empty_queries_do_not_mutate(self, registry):
        before = snapshot(registry)
        registry.get("")
        registry.search_title("")
        registry.list_by_author("")
        registry.list_by_category("")
        assert snapshot(registry) == before


class TestDuneScenario:
    def test_scenario(self):
        reg = CatalogRegistry()
        dune = Book(key="001", title="Dune", authors=("Frank Herbert",), year=1965, categories=("Sci-Fi",))

        assert reg.insert(dune) is True
        assert reg.insert(Book(key="001", title="Dune")) is False
        assert len(reg.list_all()) == 1
        assert reg.list_by_author("frank herbert") == [dune]
        assert reg.search_title("un") == [dune]
        assert reg.list_by_category("drama") == []


class TestConcurrency:
    def test_concurrent_duplicate_inserts(self):
        reg = CatalogRegistry()
        results = []
        barrier = threading.Barrier(8)

        def worker(i):
            barrier.wait()
            results.append(reg.insert(Book(key="SAME", title=f"copy {i}", authors=(f"Author {i}",))))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert reg.count() == 1
        assert reg.validate_indices() == []
        assert len(reg.authors()) == 1
