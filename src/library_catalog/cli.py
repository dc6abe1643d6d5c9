#!/usr/bin/env python3
"""
Interactive console for the library catalog.

Usage:
    python -m library_catalog.cli
    python -m library_catalog.cli --seed books.yaml
    python -m library_catalog.cli --config config.yaml
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable

import yaml
from colorama import Fore, Style, just_fix_windows_console

from .catalog.loader import build_registry, split_values
from .catalog.registry import CatalogRegistry
from .catalog.types import Book
from .config import Config
from .timing import timed


logger = logging.getLogger(__name__)

MENU = [
    ("1", "Add book"),
    ("2", "Look up by ISBN"),
    ("3", "Search by partial title"),
    ("4", "List by author"),
    ("5", "List by category"),
    ("6", "List full catalog"),
    ("0", "Exit"),
]


def colorize(text: str, color: str) -> str:
    """Wrap text in a color code."""
    return f"{color}{text}{Style.RESET_ALL}"


def split_list(text: str | None) -> list[str]:
    """Split a ';'-separated entry, trimming and dropping empty items."""
    return split_values(text or "")


def parse_year(text: str | None) -> int:
    """Parse a year, defaulting to 0 when the input is not an integer."""
    try:
        return int((text or "").strip())
    except ValueError:
        return 0


class CatalogConsole:
    """
    Menu-driven front end over a CatalogRegistry.

    Input and output are injectable so the loop can be driven from tests:

        console = CatalogConsole(registry, input_fn=scripted_input, output_fn=lines.append)
        console.run()
    """

    def __init__(
        self,
        registry: CatalogRegistry,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self.registry = registry
        self._input = input_fn
        self._output = output_fn
        self._handlers = {
            "1": self.add_book,
            "2": self.lookup,
            "3": self.search_title,
            "4": self.list_by_author,
            "5": self.list_by_category,
            "6": self.list_all,
        }

    def prompt(self, label: str) -> str:
        return self._input(label)

    def say(self, text: str = "") -> None:
        self._output(text)

    def run(self) -> None:
        """Main menu loop. Ends on '0' or end of input."""
        while True:
            self.show_menu()
            try:
                choice = self.prompt("Select an option: ").strip()
            except EOFError:
                choice = "0"
            self.say()

            if choice == "0":
                self.say("Exiting...")
                return

            handler = self._handlers.get(choice)
            if handler is None:
                self.say(colorize("Invalid option.", Fore.RED))
            else:
                try:
                    handler()
                except EOFError:
                    self.say("Exiting...")
                    return
            self.say()

    def show_menu(self) -> None:
        self.say(colorize("========= LIBRARY CATALOG =========", Style.BRIGHT))
        for option, label in MENU:
            self.say(f"{colorize(option + '.', Fore.CYAN)} {label}")

    def add_book(self) -> None:
        isbn = self.prompt("ISBN: ").strip()
        while self.registry.exists(isbn):
            self.say(colorize("ISBN already exists, enter another:", Fore.YELLOW))
            isbn = self.prompt("ISBN: ").strip()

        title = self.prompt("Title: ")
        authors = split_list(self.prompt("Authors (separated by ';'): "))
        year = parse_year(self.prompt("Year: "))
        categories = split_list(self.prompt("Categories (separated by ';'): "))

        book = Book.from_fields(isbn, title, authors, year, categories)
        added, ms = timed(self.registry.insert, book)

        if added:
            self.say(colorize(f"Book added in {ms:.2f} ms", Fore.GREEN))
        else:
            self.say(colorize("Could not add the book.", Fore.RED))

    def lookup(self) -> None:
        isbn = self.prompt("ISBN: ")
        book, ms = timed(self.registry.lookup_by_key, isbn)
        if book is not None:
            self.say(f"Found in {ms:.2f} ms:")
            self.say(str(book))
        else:
            self.say("Book not found.")

    def search_title(self) -> None:
        fragment = self.prompt("Title fragment: ")
        self._show_results("Results", *timed(self.registry.search_by_title_substring, fragment))

    def list_by_author(self) -> None:
        author = self.prompt("Author: ")
        self._show_results("Results", *timed(self.registry.list_by_author, author))

    def list_by_category(self) -> None:
        category = self.prompt("Category: ")
        self._show_results("Results", *timed(self.registry.list_by_category, category))

    def list_all(self) -> None:
        self._show_results("Full catalog", *timed(self.registry.list_all))

    def _show_results(self, heading: str, books: list[Book], ms: float) -> None:
        self.say(colorize(f"{heading} ({len(books)}) in {ms:.2f} ms:", Style.BRIGHT))
        for book in books:
            self.say(str(book))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Library catalog console",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", "-c", help="Config file (YAML or JSON)")
    parser.add_argument("--seed", "-s", help="Seed catalog file or directory (overrides config)")
    args = parser.parse_args(argv)

    just_fix_windows_console()

    try:
        config = Config.from_file(args.config) if args.config else Config()
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        print(colorize(f"Error loading config: {e}", Fore.RED), file=sys.stderr)
        return 1

    if args.seed:
        config.catalog.seed_file = args.seed
    config.logging.apply()

    try:
        registry = build_registry(config.catalog.seed_file)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(colorize(f"Error loading catalog: {e}", Fore.RED), file=sys.stderr)
        return 1

    logger.info(f"Catalog ready with {registry.count()} books")
    CatalogConsole(registry).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
