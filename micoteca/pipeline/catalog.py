"""Mycological library catalog: filtering and ordering of books."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

Book = Mapping[str, Any]

DEFAULT_SORT = ("titolo", "volume")
SEARCH_FIELDS = ("titolo", "volume", "autori", "editore", "data")

_DIGIT_RUN = re.compile(r"(\d+)")


def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def natural_key(value: Any) -> tuple:
    """Case and accent insensitive key that orders digit runs numerically."""
    chunks = []
    for chunk in _DIGIT_RUN.split(_fold(str(value or ""))):
        if not chunk:
            continue
        if chunk.isdigit():
            chunks.append((0, int(chunk), ""))
        else:
            chunks.append((1, 0, chunk))
    return tuple(chunks)


def natural_compare(a: Any, b: Any) -> int:
    key_a, key_b = natural_key(a), natural_key(b)
    return (key_a > key_b) - (key_a < key_b)


def sort_books(books: Iterable[Book], props: Sequence[str] = DEFAULT_SORT) -> list[Book]:
    """Sort by several properties; a leading ``-`` sorts that property descending."""
    ordered = list(books)
    for prop in reversed(props):
        descending = prop.startswith("-")
        name = prop[1:] if descending else prop
        ordered.sort(key=lambda book: natural_key(book.get(name)), reverse=descending)
    return ordered


def display_tags(book: Book) -> list[str]:
    tags = list(book.get("tags") or [])
    copies = book.get("copie") or 0
    if copies > 1 and not any("copie" in tag for tag in tags):
        tags.append(f"{copies} copie")
    return tags


def _matches_token(book: Book, token: str) -> bool:
    for key in SEARCH_FIELDS:
        if token in str(book.get(key) or "").lower():
            return True
    return any(token in tag.lower() for tag in display_tags(book))


def filter_books(
    books: Iterable[Book],
    query: str | None = "",
    tag: str | None = None,
    rating: int | None = None,
) -> list[Book]:
    tokens = (query or "").lower().split()
    return [
        book
        for book in books
        if all(_matches_token(book, token) for token in tokens)
        and (not tag or tag in display_tags(book))
        and (not rating or book.get("rating") == rating)
    ]


@dataclass
class CatalogFilters:
    """Active tag and rating of the catalog page; re-selecting a value clears it."""

    tag: str | None = None
    rating: int | None = None

    def toggle_tag(self, tag: str) -> None:
        self.tag = None if self.tag == tag else tag

    def toggle_rating(self, rating: int) -> None:
        self.rating = None if self.rating == rating else rating

    def apply(self, books: Iterable[Book], query: str | None = "") -> list[Book]:
        return filter_books(books, query, tag=self.tag, rating=self.rating)
