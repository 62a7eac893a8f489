"""Species search over the census dataset.

Covers the genus/species dropdown filters, free-text search, exact taxon
search from lineage links, and autocomplete suggestions. Lineages are
strings such as ``"Regno: Fungi > Divisione: Basidiomycota > Genere: Boletus"``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from micoteca.common.constants import DEFAULT_AUTOCOMPLETE_LIMIT

Species = Mapping[str, Any]

LINEAGE_SEPARATOR = " > "


def _lower(entry: Species, key: str) -> str:
    return str(entry.get(key) or "").lower()


def list_genera(species: Iterable[Species]) -> list[str]:
    return sorted({entry["genus"] for entry in species if entry.get("genus")})


def list_epithets(species: Iterable[Species], genus: str | None) -> list[str]:
    if not genus:
        return []
    return sorted({entry["species"] for entry in species if entry.get("genus") == genus and entry.get("species")})


def filter_by_genus_species(
    species: Iterable[Species],
    genus: str | None = None,
    epithet: str | None = None,
) -> list[Species]:
    return [
        entry
        for entry in species
        if (not genus or entry.get("genus") == genus) and (not epithet or entry.get("species") == epithet)
    ]


def lineage_taxa(lineage: str | None) -> list[str]:
    taxa = []
    for part in (lineage or "").split(LINEAGE_SEPARATOR):
        _rank, sep, name = part.partition(":")
        name = name.strip()
        if sep and name:
            taxa.append(name)
    return taxa


def _matches_any_field(entry: Species, word: str) -> bool:
    return word in _lower(entry, "genus") or word in _lower(entry, "species") or word in _lower(entry, "lineage")


def free_search(species: Iterable[Species], query: str | None) -> list[Species]:
    entries = list(species)
    words = (query or "").lower().split()
    if not words:
        return entries

    phrase = " ".join(words)
    if len(words) == 1:
        return [entry for entry in entries if _matches_any_field(entry, phrase)]

    by_full_name = [entry for entry in entries if phrase in _lower(entry, "fullName")]
    if by_full_name or len(words) == 2:
        return by_full_name

    return [entry for entry in entries if all(_matches_any_field(entry, word) for word in words)]


def taxon_search(species: Iterable[Species], taxon: str | None) -> list[Species]:
    value = (taxon or "").strip().lower()
    if not value:
        return list(species)
    pattern = re.compile(rf"\b{re.escape(value)}\b", re.IGNORECASE)
    return [
        entry
        for entry in species
        if _lower(entry, "genus") == value or pattern.search(str(entry.get("lineage") or ""))
    ]


def suggest(
    species: Iterable[Species],
    query: str | None,
    limit: int = DEFAULT_AUTOCOMPLETE_LIMIT,
) -> list[str]:
    needle = (query or "").strip().lower()
    if not needle:
        return []

    # dict keeps first-seen order
    found: dict[str, None] = {}
    for entry in species:
        genus = str(entry.get("genus") or "")
        epithet = str(entry.get("species") or "")
        if needle in genus.lower():
            found.setdefault(genus)
        if needle in epithet.lower():
            found.setdefault(f"{genus} {epithet}")
        for name in lineage_taxa(entry.get("lineage")):
            if needle in name.lower():
                found.setdefault(name)
    return list(found)[:limit]


def is_synonym(entry: Species) -> bool:
    current = entry.get("currentName")
    return bool(current) and current != entry.get("fullName")


@dataclass
class AutocompleteCursor:
    """Keyboard selection state for one autocomplete list."""

    suggestions: list[str] = field(default_factory=list)
    index: int = -1

    def show(self, suggestions: list[str]) -> None:
        self.suggestions = list(suggestions)
        self.index = -1

    def move_down(self) -> None:
        self.index = min(self.index + 1, len(self.suggestions) - 1)

    def move_up(self) -> None:
        self.index = max(self.index - 1, -1)

    @property
    def selected(self) -> str | None:
        if 0 <= self.index < len(self.suggestions):
            return self.suggestions[self.index]
        return None

    def reset(self) -> None:
        self.suggestions = []
        self.index = -1
