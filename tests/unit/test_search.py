import json
from pathlib import Path

import pytest

from micoteca.pipeline.search import (
    AutocompleteCursor,
    filter_by_genus_species,
    free_search,
    is_synonym,
    lineage_taxa,
    list_epithets,
    list_genera,
    suggest,
    taxon_search,
)


@pytest.fixture
def species():
    payload = json.loads(Path("tests/fixtures/census.json").read_text(encoding="utf-8"))
    return payload["species"]


def _names(entries):
    return [entry["fullName"] for entry in entries]


def test_list_genera_and_epithets(species):
    assert list_genera(species) == ["Amanita", "Boletus", "Russula", "Xerocomus"]
    assert list_epithets(species, "Amanita") == ["muscaria", "phalloides"]
    assert list_epithets(species, "") == []


def test_filter_by_genus_species(species):
    assert _names(filter_by_genus_species(species, "Amanita")) == ["Amanita muscaria", "Amanita phalloides"]
    assert _names(filter_by_genus_species(species, "Amanita", "phalloides")) == ["Amanita phalloides"]
    assert len(filter_by_genus_species(species)) == len(species)


def test_lineage_taxa_skips_parts_without_rank():
    lineage = "Regno: Fungi > incertae sedis > Genere: Boletus"
    assert lineage_taxa(lineage) == ["Fungi", "Boletus"]
    assert lineage_taxa(None) == []


def test_free_search_single_word_hits_genus_epithet_or_lineage(species):
    assert _names(free_search(species, "BOLET")) == ["Boletus edulis", "Xerocomus badius"]
    assert _names(free_search(species, "russulaceae")) == ["Russula cyanoxantha"]


def test_free_search_blank_returns_everything(species):
    assert free_search(species, "   ") == species
    assert free_search(species, None) == species


def test_free_search_two_words_matches_full_name(species):
    assert _names(free_search(species, "amanita  musc")) == ["Amanita muscaria"]
    assert free_search(species, "boletales edulis") == []


def test_free_search_three_words_falls_back_to_all_words(species):
    assert _names(free_search(species, "agaricales amanitaceae phalloides")) == ["Amanita phalloides"]


def test_taxon_search_exact_genus_or_whole_word_lineage(species):
    assert _names(taxon_search(species, "Boletaceae")) == ["Boletus edulis", "Xerocomus badius"]
    assert _names(taxon_search(species, "amanita")) == ["Amanita muscaria", "Amanita phalloides"]
    assert taxon_search(species, "Bolet") == []


def test_taxon_search_escapes_regex_metacharacters(species):
    assert taxon_search(species, "Fungi (s.l.)") == []


def test_suggest_collects_unique_names_in_discovery_order(species):
    assert suggest(species, "amani") == ["Amanita", "Amanitaceae"]
    assert suggest(species, "edul") == ["Boletus edulis"]
    assert suggest(species, "bolet") == ["Boletus", "Boletales", "Boletaceae"]
    assert suggest(species, "") == []


def test_suggest_respects_limit(species):
    assert len(suggest(species, "a", limit=3)) == 3


def test_is_synonym(species):
    by_name = {entry["fullName"]: entry for entry in species}
    assert is_synonym(by_name["Xerocomus badius"]) is True
    assert is_synonym(by_name["Boletus edulis"]) is False


def test_autocomplete_cursor_clamps_and_selects():
    cursor = AutocompleteCursor()
    cursor.move_down()
    assert cursor.index == -1

    cursor.show(["Amanita", "Amanitaceae"])
    assert cursor.selected is None
    cursor.move_down()
    cursor.move_down()
    cursor.move_down()
    assert cursor.selected == "Amanitaceae"
    cursor.move_up()
    cursor.move_up()
    cursor.move_up()
    assert cursor.index == -1

    cursor.move_down()
    cursor.reset()
    assert cursor.selected is None
    assert cursor.suggestions == []
