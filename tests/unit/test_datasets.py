from pathlib import Path

import pytest

from micoteca.common.datasets import is_remote, load_dataset
from micoteca.common.errors import DatasetError


class FakeClient:
    def __init__(self, payload):
        self.payload = payload
        self.urls = []

    def get_json(self, url):
        self.urls.append(url)
        return self.payload


def test_load_local_dataset():
    payload = load_dataset(Path("tests/fixtures/books.json"))
    assert [book["id"] for book in payload] == [1, 2, 3, 4]


def test_load_remote_dataset_goes_through_client():
    client = FakeClient({"species": []})
    assert load_dataset("https://example.test/census.json", client=client) == {"species": []}
    assert client.urls == ["https://example.test/census.json"]


def test_missing_dataset_raises(tmp_path: Path):
    with pytest.raises(DatasetError):
        load_dataset(tmp_path / "nope.json")


def test_invalid_json_dataset_raises(tmp_path: Path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(DatasetError):
        load_dataset(path)


def test_is_remote():
    assert is_remote("http://example.test/a.json")
    assert is_remote("https://example.test/a.json")
    assert not is_remote("./data/census.json")
