"""Dataset loading from local JSON files or published site URLs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from micoteca.common.errors import DatasetError
from micoteca.common.fs import read_json
from micoteca.common.http import HttpClient


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_dataset(source: str | Path, client: HttpClient | None = None) -> Any:
    source_str = str(source)
    if is_remote(source_str):
        if client is not None:
            return client.get_json(source_str)
        with HttpClient() as owned:
            return owned.get_json(source_str)

    path = Path(source_str)
    if not path.exists():
        raise DatasetError(f"Missing dataset: {path}")
    try:
        return read_json(path)
    except json.JSONDecodeError as exc:
        raise DatasetError(f"Invalid JSON in dataset {path}: {exc}") from exc
