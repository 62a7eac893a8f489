"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from micoteca.common.errors import ConfigError

CALENDAR_SORT_MODES = ("earliest", "latest")


def _assert_mapping(obj, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    _assert_mapping(obj, ctx)
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_int(value, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive integer")


def validate_app_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {
        "datasets",
        "regions",
        "region_filter",
        "search",
        "calendar",
        "catalog",
        "http",
    }
    _assert_required_keys(cfg, top_required, "micoteca config")
    _assert_no_unknown_keys(cfg, top_required, "micoteca config", allow_unknown)

    _assert_required_keys(cfg["datasets"], {"census", "calendar", "books"}, "datasets")
    _assert_mapping(cfg["regions"], "regions")
    _assert_required_keys(cfg["region_filter"], {"coordinates_field", "records_key"}, "region_filter")
    _assert_required_keys(cfg["search"], {"autocomplete_limit"}, "search")
    _assert_positive_int(cfg["search"]["autocomplete_limit"], "search.autocomplete_limit")

    _assert_required_keys(cfg["calendar"], {"default_sort"}, "calendar")
    if cfg["calendar"]["default_sort"] not in CALENDAR_SORT_MODES:
        raise ConfigError(f"calendar.default_sort must be one of: {', '.join(CALENDAR_SORT_MODES)}")

    _assert_required_keys(cfg["catalog"], {"sort"}, "catalog")
    if not isinstance(cfg["catalog"]["sort"], list) or not cfg["catalog"]["sort"]:
        raise ConfigError("catalog.sort must be a non-empty list")

    _assert_required_keys(cfg["http"], {"connect_timeout", "read_timeout", "max_attempts"}, "http")
    _assert_positive_int(cfg["http"]["max_attempts"], "http.max_attempts")

    return cfg
