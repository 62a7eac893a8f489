"""CLI entrypoint for the micoteca dataset filters."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from micoteca.common.config_loader import ConfigBundle, load_config
from micoteca.common.constants import COMMANDS, EXIT_HARD_FAIL, EXIT_SUCCESS
from micoteca.common.datasets import load_dataset
from micoteca.common.errors import DatasetError, MicotecaError
from micoteca.common.fs import write_json
from micoteca.common.geometry import Region
from micoteca.common.http import HttpClient
from micoteca.common.ids import generate_run_id
from micoteca.common.logging import build_logger, close_logger, log_debug_event, log_event
from micoteca.pipeline.calendar import build_calendar
from micoteca.pipeline.catalog import filter_books, sort_books
from micoteca.pipeline.region_filter import extract_records, records_in_region
from micoteca.pipeline.search import filter_by_genus_species, free_search, suggest, taxon_search

# command -> configured dataset name
COMMAND_DATASETS = {
    "region": "census",
    "search": "census",
    "suggest": "census",
    "calendar": "calendar",
    "catalog": "books",
}


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--dataset", default=None, help="Path or URL overriding the configured dataset")
    parser.add_argument("--out", default=None)
    parser.add_argument("--region", default=None, help="Configured region name or GeoJSON path")
    parser.add_argument("--records-key", default=None)
    parser.add_argument("--coordinates-field", default=None)
    parser.add_argument("--query", default=None)
    parser.add_argument("--taxon", default=None)
    parser.add_argument("--genus", default=None)
    parser.add_argument("--species", default=None)
    parser.add_argument("--sort", default=None, choices=["earliest", "latest"])
    parser.add_argument("--tag", default=None)
    parser.add_argument("--rating", default=None, type=int, choices=[1, 2, 3])
    return parser.parse_args(argv)


def _species_list(payload: Any) -> list[dict]:
    if isinstance(payload, dict) and isinstance(payload.get("species"), list):
        return payload["species"]
    raise DatasetError("Dataset has no 'species' list")


def run_region(args: argparse.Namespace, bundle: ConfigBundle, payload: Any, logger: logging.Logger) -> dict:
    if not args.region:
        raise DatasetError("The region command needs --region")
    region = Region.from_geojson(load_dataset(bundle.region_path(args.region)))

    records_key = args.records_key or bundle.region_filter["records_key"]
    coordinates_field = args.coordinates_field or bundle.region_filter["coordinates_field"]
    records = extract_records(payload, records_key)
    skipped: list[str] = []

    def _on_malformed(record, exc) -> None:
        skipped.append(str(exc))
        log_debug_event(
            logger,
            str(exc),
            run_id=args.run_id,
            command="region",
            event="RECORD_SKIPPED",
            status="skipped",
            error_code=exc.error_code,
        )

    selected = list(
        records_in_region(records, region, coordinates_field=coordinates_field, on_malformed=_on_malformed)
    )
    return {
        "region": args.region,
        "rows_in": len(records),
        "skipped": len(skipped),
        "records": selected,
    }


def run_search(args: argparse.Namespace, payload: Any) -> dict:
    species = _species_list(payload)
    if args.taxon:
        matched = taxon_search(species, args.taxon)
    elif args.genus or args.species:
        matched = filter_by_genus_species(species, args.genus, args.species)
    else:
        matched = free_search(species, args.query)
    return {"rows_in": len(species), "records": matched}


def run_suggest(args: argparse.Namespace, bundle: ConfigBundle, payload: Any) -> dict:
    species = _species_list(payload)
    suggestions = suggest(species, args.query, limit=bundle.search["autocomplete_limit"])
    return {"rows_in": len(species), "records": suggestions}


def run_calendar(args: argparse.Namespace, bundle: ConfigBundle, payload: Any) -> dict:
    species = _species_list(payload)
    sort_mode = args.sort or bundle.calendar["default_sort"]
    return {"rows_in": len(species), "sort": sort_mode, "records": build_calendar(species, sort_mode)}


def run_catalog(args: argparse.Namespace, bundle: ConfigBundle, payload: Any) -> dict:
    if not isinstance(payload, list):
        raise DatasetError("Books dataset must be a JSON list")
    books = sort_books(payload, bundle.catalog["sort"])
    return {"rows_in": len(books), "records": filter_books(books, args.query, tag=args.tag, rating=args.rating)}


def execute_command(args: argparse.Namespace, bundle: ConfigBundle, payload: Any, logger: logging.Logger) -> dict:
    if args.command == "region":
        return run_region(args, bundle, payload, logger)
    if args.command == "search":
        return run_search(args, payload)
    if args.command == "suggest":
        return run_suggest(args, bundle, payload)
    if args.command == "calendar":
        return run_calendar(args, bundle, payload)
    if args.command == "catalog":
        return run_catalog(args, bundle, payload)
    raise ValueError(f"Unknown command: {args.command}")


def run_command(args: argparse.Namespace) -> int:
    args.run_id = args.run_id or generate_run_id(args.command)
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    logger = build_logger(args.run_id, data_dir=data_dir, level=args.log_level)
    try:
        bundle = load_config(config_dir, overlay_config_dir=overlay_config_dir)
        source = args.dataset or bundle.datasets[COMMAND_DATASETS[args.command]]
        log_event(
            logger,
            "command start",
            run_id=args.run_id,
            command=args.command,
            dataset=source,
            event="COMMAND_START",
            status="ok",
        )

        with HttpClient.from_config(bundle.http) as client:
            payload = load_dataset(source, client=client)
        result = execute_command(args, bundle, payload, logger)

        out_path = Path(args.out) if args.out else data_dir / "out" / f"{args.command}.json"
        write_json(out_path, result["records"])
        log_event(
            logger,
            "command end",
            run_id=args.run_id,
            command=args.command,
            dataset=source,
            event="COMMAND_END",
            status="ok",
            rows_in=result["rows_in"],
            rows_out=len(result["records"]),
            skipped=result.get("skipped"),
        )
        return EXIT_SUCCESS
    except MicotecaError as exc:
        log_event(
            logger,
            f"command failed: {exc}",
            run_id=args.run_id,
            command=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL
    except Exception:
        log_event(
            logger,
            f"unexpected failure in command {args.command}",
            run_id=args.run_id,
            command=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code="UNEXPECTED_ERROR",
        )
        return EXIT_HARD_FAIL
    finally:
        close_logger(logger)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
