"""CLI helpers for the food admin backend."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from dateutil import parser as date_parser

from foodadmin.config import ApiConfig, Endpoints
from foodadmin.core.kpis import delivery_kpis, food_kpis, order_kpis, user_kpis
from foodadmin.core.models import EntityKind
from foodadmin.core.pipeline import EntityView
from foodadmin.core.query import CollectionQuery
from foodadmin.core.registry import EntityRegistry, EntitySchema, default_registry
from foodadmin.repositories import (
    DeliveryRepository,
    FoodRepository,
    OrderRepository,
    UserRepository,
)
from foodadmin.transport import HttpTransport

logger = logging.getLogger(__name__)

EXIT_UNKNOWN_KIND = 2

_REPOSITORIES = {
    EntityKind.USER: UserRepository,
    EntityKind.FOOD: FoodRepository,
    EntityKind.PURCHASE: OrderRepository,
    EntityKind.DELIVERY: DeliveryRepository,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="foodadmin")
    parser.add_argument("--log-level", default="WARNING")
    subparsers = parser.add_subparsers(dest="command", required=True)
    kinds = [k.value for k in EntityKind]

    normalize_cmd = subparsers.add_parser("normalize", help="Normalize a raw response into JSONL")
    normalize_cmd.add_argument("file")
    normalize_cmd.add_argument("--entity", choices=kinds)
    normalize_cmd.add_argument("--out", required=True)

    search_cmd = subparsers.add_parser("search", help="Search and filter a raw response")
    search_cmd.add_argument("file")
    search_cmd.add_argument("--entity", choices=kinds)
    search_cmd.add_argument("--query", default="")
    search_cmd.add_argument("--filter", action="append", default=[], metavar="ATTR=VALUE")
    search_cmd.add_argument("--min", action="append", default=[], metavar="ATTR=VALUE")
    search_cmd.add_argument("--out")

    kpis_cmd = subparsers.add_parser("kpis", help="Print aggregate indicators as JSON")
    kpis_cmd.add_argument("file")
    kpis_cmd.add_argument("--entity", choices=kinds)
    kpis_cmd.add_argument("--now")

    fetch_cmd = subparsers.add_parser("fetch", help="Fetch a collection from the backend")
    fetch_cmd.add_argument("--entity", choices=kinds, required=True)
    fetch_cmd.add_argument("--out", required=True)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    registry = default_registry()

    if args.command == "fetch":
        records = _fetch(registry.get(args.entity), registry)
        _write_jsonl(args.out, [dataclass_to_dict(r) for r in records])
        return 0

    payload = _read_json(args.file)
    schema = _resolve_schema(registry, payload, args.entity)
    if schema is None:
        print(f"Cannot determine entity kind of {args.file}; pass --entity", file=sys.stderr)
        return EXIT_UNKNOWN_KIND
    view = EntityView(schema.kind, lambda: payload, registry=registry)
    records = view.refresh()

    if args.command == "normalize":
        _write_jsonl(args.out, [dataclass_to_dict(r) for r in records])
        return 0

    if args.command == "search":
        query = CollectionQuery(
            query=args.query,
            filters=_parse_pairs(args.filter),
            minimums=_parse_pairs(args.min),
        )
        rows = [dataclass_to_dict(r) for r in query.run(records)]
        if args.out:
            _write_jsonl(args.out, rows)
        else:
            for row in rows:
                print(json.dumps(row, ensure_ascii=False))
        return 0

    if args.command == "kpis":
        now = _parse_datetime(args.now)
        if schema.kind == EntityKind.FOOD:
            summary: Any = food_kpis(records, now)
        elif schema.kind == EntityKind.USER:
            summary = user_kpis(records, now)
        elif schema.kind == EntityKind.PURCHASE:
            summary = order_kpis(records)
        else:
            summary = delivery_kpis(records)
        print(json.dumps(dataclass_to_dict(summary), ensure_ascii=False))
        return 0

    return 1


def _resolve_schema(
    registry: EntityRegistry, payload: Any, entity: Optional[str]
) -> Optional[EntitySchema]:
    if entity:
        return registry.get(entity)
    return registry.find_compatible(payload)


def _fetch(schema: EntitySchema, registry: EntityRegistry) -> list[Any]:
    config = ApiConfig.from_env()
    with HttpTransport(config) as transport:
        repository = _REPOSITORIES[schema.kind](transport, Endpoints.from_config(config))
        view = EntityView(schema.kind, repository.fetch, registry=registry)
        return view.refresh()


def _parse_pairs(values: list[str]) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for value in values:
        attr, sep, rest = value.partition("=")
        if not sep or not attr.strip():
            raise ValueError(f"Expected ATTR=VALUE, got {value!r}")
        pairs[attr.strip()] = rest.strip()
    return pairs


def _read_json(path: str) -> Any:
    with Path(path).open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _write_jsonl(path: str | Path, records: list[dict[str, Any]]) -> None:
    path = Path(path)
    with path.open("w", encoding="utf-8") as handle:
        for record in records:
            handle.write(json.dumps(record, ensure_ascii=False) + "\n")


def dataclass_to_dict(obj: Any) -> Any:
    if obj is None:
        return None
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj) and not isinstance(obj, type):
        data = asdict(obj)
        return {key: dataclass_to_dict(value) for key, value in data.items()}
    if isinstance(obj, (list, tuple)):
        return [dataclass_to_dict(value) for value in obj]
    if isinstance(obj, dict):
        return {key: dataclass_to_dict(value) for key, value in obj.items()}
    return obj


def _parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        return date_parser.isoparse(str(value))
    except (ValueError, TypeError):
        raise ValueError(f"--now is not an ISO-8601 timestamp: {value!r}") from None


if __name__ == "__main__":
    raise SystemExit(main())
