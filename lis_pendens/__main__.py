"""
Command line entry point.

    python -m lis_pendens resolve filings.json [--output results.jsonl] [--concurrency 4]

Reads a JSON list of scraped filings and writes one JSON line per filing with
the resolution result and the prepared lead contacts.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional, TextIO

from loguru import logger
from pydantic import ValidationError

from config.resolution import load_settings
from lis_pendens.exceptions import RegistryUnavailable
from lis_pendens.models.filing import RawFiling
from lis_pendens.services.address_resolver import AddressResolver, BatchItem
from lis_pendens.services.contact_prep import prepare_contacts
from lis_pendens.services.parcel_registry import ArcGISParcelRegistry
from lis_pendens.utils.logging_config import configure_logger


def load_filings(path: Path) -> list[RawFiling]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("filings", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of filings")
    return [RawFiling.model_validate(item) for item in data]


def item_to_record(item: BatchItem) -> dict:
    record: dict = {"document_number": item.filing.document_number}
    if item.error is not None:
        record["error"] = type(item.error).__name__
        record["message"] = str(item.error)
        record["needs_manual_review"] = True
        return record
    record.update(item.result.to_dict())
    record["contacts"] = [c.to_dict() for c in prepare_contacts(item.filing, item.result)]
    return record


def write_records(items: list[BatchItem], out: TextIO) -> None:
    for item in items:
        out.write(json.dumps(item_to_record(item), default=str) + "\n")


async def run_resolve(filings: list[RawFiling], concurrency: Optional[int]) -> list[BatchItem]:
    settings = load_settings()
    registry = ArcGISParcelRegistry(
        settings.registry_url,
        timeout_seconds=settings.timeout_seconds,
        max_retries=settings.max_retries,
    )
    try:
        resolver = AddressResolver(
            registry,
            jurisdiction_codes=settings.jurisdiction_codes,
            fuzzy_result_limit=settings.fuzzy_result_limit,
        )
        return await resolver.resolve_batch(filings, concurrency=concurrency or settings.concurrency)
    finally:
        registry.close()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="lis_pendens",
        description="Resolve Lis Pendens filings to property addresses",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    resolve = sub.add_parser("resolve", help="Resolve a JSON file of scraped filings")
    resolve.add_argument("filings", type=Path, help="JSON list of filings")
    resolve.add_argument("--output", type=Path, default=None,
                         help="Write JSON lines here instead of stdout")
    resolve.add_argument("--concurrency", type=int, default=None,
                         help="Filings resolved at once (default RESOLVER_CONCURRENCY or 4)")
    resolve.add_argument("--log-level", type=str, default=None, help="Override LOG_LEVEL")

    args = parser.parse_args(argv)
    configure_logger(level=args.log_level)

    try:
        filings = load_filings(args.filings)
    except (OSError, ValueError, ValidationError) as exc:
        logger.error(f"Could not load filings from {args.filings}: {exc}")
        return 2

    logger.info(f"Resolving {len(filings)} filings from {args.filings}")
    items = asyncio.run(run_resolve(filings, args.concurrency))

    if args.output:
        with args.output.open("w", encoding="utf-8") as fh:
            write_records(items, fh)
        logger.info(f"Wrote {len(items)} records to {args.output}")
    else:
        write_records(items, sys.stdout)

    unavailable = [i for i in items if isinstance(i.error, RegistryUnavailable)]
    if unavailable:
        logger.error(f"{len(unavailable)} filings failed: parcel registry unavailable")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
