"""Command line interface: ``perfmet create-baseline | list-baselines | show-baseline``."""

import argparse
import json
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from .adapters import FileBaselineStore, SQLAlchemyBaselineRepository
from .config import Settings, load_settings
from .exceptions import PerfMetError
from .models import BaselineMetrics, TestConfig
from .ports import BaselineRepository
from .service import BaselineService

logger = logging.getLogger("perfmet")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perfmet",
        description="Extract baseline performance metrics from load-test logs.",
    )
    parser.add_argument("--logs-dir", type=Path, help="Directory holding the run logs")
    parser.add_argument("--baselines-dir", type=Path, help="Directory holding baseline files")
    parser.add_argument("--database-url", help="Store baselines in this database instead of files")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create-baseline", help="Extract metrics from logs and create a baseline")
    create.add_argument("log_prefix", help="Prefix of log files (e.g. tmp-all-2025-11-13T15:03:32)")
    create.add_argument("-e", dest="entity_count", type=int, default=0, help="Number of entities")
    create.add_argument("-l", dest="logs_per_entity", type=int, default=0, help="Number of logs per entity")
    create.add_argument("-u", dest="upload_count", type=int, help="Number of uploads (interval tests)")
    create.add_argument("-i", dest="interval_ms", type=int, help="Interval in milliseconds (interval tests)")
    create.add_argument("-n", dest="name", help="Custom name for the baseline (defaults to the log prefix)")

    subparsers.add_parser("list-baselines", help="List all available baselines")

    show = subparsers.add_parser("show-baseline", help="Print a baseline as JSON")
    show.add_argument("pattern", nargs="?", help="Name prefix or path (defaults to the latest baseline)")

    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    return Settings(
        logs_dir=args.logs_dir or settings.logs_dir,
        baselines_dir=args.baselines_dir or settings.baselines_dir,
        database_url=args.database_url or settings.database_url,
        log_level=(args.log_level or settings.log_level).upper(),
    )


@contextmanager
def open_repository(settings: Settings) -> Iterator[BaselineRepository]:
    """Yield the baseline store selected by the settings."""
    if not settings.database_url:
        yield FileBaselineStore(settings.baselines_dir)
        return

    engine = create_engine(settings.database_url)
    try:
        with Session(engine) as session:
            repo = SQLAlchemyBaselineRepository(session)
            repo.ensure_schema()
            yield repo
    finally:
        engine.dispose()


def _print_summary(baseline: BaselineMetrics, reference: str) -> None:
    metrics = baseline.metrics
    print("\nBaseline created successfully!")
    print(f"File: {reference}")
    print("\nSummary:")
    print(f"  Search Latency (avg): {metrics['search_latency']['avg']:.2f}ms")
    print(f"  Intake Latency (avg): {metrics['intake_latency']['avg']:.2f}ms")
    print(f"  CPU (avg): {metrics['cpu']['avg']:.2f}%")
    print(f"  Memory Heap (avg): {metrics['memory']['avg_heap_percent']:.2f}%")
    print(f"  Throughput (avg): {metrics['throughput']['avg_documents_per_second']:.2f} docs/sec")
    print(f"  Errors: {metrics['errors']['total_failures']}")


def _create_baseline(service: BaselineService, args: argparse.Namespace) -> None:
    test_config = TestConfig(
        entity_count=args.entity_count,
        logs_per_entity=args.logs_per_entity,
        upload_count=args.upload_count,
        interval_ms=args.interval_ms,
    )
    logger.info("Extracting baseline metrics from logs with prefix: %s", args.log_prefix)
    baseline, reference = service.create_baseline(args.log_prefix, test_config, name=args.name)
    _print_summary(baseline, reference)


def _list_baselines(service: BaselineService) -> None:
    references = service.list_baselines()
    if not references:
        print("No baselines found.")
        return

    print(f"\nFound {len(references)} baseline(s):\n")
    for index, reference in enumerate(references, start=1):
        try:
            baseline = service.load_baseline(reference)
        except PerfMetError as exc:
            print(f"{index}. {reference} (error loading: {exc})\n")
            continue
        print(f"{index}. {baseline.test_name}")
        print(f"   Timestamp: {baseline.timestamp}")
        print(
            f"   Entities: {baseline.test_config.entity_count}, "
            f"Logs per entity: {baseline.test_config.logs_per_entity}"
        )
        print(f"   File: {reference}\n")


def _show_baseline(service: BaselineService, args: argparse.Namespace) -> None:
    baseline, _ = service.resolve_baseline(args.pattern)
    print(json.dumps(baseline.to_dict(), indent=2))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = _apply_overrides(load_settings(), args)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        with open_repository(settings) as repo:
            service = BaselineService(repo, settings.logs_dir)
            if args.command == "create-baseline":
                _create_baseline(service, args)
            elif args.command == "list-baselines":
                _list_baselines(service)
            elif args.command == "show-baseline":
                _show_baseline(service, args)
    except PerfMetError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
