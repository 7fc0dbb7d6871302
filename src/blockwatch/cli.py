"""
Console runner for blockwatch.

Usage:
    blockwatch --once                 # one retry-wrapped fetch, JSON to stdout
    blockwatch --interval 5           # poll every 5 minutes until Ctrl+C
"""

import argparse
import asyncio
import sys

from blockwatch.config.state import ConfigState
from blockwatch.dependency_container import BlockwatchDependencyContainer
from blockwatch.exceptions import ConfigurationError
from blockwatch.infrastructure.config.settings import load_settings
from blockwatch.infrastructure.observability import get_service_logger, setup_logging
from blockwatch.orchestration.store import StoreEvent
from blockwatch.service import BlockwatchService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockwatch",
        description="Poll public Bitcoin APIs and report a merged snapshot.",
    )
    parser.add_argument(
        "--interval",
        type=int,
        choices=[0, 5, 10, 15],
        help="Refresh interval in minutes (0 = manual). Defaults to config.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Fetch a single snapshot, print it as JSON and exit.",
    )
    parser.add_argument("--config-dir", help="Directory holding blockwatch.yaml")
    parser.add_argument("--log-level", help="Override the configured log level")
    logs = parser.add_mutually_exclusive_group()
    logs.add_argument("--json-logs", dest="json_logs", action="store_true", default=None)
    logs.add_argument("--console-logs", dest="json_logs", action="store_false")
    return parser


async def fetch_once(state: ConfigState) -> int:
    container = BlockwatchDependencyContainer.from_config(state)
    try:
        snapshot = await container.create_retry_controller().fetch_with_retry()
    finally:
        await container.close()

    if snapshot is None:
        print("Unable to load Bitcoin data.", file=sys.stderr)
        return 1
    print(snapshot.model_dump_json(indent=2))
    return 0


async def watch(state: ConfigState, interval: int | None) -> int:
    log = get_service_logger("cli")
    service = BlockwatchService.from_config(state)
    if interval is not None:
        service.set_refresh_interval(interval)
    log.info("watch_started", refresh=service.refresh_interval.label)

    def report(event: StoreEvent) -> None:
        current = event.state
        if "snapshot" in event.changed and current.snapshot is not None:
            snap = current.snapshot
            log.info(
                "snapshot",
                height=snap.block.height if snap.block else None,
                price_usd=snap.price_usd,
                change_24h=snap.price_change_24h,
                sats_per_unit=snap.sats_per_unit,
                fastest_fee=snap.fees.fastest_fee if snap.fees else None,
            )
        if "is_stale" in event.changed:
            log.info("stale" if current.is_stale else "fresh", error=current.error_message)

    service.subscribe(report)
    async with service:
        await asyncio.Event().wait()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        state = load_settings(args.config_dir)
    except ConfigurationError as e:
        print(str(e), file=sys.stderr)
        return 2

    json_logs = state.logging.json_logs if args.json_logs is None else args.json_logs
    setup_logging(level=args.log_level or state.logging.level, json_logs=json_logs)

    if args.once:
        return asyncio.run(fetch_once(state))

    try:
        return asyncio.run(watch(state, args.interval))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
