"""Relay sync entrypoint - standalone script run by the scheduled workflow.

Usage:
    python -m relaydir.sync_entrypoint                          # Try built-in endpoints
    python -m relaydir.sync_entrypoint --source seed.json       # Local override
    python -m relaydir.sync_entrypoint --source https://...     # URL override
    python -m relaydir.sync_entrypoint --dry-run                # Assemble without writing

RELAY_SOURCE in the environment is used when --source is not given.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from relaydir.core.errors import RelaySyncError
from relaydir.core.logging import get_logger
from relaydir.services.dataset_service import DatasetService

logger = get_logger("sync_entrypoint")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Refresh the relay server directory dataset.")
    parser.add_argument("--source", help="URL or local JSON path to use instead of the built-in endpoints")
    parser.add_argument("--output", help="Dataset path (defaults to OUTPUT_PATH)")
    parser.add_argument("--dry-run", action="store_true", help="Assemble the dataset without writing it")
    return parser


async def run_sync(source: Optional[str], output: Optional[str], dry_run: bool = False) -> dict:
    service = DatasetService(source_override=source, output_path=output)
    return await service.run(dry_run=dry_run)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        result = asyncio.run(run_sync(args.source, args.output, args.dry_run))
    except RelaySyncError as exc:
        logger.error(str(exc))
        return 1

    logger.info(f"Relay sync completed: {result}")
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
