"""
Entry point for the contract_sources component.
"""

import argparse
import asyncio
import logging
import sys

from .application.exceptions import ContractSourcesError
from .infrastructure.containers import Container

logger = logging.getLogger(__name__)


def setup_logging(level: str):
    """Applies basic logging configuration."""
    logging.basicConfig(level=level)


async def run_application(args: argparse.Namespace):
    """Wires and runs the application using the DI container."""

    container = Container()
    container.cli_args.from_dict(vars(args))
    setup_logging(level=container.config().logging.level)

    try:
        service = container.contract_source_service()
        await service.run(only=args.only)
    except ContractSourcesError as e:
        logger.error(f"An application error occurred: {type(e).__name__}: {e}")
        sys.exit(1)
    finally:
        await container.http_client().aclose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Download verified contract sources from a block explorer"
    )

    parser.add_argument(
        "--root-dir",
        default=None,
        help="Directory that receives one sub-directory per contract "
             "(defaults to paths.root_dir from the settings).",
    )

    parser.add_argument(
        "--only",
        nargs="+",
        default=None,
        metavar="ADDRESS",
        help="Restrict the run to these addresses from the contracts table.",
    )

    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Number of addresses processed at once (default: 1).",
    )

    return parser


def main(argv=None):
    cli_args = build_parser().parse_args(argv)
    asyncio.run(run_application(cli_args))


if __name__ == "__main__":
    main()
