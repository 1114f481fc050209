"""
Card key provisioning command.

Generates fresh card keys or imports existing ones into the database
configured by DATABASE_URL. New keys are printed one per line.
"""

import argparse
import logging
import sys
from collections.abc import Sequence

from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresCardKeyRepository, run_migrations
from src.config.settings import get_settings
from src.domain.exceptions import CardKeyError
from src.domain.provisioning import ProvisioningService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cardgate-provision", description="Create unused card keys."
    )
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--count", type=int, help="Number of random card keys to generate")
    group.add_argument(
        "--import",
        dest="import_codes",
        nargs="+",
        metavar="CODE",
        help="Existing card keys to store (normalized to uppercase)",
    )
    return parser


def run(service: ProvisioningService, args: argparse.Namespace) -> list[str]:
    """Provision or import card keys according to parsed arguments."""
    if args.import_codes:
        return [service.import_key(code) for code in args.import_codes]
    return service.provision(args.count)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.count is not None and args.count <= 0:
        parser.error("--count must be positive")

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    with ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=1) as pool:
        run_migrations(pool)
        service = ProvisioningService(repository=PostgresCardKeyRepository(pool))
        try:
            codes = run(service, args)
        except CardKeyError as e:
            logger.error("Provisioning failed: %s", e)
            return 1

    for code in codes:
        print(code)
    return 0


if __name__ == "__main__":
    sys.exit(main())
