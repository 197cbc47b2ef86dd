"""
Storefront bootstrap

Loads configuration, sets up logging and the database, and returns a wired
dependency container. Run as a module to create tables and optionally seed
the catalog from a JSON file of catalog payloads.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from storefront.domain.entities.catalog_item import CatalogItem
from storefront.infrastructure.configuration.config import (
    ConfigValidator,
    Settings,
    get_config,
)
from storefront.infrastructure.container.dependency_injection import (
    DependencyContainer,
    get_container,
    reset_container,
)
from storefront.infrastructure.database.operations import init_db
from storefront.infrastructure.logging.logging_config import setup_logging
from storefront.infrastructure.utilities.exceptions import ErrorReporter, StorefrontError


def bootstrap(config: Optional[Settings] = None, enable_file_logging: bool = True) -> DependencyContainer:
    """Prepare logging, configuration checks and tables; return the container"""
    load_dotenv()
    config = config or get_config()
    setup_logging(config, enable_file=enable_file_logging)
    logger = logging.getLogger(__name__)

    validator = ConfigValidator(config)
    if not validator.validate_all() and config.environment == "production":
        logger.critical("Production configuration invalid: %s", validator.errors)
        raise RuntimeError("Production environment not properly configured")

    db_manager = init_db(config)
    logger.info("Database initialization completed")

    reset_container()
    return get_container(config, db_manager.get_session_factory())


async def seed_catalog(container: DependencyContainer, payloads: List[dict]) -> int:
    """Upsert catalog items from API-style payloads; returns how many were saved"""
    repository = container.get_catalog_repository()
    for payload in payloads:
        await repository.save_item(CatalogItem.from_dict(payload))
    return len(payloads)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Storefront bootstrap")
    parser.add_argument("--seed-catalog", metavar="PATH", help="JSON list of catalog items")
    args = parser.parse_args(argv)

    container = bootstrap()
    logger = logging.getLogger(__name__)

    if args.seed_catalog:
        try:
            with open(args.seed_catalog, "r", encoding="utf-8") as f:
                payloads = json.load(f)
            count = asyncio.run(seed_catalog(container, payloads))
        except StorefrontError as e:
            ErrorReporter.report_business_error(e)
            return 1
        except (OSError, ValueError) as e:
            ErrorReporter.report_critical_error(e)
            return 1
        logger.info("Seeded %d catalog items", count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
