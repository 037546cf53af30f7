"""CLI job that drops inactive drivers from the aggregated roster file."""

import argparse
import logging
from typing import Any, Dict, List, Optional

from roster_sync.core.config import get_settings
from roster_sync.core.storage import COMPANIES_WITH_DRIVERS, COMPANIES_WITH_DRIVERS_ACTIVE, JsonFileStore
from roster_sync.etl.transform import MalformedInputError, filter_inactive_drivers

logger = logging.getLogger(__name__)


def filter_active_job(store: JsonFileStore) -> List[Dict[str, Any]]:
    companies = store.read(COMPANIES_WITH_DRIVERS)
    if not isinstance(companies, list):
        raise MalformedInputError(f"{COMPANIES_WITH_DRIVERS} must contain a JSON list")

    filtered = filter_inactive_drivers(companies)
    store.write(COMPANIES_WITH_DRIVERS_ACTIVE, filtered)
    logger.info("Filtered inactive drivers. Saved to %s", store.path(COMPANIES_WITH_DRIVERS_ACTIVE))
    return filtered


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Drop inactive drivers from companies_with_drivers.json")
    parser.add_argument("--data-dir", dest="data_dir", help="Directory holding the JSON artifacts")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)
    store = JsonFileStore(args.data_dir or get_settings().data_dir)

    try:
        filter_active_job(store)
    except Exception as exc:  # noqa: BLE001
        logger.error("Error filtering drivers: %s", exc, exc_info=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
