"""Sequential per-company roster aggregation with incremental snapshots."""

import logging
import time
from typing import Any, List, Sequence

from roster_sync.core.storage import COMPANIES_FILTERED, COMPANIES_WITH_DRIVERS, JsonFileStore
from roster_sync.etl.transform import MalformedInputError, normalize_drivers, resolve_company
from roster_sync.models import CompanyResult
from roster_sync.vendors.heroeld import ResourceFetcher, TenantSession

logger = logging.getLogger(__name__)

DEFAULT_ELD_PLATFORM = "HERO"


def load_companies(store: JsonFileStore, key: str = COMPANIES_FILTERED) -> List[Any]:
    companies = store.read(key)
    if not isinstance(companies, list):
        raise MalformedInputError(f"{key} must contain a JSON list of companies")
    return companies


def _snapshot(store: JsonFileStore, key: str, results: List[CompanyResult]) -> None:
    store.write(key, [result.to_json() for result in results])


def run_aggregation(
    companies: Sequence[Any],
    *,
    session: TenantSession,
    fetcher: ResourceFetcher,
    store: JsonFileStore,
    output_key: str = COMPANIES_WITH_DRIVERS,
    company_delay: float = 1.0,
    eld_platform: str = DEFAULT_ELD_PLATFORM,
) -> List[CompanyResult]:
    """Fetch and normalize the roster of every company, one company at a time.

    A company that fails after its retries is recorded with an `error` entry and
    the run continues. The output document is rewritten after every company so
    it always holds the results completed so far, in input order. Only one run
    may target a given output key at a time.
    """
    total = len(companies)
    results: List[CompanyResult] = []

    for index, raw in enumerate(companies, start=1):
        company = resolve_company(raw)
        if company is None:
            logger.warning("Skipping company without id at index %d", index - 1)
            continue

        logger.info("[%d/%d] Processing %s (%s)", index, total, company.name, company.company_id)
        try:
            token = session.authenticate(company.company_id)
            raw_drivers = fetcher.fetch_roster(token)
            drivers = normalize_drivers(raw_drivers)
            results.append(
                CompanyResult(
                    company_id=company.company_id,
                    name=company.name,
                    drivers=drivers,
                    eld_platform=eld_platform,
                )
            )
            logger.info("Company %s: %d drivers", company.company_id, len(drivers))
        except Exception as exc:  # noqa: BLE001
            logger.error("Error for company %s: %s", company.company_id, exc)
            results.append(CompanyResult(company_id=company.company_id, name=company.name, error=str(exc)))

        _snapshot(store, output_key, results)

        if index < total and company_delay > 0:
            time.sleep(company_delay)

    _snapshot(store, output_key, results)
    logger.info("Done. Saved %d company entries to %s", len(results), store.path(output_key))
    return results
