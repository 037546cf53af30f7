"""CLI job that lists HeroELD companies and aggregates their driver rosters."""

import argparse
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from roster_sync.core.alerts import AlertSink
from roster_sync.core.config import ConfigError, Settings, get_settings
from roster_sync.core.retry import RetryPolicy
from roster_sync.core.storage import COMPANIES_FILTERED, JsonFileStore
from roster_sync.etl.transform import filter_companies
from roster_sync.jobs.aggregate import load_companies, run_aggregation
from roster_sync.jobs.filter_active import filter_active_job
from roster_sync.vendors.heroeld import ResourceFetcher, TenantSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncSummary:
    companies_count: int
    active_companies_count: int


def build_clients(settings: Settings, store: JsonFileStore) -> Tuple[TenantSession, ResourceFetcher]:
    """Create the backend clients; fails before any request when credentials are missing."""
    credentials = settings.require_credentials()
    options: Dict[str, Any] = dict(
        base_url=settings.api_base_url,
        timeout=settings.request_timeout,
        retry_policy=RetryPolicy(attempts=settings.retry_attempts, initial_delay=settings.retry_initial_delay),
        alert_sink=AlertSink(store),
    )
    return TenantSession(credentials, **options), ResourceFetcher(**options)


def fetch_companies_job(
    settings: Settings,
    store: JsonFileStore,
    session: TenantSession,
    fetcher: ResourceFetcher,
) -> List[Dict[str, Any]]:
    """Authenticate as the operator, list companies and save the filtered list."""
    token = session.authenticate(None)
    payload = fetcher.fetch_companies(token)
    companies = filter_companies(payload, excluded_prefix=settings.excluded_company_prefix)
    store.write(COMPANIES_FILTERED, companies)
    logger.info("Companies fetched, filtered, and saved: %d", len(companies))
    return companies


def run_sync_pipeline(
    settings: Optional[Settings] = None,
    *,
    store: Optional[JsonFileStore] = None,
    from_file: bool = False,
) -> SyncSummary:
    """Run companies -> rosters -> active filter and summarise the outcome."""
    settings = settings or get_settings()
    store = store or JsonFileStore(settings.data_dir)
    session, fetcher = build_clients(settings, store)

    if from_file:
        companies = load_companies(store)
    else:
        companies = fetch_companies_job(settings, store, session, fetcher)

    results = run_aggregation(
        companies,
        session=session,
        fetcher=fetcher,
        store=store,
        company_delay=settings.company_delay,
        eld_platform=settings.eld_platform,
    )
    active = filter_active_job(store)
    active_companies = sum(1 for entry in active if entry.get("drivers"))

    failed = sum(1 for result in results if not result.succeeded)
    if failed:
        logger.warning("%d of %d companies failed; see their error entries and the alert log", failed, len(results))

    return SyncSummary(companies_count=len(results), active_companies_count=active_companies)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sync HeroELD driver rosters for every company")
    parser.add_argument(
        "--from-file",
        dest="from_file",
        action="store_true",
        help="Read companies from companies_filtered.json instead of listing them",
    )
    parser.add_argument(
        "--companies-only",
        dest="companies_only",
        action="store_true",
        help="Only list, filter and save companies",
    )
    parser.add_argument("--data-dir", dest="data_dir", help="Directory holding the JSON artifacts")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
        store = JsonFileStore(args.data_dir or settings.data_dir)
        if args.companies_only:
            session, fetcher = build_clients(settings, store)
            fetch_companies_job(settings, store, session, fetcher)
            return
        summary = run_sync_pipeline(settings, store=store, from_file=args.from_file)
        logger.info(
            "Sync complete: companies=%d active_companies=%d",
            summary.companies_count,
            summary.active_companies_count,
        )
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except Exception as exc:  # noqa: BLE001
        logger.error("Roster sync failed: %s", exc, exc_info=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
