"""HTTP entrypoint that triggers the roster sync (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
import threading
import time
from typing import Any

from flask import Flask, jsonify

from roster_sync.core.config import get_settings
from roster_sync.core.storage import JsonFileStore
from roster_sync.jobs.sync_drivers import build_clients, fetch_companies_job, run_sync_pipeline

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)
# One sync per process: runs share the same output files.
_run_lock = threading.Lock()

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; does not contact the backend."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "worker_port_config": settings.worker_port,
                "sync_running": _run_lock.locked(),
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/fetch-companies")
def fetch_companies() -> Any:
    """List companies for the operator, filter them and save companies_filtered.json."""
    try:
        settings = get_settings()
        store = JsonFileStore(settings.data_dir)
        session, fetcher = build_clients(settings, store)
        companies = fetch_companies_job(settings, store, session, fetcher)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Fetching companies failed: %s", exc)
        return jsonify({"error": str(exc)}), 500

    return jsonify({"message": "Companies fetched, filtered, and saved", "count": len(companies)}), 200


@app.get("/sync-drivers")
def sync_drivers() -> Any:
    """Run the full pipeline synchronously and report a summary."""
    if not _run_lock.acquire(blocking=False):
        return jsonify({"success": False, "error": "a sync is already running"}), 409

    started = time.monotonic()
    try:
        summary = run_sync_pipeline()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Roster sync failed: %s", exc)
        return (
            jsonify({"success": False, "error": str(exc), "executionTimeMs": _elapsed_ms(started)}),
            500,
        )
    finally:
        _run_lock.release()

    return (
        jsonify(
            {
                "success": True,
                "message": "Drivers fetched, normalized, and saved",
                "companiesCount": summary.companies_count,
                "activeCompaniesCount": summary.active_companies_count,
                "executionTimeMs": _elapsed_ms(started),
            }
        ),
        200,
    )


# ---------- Internals ----------


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def main() -> None:
    port = int(os.getenv("PORT") or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
