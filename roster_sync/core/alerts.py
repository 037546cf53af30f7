"""Durable alert log for operations that ran out of retries."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from roster_sync.core.storage import ALERTS, JsonFileStore
from roster_sync.models import AlertRecord

logger = logging.getLogger(__name__)


class AlertSink:
    """Append-only alert log kept as a JSON list in the file store.

    The log is rewritten with a read-append-write cycle, so it must have a
    single writer. Failures while updating the log are logged and dropped:
    recording an alert never raises.
    """

    def __init__(self, store: JsonFileStore, key: str = ALERTS) -> None:
        self.store = store
        self.key = key

    def record_failure(self, service: str, error: Any, attempts: int) -> AlertRecord:
        record = AlertRecord(
            service=service,
            error=str(error),
            attempts=attempts,
            timestamp=datetime.now(timezone.utc).isoformat(),
            alert_id=str(uuid.uuid4()),
        )
        logger.error(
            "ALERT %s failed after %d attempts: %s (alert_id=%s)",
            service,
            attempts,
            record.error,
            record.alert_id,
        )

        try:
            alerts = self.store.read(self.key, default=[])
            if not isinstance(alerts, list):
                raise ValueError(f"{self.key} does not contain a JSON list")
            alerts.append(record.to_json())
            self.store.write(self.key, alerts)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to persist alert %s to %s: %s", record.alert_id, self.key, exc)

        return record

    def list_alerts(self) -> List[Dict[str, Any]]:
        alerts: Optional[Any] = self.store.read(self.key, default=[])
        return alerts if isinstance(alerts, list) else []
