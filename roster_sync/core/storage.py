"""JSON file store: one file per key under a data directory.

Every write replaces the whole file through a temporary sibling, so a reader
never observes a half-written document. The store does no locking; running two
syncs against the same data directory at once is not supported.
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)

COMPANIES_FILTERED = "companies_filtered.json"
COMPANIES_WITH_DRIVERS = "companies_with_drivers.json"
COMPANIES_WITH_DRIVERS_ACTIVE = "companies_with_drivers_active.json"
ALERTS = "alerts.json"

_MISSING = object()


class JsonFileStore:
    """Read and overwrite JSON documents stored as `<root>/<key>`."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def path(self, key: str) -> Path:
        return self.root / key

    def read(self, key: str, default: Any = _MISSING) -> Any:
        """Return the parsed document; `default` is returned only when the file is absent."""
        path = self.path(key)
        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError:
            if default is _MISSING:
                raise
            return default

    def write(self, key: str, data: Any) -> Path:
        path = self.path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False, indent=2)
        tmp.replace(path)
        logger.debug("Wrote %s", path)
        return path
