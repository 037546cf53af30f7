"""Utilities for turning HeroELD responses into canonical records."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from roster_sync.models import Company, Driver

logger = logging.getLogger(__name__)

FIRST_NAME_KEYS = ("firstName", "firstname", "first_name")
LAST_NAME_KEYS = ("lastName", "lastname", "last_name")
DRIVER_ID_KEYS = ("_id", "id")
COMPANY_ID_KEYS = ("companyId", "id", "company_id")
COMPANY_NAME_KEYS = ("name", "companyName", "company_name")


class MalformedInputError(ValueError):
    """Raised when an input document does not have the expected structure."""


def first_present(raw: Dict[str, Any], keys: Sequence[str]) -> Any:
    """Return the first value among `keys` that is not None."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def to_driver(raw: Dict[str, Any]) -> Driver:
    active = raw.get("active")
    return Driver(
        first_name=first_present(raw, FIRST_NAME_KEYS),
        last_name=first_present(raw, LAST_NAME_KEYS),
        id=first_present(raw, DRIVER_ID_KEYS),
        active=active if isinstance(active, bool) else bool(active),
        updated_at=raw["updatedAt"],
    )


def normalize_drivers(raw_drivers: Iterable[Any]) -> List[Driver]:
    """Map raw roster entries to Drivers, dropping entries without `updatedAt`."""
    drivers: List[Driver] = []
    dropped = 0
    for raw in raw_drivers or []:
        if not isinstance(raw, dict) or not raw.get("updatedAt"):
            dropped += 1
            continue
        drivers.append(to_driver(raw))
    if dropped:
        logger.debug("Dropped %d undated roster entries", dropped)
    return drivers


def resolve_company(raw: Any) -> Optional[Company]:
    if not isinstance(raw, dict):
        return None
    company_id = first_present(raw, COMPANY_ID_KEYS)
    if company_id is None or company_id == "":
        return None
    return Company(company_id=company_id, name=first_present(raw, COMPANY_NAME_KEYS) or None)


def filter_companies(payload: Any, excluded_prefix: str = "zzz") -> List[Dict[str, Any]]:
    """Reduce a /companies response to `{companyId, name}` pairs without test companies."""
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list):
        raise MalformedInputError("Invalid companies structure")

    prefix = excluded_prefix.lower()
    companies: List[Dict[str, Any]] = []
    for raw in data:
        if not isinstance(raw, dict):
            continue
        name = raw.get("name")
        if prefix and isinstance(name, str) and name.lower().startswith(prefix):
            continue
        companies.append({"companyId": raw.get("companyId"), "name": name})
    return companies


def filter_inactive_drivers(results: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep every company entry but only the drivers whose `active` is exactly True."""
    filtered = []
    for entry in results:
        drivers = entry.get("drivers") or []
        filtered.append({**entry, "drivers": [d for d in drivers if d.get("active") is True]})
    return filtered
