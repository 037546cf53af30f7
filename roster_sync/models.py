"""Core data models shared by the roster sync pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

CompanyId = Union[str, int]


@dataclass(slots=True, frozen=True)
class Company:
    company_id: CompanyId
    name: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return {"companyId": self.company_id, "name": self.name}


@dataclass(slots=True)
class Driver:
    """Canonical driver record built from a backend roster entry."""

    first_name: Optional[str]
    last_name: Optional[str]
    id: Optional[str]
    active: bool
    updated_at: str

    def to_json(self) -> Dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "id": self.id,
            "active": self.active,
            "updatedAt": self.updated_at,
        }


@dataclass(slots=True)
class CompanyResult:
    """Outcome for one company: its drivers, or the error that stopped it."""

    company_id: CompanyId
    name: Optional[str]
    drivers: List[Driver] = field(default_factory=list)
    eld_platform: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_json(self) -> Dict[str, Any]:
        if self.error is not None:
            return {
                "companyId": self.company_id,
                "name": self.name,
                "drivers": [],
                "error": self.error,
            }
        return {
            "eldPlatform": self.eld_platform,
            "companyId": self.company_id,
            "name": self.name,
            "drivers": [driver.to_json() for driver in self.drivers],
        }


@dataclass(slots=True)
class AlertRecord:
    service: str
    error: str
    attempts: int
    timestamp: str
    alert_id: str

    def to_json(self) -> Dict[str, Any]:
        return {
            "service": self.service,
            "error": self.error,
            "attempts": self.attempts,
            "timestamp": self.timestamp,
            "alertId": self.alert_id,
        }
