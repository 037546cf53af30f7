"""Client utilities for the HeroELD fleet backend."""

from __future__ import annotations

import base64
import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

import requests

from roster_sync.core.alerts import AlertSink
from roster_sync.core.config import DEFAULT_API_URL, OperatorCredentials
from roster_sync.core.retry import RetryPolicy, retry_with_alert
from roster_sync.models import CompanyId

logger = logging.getLogger(__name__)
_SESSION = requests.Session()

REQUEST_TIMEOUT = 15
DEFAULT_RETRY_POLICY = RetryPolicy(attempts=3, initial_delay=0.7)

# Where the backend may put the bearer token, tried in order.
TOKEN_PATHS: Tuple[Tuple[str, ...], ...] = (
    ("accessToken",),
    ("token",),
    ("data", "token"),
    ("data", "accessToken"),
)


class HeroEldError(RuntimeError):
    """Raised when the backend answers with a non-successful response."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class AuthenticationError(HeroEldError):
    """The authentication endpoint rejected the request."""


class TokenMissingError(HeroEldError):
    """The authentication response carried no recognisable token."""


class FetchError(HeroEldError):
    """A resource endpoint answered with a non-successful status."""


def basic_auth_header(username: str, password: str) -> str:
    encoded = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


def _safe_json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


def _response_text(response: requests.Response) -> str:
    try:
        return response.text
    except Exception:  # noqa: BLE001
        return "<no body>"


def _dig(payload: Any, path: Sequence[str]) -> Any:
    value = payload
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def extract_token(payload: Any) -> Optional[str]:
    """Return the first non-empty token found along TOKEN_PATHS."""
    for path in TOKEN_PATHS:
        value = _dig(payload, path)
        if isinstance(value, str) and value:
            return value
    return None


def _bare_list(payload: Any) -> Optional[List[Any]]:
    return payload if isinstance(payload, list) else None


def _wrapped_list(payload: Any) -> Optional[List[Any]]:
    data = _dig(payload, ("data",))
    return data if isinstance(data, list) else None


# Roster response shapes, tried in order; anything else is an empty roster.
ROSTER_EXTRACTORS: Tuple[Callable[[Any], Optional[List[Any]]], ...] = (_bare_list, _wrapped_list)


def extract_roster(payload: Any) -> List[Any]:
    for extractor in ROSTER_EXTRACTORS:
        items = extractor(payload)
        if items is not None:
            return items
    return []


class _BackendClient:
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_API_URL,
        timeout: float = REQUEST_TIMEOUT,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        alert_sink: Optional[AlertSink] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_policy = retry_policy
        self.alert_sink = alert_sink
        self.session = session or _SESSION

    def _with_retry(self, service: str, operation: Callable[[], Any]) -> Any:
        return retry_with_alert(
            operation,
            service=service,
            alert_sink=self.alert_sink,
            attempts=self.retry_policy.attempts,
            initial_delay=self.retry_policy.initial_delay,
        )


class TenantSession(_BackendClient):
    """Obtains bearer tokens scoped to a single company."""

    def __init__(self, credentials: OperatorCredentials, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.credentials = credentials

    def authenticate(self, company_id: Optional[CompanyId] = None) -> str:
        """Return a bearer token for `company_id` (None asks for the operator token)."""
        return self._with_retry("authenticate", lambda: self._authenticate_once(company_id))

    def _authenticate_once(self, company_id: Optional[CompanyId]) -> str:
        username = self.credentials.username
        body = {
            "company": company_id,
            "email": username,
            "password": self.credentials.password,
            "rCode": "hero",
            "strategy": "local",
        }
        response = self.session.post(
            f"{self.base_url}/authentication",
            json=body,
            headers={
                "Authorization": basic_auth_header(username, self.credentials.password),
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=self.timeout,
        )
        if not response.ok:
            text = _response_text(response)
            raise AuthenticationError(
                f"Auth failed for company {company_id}: {response.status_code} {response.reason} - {text}",
                status=response.status_code,
                body=text,
            )

        token = extract_token(_safe_json(response))
        if not token:
            raise TokenMissingError(f"No token found in auth response for company {company_id}")
        return token


class ResourceFetcher(_BackendClient):
    """Reads tenant resources with a bearer token."""

    def fetch_roster(self, token: str) -> List[Any]:
        return self._with_retry("fetch_roster", lambda: extract_roster(self._get("drivers", token, "Drivers")))

    def fetch_companies(self, token: str) -> Any:
        return self._with_retry("fetch_companies", lambda: self._get("companies", token, "Companies"))

    def _get(self, resource: str, token: str, label: str) -> Any:
        response = self.session.get(
            f"{self.base_url}/{resource}",
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=self.timeout,
        )
        if not response.ok:
            text = _response_text(response)
            raise FetchError(
                f"{label} fetch failed: {response.status_code} {response.reason} - {text}",
                status=response.status_code,
                body=text,
            )
        return _safe_json(response)
