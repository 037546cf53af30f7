"""Configuration helpers for the roster sync worker.

Operator credentials come from the environment only (`HEROELD_USERNAME`,
`HEROELD_PASSWORD`). They are loaded once into an immutable `Settings` value and
handed to the backend clients explicitly.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://backend.apexhos.com"


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing."""


class CredentialMissingError(ConfigError):
    """Raised when the operator username or password is not configured."""


@dataclass(frozen=True)
class OperatorCredentials:
    username: str
    password: str

    def __repr__(self) -> str:
        return f"OperatorCredentials(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class Settings:
    heroeld_username: str
    heroeld_password: str
    api_base_url: str = DEFAULT_API_URL
    data_dir: str = "data"
    retry_attempts: int = 3
    retry_initial_delay: float = 0.7
    company_delay: float = 1.0
    request_timeout: float = 15.0
    worker_port: int = 8080
    eld_platform: str = "HERO"
    excluded_company_prefix: str = "zzz"

    def require_credentials(self) -> OperatorCredentials:
        """Return the operator credentials or fail before any backend call is made."""
        missing = [
            name
            for name, value in (
                ("HEROELD_USERNAME", self.heroeld_username),
                ("HEROELD_PASSWORD", self.heroeld_password),
            )
            if not value
        ]
        if missing:
            raise CredentialMissingError(f"Missing {' and '.join(missing)} in the environment.")
        return OperatorCredentials(username=self.heroeld_username, password=self.heroeld_password)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    username = os.getenv("HEROELD_USERNAME", "")
    password = os.getenv("HEROELD_PASSWORD", "")
    api_base_url = (os.getenv("HEROELD_API_URL") or DEFAULT_API_URL).rstrip("/")
    data_dir = os.getenv("ROSTER_DATA_DIR") or "data"
    retry_attempts = int(os.getenv("ROSTER_RETRY_ATTEMPTS", "3"))
    retry_initial_delay = float(os.getenv("ROSTER_RETRY_DELAY_SECONDS", "0.7"))
    company_delay = float(os.getenv("ROSTER_COMPANY_DELAY_SECONDS", "1.0"))
    request_timeout = float(os.getenv("ROSTER_REQUEST_TIMEOUT", "15"))
    worker_port = int(os.getenv("PORT", "8080"))

    if not username or not password:
        logger.warning("HEROELD_USERNAME/HEROELD_PASSWORD are not configured; backend calls will fail.")
    if retry_attempts < 1:
        raise ConfigError("ROSTER_RETRY_ATTEMPTS must be at least 1.")

    return Settings(
        heroeld_username=username,
        heroeld_password=password,
        api_base_url=api_base_url,
        data_dir=data_dir,
        retry_attempts=retry_attempts,
        retry_initial_delay=retry_initial_delay,
        company_delay=company_delay,
        request_timeout=request_timeout,
        worker_port=worker_port,
    )
