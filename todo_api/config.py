from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import List, Optional
from urllib.parse import urlparse
import logging
import os
import re

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "todo_app"
_DURATION_RE = re.compile(r"^\s*(\d+)\s*([dhms]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"d": "days", "h": "hours", "m": "minutes", "s": "seconds", "": "seconds"}


class ConfigurationError(RuntimeError):
    """Raised when the process cannot start with the current environment."""


def parse_duration(value: str) -> Optional[timedelta]:
    """Parse ``30d``/``12h``/``15m``/``90s`` or bare seconds."""
    match = _DURATION_RE.match(value or "")
    if not match:
        return None
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


def parse_int_env(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Invalid integer env value '%s', using default=%s", value, default)
        return default


def _database_name_from_uri(uri: Optional[str]) -> str:
    if not uri:
        return DEFAULT_DB_NAME
    path = urlparse(uri).path.lstrip("/")
    return path or DEFAULT_DB_NAME


@dataclass(frozen=True)
class Settings:
    environment: str
    mongodb_uri: Optional[str]
    mongodb_db: str
    db_timeout_ms: int
    jwt_secret: str
    jwt_algorithm: str
    jwt_expire: str
    port: int
    allowed_origins: List[str]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def token_lifetime(self) -> timedelta:
        lifetime = parse_duration(self.jwt_expire)
        if lifetime is None:
            raise ConfigurationError(f"JWT_EXPIRE has an invalid value '{self.jwt_expire}'")
        return lifetime

    def validate(self) -> None:
        if not self.jwt_secret:
            raise ConfigurationError("JWT_SECRET must be set before the API can authenticate requests")
        if self.token_lifetime <= timedelta(0):
            raise ConfigurationError("JWT_EXPIRE must be a positive duration")
        if self.is_production and not self.mongodb_uri:
            raise ConfigurationError("MONGODB_URI must be set when ENVIRONMENT=production")


@lru_cache
def get_settings() -> Settings:
    environment = os.getenv("ENVIRONMENT", "development").strip().lower()
    mongodb_uri = os.getenv("MONGODB_URI") or None
    mongodb_db = os.getenv("MONGODB_DB") or _database_name_from_uri(mongodb_uri)
    raw_origins = os.getenv("ALLOWED_ORIGINS", "")
    allowed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

    return Settings(
        environment=environment,
        mongodb_uri=mongodb_uri,
        mongodb_db=mongodb_db,
        db_timeout_ms=parse_int_env(os.getenv("DB_TIMEOUT_MS"), 5000),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        jwt_expire=os.getenv("JWT_EXPIRE", "30d"),
        port=parse_int_env(os.getenv("PORT"), 5000),
        allowed_origins=allowed_origins,
    )
