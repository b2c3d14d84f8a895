"""
Connection Settings
Defaults, environment overrides and per-call merging
"""

from pydantic_settings import BaseSettings
from typing import Optional, Dict, Any, Mapping
import logging

logger = logging.getLogger(__name__)

# Keys accepted from legacy datasource configuration arrays
LEGACY_KEYS = {
    "pass": "password",
    "login": "user",
}

class ConnectionSettings(BaseSettings):
    # Server
    scheme: str = "http"
    host: str = "localhost"
    port: int = 5984

    # Credentials (HTTP basic auth)
    user: Optional[str] = None
    password: Optional[str] = None

    # Collection-name namespacing
    prefix: Optional[str] = None

    # Transport
    timeout: float = 120

    @property
    def base_url(self) -> str:
        """Absolute base URI for the server"""
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def display_url(self) -> str:
        """Base URI with credentials masked, safe for logs"""
        if self.user:
            return f"{self.scheme}://{self.user}:***@{self.host}:{self.port}"
        return self.base_url

    @property
    def auth(self) -> Optional[tuple]:
        if self.user is None:
            return None
        return (self.user, self.password or "")

    def merge(self, overrides: Optional[Mapping[str, Any]] = None) -> "ConnectionSettings":
        """
        Return new settings with ``overrides`` applied over these ones

        Args:
            overrides: Mapping of setting names (legacy aliases accepted)

        Returns:
            Validated ConnectionSettings
        """
        values = self.model_dump()
        values.update(normalize(overrides))
        return ConnectionSettings(**values)

    class Config:
        env_prefix = "COUCHSTORE_"
        env_file = ".env"
        extra = "ignore"


def normalize(config: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Translate legacy keys and drop the ones settings do not know about"""
    if not config:
        return {}

    known = set(ConnectionSettings.model_fields)
    result = {}

    for key, value in config.items():
        key = LEGACY_KEYS.get(key, key)
        if key in known:
            result[key] = value
        else:
            logger.debug(f"Ignoring unknown connection setting: {key}")

    return result
