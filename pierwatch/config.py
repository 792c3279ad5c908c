"""
Configuration management for PierWatch.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class SchipholConfig:
    """Schiphol Public Flight API configuration."""
    app_id: Optional[str] = os.getenv('SCHIPHOL_APP_ID') or None
    app_key: Optional[str] = os.getenv('SCHIPHOL_APP_KEY') or None
    base_url: str = os.getenv('SCHIPHOL_BASE_URL', 'https://api.schiphol.nl/public-flights')
    resource_version: str = os.getenv('SCHIPHOL_RESOURCE_VERSION', 'v4')

    @property
    def is_configured(self) -> bool:
        return bool(self.app_id and self.app_key)


@dataclass(frozen=True)
class FetchConfig:
    """Request timeout, retry and pagination settings."""
    timeout_seconds: float = float(os.getenv('FETCH_TIMEOUT_SECONDS', '15'))
    max_attempts: int = int(os.getenv('FETCH_MAX_ATTEMPTS', '2'))
    retry_delay_seconds: float = float(os.getenv('FETCH_RETRY_DELAY_SECONDS', '0.5'))

    # Hard ceiling in case the provider never returns an empty page
    max_pages: int = int(os.getenv('FETCH_MAX_PAGES', '50'))
    page_delay_seconds: float = float(os.getenv('FETCH_PAGE_DELAY_SECONDS', '0.05'))


@dataclass(frozen=True)
class CacheConfig:
    """Response cache settings."""
    duration_seconds: int = int(os.getenv('CACHE_DURATION_SECONDS', '600'))
    # Entries older than this are purged; must exceed duration_seconds
    expiry_seconds: int = int(os.getenv('CACHE_EXPIRY_SECONDS', '900'))


@dataclass(frozen=True)
class AirportConfig:
    """Airport layout rules used when grouping flights by pier."""
    timezone: str = os.getenv('AIRPORT_TIMEZONE', 'Europe/Amsterdam')

    # Pier D serves both Schengen and non-Schengen gates
    multi_purpose_pier: str = 'D'
    schengen_piers: Tuple[str, ...] = ('A', 'B', 'C')
    schengen_gates: Tuple[int, int] = (59, 87)
    non_schengen_gates: Tuple[int, int] = (1, 57)

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@dataclass(frozen=True)
class DashboardConfig:
    """Defaults applied when the dashboard does not pass explicit filters."""
    carrier: str = os.getenv('DASHBOARD_CARRIER', 'KL')
    direction: str = os.getenv('DASHBOARD_DIRECTION', 'D')


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    schiphol: SchipholConfig
    fetch: FetchConfig
    cache: CacheConfig
    airport: AirportConfig
    dashboard: DashboardConfig

    # Flask settings
    secret_key: str
    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    cache = CacheConfig()
    if cache.expiry_seconds <= cache.duration_seconds:
        raise ValueError('CACHE_EXPIRY_SECONDS must be greater than CACHE_DURATION_SECONDS')

    return AppConfig(
        schiphol=SchipholConfig(),
        fetch=FetchConfig(),
        cache=cache,
        airport=AirportConfig(),
        dashboard=DashboardConfig(),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
