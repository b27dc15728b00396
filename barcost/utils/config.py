"""
Runtime configuration for Bar Costing.

Where the database lives depends on the environment: ``production`` keeps it
under the user's Documents folder, ``development`` inside the project's
``data/`` directory. ``BAR_COSTING_DATA_DIR`` overrides both. Numeric
settings come from environment variables; a value that does not parse is
logged and replaced by the default.
"""

import logging
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, Optional

from .constants import DATABASE_FILENAME, DEFAULT_PROFIT_MARGIN_PERCENT

logger = logging.getLogger(__name__)

ENV_VAR_ENVIRONMENT = "BAR_COSTING_ENV"
ENV_VAR_DB_TIMEOUT = "BAR_COSTING_DB_TIMEOUT"
ENV_VAR_PROFIT_MARGIN = "BAR_COSTING_PROFIT_MARGIN"
ENV_VAR_DATA_DIR = "BAR_COSTING_DATA_DIR"
ENV_VAR_LOW_STOCK_THRESHOLD = "BAR_COSTING_LOW_STOCK_THRESHOLD"

DEFAULT_DB_TIMEOUT = 30


def _read_env(name: str, parse: Callable, default, is_valid: Callable = lambda value: True):
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = parse(raw)
    except (ValueError, InvalidOperation):
        value = None
    if value is None or not is_valid(value):
        logger.warning(f"Invalid {name}='{raw}', using default {default}")
        return default
    return value


class Config:
    """
    Application configuration.

    Args:
        environment: 'production' or 'development'
    """

    def __init__(self, environment: str = "production"):
        self.environment = environment

        override_dir = os.environ.get(ENV_VAR_DATA_DIR)
        if override_dir:
            self._database_dir = Path(override_dir)
        elif environment == "development":
            self._database_dir = Path(__file__).resolve().parents[2] / "data"
        else:
            self._database_dir = Path.home() / "Documents" / "BarCosting"

        self._database_path = self._database_dir / DATABASE_FILENAME

    def ensure_directories(self) -> None:
        self._database_dir.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        return self._database_path

    @property
    def database_url(self) -> str:
        return "sqlite:///" + self._database_path.as_posix()

    def database_exists(self) -> bool:
        return self._database_path.exists()

    @property
    def db_timeout(self) -> int:
        """SQLite busy timeout in seconds (BAR_COSTING_DB_TIMEOUT, > 0)."""
        return _read_env(ENV_VAR_DB_TIMEOUT, int, DEFAULT_DB_TIMEOUT, lambda v: v > 0)

    @property
    def default_profit_margin(self) -> Decimal:
        """Margin percent used when a caller gives none (BAR_COSTING_PROFIT_MARGIN).

        Negative margins are accepted; the costing engine passes them through.
        """
        return _read_env(
            ENV_VAR_PROFIT_MARGIN,
            Decimal,
            Decimal(DEFAULT_PROFIT_MARGIN_PERCENT),
            lambda v: v.is_finite(),
        )

    @property
    def low_stock_default_threshold(self) -> Optional[Decimal]:
        """Alert level given to new ingredients that specify none.

        Unset (the default) means new ingredients never raise low-stock alerts.
        """
        return _read_env(ENV_VAR_LOW_STOCK_THRESHOLD, Decimal, None, lambda v: v.is_finite() and v >= 0)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def __repr__(self) -> str:
        return f"Config(environment='{self.environment}', database_path='{self._database_path}')"


_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Once created, the singleton keeps its environment: a later call asking
    for a different one gets the existing instance and a warning, so the
    database cannot switch mid-session.

    Args:
        environment: Environment for first creation. Defaults to
            BAR_COSTING_ENV, then 'production'.

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get(ENV_VAR_ENVIRONMENT, "production")
        _config_instance = Config(environment)
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"get_config() called with environment='{environment}' but singleton "
            f"already exists with environment='{_config_instance.environment}'. "
            f"Returning existing singleton to prevent database switching."
        )

    return _config_instance


def reset_config():
    """Drop the global instance (tests)."""
    global _config_instance
    _config_instance = None
