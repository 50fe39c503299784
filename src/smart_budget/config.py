"""Configuration management for Smart Budget."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .undo import DEFAULT_UNDO_WINDOW


@dataclass
class DataConfig:
    """Data storage configuration."""

    storage_dir: Path
    db_name: str = "smart_budget.db"

    @property
    def db_path(self) -> Path:
        return self.storage_dir / self.db_name


@dataclass
class UndoConfig:
    """Undo configuration."""

    window_seconds: float = DEFAULT_UNDO_WINDOW


@dataclass
class BudgetConfig:
    """Budget configuration."""

    default_monthly: float = 0.0


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class Config:
    """Complete application configuration."""

    data: DataConfig
    undo: UndoConfig
    budget: BudgetConfig
    logging: LoggingConfig


class ConfigManager:
    """Manages application configuration from TOML files."""

    def __init__(self, config_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional explicit path to config file.
                        If not provided, searches standard locations.
        """
        self.config_path = config_path or self._find_config()
        self._config = self._load_config()

    @property
    def data(self) -> DataConfig:
        """Get data configuration."""
        return self._config.data

    @property
    def undo(self) -> UndoConfig:
        """Get undo configuration."""
        return self._config.undo

    @property
    def budget(self) -> BudgetConfig:
        """Get budget configuration."""
        return self._config.budget

    @property
    def logging(self) -> LoggingConfig:
        return self._config.logging

    def _find_config(self) -> Path:
        """Find config file in standard locations."""
        locations = [
            Path.cwd() / "config.toml",
            Path.home() / ".config" / "smart-budget" / "config.toml",
            Path.home() / ".smart-budget" / "config.toml",
        ]

        for loc in locations:
            if loc.exists():
                return loc

        return Path.home() / ".config" / "smart-budget" / "config.toml"

    def _load_config(self) -> Config:
        """Load configuration from TOML file."""
        if not self.config_path.exists():
            return self._default_config()

        with open(self.config_path, "rb") as f:
            data = tomllib.load(f)

        data_section = data.get("data", {})
        return Config(
            data=DataConfig(
                storage_dir=Path(
                    data_section.get("storage_dir", "~/smart-budget/data")
                ).expanduser(),
                db_name=data_section.get("db_name", "smart_budget.db"),
            ),
            undo=UndoConfig(
                window_seconds=float(
                    data.get("undo", {}).get("window_seconds", DEFAULT_UNDO_WINDOW)
                ),
            ),
            budget=BudgetConfig(
                default_monthly=float(data.get("budget", {}).get("default_monthly", 0.0)),
            ),
            logging=LoggingConfig(
                level=str(data.get("logging", {}).get("level", "WARNING")).upper(),
            ),
        )

    def _default_config(self) -> Config:
        """Return default configuration."""
        return Config(
            data=DataConfig(storage_dir=Path.home() / "smart-budget" / "data"),
            undo=UndoConfig(),
            budget=BudgetConfig(),
            logging=LoggingConfig(),
        )

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get config value by dot-notation path.

        Args:
            key_path: Dot-separated path like 'undo.window_seconds'
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        value: Any = self._config

        for key in key_path.split("."):
            if hasattr(value, key):
                value = getattr(value, key)
            else:
                return default

        return value if value is not None else default
