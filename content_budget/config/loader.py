"""
Configuration management and loading.

Handles the monthly budget ceiling and the storage location of the store.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import yaml


MONTHLY_BUDGET_CENTS = 30000  # $300
DEFAULT_WARNING_PERCENT = 70.0
DEFAULT_CRITICAL_PERCENT = 90.0
DEFAULT_DB_PATH = "content_budget.db"
DEFAULT_SLOT = "tmh-budget-store"


@dataclass(frozen=True)
class BudgetConfig:
    """Monthly budget ceiling and health thresholds."""
    monthly_cents: int
    warning_percent: float = DEFAULT_WARNING_PERCENT
    critical_percent: float = DEFAULT_CRITICAL_PERCENT

    def __post_init__(self):
        """Validate budget values."""
        if self.monthly_cents <= 0:
            raise ValueError("monthly budget must be > 0")
        if not 0 < self.warning_percent < self.critical_percent:
            raise ValueError("warning_percent must be > 0 and below critical_percent")
        if self.critical_percent > 100:
            raise ValueError("critical_percent must be <= 100")


@dataclass(frozen=True)
class StorageConfig:
    """Where the store state is persisted."""
    db_path: str = DEFAULT_DB_PATH
    slot: str = DEFAULT_SLOT

    def __post_init__(self):
        if not self.db_path or not self.db_path.strip():
            raise ValueError("db_path cannot be empty")
        if not self.slot or not self.slot.strip():
            raise ValueError("slot cannot be empty")


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    budget: BudgetConfig
    storage: StorageConfig = field(default_factory=StorageConfig)


def default_config() -> AppConfig:
    """Configuration used when no file is supplied."""
    return AppConfig(budget=BudgetConfig(monthly_cents=MONTHLY_BUDGET_CENTS))


def load_budget_config(path: str) -> AppConfig:
    """Load and validate budget configuration from YAML file.

    Strict validation ensures a typo can never silently fall back to a
    different spending ceiling.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated AppConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Budget config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    allowed_top_keys = {'budget', 'storage'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    if 'budget' not in raw_config:
        raise ValueError("Missing required 'budget' section")

    budget = _parse_budget_config(raw_config['budget'])

    storage_data = raw_config.get('storage', {})
    if not isinstance(storage_data, dict):
        raise ValueError("'storage' must be a dictionary")
    storage = _parse_storage_config(storage_data)

    return AppConfig(budget=budget, storage=storage)


def _parse_budget_config(data: Dict) -> BudgetConfig:
    """Parse and validate the budget section.

    Raises:
        ValueError: If configuration is invalid
    """
    if not isinstance(data, dict):
        raise ValueError("'budget' must be a dictionary")

    allowed_keys = {'monthly_cents', 'warning_percent', 'critical_percent'}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown budget keys: {unknown_keys}")

    if 'monthly_cents' not in data:
        raise ValueError("Missing required 'monthly_cents' budget")

    monthly = data['monthly_cents']
    if isinstance(monthly, bool) or not isinstance(monthly, int) or monthly <= 0:
        raise ValueError("'monthly_cents' must be a positive integer")

    thresholds = {}
    for key in ('warning_percent', 'critical_percent'):
        if key in data:
            value = data[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"'{key}' must be a number")
            thresholds[key] = float(value)

    return BudgetConfig(monthly_cents=monthly, **thresholds)


def _parse_storage_config(data: Dict) -> StorageConfig:
    allowed_keys = {'db_path', 'slot'}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown storage keys: {unknown_keys}")

    values = {}
    for key in ('db_path', 'slot'):
        if key in data:
            if not isinstance(data[key], str):
                raise ValueError(f"'{key}' in storage must be a string")
            values[key] = data[key]

    return StorageConfig(**values)
