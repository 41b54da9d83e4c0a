"""
Policystore configuration loader.

Only the command-line tool reads this file. Applications embedding the
adapter build their own engine and pass it in.
"""

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class DatabaseConfig:
    url: str = "sqlite:///./data/policy.db"
    table_name: str = "casbin_rule"


@dataclass
class CasbinConfig:
    model_path: str = "rbac_model.conf"


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class Config:
    """Static configuration loaded from config.yaml."""
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    casbin: CasbinConfig = field(default_factory=CasbinConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: str | Path) -> Config:
    """Load configuration from a YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    config = Config()

    # Database
    if "database" in data:
        db_data = data["database"] or {}
        config.database = DatabaseConfig(
            url=db_data.get("url", "sqlite:///./data/policy.db"),
            table_name=db_data.get("table_name", "casbin_rule"),
        )

    # Casbin model
    if "casbin" in data:
        casbin_data = data["casbin"] or {}
        model_path = casbin_data.get("model_path", "rbac_model.conf")
        # Relative model paths are resolved against the config file
        if not Path(model_path).is_absolute():
            model_path = str(config_path.parent / model_path)
        config.casbin = CasbinConfig(model_path=model_path)

    # Logging
    if "logging" in data:
        logging_data = data["logging"] or {}
        config.logging = LoggingConfig(
            level=logging_data.get("level", "INFO"),
        )

    return config
