# Policystore
from policystore.adapter import Adapter
from policystore.async_adapter import AsyncAdapter
from policystore.errors import ConfigError, StorageError
from policystore.models.rule import CasbinRule, DEFAULT_TABLE_NAME

__version__ = "0.1.0"

__all__ = [
    "Adapter",
    "AsyncAdapter",
    "ConfigError",
    "StorageError",
    "CasbinRule",
    "DEFAULT_TABLE_NAME",
]
