# Policystore Models
from policystore.models.database import create_db_engine, create_async_db_engine
from policystore.models.rule import (
    CasbinRule,
    DEFAULT_TABLE_NAME,
    FIELD_COUNT,
    create_rule_table,
    model_to_rules,
)

__all__ = [
    "create_db_engine",
    "create_async_db_engine",
    "CasbinRule",
    "DEFAULT_TABLE_NAME",
    "FIELD_COUNT",
    "create_rule_table",
    "model_to_rules",
]
