"""
SQLAlchemy-backed casbin adapter.
"""

import logging
from typing import Sequence

from casbin import persist
from casbin.persist.adapter import load_policy_line
from sqlalchemy import delete, insert, select
from sqlalchemy.engine import Connection, Engine

from policystore.errors import ConfigError
from policystore.models.rule import (
    CasbinRule,
    DEFAULT_TABLE_NAME,
    create_rule_table,
    model_to_rules,
)


logger = logging.getLogger(__name__)


class Adapter(persist.Adapter):
    """Stores casbin policy rules in a single relational table.

    The table is created on construction if it does not exist yet.
    Database errors propagate unchanged.
    """

    def __init__(self, engine: Engine, table_name: str = DEFAULT_TABLE_NAME):
        if engine is None:
            raise ConfigError("Database engine is not initialized")
        if not table_name:
            raise ConfigError("Policy table name must not be empty")

        self._engine = engine
        self._table = create_rule_table(table_name)
        self.create_table()

    @property
    def table_name(self) -> str:
        return self._table.name

    def create_table(self) -> None:
        """Create the policy table if absent."""
        with self._engine.begin() as conn:
            self._table.create(conn, checkfirst=True)
        logger.info(f"Policy table ready: {self.table_name}")

    def load_policy(self, model) -> None:
        """Load every stored rule into the model."""
        with self._engine.connect() as conn:
            rows = conn.execute(select(self._table)).all()

        for row in rows:
            load_policy_line(CasbinRule.from_row(row).to_line(), model)

        logger.debug(f"Loaded {len(rows)} rules from {self.table_name}")

    def save_policy(self, model) -> bool:
        """Replace the table content with the model's "p" and "g" rules.

        The drop, create and inserts share one transaction.
        """
        rules = model_to_rules(model)

        with self._engine.begin() as conn:
            self._table.drop(conn, checkfirst=True)
            self._table.create(conn)
            for rule in rules:
                self._insert(conn, rule)

        logger.info(f"Saved {len(rules)} rules to {self.table_name}")
        return True

    def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Insert one rule. ``sec`` does not select a table."""
        with self._engine.begin() as conn:
            self._insert(conn, CasbinRule.from_rule(ptype, rule))
        return True

    def add_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> bool:
        """Insert several rules, one statement each, in one transaction."""
        with self._engine.begin() as conn:
            for rule in rules:
                self._insert(conn, CasbinRule.from_rule(ptype, rule))
        return True

    def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Delete rows matching the rule.

        Empty values in ``rule`` match any value in their column.
        """
        with self._engine.begin() as conn:
            self._delete(conn, CasbinRule.from_rule(ptype, rule))
        return True

    def remove_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> bool:
        with self._engine.begin() as conn:
            for rule in rules:
                self._delete(conn, CasbinRule.from_rule(ptype, rule))
        return True

    def remove_filtered_policy(self, sec: str, ptype: str, field_index: int, *field_values: str) -> bool:
        """Delete rows whose fields from ``field_index`` on match ``field_values``."""
        with self._engine.begin() as conn:
            self._delete(conn, CasbinRule.from_filter(ptype, field_index, field_values))
        return True

    def _insert(self, conn: Connection, rule: CasbinRule) -> None:
        conn.execute(insert(self._table).values(**rule.to_dict()))
        logger.debug(f"Inserted {rule!r} into {self.table_name}")

    def _delete(self, conn: Connection, rule: CasbinRule) -> int:
        result = conn.execute(
            delete(self._table).where(*rule.filter_clauses(self._table))
        )
        logger.debug(f"Deleted {result.rowcount} rows matching {rule!r} from {self.table_name}")
        return result.rowcount
