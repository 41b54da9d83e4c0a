"""
Asyncio flavour of the policy adapter, for casbin.AsyncEnforcer.
"""

import logging
from typing import Sequence

from casbin.persist.adapter import load_policy_line
from casbin.persist.adapters.asyncio import AsyncAdapter as BaseAsyncAdapter
from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from policystore.errors import ConfigError
from policystore.models.rule import (
    CasbinRule,
    DEFAULT_TABLE_NAME,
    create_rule_table,
    model_to_rules,
)


logger = logging.getLogger(__name__)


class AsyncAdapter(BaseAsyncAdapter):
    """Stores casbin policy rules through an async SQLAlchemy engine.

    The constructor cannot await, so use ``await AsyncAdapter.create(...)``
    or call ``create_table()`` before first use.
    """

    def __init__(self, engine: AsyncEngine, table_name: str = DEFAULT_TABLE_NAME):
        if engine is None:
            raise ConfigError("Database engine is not initialized")
        if not table_name:
            raise ConfigError("Policy table name must not be empty")

        self._engine = engine
        self._table = create_rule_table(table_name)

    @classmethod
    async def create(cls, engine: AsyncEngine, table_name: str = DEFAULT_TABLE_NAME) -> "AsyncAdapter":
        """Build an adapter and make sure its table exists."""
        adapter = cls(engine, table_name)
        await adapter.create_table()
        return adapter

    @property
    def table_name(self) -> str:
        return self._table.name

    async def create_table(self) -> None:
        """Create the policy table if absent."""
        async with self._engine.begin() as conn:
            await conn.run_sync(self._table.create, checkfirst=True)
        logger.info(f"Policy table ready: {self.table_name}")

    async def load_policy(self, model) -> None:
        async with self._engine.connect() as conn:
            result = await conn.execute(select(self._table))
            rows = result.all()

        for row in rows:
            load_policy_line(CasbinRule.from_row(row).to_line(), model)

        logger.debug(f"Loaded {len(rows)} rules from {self.table_name}")

    async def save_policy(self, model) -> bool:
        """Replace the table content with the model's "p" and "g" rules in one transaction."""
        rules = model_to_rules(model)

        async with self._engine.begin() as conn:
            await conn.run_sync(self._table.drop, checkfirst=True)
            await conn.run_sync(self._table.create)
            for rule in rules:
                await self._insert(conn, rule)

        logger.info(f"Saved {len(rules)} rules to {self.table_name}")
        return True

    async def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        async with self._engine.begin() as conn:
            await self._insert(conn, CasbinRule.from_rule(ptype, rule))
        return True

    async def add_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> bool:
        async with self._engine.begin() as conn:
            for rule in rules:
                await self._insert(conn, CasbinRule.from_rule(ptype, rule))
        return True

    async def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        async with self._engine.begin() as conn:
            await self._delete(conn, CasbinRule.from_rule(ptype, rule))
        return True

    async def remove_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> bool:
        async with self._engine.begin() as conn:
            for rule in rules:
                await self._delete(conn, CasbinRule.from_rule(ptype, rule))
        return True

    async def remove_filtered_policy(self, sec: str, ptype: str, field_index: int, *field_values: str) -> bool:
        async with self._engine.begin() as conn:
            await self._delete(conn, CasbinRule.from_filter(ptype, field_index, field_values))
        return True

    async def _insert(self, conn: AsyncConnection, rule: CasbinRule) -> None:
        await conn.execute(insert(self._table).values(**rule.to_dict()))
        logger.debug(f"Inserted {rule!r} into {self.table_name}")

    async def _delete(self, conn: AsyncConnection, rule: CasbinRule) -> int:
        result = await conn.execute(
            delete(self._table).where(*rule.filter_clauses(self._table))
        )
        logger.debug(f"Deleted {result.rowcount} rows matching {rule!r} from {self.table_name}")
        return result.rowcount
