"""
Policy rule table and row conversion.
"""

from dataclasses import dataclass, fields
from typing import Any, Sequence

from sqlalchemy import Column, MetaData, String, Table
from sqlalchemy.sql.elements import ColumnElement


DEFAULT_TABLE_NAME = "casbin_rule"

# Number of positional parameter columns (v0..v5)
FIELD_COUNT = 6
FIELD_NAMES = tuple(f"v{i}" for i in range(FIELD_COUNT))


def create_rule_table(table_name: str = DEFAULT_TABLE_NAME, metadata: MetaData | None = None) -> Table:
    """Build the policy rule table definition.

    The table has no primary key, no unique constraint and no index.
    """
    if metadata is None:
        metadata = MetaData()

    return Table(
        table_name,
        metadata,
        Column("ptype", String(10), default=""),
        *(Column(name, String(256), default="") for name in FIELD_NAMES),
    )


@dataclass
class CasbinRule:
    """One persisted policy rule."""

    ptype: str
    v0: str = ""
    v1: str = ""
    v2: str = ""
    v3: str = ""
    v4: str = ""
    v5: str = ""

    @classmethod
    def from_rule(cls, ptype: str, rule: Sequence[str]) -> "CasbinRule":
        """Build a row from a ptype and its parameters.

        Parameters beyond the sixth are dropped.
        """
        values = list(rule[:FIELD_COUNT])
        values += [""] * (FIELD_COUNT - len(values))
        return cls(ptype, *values)

    @classmethod
    def from_filter(cls, ptype: str, field_index: int, field_values: Sequence[str]) -> "CasbinRule":
        """Build a row holding only the positions covered by a filtered removal."""
        values = [""] * FIELD_COUNT
        for i in range(FIELD_COUNT):
            if field_index <= i < field_index + len(field_values):
                values[i] = field_values[i - field_index]
        return cls(ptype, *values)

    @classmethod
    def from_row(cls, row: Any) -> "CasbinRule":
        """Build a rule from a result row. NULL columns read as empty."""
        mapping = row._mapping
        return cls(
            mapping["ptype"] or "",
            *(mapping[name] or "" for name in FIELD_NAMES),
        )

    @property
    def values(self) -> list[str]:
        return [getattr(self, name) for name in FIELD_NAMES]

    def to_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_line(self) -> str:
        """Render as a policy line, e.g. ``p, alice, data1, read``.

        Empty fields are skipped wherever they appear.
        """
        return ", ".join([self.ptype] + [value for value in self.values if value])

    def filter_clauses(self, table: Table) -> list[ColumnElement[bool]]:
        """WHERE clauses matching this rule.

        Empty fields do not constrain their column.
        """
        clauses = [table.c.ptype == self.ptype]
        for name, value in zip(FIELD_NAMES, self.values):
            if value:
                clauses.append(table.c[name] == value)
        return clauses

    def __repr__(self) -> str:
        return f"<CasbinRule({self.to_line()})>"


def model_to_rules(model) -> list[CasbinRule]:
    """Flatten a casbin model into rows, section "p" first then "g"."""
    rules = []
    for sec in ("p", "g"):
        if sec not in model.model:
            continue
        for ptype, assertion in model.model[sec].items():
            for rule in assertion.policy:
                rules.append(CasbinRule.from_rule(ptype, rule))
    return rules
