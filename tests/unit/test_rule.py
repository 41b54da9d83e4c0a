"""
Tests for the policy rule row model.
"""

from pathlib import Path

import pytest
from casbin.model import Model

from policystore.models.rule import (
    CasbinRule,
    FIELD_COUNT,
    create_rule_table,
    model_to_rules,
)


MODEL_PATH = Path(__file__).parent / "fixtures" / "rbac_model.conf"


def _model() -> Model:
    model = Model()
    model.load_model(str(MODEL_PATH))
    return model


class TestCreateRuleTable:
    """Tests for the table definition."""

    def test_default_schema(self):
        """Test the fixed seven column layout."""
        table = create_rule_table()

        assert table.name == "casbin_rule"
        assert [c.name for c in table.columns] == [
            "ptype", "v0", "v1", "v2", "v3", "v4", "v5",
        ]
        assert table.c.ptype.type.length == 10
        assert all(table.c[f"v{i}"].type.length == 256 for i in range(FIELD_COUNT))

    def test_no_keys_or_indexes(self):
        table = create_rule_table("rules")

        assert table.name == "rules"
        assert list(table.primary_key.columns) == []
        assert table.indexes == set()


class TestCasbinRule:
    """Tests for CasbinRule conversions."""

    def test_from_rule_pads_missing_fields(self):
        """Test that unused trailing fields are empty strings."""
        rule = CasbinRule.from_rule("p", ["alice", "data1", "read"])

        assert rule.ptype == "p"
        assert rule.values == ["alice", "data1", "read", "", "", ""]

    def test_from_rule_drops_extra_fields(self):
        """Test that parameters beyond the sixth are dropped."""
        rule = CasbinRule.from_rule("p", ["a", "b", "c", "d", "e", "f", "g", "h"])

        assert rule.values == ["a", "b", "c", "d", "e", "f"]

    def test_to_line(self):
        rule = CasbinRule.from_rule("g", ["alice", "admin"])
        assert rule.to_line() == "g, alice, admin"

    def test_to_line_skips_empty_fields(self):
        """Test that empty middle fields are skipped, not kept as blanks."""
        rule = CasbinRule.from_rule("p", ["alice", "", "read"])
        assert rule.to_line() == "p, alice, read"

    def test_to_dict(self):
        rule = CasbinRule.from_rule("p", ["alice"])
        assert rule.to_dict() == {
            "ptype": "p",
            "v0": "alice",
            "v1": "",
            "v2": "",
            "v3": "",
            "v4": "",
            "v5": "",
        }

    @pytest.mark.parametrize(
        "field_index,field_values,expected",
        [
            (0, ["alice"], ["alice", "", "", "", "", ""]),
            (1, ["data1"], ["", "data1", "", "", "", ""]),
            (1, ["data1", "read"], ["", "data1", "read", "", "", ""]),
            (5, ["x", "y"], ["", "", "", "", "", "x"]),
            (-1, ["skipped", "alice"], ["alice", "", "", "", "", ""]),
            (6, ["ignored"], ["", "", "", "", "", ""]),
        ],
    )
    def test_from_filter(self, field_index, field_values, expected):
        """Test that only positions covered by the filter are set."""
        rule = CasbinRule.from_filter("p", field_index, field_values)
        assert rule.values == expected

    def test_filter_clauses_skip_empty_values(self):
        """Test that empty values do not constrain their column."""
        table = create_rule_table()
        rule = CasbinRule.from_rule("p", ["alice", "", "read"])

        clauses = rule.filter_clauses(table)

        # ptype, v0 and v2 only
        assert len(clauses) == 3
        columns = [clause.left.name for clause in clauses]
        assert columns == ["ptype", "v0", "v2"]

    def test_repr(self):
        rule = CasbinRule.from_rule("p", ["alice", "data1", "read"])
        assert repr(rule) == "<CasbinRule(p, alice, data1, read)>"


class TestModelToRules:
    """Tests for flattening a casbin model."""

    def test_policy_section_before_grouping(self):
        """Test that "p" rules come first, in list order."""
        model = _model()
        model.add_policy("g", "g", ["alice", "admin"])
        model.add_policy("p", "p", ["alice", "data1", "read"])
        model.add_policy("p", "p", ["bob", "data2", "write"])

        rules = model_to_rules(model)

        assert [r.to_line() for r in rules] == [
            "p, alice, data1, read",
            "p, bob, data2, write",
            "g, alice, admin",
        ]

    def test_empty_model(self):
        assert model_to_rules(_model()) == []
