"""Tests for schema builders and helpers."""

import pytest

from soap_scribe.templates.schema import (
    InvalidSchemaError,
    SectionType,
    blank_rows,
    categorized_table,
    composite,
    field_names,
    is_categorized,
    iter_fields,
    list_section,
    section_type,
    table,
    table_columns,
    table_rows,
    validate_schema,
    wysiwyg,
)


class TestBuilders:
    """Tests for section builder functions."""

    def test_wysiwyg_blank_content(self):
        """Test free-text sections start empty with a placeholder."""
        section = wysiwyg("Patient history...", label="Subjective")

        assert section == {
            "type": "wysiwyg",
            "label": "Subjective",
            "content": "",
            "placeholder": "Patient history...",
        }

    def test_list_section_blank_items(self):
        """Test list sections start with no items."""
        section = list_section("SMART goals")

        assert section["type"] == "list"
        assert section["items"] == []
        assert "label" not in section

    def test_blank_rows_use_first_column_for_test_name(self):
        """Test blank rows carry the test name and empty cells."""
        rows = blank_rows(["Knee Flexion"], ("test", "initial", "discharge", "change"))

        assert rows == [{"test": "Knee Flexion", "initial": "", "discharge": "", "change": ""}]

    def test_flat_table(self):
        """Test a flat table has one row per test."""
        section = table(["Gait Pattern", "Balance"], common_results=["WNL"])

        assert section["type"] == "table"
        assert section["columns"] == ["test", "result", "notes"]
        assert [r["test"] for r in section["rows"]] == ["Gait Pattern", "Balance"]
        assert section["common_results"] == ["WNL"]
        assert not is_categorized(section)

    def test_table_without_tests(self):
        """Test a table may start with no rows."""
        assert table()["rows"] == []

    def test_categorized_table_keeps_order(self):
        """Test categories keep declaration order."""
        section = categorized_table({"Observation": ["Gait"], "Palpation": ["AC Joint", "Biceps"]})

        assert is_categorized(section)
        assert [c["name"] for c in section["categories"]] == ["Observation", "Palpation"]
        assert section["categories"][1]["rows"][1] == {"test": "Biceps", "result": "", "notes": ""}

    def test_composite_field_order(self):
        """Test composite fields keep keyword order."""
        section = composite(b=wysiwyg(), a=list_section())

        assert list(section["fields"]) == ["b", "a"]


class TestHelpers:
    """Tests for schema inspection helpers."""

    def test_section_type(self):
        """Test declared types are recognized."""
        assert section_type({"type": "table"}) == SectionType.TABLE
        assert section_type({"type": "chart"}) is None
        assert section_type("text") is None

    def test_table_columns_default(self):
        """Test missing columns fall back to test/result/notes."""
        assert table_columns({"type": "table"}) == ["test", "result", "notes"]

    def test_table_rows_flattens_categories(self):
        """Test rows are gathered across categories."""
        section = categorized_table({"A": ["x"], "B": ["y", "z"]})

        assert [r["test"] for r in table_rows(section)] == ["x", "y", "z"]

    def test_table_rows_ignores_malformed_categories(self):
        """Test categories without a rows list are skipped."""
        section = {"type": "table", "categories": [{"name": "A"}, "bad", {"rows": [{"test": "x"}]}]}

        assert table_rows(section) == [{"test": "x"}]

    def test_iter_fields_uses_dotted_paths(self):
        """Test composite leaves are yielded with their paths."""
        schema = {
            "subjective": wysiwyg(),
            "plan": composite(interventions=list_section(), frequency=wysiwyg()),
        }

        assert [path for path, _ in iter_fields(schema)] == [
            "subjective",
            "plan.interventions",
            "plan.frequency",
        ]
        assert field_names(schema) == {"subjective", "interventions", "frequency"}


class TestValidateSchema:
    """Tests for validate_schema."""

    def test_valid_schema(self):
        """Test a well-formed schema passes."""
        validate_schema(
            {
                "subjective": wysiwyg(),
                "objective": categorized_table({"Observation": ["Gait"]}),
                "plan": composite(goals=list_section()),
            }
        )

    def test_empty_schema_rejected(self):
        """Test an empty schema is rejected."""
        with pytest.raises(InvalidSchemaError):
            validate_schema({})

    def test_unknown_type_rejected(self):
        """Test unknown section types are rejected."""
        with pytest.raises(InvalidSchemaError, match="subjective"):
            validate_schema({"subjective": {"type": "chart"}})

    def test_table_without_rows_rejected(self):
        """Test a table needs a rows array."""
        with pytest.raises(InvalidSchemaError, match="rows"):
            validate_schema({"objective": {"type": "table", "rows": None}})

    def test_category_without_rows_rejected(self):
        """Test every category needs rows."""
        with pytest.raises(InvalidSchemaError, match="category"):
            validate_schema({"objective": {"type": "table", "categories": [{"name": "A"}]}})

    def test_nested_error_path(self):
        """Test errors inside composites name the nested path."""
        with pytest.raises(InvalidSchemaError, match="plan.goals"):
            validate_schema({"plan": composite(goals={"type": "list", "items": "x"})})
