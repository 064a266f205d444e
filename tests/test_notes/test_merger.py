"""Tests for merging LLM output into template schemas."""

import copy

import pytest

from soap_scribe.notes import fill_schema, fill_section
from soap_scribe.templates import get_template
from soap_scribe.templates.schema import (
    categorized_table,
    composite,
    list_section,
    table,
    wysiwyg,
)


@pytest.fixture
def knee_schema():
    return get_template("knee").build_schema()


@pytest.fixture
def simple_schema():
    return {
        "subjective": wysiwyg("History..."),
        "objective": table(["Gait", "Balance"]),
        "assessment": composite(impression=wysiwyg(), goals=list_section()),
        "plan": wysiwyg("Plan..."),
    }


class TestFillSchema:
    """Tests for fill_schema."""

    def test_schema_keys_and_order(self, knee_schema):
        """Test the note has exactly the schema's keys in order."""
        note = fill_schema(knee_schema, {"plan": {}, "extra": {"content": "x"}, "subjective": {}})

        assert list(note) == list(knee_schema)

    def test_non_object_output_gives_defaults(self, simple_schema):
        """Test anything that is not an object yields the defaults."""
        for llm_output in (None, "text", [1, 2], 42):
            assert fill_schema(simple_schema, llm_output) == simple_schema

    def test_inputs_not_mutated(self, simple_schema):
        """Test neither the schema nor the LLM output is changed."""
        schema_before = copy.deepcopy(simple_schema)
        llm_output = {"objective": {"rows": [{"test": "Gait", "result": None}]}}
        output_before = copy.deepcopy(llm_output)

        note = fill_schema(simple_schema, llm_output)
        note["objective"]["rows"][0]["result"] = "changed"

        assert simple_schema == schema_before
        assert llm_output == output_before

    def test_idempotent(self, knee_schema):
        """Test filling a filled note returns it unchanged."""
        llm_output = {
            "subjective": {"content": "Right knee pain for 3 weeks"},
            "objective": {
                "categories": [
                    {"name": "Special Tests", "rows": [{"test": "McMurray's Test", "result": "Positive"}]}
                ]
            },
            "assessment": {"clinical_impression": "Medial meniscus", "short_term_goals": ["Stairs"]},
            "plan": {"fields": {"interventions": ["TherEx"]}},
        }
        once = fill_schema(knee_schema, llm_output)

        assert fill_schema(knee_schema, once) == once

    def test_mcmurray_positive(self, knee_schema):
        """Test a categorized objective keeps the LLM's categories and results."""
        llm_output = {
            "objective": {
                "categories": [
                    {
                        "name": "Special Tests",
                        "rows": [{"test": "McMurray's Test", "result": "Positive", "notes": "Medial"}],
                    }
                ]
            }
        }

        objective = fill_schema(knee_schema, llm_output)["objective"]

        assert objective["categories"] == [
            {
                "name": "Special Tests",
                "rows": [{"test": "McMurray's Test", "result": "Positive", "notes": "Medial"}],
            }
        ]
        assert objective["headers"] == knee_schema["objective"]["headers"]
        assert objective["common_results"] == knee_schema["objective"]["common_results"]


class TestWysiwyg:
    """Tests for free-text sections."""

    def test_content_object(self):
        """Test the content property is used."""
        assert fill_section(wysiwyg(), {"content": "Pain 6/10"})["content"] == "Pain 6/10"

    def test_bare_string(self):
        """Test a bare string is used as content."""
        assert fill_section(wysiwyg(), "Pain 6/10")["content"] == "Pain 6/10"

    def test_numbers_become_text(self):
        """Test scalars are stringified."""
        assert fill_section(wysiwyg(), 4)["content"] == "4"
        assert fill_section(wysiwyg(), {"content": True})["content"] == "true"

    def test_wrong_kind_falls_back(self):
        """Test lists, nulls and objects without content use the default."""
        for value in (["a"], None, {"text": "x"}, {"content": None}):
            assert fill_section(wysiwyg("hint"), value)["content"] == ""

    def test_placeholder_kept(self):
        """Test schema properties other than content survive."""
        filled = fill_section(wysiwyg("hint", label="Subjective"), "x")

        assert filled["placeholder"] == "hint"
        assert filled["label"] == "Subjective"


class TestList:
    """Tests for list sections."""

    def test_items_object(self):
        """Test the items property is used."""
        assert fill_section(list_section(), {"items": ["a", "b"]})["items"] == ["a", "b"]

    def test_bare_list_drops_nulls(self):
        """Test a bare list is used and null entries dropped."""
        assert fill_section(list_section(), ["97110", None, "97140"])["items"] == ["97110", "97140"]

    def test_object_items_kept(self):
        """Test structured items pass through."""
        items = [{"code": "97110", "units": 2}]

        assert fill_section(list_section(), items)["items"] == items

    def test_wrong_kind_falls_back(self):
        """Test a string falls back to empty items."""
        assert fill_section(list_section(), "97110")["items"] == []


class TestTable:
    """Tests for table sections."""

    def test_rows_object(self):
        """Test rows are normalized to the columns."""
        filled = fill_section(table(["Gait"]), {"rows": [{"test": "Gait", "result": "Antalgic"}]})

        assert filled["rows"] == [{"test": "Gait", "result": "Antalgic", "notes": ""}]

    def test_bare_rows(self):
        """Test a bare list of rows is accepted."""
        filled = fill_section(table(), [{"test": "Balance", "result": "WNL", "notes": None}])

        assert filled["rows"] == [{"test": "Balance", "result": "WNL", "notes": ""}]

    def test_extra_row_keys_kept(self):
        """Test unknown row keys survive."""
        filled = fill_section(table(), [{"test": "ROM", "result": "110", "side": "R"}])

        assert filled["rows"][0]["side"] == "R"

    def test_non_dict_rows_dropped(self):
        """Test rows that are not objects are skipped."""
        filled = fill_section(table(), ["Gait", {"test": "Balance"}])

        assert filled["rows"] == [{"test": "Balance", "result": "", "notes": ""}]

    def test_missing_rows_keep_blank_rows(self):
        """Test the schema's blank rows remain when the LLM gave nothing."""
        schema = table(["Gait", "Balance"])

        assert fill_section(schema, {"content": "x"})["rows"] == schema["rows"]

    def test_custom_columns(self):
        """Test tables with their own columns are normalized to them."""
        schema = table(columns=("test", "initial", "discharge", "change"))

        filled = fill_section(schema, [{"test": "Knee Flexion", "initial": "90", "discharge": "125"}])

        assert filled["rows"] == [
            {"test": "Knee Flexion", "initial": "90", "discharge": "125", "change": ""}
        ]

    def test_categories_filter_malformed(self):
        """Test only categories with a rows array are kept."""
        schema = categorized_table({"Observation": ["Gait"]})

        filled = fill_section(
            schema,
            {"categories": [{"name": "Palpation", "rows": [{"test": "AC Joint"}]}, {"name": "Bad"}, "x"]},
        )

        assert filled["categories"] == [
            {"name": "Palpation", "rows": [{"test": "AC Joint", "result": "", "notes": ""}]}
        ]

    def test_bare_categories(self):
        """Test a bare list of categories is accepted."""
        filled = fill_section(categorized_table({"A": []}), [{"name": "B", "rows": []}])

        assert filled["categories"] == [{"name": "B", "rows": []}]

    def test_categories_missing_keep_defaults(self):
        """Test the schema's categories remain when the LLM gave nothing usable."""
        schema = categorized_table({"Observation": ["Gait"]})

        assert fill_section(schema, {"rows": []})["categories"] == schema["categories"]

    def test_bare_rows_for_categorized_table(self, knee_schema):
        """Test bare rows land under the category that lists the same test."""
        filled = fill_section(
            knee_schema["objective"],
            [{"test": "Lachman's Test", "result": "Negative", "notes": ""}],
        )

        assert filled["categories"] == [
            {
                "name": "Special Tests",
                "rows": [{"test": "Lachman's Test", "result": "Negative", "notes": ""}],
            }
        ]

    def test_unknown_bare_rows_grouped_as_findings(self):
        """Test rows for tests the schema does not list go under Findings."""
        schema = categorized_table({"Observation": ["Gait"]})

        filled = fill_section(
            schema,
            {"categories": [{"test": "Gait", "result": "Antalgic"}, {"test": "Grip", "result": "4/5"}]},
        )

        assert filled["categories"] == [
            {"name": "Observation", "rows": [{"test": "Gait", "result": "Antalgic", "notes": ""}]},
            {"name": "Findings", "rows": [{"test": "Grip", "result": "4/5", "notes": ""}]},
        ]

    def test_unusable_categories_keep_defaults(self):
        """Test a list with nothing usable leaves the schema's categories."""
        schema = categorized_table({"Observation": ["Gait"]})

        filled = fill_section(schema, ["x", {"name": "Bad"}])

        assert filled["categories"] == schema["categories"]

    def test_bare_rows_idempotent(self, knee_schema):
        """Test filling a note merged from bare rows returns it unchanged."""
        once = fill_section(knee_schema["objective"], [{"test": "Gait Pattern", "result": "WNL"}])

        assert fill_section(knee_schema["objective"], once) == once


class TestComposite:
    """Tests for composite sections."""

    def test_fields_wrapper(self):
        """Test values under a fields object are read."""
        schema = composite(impression=wysiwyg(), goals=list_section())

        filled = fill_section(schema, {"fields": {"impression": "Improving", "goals": ["Walk 1 mile"]}})

        assert filled["fields"]["impression"]["content"] == "Improving"
        assert filled["fields"]["goals"]["items"] == ["Walk 1 mile"]

    def test_direct_fields(self):
        """Test sub-section values directly on the object are read."""
        schema = composite(impression=wysiwyg())

        filled = fill_section(schema, {"impression": {"content": "Improving"}})

        assert filled["fields"]["impression"]["content"] == "Improving"

    def test_missing_composite(self):
        """Test a missing composite yields all defaults."""
        schema = composite(impression=wysiwyg(), goals=list_section())

        assert fill_section(schema, None) == schema

    def test_nested_table(self):
        """Test tables inside composites accept bare row lists."""
        schema = composite(measurements=table())

        filled = fill_section(schema, {"measurements": [{"test": "TUG", "result": "12 s"}]})

        assert filled["fields"]["measurements"]["rows"] == [
            {"test": "TUG", "result": "12 s", "notes": ""}
        ]
