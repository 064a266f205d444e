"""Declarative note schemas.

A schema is an ordered mapping of SOAP section keys (``subjective``,
``objective``, ``assessment``, ``plan`` and optionally ``billing``) to
sections. Every section is a plain JSON-ready dict with a ``type``:

- ``wysiwyg``: free text held in ``content``
- ``list``: an ``items`` array of strings or objects
- ``table``: flat ``rows`` or categorized ``categories`` (``{name, rows}``)
- ``composite``: named sub-sections under ``fields``

The schema doubles as the blank note: ``content`` is ``''``, ``items`` is
``[]`` and table rows carry only the test names. Those are the values the
merger falls back to.
"""

from enum import Enum
from typing import Any, Iterator, Optional

CORE_SECTIONS = ("subjective", "objective", "assessment", "plan")
DEFAULT_COLUMNS = ("test", "result", "notes")


class SectionType(str, Enum):
    """Section types a schema may declare."""

    WYSIWYG = "wysiwyg"
    TABLE = "table"
    COMPOSITE = "composite"
    LIST = "list"


class InvalidSchemaError(ValueError):
    """Schema declaration is malformed."""

    pass


def wysiwyg(placeholder: str = "", label: Optional[str] = None) -> dict[str, Any]:
    """Free-text section."""
    section: dict[str, Any] = {"type": SectionType.WYSIWYG.value}
    if label:
        section["label"] = label
    section["content"] = ""
    section["placeholder"] = placeholder
    return section


def list_section(placeholder: str = "", label: Optional[str] = None) -> dict[str, Any]:
    """List-of-items section (goals, interventions, codes...)."""
    section: dict[str, Any] = {"type": SectionType.LIST.value}
    if label:
        section["label"] = label
    section["items"] = []
    section["placeholder"] = placeholder
    return section


def blank_rows(tests: list[str], columns: tuple[str, ...] = DEFAULT_COLUMNS) -> list[dict[str, str]]:
    """Rows with the first column set to the test name and the rest empty."""
    first, rest = columns[0], columns[1:]
    return [{first: test, **{col: "" for col in rest}} for test in tests]


def table(
    tests: Optional[list[str]] = None,
    *,
    headers: Optional[list[str]] = None,
    columns: tuple[str, ...] = DEFAULT_COLUMNS,
    common_results: Optional[list[str]] = None,
    label: Optional[str] = None,
) -> dict[str, Any]:
    """Flat table section with one row per test."""
    section: dict[str, Any] = {"type": SectionType.TABLE.value}
    if label:
        section["label"] = label
    section["headers"] = headers or ["Test/Measurement", "Result", "Notes"]
    section["columns"] = list(columns)
    section["rows"] = blank_rows(tests or [], columns)
    section["allow_add_rows"] = True
    if common_results:
        section["common_results"] = list(common_results)
    return section


def categorized_table(
    categories: dict[str, list[str]],
    *,
    headers: Optional[list[str]] = None,
    common_results: Optional[list[str]] = None,
    label: Optional[str] = None,
) -> dict[str, Any]:
    """Table grouped into named categories (Observation, Palpation, ...)."""
    section: dict[str, Any] = {"type": SectionType.TABLE.value}
    if label:
        section["label"] = label
    section["headers"] = headers or ["Category", "Test/Measurement", "Result", "Notes"]
    section["columns"] = list(DEFAULT_COLUMNS)
    section["categories"] = [
        {"name": name, "rows": blank_rows(tests)} for name, tests in categories.items()
    ]
    section["allow_add_rows"] = True
    if common_results:
        section["common_results"] = list(common_results)
    return section


def composite(label: Optional[str] = None, **fields: dict[str, Any]) -> dict[str, Any]:
    """Section made of named sub-sections, kept in declaration order."""
    section: dict[str, Any] = {"type": SectionType.COMPOSITE.value}
    if label:
        section["label"] = label
    section["fields"] = dict(fields)
    return section


def billing_section(cpt_placeholder: str = "CPT codes based on interventions performed") -> dict[str, Any]:
    """Billing block shared by most evaluation and adjustment templates."""
    return composite(
        cpt_codes=list_section(cpt_placeholder),
        units=wysiwyg("Time-based units for billing"),
        icd10_codes=list_section("ICD-10 diagnosis codes"),
    )


def section_type(section: Any) -> Optional[SectionType]:
    """Return the declared type of a section, or None if it has none."""
    if not isinstance(section, dict):
        return None
    try:
        return SectionType(section.get("type"))
    except ValueError:
        return None


def is_categorized(section: dict[str, Any]) -> bool:
    """True for tables that group rows into categories."""
    return "categories" in section


def table_columns(section: dict[str, Any]) -> list[str]:
    """Column keys of a table section."""
    columns = section.get("columns")
    if isinstance(columns, list) and columns:
        return [str(c) for c in columns]
    return list(DEFAULT_COLUMNS)


def table_rows(section: dict[str, Any]) -> list[Any]:
    """All rows of a table, flattening categories."""
    if is_categorized(section):
        rows: list[Any] = []
        for category in section.get("categories") or []:
            if isinstance(category, dict) and isinstance(category.get("rows"), list):
                rows.extend(category["rows"])
        return rows
    rows = section.get("rows")
    return rows if isinstance(rows, list) else []


def iter_fields(schema: dict[str, Any], prefix: str = "") -> Iterator[tuple[str, dict[str, Any]]]:
    """Yield ``(dotted_path, section)`` for every leaf section of a schema."""
    for key, section in schema.items():
        path = f"{prefix}{key}"
        if section_type(section) == SectionType.COMPOSITE:
            yield from iter_fields(section.get("fields") or {}, prefix=f"{path}.")
        else:
            yield path, section


def field_names(schema: dict[str, Any]) -> set[str]:
    """Names of every leaf field (last path component)."""
    return {path.rsplit(".", 1)[-1] for path, _ in iter_fields(schema)}


def validate_schema(schema: Any, _path: str = "") -> None:
    """Check that a schema declaration is well formed.

    Raises:
        InvalidSchemaError: On unknown section types or missing containers
    """
    if not isinstance(schema, dict) or not schema:
        raise InvalidSchemaError(f"{_path or 'schema'}: expected a non-empty object of sections")

    for key, section in schema.items():
        path = f"{_path}{key}"
        kind = section_type(section)
        if kind is None:
            raise InvalidSchemaError(f"{path}: unknown or missing section type")

        if kind == SectionType.WYSIWYG and not isinstance(section.get("content", ""), str):
            raise InvalidSchemaError(f"{path}: wysiwyg content must be a string")
        elif kind == SectionType.LIST and not isinstance(section.get("items", []), list):
            raise InvalidSchemaError(f"{path}: list items must be an array")
        elif kind == SectionType.TABLE:
            container = "categories" if is_categorized(section) else "rows"
            if not isinstance(section.get(container), list):
                raise InvalidSchemaError(f"{path}: table {container} must be an array")
            if container == "categories":
                for category in section["categories"]:
                    if not isinstance(category, dict) or not isinstance(category.get("rows"), list):
                        raise InvalidSchemaError(f"{path}: every category needs a rows array")
        elif kind == SectionType.COMPOSITE:
            validate_schema(section.get("fields"), _path=f"{path}.")
