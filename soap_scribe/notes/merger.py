"""Schema-fill merge: shape loosely-typed LLM output into a template schema.

The LLM is asked for JSON in the template's shape, but real responses drop
sections, return bare strings where an object was requested, wrap lists in
the wrong container or add keys nobody asked for. ``fill_schema`` takes
whatever parsed and returns a note with exactly the schema's sections,
taking each leaf from the LLM when it has the right kind and from the
schema default otherwise.

Both inputs are left untouched, and filling a filled note returns it
unchanged.
"""

import copy
from typing import Any, Optional

from soap_scribe.templates.schema import SectionType, is_categorized, section_type, table_columns

UNCATEGORIZED = "Findings"


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _container(llm_value: Any, key: str) -> Optional[list[Any]]:
    """``llm_value[key]`` if the value is an object, or the value itself if it is a bare list."""
    if isinstance(llm_value, dict):
        candidate = llm_value.get(key)
    else:
        candidate = llm_value
    return candidate if isinstance(candidate, list) else None


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    return value


def _normalize_rows(rows: list[Any], columns: list[str]) -> list[dict[str, Any]]:
    normalized = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        filled = {col: _cell(row.get(col)) for col in columns}
        for extra_key, extra_value in row.items():
            if extra_key not in filled:
                filled[extra_key] = _cell(extra_value)
        normalized.append(filled)
    return normalized


def _fill_wysiwyg(section: dict[str, Any], llm_value: Any) -> dict[str, Any]:
    value = llm_value.get("content") if isinstance(llm_value, dict) else llm_value
    content = _text(value)
    filled = copy.deepcopy(section)
    filled["content"] = content if content is not None else section.get("content", "")
    return filled


def _fill_list(section: dict[str, Any], llm_value: Any) -> dict[str, Any]:
    items = _container(llm_value, "items")
    filled = copy.deepcopy(section)
    if items is None:
        filled["items"] = copy.deepcopy(section.get("items", []))
    else:
        filled["items"] = [copy.deepcopy(item) for item in items if item is not None]
    return filled


def _is_loose_row(entry: Any, columns: list[str]) -> bool:
    """A row dict sent where a category was expected."""
    return isinstance(entry, dict) and "rows" not in entry and any(col in entry for col in columns)


def _group_loose_rows(
    section: dict[str, Any], rows: list[dict[str, Any]], columns: list[str]
) -> list[dict[str, Any]]:
    """Place uncategorized rows under the schema category listing the same test."""
    home: dict[str, str] = {}
    for category in section.get("categories") or []:
        for row in category.get("rows") or []:
            test = str(row.get(columns[0]) or "").strip().lower()
            if test:
                home.setdefault(test, category.get("name", ""))

    grouped: dict[str, list[dict[str, Any]]] = {}
    for row in _normalize_rows(rows, columns):
        name = home.get(str(row.get(columns[0]) or "").strip().lower(), UNCATEGORIZED)
        grouped.setdefault(name, []).append(row)

    order = [category.get("name", "") for category in section.get("categories") or []]
    names = [name for name in order if name in grouped]
    names += [name for name in grouped if name not in names]
    return [{"name": name, "rows": grouped[name]} for name in names]


def _fill_table(section: dict[str, Any], llm_value: Any) -> dict[str, Any]:
    columns = table_columns(section)
    filled = copy.deepcopy(section)

    if is_categorized(section):
        categories = _container(llm_value, "categories")
        if categories is None:
            return filled
        merged = [
            {
                **{k: copy.deepcopy(v) for k, v in category.items() if k != "rows"},
                "name": category.get("name") if category.get("name") is not None else "",
                "rows": _normalize_rows(category["rows"], columns),
            }
            for category in categories
            if isinstance(category, dict) and isinstance(category.get("rows"), list)
        ]
        loose = [entry for entry in categories if _is_loose_row(entry, columns)]
        if loose:
            merged.extend(_group_loose_rows(section, loose, columns))
        if categories and not merged:
            return filled
        filled["categories"] = merged
        return filled

    rows = _container(llm_value, "rows")
    if rows is not None:
        filled["rows"] = _normalize_rows(rows, columns)
    return filled


def _fill_composite(section: dict[str, Any], llm_value: Any) -> dict[str, Any]:
    source = llm_value
    if isinstance(llm_value, dict) and isinstance(llm_value.get("fields"), dict):
        source = llm_value["fields"]

    filled = copy.deepcopy(section)
    filled["fields"] = fill_schema(section.get("fields") or {}, source)
    return filled


_FILLERS = {
    SectionType.WYSIWYG: _fill_wysiwyg,
    SectionType.LIST: _fill_list,
    SectionType.TABLE: _fill_table,
    SectionType.COMPOSITE: _fill_composite,
}


def fill_section(section: dict[str, Any], llm_value: Any) -> dict[str, Any]:
    """Fill a single schema section from the LLM's value for it."""
    kind = section_type(section)
    if kind is None:
        return copy.deepcopy(section)
    return _FILLERS[kind](section, llm_value)


def fill_schema(schema: dict[str, Any], llm_output: Any) -> dict[str, Any]:
    """Merge parsed LLM output into a template schema.

    Args:
        schema: Ordered section schema (see ``soap_scribe.templates.schema``)
        llm_output: Parsed LLM response; anything that is not an object is
            treated as an empty object

    Returns:
        A new note with exactly the schema's keys, in schema order. Keys the
        LLM added that the schema does not declare are dropped.
    """
    source = llm_output if isinstance(llm_output, dict) else {}
    return {key: fill_section(section, source.get(key)) for key, section in schema.items()}

