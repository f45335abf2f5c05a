"""Flatten nested portal records into single-level rows."""

from typing import Any, Dict, Mapping

PROPERTY_LISTS = (
    "customProperties",
    "systemProperties",
    "autoProperties",
    "inheritedProperties",
)


def _is_property_list(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(v, Mapping) and set(v) >= {"name", "value"} for v in value
    )


def flatten(record: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten *record*; ``[{name, value}]`` property arrays become ``prop.<name>`` columns."""
    row: Dict[str, Any] = {}
    for key, value in record.items():
        column = f"{prefix}{key}"
        if key in PROPERTY_LISTS and _is_property_list(value):
            for prop in value:
                row[f"prop.{prop['name']}"] = prop["value"]
        elif isinstance(value, Mapping):
            row.update(flatten(value, prefix=f"{column}."))
        elif isinstance(value, list):
            row[column] = ",".join(str(v) for v in value)
        else:
            row[column] = value
    return row
