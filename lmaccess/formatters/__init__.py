"""Export helpers for fetched records."""

from ._csv import to_csv
from ._flatten import flatten
from ._json import to_json
from ._table import to_table

__all__ = ["flatten", "to_csv", "to_json", "to_table"]
