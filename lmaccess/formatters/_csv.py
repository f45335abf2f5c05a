import csv
import io
from typing import Any, List, Mapping, Sequence

from ._flatten import flatten


def to_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """Convert records to CSV text; the header is the union of all flattened columns."""
    if not rows:
        return ""
    flat = [flatten(row) for row in rows]
    fieldnames: List[str] = []
    for row in flat:
        fieldnames.extend(k for k in row if k not in fieldnames)
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=fieldnames, restval="")
    writer.writeheader()
    writer.writerows(flat)
    return output.getvalue()
