from typing import Any, Mapping, Optional, Sequence

from tabulate import tabulate

from ._flatten import flatten


def to_table(
    rows: Sequence[Mapping[str, Any]], *, headers: Optional[Sequence[str]] = None
) -> str:
    """Render records as a GitHub-style table using ``tabulate``.

    With *headers*, only those (flattened) columns are shown, in that order.
    """
    flat = [flatten(row) for row in rows]
    if headers is None:
        return tabulate(flat, headers="keys", tablefmt="github")
    table = [[row.get(h, "") for h in headers] for row in flat]
    return tabulate(table, headers=list(headers), tablefmt="github")
