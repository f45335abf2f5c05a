import json
from typing import Any, Mapping, Sequence, Union

from ._flatten import flatten

Records = Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]


def to_json(records: Records, *, flat: bool = False, indent: int = 2) -> str:
    """Serialize one record or a list of records.

    With ``flat=True`` each record is flattened the same way as for CSV
    export, so custom properties appear as ``prop.<name>`` keys.
    """
    if flat:
        if isinstance(records, Mapping):
            records = flatten(records)
        else:
            records = [flatten(record) for record in records]
    return json.dumps(records, default=str, indent=indent)
