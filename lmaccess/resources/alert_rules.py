"""Alert rules (``/setting/alert/rules``)."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from lmaccess._core._validators import require_non_empty
from lmaccess.fetch import FilterClause

from ._base import FilterArg, Record, Resource

__all__ = ["AlertRules", "NewAlertRule"]

LEVELS = ("All", "Warn", "Error", "Critical")


@dataclass
class NewAlertRule:
    """Body of an alert rule creation request.

    Wildcards (``"*"``) match every device, group, datasource, instance or
    datapoint. Lower ``priority`` values are evaluated first.
    """

    name: str
    priority: int
    escalating_chain_id: int
    escalation_interval: int = 15
    level_str: str = "All"
    devices: List[str] = field(default_factory=lambda: ["*"])
    device_groups: List[str] = field(default_factory=lambda: ["*"])
    datasource: str = "*"
    instance: str = "*"
    datapoint: str = "*"
    suppress_alert_clear: Optional[bool] = None
    suppress_alert_ack_sdt: Optional[bool] = None

    def __post_init__(self) -> None:
        require_non_empty({"name": self.name}, ["name"])
        if self.level_str not in LEVELS:
            raise ValueError(f"level_str must be one of {LEVELS}, got {self.level_str!r}")


class AlertRules(Resource):
    path = "/setting/alert/rules"
    name = "alert_rules"

    def list(
        self,
        filter: FilterArg = None,
        *,
        name: Optional[str] = None,
        batch_size: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> List[Record]:
        clauses = [FilterClause("name", name)] if name is not None else []
        return self._list(
            filter, clauses, batch_size=batch_size, fields=fields, cancel=cancel
        )

    def add(
        self, rule: NewAlertRule, *, cancel: Optional[threading.Event] = None
    ) -> Record:
        return self._create(rule, cancel=cancel)
