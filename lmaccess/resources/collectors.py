"""Collectors (``/setting/collector/collectors``).

Upgrade history and version scheduling only exist on the newer API and are
sent with ``X-Version: 2``.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from lmaccess._core._models import to_payload
from lmaccess.fetch import FilterClause

from ._base import FilterArg, Record, Resource

__all__ = ["Collectors", "NewCollector", "UpgradeInfo"]

UPGRADE_API_VERSION = 2


@dataclass
class NewCollector:
    """Body of a collector creation request."""

    description: str
    collector_group_id: Optional[int] = None
    backup_agent_id: Optional[int] = None
    escalating_chain_id: Optional[int] = None
    enable_fail_back: Optional[bool] = None


@dataclass
class UpgradeInfo:
    """One-time collector upgrade schedule.

    Attributes:
        major_version: Target major version, e.g. ``34``.
        minor_version: Target minor version, e.g. ``100``.
        start_epoch: Upgrade start, seconds since the epoch.
        timezone: Portal timezone id, e.g. ``"America/Los_Angeles"``.
        description: Free text shown in the upgrade history.
    """

    major_version: int
    minor_version: int
    start_epoch: int
    timezone: Optional[str] = None
    description: Optional[str] = None


class Collectors(Resource):
    path = "/setting/collector/collectors"
    name = "collectors"

    def list(
        self,
        filter: FilterArg = None,
        *,
        hostname: Optional[str] = None,
        description: Optional[str] = None,
        batch_size: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> List[Record]:
        clauses = []
        if hostname is not None:
            clauses.append(FilterClause("hostname", hostname))
        if description is not None:
            clauses.append(FilterClause("description", description))
        return self._list(
            filter, clauses, batch_size=batch_size, fields=fields, cancel=cancel
        )

    def add(
        self, collector: NewCollector, *, cancel: Optional[threading.Event] = None
    ) -> Record:
        return self._create(collector, cancel=cancel)

    def upgrade_history(
        self,
        filter: FilterArg = None,
        *,
        batch_size: Optional[int] = None,
        cancel: Optional[threading.Event] = None,
    ) -> List[Record]:
        """Past and scheduled collector upgrades."""
        return self._list(
            filter,
            path=f"{self.path}/upgradeHistory",
            batch_size=batch_size or self.portal.batch_size("collector_upgrade_history"),
            api_version=UPGRADE_API_VERSION,
            cancel=cancel,
        )

    def update_version(
        self,
        id: Union[int, str],
        upgrade: UpgradeInfo,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> Any:
        """Schedule a one-time upgrade (or downgrade) of one collector."""
        return self._patch(
            id,
            {"onetimeUpgradeInfo": to_payload(upgrade)},
            api_version=UPGRADE_API_VERSION,
            cancel=cancel,
        )
