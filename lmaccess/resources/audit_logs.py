"""Audit (access) logs (``/setting/accesslogs``)."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import List, Optional, Sequence, Union

from lmaccess._core._models import to_epoch_seconds
from lmaccess._core._validators import validate_time_range
from lmaccess.fetch import FilterClause

from ._base import FilterArg, Record, Resource

__all__ = ["AuditLogs"]


class AuditLogs(Resource):
    path = "/setting/accesslogs"
    name = "audit_logs"

    def list(
        self,
        filter: FilterArg = None,
        *,
        since: Optional[Union[datetime, int]] = None,
        until: Optional[Union[datetime, int]] = None,
        username: Optional[str] = None,
        batch_size: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> List[Record]:
        """Audit log entries, optionally within ``[since, until]`` (epoch seconds or datetimes)."""
        start = to_epoch_seconds(since) if since is not None else None
        end = to_epoch_seconds(until) if until is not None else None
        validate_time_range(start, end)

        clauses = []
        if start is not None:
            clauses.append(FilterClause("happenedOn", start, ">:"))
        if end is not None:
            clauses.append(FilterClause("happenedOn", end, "<:"))
        if username is not None:
            clauses.append(FilterClause("username", username))
        return self._list(
            filter, clauses, batch_size=batch_size, fields=fields, cancel=cancel
        )
