"""Scheduled down time, i.e. maintenance windows (``/sdt/sdts``).

Alerts raised by an object in SDT are suppressed. Only one-time windows are
created here; recurring schedules are managed in the portal.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from lmaccess._core._models import to_epoch_millis
from lmaccess._core._validators import validate_time_range
from lmaccess.auth.signer import epoch_millis
from lmaccess.fetch import FilterClause

from ._base import FilterArg, Record, Resource

__all__ = ["NewSDT", "SDTs", "TARGETS"]

# target -> (SDT type, id field)
TARGETS: Dict[str, Tuple[str, str]] = {
    "device": ("DeviceSDT", "deviceId"),
    "device_group": ("DeviceGroupSDT", "deviceGroupId"),
    "collector": ("CollectorSDT", "collectorId"),
}

ONE_TIME = 1


@dataclass
class NewSDT:
    """A one-time maintenance window on a device, device group or collector."""

    target: str
    target_id: int
    start_date_time: int
    end_date_time: int
    comment: str = ""

    def __post_init__(self) -> None:
        if self.target not in TARGETS:
            raise ValueError(f"SDT target must be one of {sorted(TARGETS)}, got {self.target!r}")
        validate_time_range(self.start_date_time, self.end_date_time)
        if self.start_date_time == self.end_date_time:
            raise ValueError("SDT must have a non-zero duration")

    def payload(self) -> Dict[str, Any]:
        sdt_type, id_field = TARGETS[self.target]
        return {
            "type": sdt_type,
            id_field: self.target_id,
            "sdtType": ONE_TIME,
            "startDateTime": self.start_date_time,
            "endDateTime": self.end_date_time,
            "comment": self.comment,
        }


class SDTs(Resource):
    path = "/sdt/sdts"
    name = "sdts"

    def list(
        self,
        filter: FilterArg = None,
        *,
        type: Optional[str] = None,
        is_effective: Optional[bool] = None,
        batch_size: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> List[Record]:
        """List SDTs, optionally of one ``type`` (e.g. ``DeviceSDT``) or only active ones."""
        clauses = []
        if type is not None:
            clauses.append(FilterClause("type", type))
        if is_effective is not None:
            clauses.append(FilterClause("isEffective", str(is_effective).lower()))
        return self._list(
            filter, clauses, batch_size=batch_size, fields=fields, cancel=cancel
        )

    def start(
        self,
        target: str,
        target_id: int,
        duration: Union[int, timedelta],
        *,
        comment: str = "",
        start: Optional[Union[datetime, int]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Record:
        """Put an object into SDT.

        Parameters:
            target: ``"device"``, ``"device_group"`` or ``"collector"``.
            target_id: Id of the object.
            duration: Minutes, or a ``timedelta``.
            comment: Reason shown in the portal.
            start: Window start; defaults to now.
        """
        if not isinstance(duration, timedelta):
            duration = timedelta(minutes=duration)
        if duration <= timedelta(0):
            raise ValueError("SDT duration must be positive")
        if start is None:
            begin = (self.portal.clock or epoch_millis)()
        else:
            begin = to_epoch_millis(start)
        sdt = NewSDT(
            target=target,
            target_id=target_id,
            start_date_time=begin,
            end_date_time=begin + int(duration.total_seconds() * 1000),
            comment=comment,
        )
        return self._create(sdt.payload(), cancel=cancel)
