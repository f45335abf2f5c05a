"""Device groups (``/device/groups``)."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

from lmaccess._core._models import Property, to_properties
from lmaccess._core._validators import require_non_empty
from lmaccess.fetch import FilterClause

from ._base import FilterArg, Record, Resource

__all__ = ["DeviceGroups", "NewDeviceGroup"]


@dataclass
class NewDeviceGroup:
    """Body of a device group creation request.

    ``applies_to`` turns the group into a dynamic group, e.g.
    ``'isWindows() && hasCategory("collector")'``.
    """

    name: str
    parent_id: int = 1
    applies_to: Optional[str] = None
    description: Optional[str] = None
    disable_alerting: Optional[bool] = None
    custom_properties: Optional[Any] = None

    def __post_init__(self) -> None:
        require_non_empty({"name": self.name}, ["name"])
        self.custom_properties = to_properties(self.custom_properties)


class DeviceGroups(Resource):
    path = "/device/groups"
    name = "device_groups"

    def list(
        self,
        filter: FilterArg = None,
        *,
        name: Optional[str] = None,
        full_path: Optional[str] = None,
        batch_size: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> List[Record]:
        clauses = []
        if name is not None:
            clauses.append(FilterClause("name", name))
        if full_path is not None:
            clauses.append(FilterClause("fullPath", full_path))
        return self._list(
            filter, clauses, batch_size=batch_size, fields=fields, cancel=cancel
        )

    def add(
        self, group: NewDeviceGroup, *, cancel: Optional[threading.Event] = None
    ) -> Record:
        return self._create(group, cancel=cancel)

    def update(
        self,
        id: Union[int, str],
        changes: Mapping[str, Any],
        *,
        cancel: Optional[threading.Event] = None,
    ) -> Record:
        return self._patch(id, changes, cancel=cancel)

    def update_properties(
        self,
        id: Union[int, str],
        properties: Union[Mapping[str, Any], Sequence[Property]],
        *,
        cancel: Optional[threading.Event] = None,
    ) -> Record:
        return self._patch(
            id, {"customProperties": to_properties(properties)}, cancel=cancel
        )

    def remove(
        self,
        id: Union[int, str],
        *,
        delete_children: bool = False,
        delete_hard: bool = True,
        cancel: Optional[threading.Event] = None,
    ) -> Any:
        """Delete a group. Non-empty groups need ``delete_children=True``."""
        return self.portal.mutate(
            "DELETE",
            self.item_path(id),
            query=[
                ("deleteChildren", str(delete_children).lower()),
                ("deleteHard", str(delete_hard).lower()),
            ],
            cancel=cancel,
        )
