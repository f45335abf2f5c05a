"""Monitored devices (``/device/devices``)."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

from lmaccess._core._models import Property, to_properties
from lmaccess._core._validators import require_non_empty
from lmaccess.fetch import FilterClause

from ._base import FilterArg, Record, Resource

__all__ = ["Devices", "NewDevice"]


@dataclass
class NewDevice:
    """Body of a device creation request.

    Attributes:
        name: Hostname or IP address the collector polls.
        display_name: Name shown in the portal.
        preferred_collector_id: Collector that monitors the device.
        host_group_ids: Device groups to place the device in.
        description: Free text.
        disable_alerting: Create the device with alerting off.
        custom_properties: Device-level properties.
    """

    name: str
    display_name: str
    preferred_collector_id: int
    host_group_ids: Optional[Union[str, Sequence[int]]] = None
    description: Optional[str] = None
    disable_alerting: Optional[bool] = None
    custom_properties: Optional[Any] = None

    def __post_init__(self) -> None:
        require_non_empty(
            {"name": self.name, "display_name": self.display_name}, ["name", "display_name"]
        )
        if self.host_group_ids is not None and not isinstance(self.host_group_ids, str):
            # Vendor expects a comma separated string
            self.host_group_ids = ",".join(str(i) for i in self.host_group_ids)
        self.custom_properties = to_properties(self.custom_properties)


class Devices(Resource):
    path = "/device/devices"
    name = "devices"

    def list(
        self,
        filter: FilterArg = None,
        *,
        name: Optional[str] = None,
        display_name: Optional[str] = None,
        batch_size: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> List[Record]:
        """List devices, optionally by exact ``name`` or ``displayName``.

        Use *filter* for anything else, e.g.
        ``FilterByField("displayName", "web", operator="~")``.
        """
        clauses = []
        if name is not None:
            clauses.append(FilterClause("name", name))
        if display_name is not None:
            clauses.append(FilterClause("displayName", display_name))
        return self._list(
            filter, clauses, batch_size=batch_size, fields=fields, cancel=cancel
        )

    def properties(
        self,
        id: Union[int, str],
        *,
        batch_size: Optional[int] = None,
        cancel: Optional[threading.Event] = None,
    ) -> List[Record]:
        """All properties of a device, including inherited and system ones."""
        return self._list(
            path=f"{self.item_path(id)}/properties",
            batch_size=batch_size,
            cancel=cancel,
        )

    def add(
        self, device: NewDevice, *, cancel: Optional[threading.Event] = None
    ) -> Record:
        return self._create(device, cancel=cancel)

    def update(
        self,
        id: Union[int, str],
        changes: Mapping[str, Any],
        *,
        cancel: Optional[threading.Event] = None,
    ) -> Record:
        """Replace the given vendor fields, e.g. ``{"description": "db"}``."""
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
        delete_hard: bool = True,
        cancel: Optional[threading.Event] = None,
    ) -> Any:
        """Delete a device; ``delete_hard=False`` moves it to the recycle bin."""
        return self.portal.mutate(
            "DELETE",
            self.item_path(id),
            query=[("deleteHard", str(delete_hard).lower())],
            cancel=cancel,
        )
