"""Command functions operating on the default portal.

Every function signs its own requests and either returns the complete result
or raises an :mod:`lmaccess.exceptions` error. List functions page through
the whole collection; ``get_*`` functions raise ``NotFoundError`` for an
unknown id while list functions return an empty list when a filter matches
nothing.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import requests

import lmaccess

from ._core._models import to_epoch_seconds
from .auth import Auth
from .auth.signer import epoch_millis
from .config import Settings
from .exceptions import AuthenticationError, LMError, TransportError
from .fetch import ALL, FetchMode
from .portal import Portal
from .resources import (
    NewAlertRule,
    NewCollector,
    NewDevice,
    NewDeviceGroup,
    UpgradeInfo,
)
from .resources._base import FilterArg

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]
Id = Union[int, str]


def login(
    strategy: str = "all",
    account: Optional[str] = None,
    access_id: Optional[str] = None,
    access_key: Optional[str] = None,
    *,
    settings: Optional[Settings] = None,
    session: Optional[requests.Session] = None,
) -> Portal:
    """Configure the default portal used by the command functions.

    Parameters:
        strategy: ``"all"``, ``"explicit"`` or ``"environment"``; see :meth:`Auth.login`.
        account: Portal account name; defaults to ``LM_ACCOUNT``.
        access_id: API token id for the explicit strategy.
        access_key: API token key for the explicit strategy.
        settings: Full settings, overriding the environment.
        session: ``requests.Session`` to reuse.

    Returns:
        The new default :class:`Portal`.

    Raises:
        LoginStrategyUnavailable: if no credential or account can be found.
    """
    with lmaccess._lock:
        auth = Auth().login(strategy, access_id=access_id, access_key=access_key)
        if settings is None:
            settings = Settings.from_env(account=account)
        portal = Portal(auth, settings, session=session)
        lmaccess._auth = auth
        lmaccess._portal = portal
    logger.info("Logged in to %s", settings.rest_url)
    return portal


def logout() -> None:
    with lmaccess._lock:
        lmaccess._auth.logout()
        lmaccess._portal = None


def _portal() -> Portal:
    if lmaccess._portal is None:
        logger.debug("No portal configured, logging in from the environment")
        login(strategy="environment")
    return lmaccess._portal  # type: ignore[return-value]


def status(raise_on_error: bool = False) -> Dict[str, str]:
    """Check that the portal is reachable and accepts the credential.

    Returns:
        ``{"Portal API": "OK"}``, or a short description of the failure.

    Raises:
        LMError: when *raise_on_error* is set and the check fails.
    """
    try:
        _portal().mutate("GET", "/device/devices", query=[("size", 1), ("fields", "id")])
        state = "OK"
    except AuthenticationError as exc:
        if raise_on_error:
            raise
        logger.error("Portal rejected the credential: %s", exc)
        state = "Unauthorized"
    except TransportError as exc:
        if raise_on_error:
            raise
        logger.error("Portal unreachable: %s", exc)
        state = "Unreachable"
    except LMError as exc:
        if raise_on_error:
            raise
        logger.error("Portal check failed: %s", exc)
        state = "Error"
    return {"Portal API": state}


def fetch(
    resource_path: str,
    mode: FetchMode = ALL,
    batch_size: int = 1000,
    **kwargs: Any,
) -> Union[List[Record], Record]:
    """Fetch any collection or record; see :meth:`PaginatedFetcher.fetch`."""
    return _portal().fetch(resource_path, mode, batch_size, **kwargs)


# -- devices -----------------------------------------------------------------


def get_devices(
    filter: FilterArg = None,
    *,
    name: Optional[str] = None,
    display_name: Optional[str] = None,
    batch_size: Optional[int] = None,
    fields: Optional[Sequence[str]] = None,
    cancel: Optional[threading.Event] = None,
) -> List[Record]:
    """List devices.

    Examples:
        >>> lmaccess.get_devices(display_name="web01")  # doctest: +SKIP
        >>> lmaccess.get_devices(FilterByField("displayName", "web", operator="~"))  # doctest: +SKIP
    """
    return _portal().devices.list(
        filter,
        name=name,
        display_name=display_name,
        batch_size=batch_size,
        fields=fields,
        cancel=cancel,
    )


def get_device(id: Id, *, fields: Optional[Sequence[str]] = None) -> Record:
    return _portal().devices.get(id, fields=fields)


def get_device_properties(id: Id) -> List[Record]:
    return _portal().devices.properties(id)


def add_device(
    name: str,
    display_name: str,
    preferred_collector_id: int,
    *,
    host_group_ids: Optional[Sequence[int]] = None,
    description: Optional[str] = None,
    properties: Optional[Mapping[str, Any]] = None,
    disable_alerting: Optional[bool] = None,
) -> Record:
    """Create a device and return it as stored by the portal.

    Raises:
        VendorApplicationError: e.g. when a device with that name already exists.
    """
    device = NewDevice(
        name=name,
        display_name=display_name,
        preferred_collector_id=preferred_collector_id,
        host_group_ids=host_group_ids,
        description=description,
        disable_alerting=disable_alerting,
        custom_properties=properties,
    )
    return _portal().devices.add(device)


def update_device(id: Id, **changes: Any) -> Record:
    """Replace vendor fields of a device, e.g. ``update_device(12, description="db")``.

    Snake-case keywords are sent in the vendor's camelCase, so
    ``disable_alerting=True`` and ``disableAlerting=True`` are the same change.
    """
    return _portal().devices.update(id, changes)


def update_device_properties(id: Id, properties: Mapping[str, Any]) -> Record:
    return _portal().devices.update_properties(id, properties)


def remove_device(id: Id, *, delete_hard: bool = True) -> Any:
    return _portal().devices.remove(id, delete_hard=delete_hard)


# -- device groups -----------------------------------------------------------


def get_device_groups(
    filter: FilterArg = None,
    *,
    name: Optional[str] = None,
    full_path: Optional[str] = None,
    batch_size: Optional[int] = None,
    fields: Optional[Sequence[str]] = None,
    cancel: Optional[threading.Event] = None,
) -> List[Record]:
    return _portal().device_groups.list(
        filter,
        name=name,
        full_path=full_path,
        batch_size=batch_size,
        fields=fields,
        cancel=cancel,
    )


def get_device_group(id: Id, *, fields: Optional[Sequence[str]] = None) -> Record:
    return _portal().device_groups.get(id, fields=fields)


def add_device_group(
    name: str,
    parent_id: int = 1,
    *,
    applies_to: Optional[str] = None,
    description: Optional[str] = None,
    properties: Optional[Mapping[str, Any]] = None,
    disable_alerting: Optional[bool] = None,
) -> Record:
    group = NewDeviceGroup(
        name=name,
        parent_id=parent_id,
        applies_to=applies_to,
        description=description,
        disable_alerting=disable_alerting,
        custom_properties=properties,
    )
    return _portal().device_groups.add(group)


def update_device_group_properties(id: Id, properties: Mapping[str, Any]) -> Record:
    return _portal().device_groups.update_properties(id, properties)


def remove_device_group(id: Id, *, delete_children: bool = False) -> Any:
    return _portal().device_groups.remove(id, delete_children=delete_children)


# -- collectors --------------------------------------------------------------


def get_collectors(
    filter: FilterArg = None,
    *,
    hostname: Optional[str] = None,
    description: Optional[str] = None,
    batch_size: Optional[int] = None,
    fields: Optional[Sequence[str]] = None,
    cancel: Optional[threading.Event] = None,
) -> List[Record]:
    return _portal().collectors.list(
        filter,
        hostname=hostname,
        description=description,
        batch_size=batch_size,
        fields=fields,
        cancel=cancel,
    )


def get_collector(id: Id, *, fields: Optional[Sequence[str]] = None) -> Record:
    return _portal().collectors.get(id, fields=fields)


def add_collector(
    description: str,
    *,
    collector_group_id: Optional[int] = None,
    backup_agent_id: Optional[int] = None,
    escalating_chain_id: Optional[int] = None,
) -> Record:
    collector = NewCollector(
        description=description,
        collector_group_id=collector_group_id,
        backup_agent_id=backup_agent_id,
        escalating_chain_id=escalating_chain_id,
    )
    return _portal().collectors.add(collector)


def remove_collector(id: Id) -> Any:
    return _portal().collectors.remove(id)


def get_collector_upgrade_history(
    filter: FilterArg = None, *, batch_size: Optional[int] = None
) -> List[Record]:
    return _portal().collectors.upgrade_history(filter, batch_size=batch_size)


def update_collector_version(
    id: Id,
    major_version: int,
    minor_version: int,
    *,
    start: Optional[Union[datetime, int]] = None,
    timezone: Optional[str] = None,
    description: Optional[str] = None,
) -> Any:
    """Schedule a one-time collector upgrade, starting now unless *start* is given.

    Parameters:
        start: Datetime or epoch seconds.
    """
    portal = _portal()
    if start is None:
        start_epoch = (portal.clock or epoch_millis)() // 1000
    else:
        start_epoch = to_epoch_seconds(start)
    upgrade = UpgradeInfo(
        major_version=major_version,
        minor_version=minor_version,
        start_epoch=start_epoch,
        timezone=timezone,
        description=description,
    )
    return portal.collectors.update_version(id, upgrade)


# -- services ----------------------------------------------------------------


def get_services(
    filter: FilterArg = None,
    *,
    name: Optional[str] = None,
    type: Optional[str] = None,
    batch_size: Optional[int] = None,
    fields: Optional[Sequence[str]] = None,
    cancel: Optional[threading.Event] = None,
) -> List[Record]:
    return _portal().services.list(
        filter, name=name, type=type, batch_size=batch_size, fields=fields, cancel=cancel
    )


def get_service(id: Id, *, fields: Optional[Sequence[str]] = None) -> Record:
    return _portal().services.get(id, fields=fields)


def remove_service(id: Id) -> Any:
    return _portal().services.remove(id)


# -- alert rules -------------------------------------------------------------


def get_alert_rules(
    filter: FilterArg = None,
    *,
    name: Optional[str] = None,
    batch_size: Optional[int] = None,
    fields: Optional[Sequence[str]] = None,
    cancel: Optional[threading.Event] = None,
) -> List[Record]:
    return _portal().alert_rules.list(
        filter, name=name, batch_size=batch_size, fields=fields, cancel=cancel
    )


def get_alert_rule(id: Id, *, fields: Optional[Sequence[str]] = None) -> Record:
    return _portal().alert_rules.get(id, fields=fields)


def add_alert_rule(
    name: str,
    priority: int,
    escalating_chain_id: int,
    **options: Any,
) -> Record:
    """Create an alert rule; *options* are the remaining :class:`NewAlertRule` fields."""
    rule = NewAlertRule(
        name=name,
        priority=priority,
        escalating_chain_id=escalating_chain_id,
        **options,
    )
    return _portal().alert_rules.add(rule)


def remove_alert_rule(id: Id) -> Any:
    return _portal().alert_rules.remove(id)


# -- SDT ---------------------------------------------------------------------


def get_sdts(
    filter: FilterArg = None,
    *,
    type: Optional[str] = None,
    is_effective: Optional[bool] = None,
    batch_size: Optional[int] = None,
    cancel: Optional[threading.Event] = None,
) -> List[Record]:
    return _portal().sdts.list(
        filter, type=type, is_effective=is_effective, batch_size=batch_size, cancel=cancel
    )


def get_sdt(id: Id) -> Record:
    return _portal().sdts.get(id)


def start_sdt(
    target: str,
    target_id: int,
    duration: Union[int, timedelta] = 60,
    *,
    comment: str = "",
    start: Optional[Union[datetime, int]] = None,
) -> Record:
    """Start a one-time maintenance window.

    Parameters:
        target: ``"device"``, ``"device_group"`` or ``"collector"``.
        target_id: Id of the object to put in SDT.
        duration: Minutes, or a ``timedelta``; one hour by default.
        comment: Reason shown in the portal.
        start: Datetime or epoch milliseconds; now by default.

    Examples:
        >>> lmaccess.start_sdt("device", 42, 30, comment="patching")  # doctest: +SKIP
    """
    return _portal().sdts.start(target, target_id, duration, comment=comment, start=start)


def remove_sdt(id: Id) -> Any:
    return _portal().sdts.remove(id)


# -- audit logs --------------------------------------------------------------


def get_audit_logs(
    filter: FilterArg = None,
    *,
    since: Optional[Union[datetime, int]] = None,
    until: Optional[Union[datetime, int]] = None,
    username: Optional[str] = None,
    batch_size: Optional[int] = None,
    cancel: Optional[threading.Event] = None,
) -> List[Record]:
    return _portal().audit_logs.list(
        filter,
        since=since,
        until=until,
        username=username,
        batch_size=batch_size,
        cancel=cancel,
    )
