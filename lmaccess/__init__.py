"""lmaccess: signed, paginated access to the LogicMonitor REST API.

Quick Start:
    ```python
    import lmaccess

    # Reads LM_ACCOUNT, LM_ACCESS_ID and LM_ACCESS_KEY
    lmaccess.login()

    # Every device, paged transparently
    devices = lmaccess.get_devices()

    # Filtered: the operator is chosen per field
    web = lmaccess.get_devices(
        lmaccess.FilterByField("displayName", "web", operator="~")
    )

    # One record; raises NotFoundError for an unknown id
    device = lmaccess.get_device(42)

    # Maintenance window of 30 minutes
    lmaccess.start_sdt("device", 42, 30, comment="patching")
    ```

Key Features:
    - **Signing**: LMv1 HMAC signatures, computed fresh for every request
    - **Pagination**: offset/size paging driven by the server-reported total
    - **Rate limits**: HTTP 429 is waited out and retried, other errors are raised
    - **Resources**: devices, device groups, collectors, services, alert rules,
      SDTs and audit logs
"""

import logging
import threading
from importlib.metadata import version
from typing import Optional

from .api import (
    add_alert_rule,
    add_collector,
    add_device,
    add_device_group,
    fetch,
    get_alert_rule,
    get_alert_rules,
    get_audit_logs,
    get_collector,
    get_collector_upgrade_history,
    get_collectors,
    get_device,
    get_device_group,
    get_device_groups,
    get_device_properties,
    get_devices,
    get_sdt,
    get_sdts,
    get_service,
    get_services,
    login,
    logout,
    remove_alert_rule,
    remove_collector,
    remove_device,
    remove_device_group,
    remove_sdt,
    remove_service,
    start_sdt,
    status,
    update_collector_version,
    update_device,
    update_device_group_properties,
    update_device_properties,
)
from .auth import Auth, Credential
from .config import Settings
from .exceptions import (
    AuthenticationError,
    FetchCancelled,
    LMError,
    LoginStrategyUnavailable,
    NotFoundError,
    RateLimited,
    TransportError,
    VendorApplicationError,
)
from .fetch import AllRecords, FilterByField, FilterClause, PaginatedFetcher, SingleById
from .portal import Portal

logger = logging.getLogger(__name__)

__all__ = [
    # api.py
    "login",
    "logout",
    "status",
    "fetch",
    "get_devices",
    "get_device",
    "get_device_properties",
    "add_device",
    "update_device",
    "update_device_properties",
    "remove_device",
    "get_device_groups",
    "get_device_group",
    "add_device_group",
    "update_device_group_properties",
    "remove_device_group",
    "get_collectors",
    "get_collector",
    "add_collector",
    "remove_collector",
    "get_collector_upgrade_history",
    "update_collector_version",
    "get_services",
    "get_service",
    "remove_service",
    "get_alert_rules",
    "get_alert_rule",
    "add_alert_rule",
    "remove_alert_rule",
    "get_sdts",
    "get_sdt",
    "start_sdt",
    "remove_sdt",
    "get_audit_logs",
    # auth
    "Auth",
    "Credential",
    # config.py
    "Settings",
    # portal.py
    "Portal",
    # fetch
    "AllRecords",
    "FilterByField",
    "FilterClause",
    "PaginatedFetcher",
    "SingleById",
    # exceptions.py
    "LMError",
    "LoginStrategyUnavailable",
    "TransportError",
    "RateLimited",
    "AuthenticationError",
    "NotFoundError",
    "VendorApplicationError",
    "FetchCancelled",
]

__version__ = version("lmaccess")

_auth = Auth()
_portal: Optional[Portal] = None
_lock = threading.Lock()


def __getattr__(name):  # type: ignore
    """Module-level getattr exposing `lmaccess.__auth__` and `lmaccess.__portal__`.

    Other unhandled attributes raise as `AttributeError` as expected.
    """
    if name not in ["__auth__", "__portal__"]:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    return _auth if name == "__auth__" else _portal
