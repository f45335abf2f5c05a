"""Per-resource configuration of the shared fetcher and mutation path."""

from .alert_rules import AlertRules, NewAlertRule
from .audit_logs import AuditLogs
from .collectors import Collectors, NewCollector, UpgradeInfo
from .device_groups import DeviceGroups, NewDeviceGroup
from .devices import Devices, NewDevice
from .sdts import SDTs, NewSDT
from .services import Services

__all__ = [
    "AlertRules",
    "AuditLogs",
    "Collectors",
    "DeviceGroups",
    "Devices",
    "NewAlertRule",
    "NewCollector",
    "NewDevice",
    "NewDeviceGroup",
    "NewSDT",
    "SDTs",
    "Services",
    "UpgradeInfo",
]
