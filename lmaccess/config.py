"""Runtime settings for lmaccess.

Settings can be built explicitly or read from the environment:

* ``LM_ACCOUNT``: portal account name (``{account}.logicmonitor.com``)
* ``LM_BASE_URL``: REST root override for on-prem or test portals
* ``LM_REQUEST_TIMEOUT``: per-request timeout in seconds
* ``LM_RATE_LIMIT_WAIT``: seconds to wait after an HTTP 429
* ``LM_MAX_RATE_LIMIT_RETRIES``: bound on 429 retries (unset means unbounded)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional

from .exceptions import LoginStrategyUnavailable

__all__ = [
    "DEFAULT_BATCH_SIZES",
    "MAX_BATCH_SIZE",
    "Settings",
]

# Vendor-side cap on the ``size`` query parameter
MAX_BATCH_SIZE = 1000

DEFAULT_BATCH_SIZES: Dict[str, int] = {
    "devices": 1000,
    "device_groups": 1000,
    "collectors": 1000,
    "collector_upgrade_history": 1000,
    "services": 300,
    "alert_rules": 250,
    "sdts": 300,
    "audit_logs": 1000,
}


def _env_number(env: Mapping[str, str], name: str, cast, default):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    """Connection and paging settings shared by every call of a portal.

    Attributes:
        account: Portal account name.
        base_url: Override for the REST root, e.g. for on-prem or test portals.
        request_timeout: Seconds before a single HTTP call is abandoned.
        rate_limit_wait: Seconds to wait before retrying after HTTP 429.
        max_rate_limit_retries: Maximum 429 retries per call, ``None`` for unbounded.
        rate_limit_deadline: Give up retrying 429s after this many seconds, ``None`` for never.
        batch_sizes: Default page size per resource type.
    """

    account: Optional[str] = None
    base_url: Optional[str] = None
    request_timeout: float = 30
    rate_limit_wait: float = 60
    max_rate_limit_retries: Optional[int] = None
    rate_limit_deadline: Optional[float] = None
    batch_sizes: Dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_BATCH_SIZES)
    )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, **overrides) -> Settings:
        """Build settings from ``LM_*`` environment variables.

        Parameters:
            env: Mapping to read from, defaults to ``os.environ``.
            overrides: Explicit values that win over the environment.
        """
        env = os.environ if env is None else env
        settings = cls(
            account=env.get("LM_ACCOUNT") or None,
            base_url=env.get("LM_BASE_URL") or None,
            request_timeout=_env_number(env, "LM_REQUEST_TIMEOUT", float, 30),
            rate_limit_wait=_env_number(env, "LM_RATE_LIMIT_WAIT", float, 60),
            max_rate_limit_retries=_env_number(
                env, "LM_MAX_RATE_LIMIT_RETRIES", int, None
            ),
        )
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(settings, **overrides) if overrides else settings

    @property
    def rest_url(self) -> str:
        """Root of the REST API, without a trailing slash."""
        if self.base_url:
            return self.base_url.rstrip("/")
        if not self.account:
            raise LoginStrategyUnavailable(
                "No portal account configured; pass account= or set LM_ACCOUNT"
            )
        return f"https://{self.account}.logicmonitor.com/santaba/rest"

    def batch_size(self, resource: str) -> int:
        """Default page size for *resource*, capped at the vendor maximum."""
        return min(self.batch_sizes.get(resource, MAX_BATCH_SIZE), MAX_BATCH_SIZE)
