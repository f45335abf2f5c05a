"""Portal: the connection context shared by every command function.

A ``Portal`` bundles the settings, the credential, one ``requests.Session``
and a logger. Reads go through the paginated fetcher, writes through
:meth:`Portal.mutate`; both sign every request afresh.
"""

from __future__ import annotations

import logging
import threading
from functools import cached_property
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

import requests

from lmaccess._core._models import RequestDescriptor
from lmaccess._core._request import Transport
from lmaccess._core._retry import Sleep, rate_limit_retrying
from lmaccess.auth import Auth
from lmaccess.auth.signer import Clock
from lmaccess.config import Settings
from lmaccess.exceptions import FetchCancelled
from lmaccess.fetch import ALL, FetchMode, PaginatedFetcher
from lmaccess.resources import (
    AlertRules,
    AuditLogs,
    Collectors,
    DeviceGroups,
    Devices,
    SDTs,
    Services,
)

logger = logging.getLogger(__name__)


class Portal:
    """Signed access to one portal account.

    Parameters:
        auth: Logged-in :class:`Auth`.
        settings: Account, timeouts and rate-limit policy.
        session: ``requests.Session`` to reuse; one is created if omitted.
        logger: Destination for request and retry logging.
        clock: Epoch-millisecond clock used for signing.
        sleep: Replacement for ``time.sleep`` during rate-limit waits.
    """

    def __init__(
        self,
        auth: Auth,
        settings: Optional[Settings] = None,
        *,
        session: Optional[requests.Session] = None,
        logger: logging.Logger = logger,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleep] = None,
    ) -> None:
        self.auth = auth
        self.settings = settings or Settings.from_env()
        self.session = session or requests.Session()
        self.logger = logger
        self.clock = clock
        self.sleep = sleep
        self.transport = Transport(
            base_url=self.settings.rest_url,
            credential=auth.get_credential(),
            session=self.session,
            timeout=self.settings.request_timeout,
            clock=clock,
            logger=logger,
        )
        self.fetcher = PaginatedFetcher(
            self.transport, self.settings, sleep=sleep, logger=logger
        )

    def __repr__(self) -> str:
        return f"Portal(url={self.settings.rest_url!r}, auth={self.auth!r})"

    def fetch(
        self,
        resource_path: str,
        mode: FetchMode = ALL,
        batch_size: int = 1000,
        **kwargs: Any,
    ) -> Union[List[Mapping[str, Any]], Mapping[str, Any]]:
        """Shortcut for :meth:`PaginatedFetcher.fetch`."""
        return self.fetcher.fetch(resource_path, mode, batch_size, **kwargs)

    def mutate(
        self,
        method: str,
        resource_path: str,
        body: Any = None,
        *,
        query: Optional[Sequence[Tuple[str, Any]]] = None,
        api_version: Optional[int] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Any:
        """Send one non-paginated POST/PUT/PATCH/DELETE (or single GET).

        Rate-limited calls are retried with the same policy as fetches; the
        portal does not apply a request it answered with 429.

        Returns:
            The unwrapped response data.
        """
        if cancel is not None and cancel.is_set():
            raise FetchCancelled("Call cancelled by caller")
        descriptor = RequestDescriptor.build(
            method, resource_path, query=query, body=body, api_version=api_version
        )
        retrying = rate_limit_retrying(
            self.settings, sleep=self.sleep, cancel=cancel, log=self.logger
        )
        data = retrying(self.transport.execute, descriptor)
        level = logging.DEBUG if descriptor.method == "GET" else logging.INFO
        self.logger.log(level, "%s %s succeeded", descriptor.method, resource_path)
        return data

    def batch_size(self, resource: str, override: Optional[int] = None) -> int:
        return override if override is not None else self.settings.batch_size(resource)

    @cached_property
    def devices(self) -> Devices:
        return Devices(self)

    @cached_property
    def device_groups(self) -> DeviceGroups:
        return DeviceGroups(self)

    @cached_property
    def collectors(self) -> Collectors:
        return Collectors(self)

    @cached_property
    def services(self) -> Services:
        return Services(self)

    @cached_property
    def alert_rules(self) -> AlertRules:
        return AlertRules(self)

    @cached_property
    def sdts(self) -> SDTs:
        return SDTs(self)

    @cached_property
    def audit_logs(self) -> AuditLogs:
        return AuditLogs(self)
