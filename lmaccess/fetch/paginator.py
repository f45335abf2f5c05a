"""Offset/size pagination over collection endpoints.

The portal pages collections with ``offset`` and ``size`` and reports the
collection ``total`` on every page. The fetcher reads ``total`` once, from
the first page, and derives the number of pages from it::

    required_pages = total // batch_size + 1

The ``+ 1`` makes sure a remainder page is requested, so when ``total`` is
a multiple of ``batch_size`` the last request returns no items. That is a
normal end of the loop, not an error.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from lmaccess._core._models import Page, RequestDescriptor
from lmaccess._core._request import Transport
from lmaccess._core._retry import Sleep, rate_limit_retrying
from lmaccess._core._validators import validate_batch_size
from lmaccess.config import Settings
from lmaccess.exceptions import FetchCancelled, NotFoundError
from lmaccess.fetch.modes import ALL, FetchMode, FilterByField, SingleById

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]


def required_pages(total: int, batch_size: int) -> int:
    return total // batch_size + 1


class PaginatedFetcher:
    """Retrieve whole collections, filtered subsets or single records.

    Each call owns its accumulator; nothing is shared between calls except
    the transport, whose credential is read-only. A call either returns the
    complete result or raises: records gathered before an error are dropped.
    """

    def __init__(
        self,
        transport: Transport,
        settings: Optional[Settings] = None,
        *,
        sleep: Optional[Sleep] = None,
        logger: logging.Logger = logger,
    ) -> None:
        self.transport = transport
        self.settings = settings or Settings()
        self.sleep = sleep
        self.logger = logger

    def _call(
        self, descriptor: RequestDescriptor, cancel: Optional[threading.Event]
    ) -> Any:
        retrying = rate_limit_retrying(
            self.settings, sleep=self.sleep, cancel=cancel, log=self.logger
        )
        return retrying(self.transport.execute, descriptor)

    def fetch(
        self,
        resource_path: str,
        mode: FetchMode = ALL,
        batch_size: int = 1000,
        *,
        fields: Optional[Sequence[str]] = None,
        sort: Optional[str] = "id",
        query: Optional[Sequence[Tuple[str, Any]]] = None,
        api_version: Optional[int] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Union[List[Record], Record]:
        """Fetch records from *resource_path*.

        Parameters:
            resource_path: Collection path, e.g. ``/device/devices``.
            mode: :class:`AllRecords`, :class:`FilterByField` or :class:`SingleById`.
            batch_size: Page size sent as ``size``.
            fields: Optional ``fields=`` projection.
            sort: Sort key; ascending ``id`` keeps results in a stable order.
            query: Extra query parameters appended after the paging ones.
            api_version: ``X-Version`` header value for newer endpoints.
            cancel: Event that aborts the fetch between pages or during a
                rate-limit wait.

        Returns:
            A list of records, or a single record in :class:`SingleById` mode.

        Raises:
            NotFoundError: in :class:`SingleById` mode when nothing matches.
            FetchCancelled: when *cancel* is set.
        """
        if isinstance(mode, SingleById):
            return self.fetch_one(
                resource_path,
                mode.id,
                fields=fields,
                api_version=api_version,
                cancel=cancel,
            )
        return self.fetch_all(
            resource_path,
            batch_size,
            filter=mode if isinstance(mode, FilterByField) else None,
            fields=fields,
            sort=sort,
            query=query,
            api_version=api_version,
            cancel=cancel,
        )

    def fetch_one(
        self,
        resource_path: str,
        id: Union[int, str],
        *,
        fields: Optional[Sequence[str]] = None,
        api_version: Optional[int] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Record:
        """Fetch the record at ``{resource_path}/{id}``."""
        _check_cancel(cancel)
        path = f"{resource_path.rstrip('/')}/{id}"
        params: List[Tuple[str, Any]] = []
        if fields:
            params.append(("fields", ",".join(fields)))
        descriptor = RequestDescriptor.build(
            "GET", path, query=params, api_version=api_version
        )
        data = self._call(descriptor, cancel)

        # Some endpoints answer an id lookup with a collection-shaped payload
        if isinstance(data, Mapping) and "items" in data and "total" in data:
            items = data.get("items") or []
            if not items:
                raise NotFoundError(f"No record with id {id} at {resource_path}")
            return items[0]
        if not data:
            raise NotFoundError(f"No record with id {id} at {resource_path}")
        return data

    def fetch_all(
        self,
        resource_path: str,
        batch_size: int = 1000,
        *,
        filter: Optional[FilterByField] = None,
        fields: Optional[Sequence[str]] = None,
        sort: Optional[str] = "id",
        query: Optional[Sequence[Tuple[str, Any]]] = None,
        api_version: Optional[int] = None,
        cancel: Optional[threading.Event] = None,
    ) -> List[Record]:
        """Page through a collection and return every record in offset order."""
        validate_batch_size(batch_size)
        results: List[Record] = []
        offset = 0
        pages_seen = 0
        pages_needed: Optional[int] = None

        while True:
            _check_cancel(cancel)
            page = self._fetch_page(
                resource_path,
                offset,
                batch_size,
                filter=filter,
                fields=fields,
                sort=sort,
                query=query,
                api_version=api_version,
                cancel=cancel,
            )
            results.extend(page.items)

            if pages_needed is None and page.total is not None and page.total >= 0:
                pages_needed = required_pages(page.total, batch_size)
                self.logger.debug(
                    "%s reports %s records, %s page(s) of %s",
                    resource_path,
                    page.total,
                    pages_needed,
                    batch_size,
                )

            offset += batch_size
            pages_seen += 1

            if pages_needed is not None:
                if pages_seen >= pages_needed:
                    break
            elif len(page.items) < batch_size:
                # No usable total: stop on the first short page
                break

        self.logger.info(
            "Fetched %s record(s) from %s in %s page(s)",
            len(results),
            resource_path,
            pages_seen,
        )
        return results

    def _fetch_page(
        self,
        resource_path: str,
        offset: int,
        batch_size: int,
        *,
        filter: Optional[FilterByField],
        fields: Optional[Sequence[str]],
        sort: Optional[str],
        query: Optional[Sequence[Tuple[str, Any]]],
        api_version: Optional[int],
        cancel: Optional[threading.Event],
    ) -> Page:
        params: List[Tuple[str, Any]] = [("offset", offset), ("size", batch_size)]
        if sort:
            params.append(("sort", sort))
        if filter is not None:
            params.append(("filter", filter.render()))
        if fields:
            params.append(("fields", ",".join(fields)))
        params.extend(query or ())

        descriptor = RequestDescriptor.build(
            "GET", resource_path, query=params, api_version=api_version
        )
        data = self._call(descriptor, cancel)
        return Page.from_data(data, offset=offset, size=batch_size)


def _check_cancel(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise FetchCancelled("Fetch cancelled by caller")
