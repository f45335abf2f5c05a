"""Shared behaviour of portal resource collections."""

from __future__ import annotations

import threading
from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from lmaccess._core._models import camel_case
from lmaccess.fetch import FilterByField, FilterClause

if TYPE_CHECKING:
    from lmaccess.portal import Portal

Record = Mapping[str, Any]
FilterArg = Union[FilterByField, FilterClause, Iterable[FilterClause], None]


def combine_filters(
    filter: FilterArg, clauses: Sequence[FilterClause] = ()
) -> Optional[FilterByField]:
    """Merge a caller filter with clauses derived from keyword arguments."""
    merged: List[FilterClause] = []
    if isinstance(filter, FilterByField):
        merged.extend(filter.clauses)
    elif isinstance(filter, FilterClause):
        merged.append(filter)
    elif filter is not None:
        merged.extend(filter)
    merged.extend(clauses)
    return FilterByField.from_clauses(merged) if merged else None


def patch_query(fields: Iterable[str]) -> List[Tuple[str, str]]:
    """Query convention for partial updates: ``patchFields=a,b&opType=replace``."""
    return [("patchFields", ",".join(fields)), ("opType", "replace")]


class Resource:
    """A collection endpoint with list/get/replace/remove and signed writes.

    Subclasses set ``path`` (collection path) and ``name`` (the key of their
    default page size in ``Settings.batch_sizes``).
    """

    path: ClassVar[str] = ""
    name: ClassVar[str] = ""
    api_version: ClassVar[Optional[int]] = None

    def __init__(self, portal: Portal) -> None:
        self.portal = portal

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"

    def item_path(self, id: Union[int, str]) -> str:
        return f"{self.path}/{id}"

    def list(
        self,
        filter: FilterArg = None,
        *,
        batch_size: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> List[Record]:
        """Return every record, or the ones matching *filter*, sorted by id."""
        return self._list(filter, batch_size=batch_size, fields=fields, cancel=cancel)

    def _list(
        self,
        filter: FilterArg = None,
        clauses: Sequence[FilterClause] = (),
        *,
        path: Optional[str] = None,
        batch_size: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
        cancel: Optional[threading.Event] = None,
        api_version: Optional[int] = None,
    ) -> List[Record]:
        return self.portal.fetcher.fetch_all(
            path or self.path,
            self.portal.batch_size(self.name, batch_size),
            filter=combine_filters(filter, clauses),
            fields=fields,
            api_version=api_version or self.api_version,
            cancel=cancel,
        )

    def get(
        self,
        id: Union[int, str],
        *,
        fields: Optional[Sequence[str]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Record:
        """Return one record.

        Raises:
            NotFoundError: if no record has this id.
        """
        return self.portal.fetcher.fetch_one(
            self.path, id, fields=fields, api_version=self.api_version, cancel=cancel
        )

    def remove(
        self,
        id: Union[int, str],
        *,
        cancel: Optional[threading.Event] = None,
    ) -> Any:
        return self.portal.mutate("DELETE", self.item_path(id), cancel=cancel)

    def _create(self, body: Any, *, cancel: Optional[threading.Event] = None) -> Any:
        return self.portal.mutate(
            "POST", self.path, body, api_version=self.api_version, cancel=cancel
        )

    def replace(
        self,
        id: Union[int, str],
        record: Any,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> Any:
        """Send a full replacement of one record with PUT."""
        return self.portal.mutate(
            "PUT", self.item_path(id), record, api_version=self.api_version, cancel=cancel
        )

    def _patch(
        self,
        id: Union[int, str],
        changes: Mapping[str, Any],
        *,
        api_version: Optional[int] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Any:
        if not changes:
            raise ValueError("Nothing to update")
        changes = {camel_case(key): value for key, value in changes.items()}
        return self.portal.mutate(
            "PATCH",
            self.item_path(id),
            changes,
            query=patch_query(changes),
            api_version=api_version or self.api_version,
            cancel=cancel,
        )
