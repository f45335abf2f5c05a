"""Website and ping services (``/service/services``)."""

from __future__ import annotations

import threading
from typing import List, Optional, Sequence

from lmaccess.fetch import FilterClause

from ._base import FilterArg, Record, Resource

__all__ = ["Services"]


class Services(Resource):
    path = "/service/services"
    name = "services"

    def list(
        self,
        filter: FilterArg = None,
        *,
        name: Optional[str] = None,
        type: Optional[str] = None,
        batch_size: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> List[Record]:
        """List services, optionally by exact name or type (``webservice``, ``pingcheck``)."""
        clauses = []
        if name is not None:
            clauses.append(FilterClause("name", name))
        if type is not None:
            clauses.append(FilterClause("type", type))
        return self._list(
            filter, clauses, batch_size=batch_size, fields=fields, cancel=cancel
        )
