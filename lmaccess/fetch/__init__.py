"""Paginated retrieval of portal collections."""

from lmaccess.fetch.modes import (
    ALL,
    AllRecords,
    FetchMode,
    FilterByField,
    FilterClause,
    SingleById,
)
from lmaccess.fetch.paginator import PaginatedFetcher, required_pages

__all__ = [
    "ALL",
    "AllRecords",
    "FetchMode",
    "FilterByField",
    "FilterClause",
    "PaginatedFetcher",
    "SingleById",
    "required_pages",
]
