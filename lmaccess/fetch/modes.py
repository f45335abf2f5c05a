"""Selection modes for the paginated fetcher.

A fetch either returns every record of a collection (:class:`AllRecords`),
the records matching one or more filter clauses (:class:`FilterByField`), or
the single record addressed by an identifier (:class:`SingleById`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Tuple, Union

__all__ = [
    "ALL",
    "AllRecords",
    "FilterByField",
    "FilterClause",
    "FetchMode",
    "OPERATORS",
    "SingleById",
]

# ":" exact match, "~" contains; the rest are the vendor's negations and comparisons
OPERATORS = (":", "~", "!:", "!~", ">:", "<:", ">", "<")


@dataclass(frozen=True)
class FilterClause:
    """One ``field<operator>value`` term of a ``filter=`` expression."""

    field: str
    value: Any
    operator: str = ":"

    def __post_init__(self) -> None:
        if not self.field:
            raise ValueError("Filter field name must not be empty")
        if self.operator not in OPERATORS:
            raise ValueError(
                f"Unknown filter operator {self.operator!r}, expected one of {OPERATORS}"
            )

    def render(self) -> str:
        return f"{self.field}{self.operator}{self.value}"


@dataclass(frozen=True)
class AllRecords:
    """Every record of the collection."""


@dataclass(frozen=True)
class SingleById:
    """The record at ``{resource_path}/{id}``."""

    id: Union[int, str]

    def __post_init__(self) -> None:
        if self.id is None or str(self.id) == "":
            raise ValueError("SingleById needs an identifier")


class FilterByField:
    """Records matching every clause; clauses are joined with commas.

    The operator must be chosen per field since the vendor defines whether a
    field supports exact (``:``) or substring (``~``) matching::

        FilterByField("displayName", "web", operator="~").where("hostStatus", "alive")
    """

    def __init__(self, field: str, value: Any, operator: str = ":") -> None:
        self.clauses: Tuple[FilterClause, ...] = (FilterClause(field, value, operator),)

    @classmethod
    def from_clauses(cls, clauses: Iterable[FilterClause]) -> FilterByField:
        clauses = tuple(clauses)
        if not clauses:
            raise ValueError("FilterByField needs at least one clause")
        instance = cls.__new__(cls)
        instance.clauses = clauses
        return instance

    def where(self, field: str, value: Any, operator: str = ":") -> FilterByField:
        """Return a new filter with one more clause."""
        return self.from_clauses(self.clauses + (FilterClause(field, value, operator),))

    def render(self) -> str:
        return ",".join(clause.render() for clause in self.clauses)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FilterByField) and self.clauses == other.clauses

    def __hash__(self) -> int:
        return hash(self.clauses)

    def __repr__(self) -> str:
        return f"FilterByField({self.render()!r})"


FetchMode = Union[AllRecords, SingleById, FilterByField]

ALL = AllRecords()
