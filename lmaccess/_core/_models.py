"""Simple data models shared across the package."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import quote

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})

QueryPairs = Tuple[Tuple[str, str], ...]


# Left readable in filter expressions; everything else, including "&", "%",
# "#", "+" and spaces, is percent-encoded so requests sends the query as is.
QUERY_SAFE = "!$'()*,/:;=?@[]~"


def encode_query(pairs: Sequence[Tuple[str, Any]]) -> str:
    """Serialize query pairs in the order given.

    A literal ``&`` in a value becomes ``%26``: the vendor filter grammar
    would otherwise read it as a parameter separator.
    """
    return "&".join(
        f"{quote(str(key), safe=QUERY_SAFE)}={quote(str(value), safe=QUERY_SAFE)}"
        for key, value in pairs
    )


def serialize_body(body: Any) -> bytes:
    """Serialize a request body to the exact bytes that are signed and sent."""
    if body is None:
        return b""
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    if is_dataclass(body) and not isinstance(body, type):
        body = to_payload(body)
    return json.dumps(body, separators=(",", ":")).encode("utf-8")


def _utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def to_epoch_seconds(value: Union[datetime, int]) -> int:
    """Accept a datetime (naive means UTC) or epoch seconds."""
    if isinstance(value, datetime):
        return int(_utc(value).timestamp())
    return int(value)


def to_epoch_millis(value: Union[datetime, int]) -> int:
    """Accept a datetime (naive means UTC) or epoch milliseconds."""
    if isinstance(value, datetime):
        return int(_utc(value).timestamp() * 1000)
    return int(value)


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_payload(obj: Any) -> Dict[str, Any]:
    """Convert a request dataclass into a vendor JSON object.

    Field names are converted to camelCase unless the dataclass field carries
    a ``wire`` name in its metadata. ``None`` values are dropped.
    """
    payload: Dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        if is_dataclass(value) and not isinstance(value, type):
            value = to_payload(value)
        elif isinstance(value, (list, tuple)):
            value = [
                to_payload(v) if is_dataclass(v) and not isinstance(v, type) else v
                for v in value
            ]
        payload[f.metadata.get("wire", camel_case(f.name))] = value
    return payload


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything that identifies one logical call, before signing.

    Attributes:
        method: HTTP method, upper case.
        resource_path: REST path without the query string, e.g. ``/device/devices``.
        query: Ordered query parameters.
        body: Exact bytes that will be transmitted, empty for no body.
        api_version: Value for the ``X-Version`` header, if the endpoint needs one.
    """

    method: str
    resource_path: str
    query: QueryPairs = ()
    body: bytes = b""
    api_version: Optional[int] = None

    def __post_init__(self) -> None:
        method = self.method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if not self.resource_path.startswith("/"):
            raise ValueError(f"resource_path must start with '/': {self.resource_path}")
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "query", tuple((k, str(v)) for k, v in self.query))

    @classmethod
    def build(
        cls,
        method: str,
        resource_path: str,
        *,
        query: Optional[Sequence[Tuple[str, Any]]] = None,
        body: Any = None,
        api_version: Optional[int] = None,
    ) -> RequestDescriptor:
        return cls(
            method=method,
            resource_path=resource_path,
            query=tuple(query or ()),
            body=serialize_body(body),
            api_version=api_version,
        )

    @property
    def query_string(self) -> str:
        return encode_query(self.query)


@dataclass(frozen=True)
class SignedRequest:
    """A request ready to hand to the transport. Never reuse: the signature expires."""

    method: str
    url: str
    headers: Mapping[str, str]
    body: bytes = b""
    epoch_millis: int = 0


@dataclass(frozen=True)
class Page:
    """One server round trip of a paginated fetch."""

    items: List[Mapping[str, Any]]
    total: Optional[int]
    offset: int
    size: int

    @classmethod
    def from_data(cls, data: Any, offset: int, size: int) -> Page:
        """Build a page from an unwrapped ``{total, items}`` payload."""
        if not isinstance(data, Mapping):
            return cls(items=[], total=0, offset=offset, size=size)
        total = data.get("total")
        return cls(
            items=list(data.get("items") or []),
            total=int(total) if total is not None else None,
            offset=offset,
            size=size,
        )


@dataclass(frozen=True)
class Property:
    """A custom property, serialized as ``{"name": ..., "value": ...}``."""

    name: str
    value: str = field(default="")

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "value": str(self.value)}


def to_properties(properties: Optional[Any]) -> Optional[List[Dict[str, str]]]:
    """Normalize a mapping or a sequence of :class:`Property` to the vendor array shape."""
    if properties is None:
        return None
    if isinstance(properties, Mapping):
        return [Property(str(k), str(v)).to_dict() for k, v in properties.items()]
    return [
        p.to_dict() if isinstance(p, Property) else Property(**p).to_dict()
        for p in properties
    ]

