"""Core HTTP request wrapper used throughout lmaccess."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import requests

from lmaccess._core._models import RequestDescriptor, SignedRequest
from lmaccess.auth.credentials import Credential
from lmaccess.auth.signer import Clock, sign
from lmaccess.exceptions import (
    AuthenticationError,
    HTTPStatusError,
    NotFoundError,
    RateLimited,
    TransportError,
    VendorApplicationError,
)

log = logging.getLogger(__name__)

# Legacy envelope success code
VENDOR_OK = 200


def _payload(resp: requests.Response) -> Any:
    if not resp.content:
        return {}
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _error_message(payload: Any, resp: requests.Response) -> str:
    if isinstance(payload, Mapping):
        for key in ("errorMessage", "errmsg", "message"):
            if payload.get(key):
                return str(payload[key])
    return resp.text or resp.reason or f"HTTP {resp.status_code}"


def _retry_after(resp: requests.Response) -> Optional[float]:
    value = resp.headers.get("Retry-After") or resp.headers.get(
        "X-Rate-Limit-Window"
    )
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


def _is_legacy_envelope(payload: Any) -> bool:
    return isinstance(payload, Mapping) and "status" in payload and (
        "data" in payload or "errmsg" in payload
    )


def unwrap(resp: requests.Response) -> Any:
    """Translate a response into its data or a typed exception.

    Handles both envelope styles: the legacy ``{status, errmsg, data}``
    wrapper, where ``status`` is a vendor code, and the newer flat payload
    where the HTTP status carries success or failure.
    """
    url = resp.request.url if resp.request is not None else resp.url
    payload = _payload(resp)
    code = resp.status_code

    if code == 429:
        raise RateLimited(
            _error_message(payload, resp), url=url, retry_after=_retry_after(resp)
        )
    if code in (401, 403):
        raise AuthenticationError(_error_message(payload, resp), http_status=code, url=url)
    if code == 404:
        raise NotFoundError(_error_message(payload, resp), http_status=code, url=url)
    if not 200 <= code < 300:
        raise HTTPStatusError(
            _error_message(payload, resp),
            http_status=code,
            status=payload.get("errorCode") if isinstance(payload, Mapping) else None,
            url=url,
        )

    if _is_legacy_envelope(payload):
        status = int(payload["status"])
        if status != VENDOR_OK:
            raise VendorApplicationError(
                str(payload.get("errmsg", "")), http_status=code, status=status, url=url
            )
        return payload.get("data")

    if isinstance(payload, Mapping) and "errorMessage" in payload and "errorCode" in payload:
        raise VendorApplicationError(
            str(payload["errorMessage"]),
            http_status=code,
            status=payload["errorCode"],
            url=url,
        )
    return payload


def send(
    session: requests.Session, signed: SignedRequest, timeout: float
) -> requests.Response:
    """Send a signed request, wrapping network failures in :class:`TransportError`."""
    try:
        return session.request(
            method=signed.method,
            url=signed.url,
            headers=dict(signed.headers),
            data=signed.body or None,
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise TransportError(f"{signed.method} {signed.url} failed: {exc}") from exc


@dataclass
class Transport:
    """Signs, sends and unwraps one request at a time.

    Attributes:
        base_url: REST root of the portal.
        credential: Token used to sign each request.
        session: Shared ``requests.Session`` (connection pooling only, no auth state).
        timeout: Per-request timeout in seconds.
        clock: Epoch-millisecond clock for signing, injectable for tests.
    """

    base_url: str
    credential: Credential
    session: requests.Session = field(default_factory=requests.Session)
    timeout: float = 30
    clock: Optional[Clock] = None
    logger: logging.Logger = field(default=log)

    def execute(self, descriptor: RequestDescriptor) -> Any:
        """Sign *descriptor* with a fresh timestamp, send it and return the unwrapped data."""
        signed = sign(descriptor, self.credential, self.base_url, clock=self.clock)
        self.logger.debug("%s %s", signed.method, signed.url)
        resp = send(self.session, signed, self.timeout)
        self.logger.debug("%s %s -> %s", signed.method, signed.url, resp.status_code)
        return unwrap(resp)
