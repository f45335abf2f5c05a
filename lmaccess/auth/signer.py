"""LMv1 request signing.

The portal authenticates every call with an HMAC over the method, a
millisecond timestamp, the request body and the resource path::

    signature = base64(hex(hmac_sha256(access_key, method + epoch + body + path)))
    Authorization: LMv1 {access_id}:{signature}:{epoch}

Note the base64 step encodes the lowercase *hex string*, not the raw digest.
The portal enforces a clock-skew window on ``epoch``, so a signed request
must be sent right away and never cached.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import time
from typing import Callable, Dict, Optional

from lmaccess._core._models import RequestDescriptor, SignedRequest
from lmaccess.auth.credentials import Credential

__all__ = [
    "AUTH_SCHEME",
    "compute_signature",
    "epoch_millis",
    "sign",
]

AUTH_SCHEME = "LMv1"

Clock = Callable[[], int]


def epoch_millis() -> int:
    """Current UTC time in milliseconds since the Unix epoch."""
    return int(round(time.time() * 1000))


def compute_signature(
    access_key: str, method: str, epoch: int, body: bytes, resource_path: str
) -> str:
    """Return the base64 LMv1 signature for one request."""
    message = method.upper().encode("utf-8") + str(epoch).encode("utf-8")
    message += body + resource_path.encode("utf-8")
    digest = hmac.new(access_key.encode("utf-8"), message, hashlib.sha256)
    return base64.b64encode(digest.hexdigest().lower().encode("utf-8")).decode("ascii")


def authorization_header(credential: Credential, signature: str, epoch: int) -> str:
    return f"{AUTH_SCHEME} {credential.access_id}:{signature}:{epoch}"


def sign(
    descriptor: RequestDescriptor,
    credential: Credential,
    base_url: str,
    *,
    clock: Optional[Clock] = None,
) -> SignedRequest:
    """Sign *descriptor* and build the full URL and headers.

    Parameters:
        descriptor: The request to sign.
        credential: Token used to sign.
        base_url: REST root, e.g. ``https://acme.logicmonitor.com/santaba/rest``.
        clock: Returns epoch milliseconds; defaults to the system clock.

    Returns:
        A fresh :class:`SignedRequest`.
    """
    epoch = (clock or epoch_millis)()
    signature = compute_signature(
        credential.access_key,
        descriptor.method,
        epoch,
        descriptor.body,
        descriptor.resource_path,
    )
    headers: Dict[str, str] = {
        "Authorization": authorization_header(credential, signature, epoch),
        "Content-Type": "application/json",
    }
    if descriptor.api_version is not None:
        headers["X-Version"] = str(descriptor.api_version)

    url = base_url.rstrip("/") + descriptor.resource_path
    if descriptor.query:
        url += "?" + descriptor.query_string

    return SignedRequest(
        method=descriptor.method,
        url=url,
        headers=headers,
        body=descriptor.body,
        epoch_millis=epoch,
    )
