"""Exceptions raised by lmaccess.

Every error carries enough context (HTTP status, vendor status code, vendor
message) for a caller to decide what to do without re-parsing the response.
"""

from typing import Optional


class LMError(Exception):
    """Base class for all lmaccess errors."""


class LoginStrategyUnavailable(LMError):
    """Credentials or account name are missing for the requested strategy."""


class TransportError(LMError):
    """The request never produced an HTTP response (DNS, TLS, connection, timeout)."""


class FetchCancelled(LMError):
    """The caller's cancellation event fired while a call was in flight."""


class APIError(LMError):
    """An HTTP response was received but it does not represent success.

    Attributes:
        http_status: HTTP status code of the response.
        status: Vendor status code from the response envelope, if any.
        errmsg: Vendor error message, verbatim.
        url: URL of the failed request (without credentials).
    """

    def __init__(
        self,
        errmsg: str,
        *,
        http_status: Optional[int] = None,
        status: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(errmsg)
        self.errmsg = errmsg
        self.http_status = http_status
        self.status = status
        self.url = url

    def __str__(self) -> str:
        code = self.status if self.status is not None else self.http_status
        return f"[{code}] {self.errmsg}" if code is not None else self.errmsg


class RateLimited(APIError):
    """HTTP 429. Retried automatically by the rate-limit policy."""

    def __init__(self, errmsg: str = "Rate limit exceeded", **kwargs) -> None:
        self.retry_after: Optional[float] = kwargs.pop("retry_after", None)
        kwargs.setdefault("http_status", 429)
        super().__init__(errmsg, **kwargs)


class AuthenticationError(APIError):
    """HTTP 401/403. Retrying with the same credential cannot succeed."""


class NotFoundError(APIError):
    """A lookup by identifier matched nothing."""


class VendorApplicationError(APIError):
    """The envelope reports a vendor-level failure (duplicate, validation, ...)."""


class HTTPStatusError(APIError):
    """Any other non-2xx HTTP status."""
