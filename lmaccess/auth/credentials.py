"""API token credentials.

A portal API token is a pair: the access id identifies the token and is sent
in clear in the ``Authorization`` header, the access key is the HMAC secret
and never leaves the process.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from lmaccess.exceptions import LoginStrategyUnavailable

__all__ = ["Credential"]


def _mask(value: str, visible: int = 4) -> str:
    if len(value) <= visible:
        return "*" * len(value)
    return value[:visible] + "*" * (len(value) - visible)


@dataclass(frozen=True)
class Credential:
    """Immutable access-id/access-key pair.

    Frozen so that one instance can be shared by concurrent fetches; signing
    only reads it. The key is excluded from ``repr`` and the id is masked so
    that a credential can safely end up in a log line or traceback.

    Attributes:
        access_id: Public identifier of the API token.
        access_key: HMAC signing secret.
    """

    access_id: str
    access_key: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.access_id or not self.access_key:
            raise LoginStrategyUnavailable("Both access_id and access_key are required")

    def __repr__(self) -> str:
        return f"Credential(access_id={_mask(self.access_id)!r})"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Credential:
        """Read ``LM_ACCESS_ID`` and ``LM_ACCESS_KEY``.

        Raises:
            LoginStrategyUnavailable: if either variable is unset or empty.
        """
        env = os.environ if env is None else env
        access_id = env.get("LM_ACCESS_ID", "")
        access_key = env.get("LM_ACCESS_KEY", "")
        if not access_id or not access_key:
            raise LoginStrategyUnavailable(
                "LM_ACCESS_ID and LM_ACCESS_KEY must both be set"
            )
        return cls(access_id=access_id, access_key=access_key)
