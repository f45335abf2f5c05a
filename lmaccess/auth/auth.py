"""Portal login state."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from lmaccess.auth.credentials import Credential
from lmaccess.exceptions import LoginStrategyUnavailable

logger = logging.getLogger(__name__)

STRATEGIES = ("all", "explicit", "environment")


class Auth:
    """Holds the credential used to sign requests.

    ``login`` performs no network I/O: a bad token is only detected when the
    portal rejects the first signed request (HTTP 401/403).
    """

    def __init__(self) -> None:
        self.authenticated = False
        self.credential: Optional[Credential] = None

    def __repr__(self) -> str:
        return f"Auth(authenticated={self.authenticated}, credential={self.credential!r})"

    def login(
        self,
        strategy: str = "all",
        access_id: Optional[str] = None,
        access_key: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> Auth:
        """Load a credential.

        Parameters:
            strategy: ``"explicit"`` uses *access_id*/*access_key*,
                ``"environment"`` reads ``LM_ACCESS_ID``/``LM_ACCESS_KEY``,
                ``"all"`` tries explicit values first, then the environment.
            access_id: Token id for the explicit strategy.
            access_key: Token key for the explicit strategy.
            env: Environment mapping, defaults to ``os.environ``.

        Returns:
            self

        Raises:
            LoginStrategyUnavailable: if no strategy yields a credential.
        """
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown login strategy {strategy!r}, use one of {STRATEGIES}")

        credential: Optional[Credential] = None
        if strategy in ("all", "explicit") and (access_id or access_key):
            credential = Credential(access_id or "", access_key or "")
        elif strategy == "explicit":
            raise LoginStrategyUnavailable(
                "The explicit strategy needs access_id and access_key"
            )

        if credential is None:
            credential = Credential.from_env(env)
            logger.debug("Loaded credential from the environment")

        self.credential = credential
        self.authenticated = True
        logger.info("Using API token %r", credential)
        return self

    def logout(self) -> None:
        self.credential = None
        self.authenticated = False

    def get_credential(self) -> Credential:
        if self.credential is None:
            raise LoginStrategyUnavailable("Not logged in, call lmaccess.login() first")
        return self.credential
