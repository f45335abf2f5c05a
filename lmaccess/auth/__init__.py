"""Authentication: credentials, login state and LMv1 request signing."""

from lmaccess.auth.auth import Auth
from lmaccess.auth.credentials import Credential
from lmaccess.auth.signer import compute_signature, epoch_millis, sign

__all__ = [
    "Auth",
    "Credential",
    "compute_signature",
    "epoch_millis",
    "sign",
]
