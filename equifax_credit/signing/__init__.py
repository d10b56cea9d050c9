"""
Certificate handling and the signed message envelope.
"""

from .certificate import SigningCertificate
from .envelope import OpenedEnvelope, VerifyOutcome, open_and_verify, sign_payload, wrap_unsigned

__all__ = [
    "SigningCertificate",
    "OpenedEnvelope",
    "VerifyOutcome",
    "open_and_verify",
    "sign_payload",
    "wrap_unsigned",
]
