"""
Credit bureau (BKI) report exchange client.

Builds a protocol 3.4 credit report request, signs it, sends it to the
bureau gateway and returns the verified, decoded reply.
"""

from .errors import (
    CertificateError,
    CharsetError,
    CreditExchangeError,
    InvalidCertificateError,
    MalformedDocumentError,
    MalformedEnvelopeError,
    RequestRejectedError,
    SchemaUnavailableError,
    SchemaValidationError,
    TransportFailureError,
    TransportTimeoutError,
    UnknownCharsetError,
    UnsignedReplyError,
    UnsupportedCharacterError,
    UnverifiableReplyError,
)
from .contracts import ApplicationDocument, ReportResponse, ResponseCode, ResponseEnvelope
from .signing import SigningCertificate, VerifyOutcome
from .credit_client import CreditReportClient

__version__ = "0.1.0"

__all__ = [
    "CreditReportClient",
    "SigningCertificate",
    "VerifyOutcome",
    "ApplicationDocument",
    "ReportResponse",
    "ResponseCode",
    "ResponseEnvelope",
    "CertificateError",
    "CharsetError",
    "CreditExchangeError",
    "InvalidCertificateError",
    "MalformedDocumentError",
    "MalformedEnvelopeError",
    "RequestRejectedError",
    "SchemaUnavailableError",
    "SchemaValidationError",
    "TransportFailureError",
    "TransportTimeoutError",
    "UnknownCharsetError",
    "UnsignedReplyError",
    "UnsupportedCharacterError",
    "UnverifiableReplyError",
]
