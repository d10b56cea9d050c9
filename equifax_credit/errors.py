"""Error types raised by the credit report exchange pipeline.

Every stage raises exactly one of these and the pipeline stops there.
Business-level outcomes (a reply whose ``responsecode`` is not a success)
are NOT errors; they come back as a normal ``ReportResponse``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from equifax_credit.contracts.envelopes import ResponseEnvelope
    from equifax_credit.signing.envelope import VerifyOutcome


class CreditExchangeError(Exception):
    """Base class for all pipeline failures."""


class MalformedDocumentError(CreditExchangeError):
    """A document could not be serialized or is not well-formed markup."""


class MalformedEnvelopeError(MalformedDocumentError):
    """The reply body is not a usable signed envelope."""


class CharsetError(CreditExchangeError):
    pass


class UnsupportedCharacterError(CharsetError):
    def __init__(self, character: str, position: int, encoding: str) -> None:
        super().__init__(
            f"Character {character!r} (U+{ord(character):04X}) at position {position} "
            f"has no representation in {encoding}."
        )
        self.character = character
        self.position = position
        self.encoding = encoding


class UnknownCharsetError(CharsetError):
    def __init__(self, charset: str) -> None:
        super().__init__(f"Unknown charset '{charset}'.")
        self.charset = charset


class SchemaUnavailableError(CreditExchangeError):
    """The configured XSD is missing or cannot be compiled."""


class SchemaValidationError(CreditExchangeError):
    """The request does not conform to the schema; ``messages`` lists every violation."""

    def __init__(self, messages: List[str]) -> None:
        super().__init__("Request failed schema validation:\n" + "\n".join(messages))
        self.messages = list(messages)


class TransportFailureError(CreditExchangeError):
    """Network-level failure: connection refused, TLS error, broken response."""


class TransportTimeoutError(TransportFailureError):
    pass


class RequestRejectedError(CreditExchangeError):
    """The gateway answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: bytes = b"") -> None:
        super().__init__(f"Gateway rejected the request with HTTP {status_code}.")
        self.status_code = status_code
        self.body = body


class UnverifiableReplyError(CreditExchangeError):
    """The reply could not be trusted.

    The payload is still attached, and ``envelope`` holds the decoded reply
    when the payload was decodable, so callers can read the bureau's
    diagnostic text.
    """

    def __init__(
        self,
        message: str,
        *,
        outcome: "VerifyOutcome",
        payload: bytes,
        envelope: Optional["ResponseEnvelope"] = None,
    ) -> None:
        super().__init__(message)
        self.outcome = outcome
        self.payload = payload
        self.envelope = envelope

    @property
    def response_text(self) -> Optional[str]:
        if self.envelope is None:
            return None
        return self.envelope.response.text


class InvalidCertificateError(UnverifiableReplyError):
    """The reply carries a signature that does not match the configured certificate."""


class UnsignedReplyError(UnverifiableReplyError):
    """The reply carries no signature at all."""


class CertificateError(CreditExchangeError):
    """The signing certificate or its private key could not be loaded."""
