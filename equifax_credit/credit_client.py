"""
Credit report exchange client.

Runs one request/reply exchange with the bureau gateway:

    document -> <bki_request> -> windows-1251 bytes -> [XSD check]
             -> signed envelope -> [audit copy] -> gateway
             -> opened envelope -> <bki_response> -> ReportResponse

The first failing stage raises its typed error (see errors.py) and nothing
after it runs. A reply whose ``responsecode`` reports a business failure is a
normal return value; inspect ``ReportResponse.outcome``.

The client holds only immutable configuration, so one instance can be shared
between threads and tasks.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from equifax_credit.clients.real_http.gateway import AsyncHttpGatewayTransport, HttpGatewayTransport
from equifax_credit.codec.charset import WIRE_CHARSET
from equifax_credit.codec.schema_validator import validate_request
from equifax_credit.codec.serializer import deserialize_response, serialize_request
from equifax_credit.contracts.application import ApplicationDocument, RequestEnvelope
from equifax_credit.contracts.envelopes import ReportResponse, ResponseEnvelope
from equifax_credit.contracts.interfaces import AsyncGatewayTransport, GatewayTransport
from equifax_credit.errors import (
    CreditExchangeError,
    InvalidCertificateError,
    UnsignedReplyError,
)
from equifax_credit.signing.certificate import SigningCertificate
from equifax_credit.signing.envelope import OpenedEnvelope, VerifyOutcome, open_and_verify, sign_payload
from equifax_credit.utils.config_loader import ClientConfig, load_certificate

logger = logging.getLogger(__name__)

AUDIT_NAME_FORMAT = "%Y%m%d%H%M%S%f"
MAX_AUDIT_ATTEMPTS = 100


class CreditReportClient:
    def __init__(
        self,
        endpoint_url: str,
        partner_id: str,
        certificate: SigningCertificate,
        schema_path: Optional[Union[str, Path]] = None,
        save_requests: bool = False,
        requests_dir: Union[str, Path] = ".",
        transport: Optional[GatewayTransport] = None,
        async_transport: Optional[AsyncGatewayTransport] = None,
        timeout_seconds: float = 30.0,
        reply_charset: str = WIRE_CHARSET,
        allow_unsigned_replies: bool = True,
    ) -> None:
        if not endpoint_url:
            raise ValueError("endpoint_url is required")
        if not partner_id:
            raise ValueError("partner_id is required")
        self.endpoint_url = endpoint_url
        self.partner_id = partner_id
        self.certificate = certificate
        self.schema_path = Path(schema_path) if schema_path else None
        self.save_requests = save_requests
        self.requests_dir = Path(requests_dir)
        self.timeout_seconds = timeout_seconds
        self.transport = transport or HttpGatewayTransport(timeout_seconds=timeout_seconds)
        self.async_transport = async_transport or AsyncHttpGatewayTransport(timeout_seconds=timeout_seconds)
        self.reply_charset = reply_charset
        self.allow_unsigned_replies = allow_unsigned_replies

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[GatewayTransport] = None,
        async_transport: Optional[AsyncGatewayTransport] = None,
    ) -> "CreditReportClient":
        return cls(
            endpoint_url=config.endpoint_url,
            partner_id=config.partner_id,
            certificate=load_certificate(config.certificate),
            schema_path=config.schema_path or None,
            save_requests=config.save_requests,
            requests_dir=config.requests_dir,
            transport=transport,
            async_transport=async_transport,
            timeout_seconds=config.timeout_seconds,
            reply_charset=config.reply_charset,
            allow_unsigned_replies=config.allow_unsigned_replies,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def exchange(self, document: ApplicationDocument, timeout: Optional[float] = None) -> ReportResponse:
        return self.exchange_envelope(document, timeout=timeout).response

    def exchange_envelope(self, document: ApplicationDocument, timeout: Optional[float] = None) -> ResponseEnvelope:
        """Full exchange, returning the reply envelope with its header."""
        signed = self._prepare(document)
        logger.info(f"Sending credit report request num={document.num} to {self.endpoint_url}")
        reply = self.transport.send(signed, self.endpoint_url, timeout=self._timeout(timeout))
        return self._accept(reply)

    async def aexchange(self, document: ApplicationDocument, timeout: Optional[float] = None) -> ReportResponse:
        signed = self._prepare(document)
        logger.info(f"Sending credit report request num={document.num} to {self.endpoint_url}")
        reply = await self.async_transport.send(signed, self.endpoint_url, timeout=self._timeout(timeout))
        return self._accept(reply).response

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def _timeout(self, timeout: Optional[float]) -> float:
        # 0 is a real deadline, only None falls back to the configured one
        return self.timeout_seconds if timeout is None else timeout

    def _prepare(self, document: ApplicationDocument) -> bytes:
        envelope = RequestEnvelope(partner_id=self.partner_id, request=document)
        payload = serialize_request(envelope, WIRE_CHARSET)
        if self.schema_path is not None:
            validate_request(payload, self.schema_path)
        signed = sign_payload(payload, self.certificate)
        if self.save_requests:
            self._save_request(signed)
        return signed

    def _save_request(self, signed: bytes) -> None:
        stem = datetime.now().strftime(AUDIT_NAME_FORMAT)
        path = self.requests_dir / f"{stem}.sig"
        try:
            self.requests_dir.mkdir(parents=True, exist_ok=True)
            # An existing audit copy is never overwritten.
            for attempt in range(1, MAX_AUDIT_ATTEMPTS + 1):
                try:
                    with open(path, "xb") as f:
                        f.write(signed)
                    break
                except FileExistsError:
                    path = self.requests_dir / f"{stem}-{attempt}.sig"
            else:
                raise FileExistsError(f"No free audit file name for {stem}")
            logger.debug(f"Saved signed request to {path}")
        except OSError:
            logger.exception(f"Failed to save signed request to {path}")

    def _accept(self, reply: bytes) -> ResponseEnvelope:
        opened = open_and_verify(reply, self.certificate)

        if opened.outcome is VerifyOutcome.VERIFIED:
            envelope = deserialize_response(opened.payload, self.reply_charset)
        elif opened.outcome is VerifyOutcome.UNSIGNED and self.allow_unsigned_replies:
            envelope = deserialize_response(opened.payload, self.reply_charset)
            logger.warning(f"Accepting unsigned reply for request num={envelope.response.num}")
        else:
            raise self._unverifiable(opened)

        logger.info(
            f"Received reply num={envelope.response.num} code={envelope.response.code} "
            f"outcome={envelope.response.outcome.value}"
        )
        return envelope

    def _unverifiable(self, opened: OpenedEnvelope) -> CreditExchangeError:
        try:
            envelope: Optional[ResponseEnvelope] = deserialize_response(opened.payload, self.reply_charset)
        except CreditExchangeError as exc:
            logger.debug(f"Unverifiable reply is not decodable either: {exc}")
            envelope = None

        if opened.outcome is VerifyOutcome.UNSIGNED:
            error_type = UnsignedReplyError
            message = "Reply is not signed"
        else:
            error_type = InvalidCertificateError
            message = f"Reply signature does not match the configured certificate: {opened.detail}"
        logger.error(message)
        return error_type(message, outcome=opened.outcome, payload=opened.payload, envelope=envelope)
