"""
Mock bureau gateway.

Purpose:
- Stands in for the bureau gateway so the full exchange can run without
  network access or bureau credentials
- Does NOT make network calls

Behavior:
- Opens and decodes each incoming request, records it on ``self.requests``
- Answers with a ``<bki_response>`` echoing the request number and partner id
- The reply carries Cyrillic report sections in the configured charset
- Failure modes on demand: non-2xx status, tampered signature, unsigned reply

Swap:
Replace with clients/real_http/gateway.py once the endpoint and a
bureau-issued certificate are available.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional

from asn1crypto import cms

from equifax_credit.codec.charset import WIRE_CHARSET, encode_to_wire
from equifax_credit.codec.serializer import deserialize_request, serialize_response
from equifax_credit.contracts.application import PROTOCOL_VERSION, RequestEnvelope
from equifax_credit.contracts.envelopes import OpaqueSection, ReportResponse, ResponseEnvelope
from equifax_credit.contracts.interfaces import GatewayTransport
from equifax_credit.errors import RequestRejectedError
from equifax_credit.signing.certificate import SigningCertificate
from equifax_credit.signing.envelope import open_and_verify, sign_payload, wrap_unsigned

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_DEFAULT_SECTIONS: Dict[str, str] = {
    "title_part": "<private><lastname>Иванов</lastname><firstname>Иван</firstname></private>",
    "base_part": "<credit><cred_type>1</cred_type><cred_sum>150000.00</cred_sum><cred_currency>RUR</cred_currency></credit>",
    "add_part": "",
    "information_parts": "<information><comment>Сведения предоставлены по запросу</comment></information>",
}


class MockGatewayTransport(GatewayTransport):
    def __init__(
        self,
        certificate: SigningCertificate,
        response_code: str = "0",
        response_text: str = "Запрос обработан",
        sections: Optional[Dict[str, str]] = None,
        status_code: int = 200,
        tamper_signature: bool = False,
        unsigned: bool = False,
        reply_charset: str = WIRE_CHARSET,
    ) -> None:
        self.certificate = certificate
        self.response_code = response_code
        self.response_text = response_text
        self.sections = dict(_DEFAULT_SECTIONS if sections is None else sections)
        self.status_code = status_code
        self.tamper_signature = tamper_signature
        self.unsigned = unsigned
        self.reply_charset = reply_charset
        self.requests: List[RequestEnvelope] = []

    def send(self, envelope: bytes, endpoint: str, timeout: Optional[float] = None) -> bytes:
        logger.info(f"[MOCK] Gateway call to {endpoint} ({len(envelope)} bytes)")
        if not 200 <= self.status_code < 300:
            raise RequestRejectedError(self.status_code, b"mock gateway rejection")
        return self.reply_for(envelope)

    def reply_for(self, envelope: bytes) -> bytes:
        """Signed reply envelope for one signed request envelope."""
        opened = open_and_verify(envelope, self.certificate)
        request = deserialize_request(opened.payload)
        self.requests.append(request)
        logger.info(
            f"[MOCK] Request num={request.request.num} partner={request.partner_id} "
            f"signature={opened.outcome.value}"
        )

        payload = serialize_response(self._build_reply(request))
        if self.unsigned:
            return wrap_unsigned(payload)

        signed = sign_payload(payload, self.certificate)
        if self.tamper_signature:
            signed = self._tamper(signed)
        return signed

    def _build_reply(self, request: RequestEnvelope) -> ResponseEnvelope:
        sections = {
            name: OpaqueSection(name=name, raw=encode_to_wire(text, self.reply_charset), encoding=self.reply_charset)
            for name, text in self.sections.items()
        }
        return ResponseEnvelope(
            version=PROTOCOL_VERSION,
            partner_id=request.partner_id,
            timestamp=datetime.now().strftime("%d.%m.%Y %H:%M:%S"),
            encoding=self.reply_charset,
            response=ReportResponse(
                num=str(request.request.num),
                code=self.response_code,
                text=self.response_text,
                **sections,
            ),
        )

    def _tamper(self, signed: bytes) -> bytes:
        """Flip the last byte of the signature value, leaving the structure intact."""
        signer_info = cms.ContentInfo.load(signed)["content"]["signer_infos"][0]
        signature = signer_info["signature"].native
        offset = signed.rfind(signature)
        last = offset + len(signature) - 1
        logger.info("[MOCK] Tampering signature byte at offset %d", last)
        return signed[:last] + bytes([signed[last] ^ 0x01]) + signed[last + 1:]
