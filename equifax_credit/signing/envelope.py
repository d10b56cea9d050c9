"""
Signed message envelope (CMS / PKCS#7 SignedData, DER).

Outgoing documents are wrapped with the payload attached and a single
signer. Incoming envelopes are opened first and verified second: the
payload is always returned when the structure is sound, together with a
classification of the signature, so a reply whose signature does not check
out can still be read for its diagnostic text.
"""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from asn1crypto import cms
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.serialization import pkcs7

from equifax_credit.errors import CertificateError, MalformedEnvelopeError

from .certificate import SigningCertificate

logger = logging.getLogger(__name__)

_HASHES = {
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


class VerifyOutcome(str, Enum):
    VERIFIED = "verified"
    VERIFICATION_FAILED = "verification_failed"
    UNSIGNED = "unsigned"


@dataclass(frozen=True)
class OpenedEnvelope:
    payload: bytes
    outcome: VerifyOutcome
    detail: Optional[str] = None

    @property
    def verified(self) -> bool:
        return self.outcome is VerifyOutcome.VERIFIED


def sign_payload(payload: bytes, certificate: SigningCertificate) -> bytes:
    """Wrap ``payload`` in a SignedData signed by ``certificate`` alone."""
    if not certificate.can_sign:
        raise CertificateError(f"Certificate {certificate.subject} has no private key to sign with")
    envelope = (
        pkcs7.PKCS7SignatureBuilder()
        .set_data(payload)
        .add_signer(certificate.certificate, certificate.private_key, hashes.SHA256())
        .sign(serialization.Encoding.DER, [pkcs7.PKCS7Options.Binary])
    )
    logger.debug("Signed %d-byte payload into %d-byte envelope", len(payload), len(envelope))
    return envelope


def wrap_unsigned(payload: bytes) -> bytes:
    """A SignedData carrying ``payload`` with no signer at all."""
    signed_data = cms.SignedData({
        "version": "v1",
        "digest_algorithms": [],
        "encap_content_info": {"content_type": "data", "content": payload},
        "signer_infos": [],
    })
    return cms.ContentInfo({"content_type": "signed_data", "content": signed_data}).dump()


def open_and_verify(envelope: bytes, certificate: SigningCertificate) -> OpenedEnvelope:
    """
    Extract the payload of ``envelope`` and check it against ``certificate``.

    A reply that is plain XML with no envelope around it is returned as
    ``UNSIGNED``. Anything else that is not a SignedData with attached
    content raises MalformedEnvelopeError.
    """
    if _looks_like_bare_xml(envelope):
        return OpenedEnvelope(envelope, VerifyOutcome.UNSIGNED, "reply is not wrapped in a signed envelope")

    try:
        content_info = cms.ContentInfo.load(envelope)
        content_type = content_info["content_type"].native
        if content_type != "signed_data":
            raise MalformedEnvelopeError(f"Expected signed_data envelope, got {content_type}")
        signed_data = content_info["content"]
        payload = signed_data["encap_content_info"]["content"].native
        signer_infos = list(signed_data["signer_infos"])
    except (ValueError, TypeError, KeyError) as exc:
        raise MalformedEnvelopeError(f"Reply is not a readable signed envelope: {exc}") from exc

    if payload is None:
        raise MalformedEnvelopeError("Signed envelope carries no attached content")

    if not signer_infos:
        return OpenedEnvelope(payload, VerifyOutcome.UNSIGNED, "envelope has no signer")

    problems = []
    for signer_info in signer_infos:
        problem = _check_signer(signer_info, payload, certificate)
        if problem is None:
            return OpenedEnvelope(payload, VerifyOutcome.VERIFIED)
        problems.append(problem)

    detail = "; ".join(problems)
    logger.warning("Envelope signature rejected for certificate %s: %s", certificate.fingerprint[:16], detail)
    return OpenedEnvelope(payload, VerifyOutcome.VERIFICATION_FAILED, detail)


def _check_signer(signer_info: cms.SignerInfo, payload: bytes, certificate: SigningCertificate) -> Optional[str]:
    """None when ``signer_info`` verifies against ``certificate``, otherwise the reason it does not."""
    digest_name = signer_info["digest_algorithm"]["algorithm"].native
    hash_type = _HASHES.get(digest_name)
    if hash_type is None:
        return f"unsupported digest algorithm {digest_name}"

    signed_attrs = signer_info["signed_attrs"]
    if signed_attrs.native:
        expected = None
        for attribute in signed_attrs:
            if attribute["type"].native == "message_digest":
                expected = attribute["values"][0].native
        if expected is None:
            return "signed attributes lack a message digest"
        digest = hashes.Hash(hash_type())
        digest.update(payload)
        if digest.finalize() != expected:
            return "message digest does not match the payload"
        # The signature covers the attributes re-tagged as a universal SET.
        signed_bytes = b"\x31" + signed_attrs.dump()[1:]
    else:
        signed_bytes = payload

    public_key = certificate.certificate.public_key()
    signature = signer_info["signature"].native
    try:
        if isinstance(public_key, rsa.RSAPublicKey):
            if signer_info["signature_algorithm"]["algorithm"].native == "rsassa_pss":
                pad = padding.PSS(mgf=padding.MGF1(hash_type()), salt_length=padding.PSS.AUTO)
            else:
                pad = padding.PKCS1v15()
            public_key.verify(signature, signed_bytes, pad, hash_type())
        elif isinstance(public_key, ec.EllipticCurvePublicKey):
            public_key.verify(signature, signed_bytes, ec.ECDSA(hash_type()))
        else:
            return f"unsupported public key type {type(public_key).__name__}"
    except InvalidSignature:
        return "signature does not match the certificate"
    return None


def _looks_like_bare_xml(data: bytes) -> bool:
    head = data[:64].lstrip()
    return head.startswith((b"<", b"\x00<", codecs.BOM_UTF8, codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE))
