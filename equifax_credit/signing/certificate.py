"""
Signing certificate held by one client instance.

The certificate (and its private key) is passed explicitly to the client
constructor, so several clients with different certificates can live in one
process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.serialization import pkcs12

from equifax_credit.errors import CertificateError

logger = logging.getLogger(__name__)

SigningKey = Union[rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey]


@dataclass(frozen=True)
class SigningCertificate:
    certificate: x509.Certificate
    private_key: Optional[SigningKey] = None

    def __post_init__(self) -> None:
        if self.private_key is None:
            return
        if not isinstance(self.private_key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
            raise CertificateError(f"Unsupported signing key type: {type(self.private_key).__name__}")
        if _spki(self.private_key.public_key()) != _spki(self.certificate.public_key()):
            raise CertificateError("Private key does not belong to the certificate")

    @property
    def fingerprint(self) -> str:
        return self.certificate.fingerprint(hashes.SHA256()).hex()

    @property
    def subject(self) -> str:
        return self.certificate.subject.rfc4514_string()

    @property
    def can_sign(self) -> bool:
        return self.private_key is not None

    @classmethod
    def from_pem(
        cls,
        cert_path: Union[str, Path],
        key_path: Optional[Union[str, Path]] = None,
        password: Optional[str] = None,
    ) -> "SigningCertificate":
        """Load a PEM certificate and, optionally, its PEM private key."""
        try:
            certificate = x509.load_pem_x509_certificate(Path(cert_path).read_bytes())
            private_key = None
            if key_path:
                private_key = serialization.load_pem_private_key(
                    Path(key_path).read_bytes(),
                    password=password.encode("utf-8") if password else None,
                )
        except (OSError, ValueError, TypeError) as exc:
            raise CertificateError(f"Cannot load certificate {cert_path}: {exc}") from exc

        loaded = cls(certificate=certificate, private_key=private_key)
        logger.info("Loaded signing certificate %s (sha256 %s)", loaded.subject, loaded.fingerprint[:16])
        return loaded

    @classmethod
    def from_pkcs12(cls, path: Union[str, Path], password: Optional[str] = None) -> "SigningCertificate":
        try:
            private_key, certificate, _ = pkcs12.load_key_and_certificates(
                Path(path).read_bytes(),
                password.encode("utf-8") if password else None,
            )
        except (OSError, ValueError, TypeError) as exc:
            raise CertificateError(f"Cannot load PKCS#12 bundle {path}: {exc}") from exc
        if certificate is None:
            raise CertificateError(f"PKCS#12 bundle {path} holds no certificate")

        loaded = cls(certificate=certificate, private_key=private_key)
        logger.info("Loaded signing certificate %s (sha256 %s)", loaded.subject, loaded.fingerprint[:16])
        return loaded


def _spki(public_key) -> bytes:
    return public_key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
