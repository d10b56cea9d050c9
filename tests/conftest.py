"""Pytest fixtures for the credit report exchange tests."""

from datetime import date, datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import NameOID

from equifax_credit.contracts.application import (
    ApplicationDocument,
    IdentityDocument,
    PersonSubject,
    RegisteredAddress,
)
from equifax_credit.contracts.enums import AddressOwner, Country, DocType, Gender, Reason
from equifax_credit.signing.certificate import SigningCertificate

SCHEMA_XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:element name="bki_request">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="request">
          <xs:complexType>
            <xs:sequence>
              <xs:any processContents="skip" minOccurs="0" maxOccurs="unbounded"/>
            </xs:sequence>
            <xs:attribute name="num" type="xs:nonNegativeInteger" use="required"/>
            <xs:attribute name="dateofreport" type="xs:string" use="required"/>
            <xs:attribute name="channel" type="xs:string" use="required"/>
          </xs:complexType>
        </xs:element>
      </xs:sequence>
      <xs:attribute name="version" type="xs:decimal" use="required"/>
      <xs:attribute name="partnerid" type="xs:positiveInteger" use="required"/>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""

PERMISSIVE_XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:element name="bki_request">
    <xs:complexType>
      <xs:sequence>
        <xs:any processContents="skip" minOccurs="0" maxOccurs="unbounded"/>
      </xs:sequence>
      <xs:anyAttribute processContents="skip"/>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""


def _self_signed(private_key, common_name: str) -> x509.Certificate:
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .sign(private_key, hashes.SHA256())
    )


def make_ec_certificate(common_name: str = "partner-ec") -> SigningCertificate:
    key = ec.generate_private_key(ec.SECP256R1())
    return SigningCertificate(certificate=_self_signed(key, common_name), private_key=key)


def make_rsa_certificate(common_name: str = "partner-rsa") -> SigningCertificate:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return SigningCertificate(certificate=_self_signed(key, common_name), private_key=key)


@pytest.fixture(scope="session")
def ec_certificate():
    return make_ec_certificate()


@pytest.fixture(scope="session")
def rsa_certificate():
    return make_rsa_certificate()


@pytest.fixture(scope="session")
def other_certificate():
    """A certificate unrelated to the one the client is configured with."""
    return make_ec_certificate("stranger")


@pytest.fixture
def minimal_document():
    """Subject and purpose only."""
    return ApplicationDocument(
        num=7,
        date_of_report=date(2026, 10, 18),
        subject=PersonSubject(
            last_name="Петров",
            first_name="Пётр",
            birthday=date(1985, 3, 9),
        ),
        purpose=Reason.LOAN_APPLICATION,
    )


@pytest.fixture
def full_document():
    return ApplicationDocument(
        num=12,
        date_of_report=date(2026, 10, 18),
        subject=PersonSubject(
            last_name="Иванов",
            first_name="Иван",
            middle_name="Иванович",
            gender=Gender.MALE,
            birthday=date(1980, 5, 17),
            birthplace="г. Москва",
            identity_document=IdentityDocument(
                doc_type=DocType.PASSPORT_RF,
                doc_number="4500 123456",
                issue_date=date(2005, 6, 1),
                issue_place="ОВД Тверского р-на;772-001",
            ),
            inn="770123456789",
        ),
        purpose=Reason.OTHER,
        purpose_text="Проверка & сверка <данных>",
        registered_address=RegisteredAddress(
            owner=AddressOwner.OWNER,
            index="125009",
            country=Country.RU,
            region="77",
            city="Москва",
            street="Тверская",
            house="1",
            flat="10",
        ),
    )


@pytest.fixture
def schema_file(tmp_path):
    """XSD that a default request violates twice (missing attribute, non-numeric partner id)."""
    path = tmp_path / "strict.xsd"
    path.write_text(SCHEMA_XSD, encoding="utf-8")
    return path


@pytest.fixture
def permissive_schema_file(tmp_path):
    path = tmp_path / "permissive.xsd"
    path.write_text(PERMISSIVE_XSD, encoding="utf-8")
    return path
