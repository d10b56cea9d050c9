"""
Application document contracts.

Typed shape of the ``<request>`` tree sent to the bureau:
- subject of the report: a person (``<private>``) or a legal entity (``<commercial>``)
- the person's identity document
- application details (credit terms, employment, dependants)
- registered and actual addresses
- purpose-of-request code

Only the subject and the purpose are mandatory. Every other section may be
left out and is then omitted from the wire document entirely.

Field order is wire order; do not reorder fields.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, ClassVar, Literal, Optional, Union

from pydantic import Field, model_validator

from .base import XmlModel, xml_attribute
from .enums import (
    AddressOwner,
    AdmCodeInForm,
    CompanyArea,
    CompanySize,
    CompanyState,
    Consent,
    Country,
    Cred,
    CredSecurity,
    DocType,
    Education,
    EmploymentCurrent,
    EmploymentType,
    Gender,
    IncomeFrequency,
    Marital,
    Profession,
    Purpose,
    Reason,
    Resident,
    SumCurrency,
)

PROTOCOL_VERSION = "3.4"

RegionCode = Annotated[str, Field(pattern=r"^\d{2}$")]
PostalIndex = Annotated[str, Field(pattern=r"^\d{6}$")]
Amount = Annotated[Decimal, Field(ge=0)]


# ---------------------------------------------------------------------------
# Subject of the report
# ---------------------------------------------------------------------------

class IdentityDocument(XmlModel):
    xml_tag: ClassVar[str] = "doc"

    doc_type: DocType = Field(alias="doctype")
    doc_number: str = Field(alias="docno", min_length=1)
    issue_date: date = Field(alias="docdate")
    expiry_date: Optional[date] = Field(default=None, alias="docenddate")
    issue_place: str = Field(alias="docplace")  # issuer name; issuer code after ';'


class PersonSubject(XmlModel):
    xml_tag: ClassVar[str] = "private"

    kind: Literal["person"] = Field(default="person", exclude=True)
    last_name: str = Field(alias="lastname", min_length=1)
    first_name: str = Field(alias="firstname", min_length=1)
    middle_name: Optional[str] = Field(default=None, alias="middlename")
    gender: Optional[Gender] = Field(default=None, alias="gender")
    birthday: date = Field(alias="birthday")
    birthplace: Optional[str] = Field(default=None, alias="birthplace")
    identity_document: Optional[IdentityDocument] = None
    inn: Optional[str] = Field(default=None, alias="inn", pattern=r"^\d{12}$")
    pension_number: Optional[str] = Field(default=None, alias="pfno")  # SNILS


class LegalEntitySubject(XmlModel):
    xml_tag: ClassVar[str] = "commercial"

    kind: Literal["legal_entity"] = Field(default="legal_entity", exclude=True)
    full_name: Optional[str] = Field(default=None, alias="fullname")
    short_name: Optional[str] = Field(default=None, alias="shortname")
    firm_name: Optional[str] = Field(default=None, alias="firmname")
    foreign_name: Optional[str] = Field(default=None, alias="foreignname")
    resident: Resident = Field(alias="resident")
    reg_country: Country = Field(alias="regcountry")
    phone: Optional[str] = Field(default=None, alias="phone")
    inn: Optional[str] = Field(default=None, alias="inn", pattern=r"^\d{10}$")
    ogrn: Optional[str] = Field(default=None, alias="egrn", pattern=r"^\d{13}$")

    @model_validator(mode="after")
    def _require_a_name(self) -> "LegalEntitySubject":
        if not any((self.full_name, self.short_name, self.firm_name, self.foreign_name)):
            raise ValueError("legal entity needs at least one of fullname/shortname/firmname/foreignname")
        return self


Subject = Annotated[Union[PersonSubject, LegalEntitySubject], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Application details
# ---------------------------------------------------------------------------

class EmploymentCompany(XmlModel):
    xml_tag: ClassVar[str] = "company"

    name: str = Field(alias="name", min_length=1)
    state: CompanyState = Field(alias="state")
    size: CompanySize = Field(alias="size")
    area: CompanyArea = Field(alias="area")
    area_text: Optional[str] = Field(default=None, alias="area_text")


class Employment(XmlModel):
    xml_tag: ClassVar[str] = "employment"

    current: EmploymentCurrent = Field(alias="current")
    duration_months: int = Field(alias="duration", ge=0)
    employment_type: EmploymentType = Field(alias="type")
    profession: Profession = Field(alias="profession")
    profession_text: Optional[str] = Field(default=None, alias="profession_text")
    company: Optional[EmploymentCompany] = None


class PrivateApplicant(XmlModel):
    xml_tag: ClassVar[str] = "private"

    kind: Literal["private"] = Field(default="private", exclude=True)
    citizenship: Optional[Country] = Field(default=None, alias="citizenship")
    marital: Optional[Marital] = Field(default=None, alias="marriage")
    dependants_under_18: Optional[int] = Field(default=None, alias="dependants_bel18", ge=0)
    dependants_over_18: Optional[int] = Field(default=None, alias="dependants_und18", ge=0)
    education: Optional[Education] = Field(default=None, alias="education")
    phone_mobile: Optional[str] = Field(default=None, alias="phone_mobile")
    phone_home: Optional[str] = Field(default=None, alias="phone_home")
    phone_work: Optional[str] = Field(default=None, alias="phone_work")
    email: Optional[str] = Field(default=None, alias="email")
    employment: Optional[Employment] = None


class CommercialApplicant(XmlModel):
    xml_tag: ClassVar[str] = "commercial"

    kind: Literal["commercial"] = Field(default="commercial", exclude=True)
    company_state: CompanyState = Field(alias="company_state")
    company_size: CompanySize = Field(alias="company_size")
    company_area: CompanyArea = Field(alias="company_area")
    company_area_text: Optional[str] = Field(default=None, alias="company_area_text")
    beginning_date: date = Field(alias="company_beginning_date")


Applicant = Annotated[Union[PrivateApplicant, CommercialApplicant], Field(discriminator="kind")]


class ApplicationDetails(XmlModel):
    xml_tag: ClassVar[str] = "application"

    consent: Consent = Field(alias="consent")
    consent_date: date = Field(alias="consentdate")
    consent_end_date: date = Field(alias="consentenddate")
    adm_code_inform: AdmCodeInForm = Field(alias="admcode_inform")
    consent_owner: Optional[str] = Field(default=None, alias="consent_owner")
    income: Optional[Amount] = Field(default=None, alias="income")
    income_frequency: Optional[IncomeFrequency] = Field(default=None, alias="income_frequency")
    purpose: Optional[Purpose] = Field(default=None, alias="purpose")
    purpose_text: Optional[str] = Field(default=None, alias="purpose_text")
    application_num: Optional[str] = Field(default=None, alias="application_num")
    application_date: date = Field(alias="application_date")
    cred_type: Optional[Cred] = Field(default=None, alias="cred_type")
    cred_currency: Optional[SumCurrency] = Field(default=None, alias="cred_currency")
    cred_sum: Optional[Amount] = Field(default=None, alias="cred_sum")
    cred_deposit: Optional[Amount] = Field(default=None, alias="cred_deposit")
    cred_last_payment: Optional[Amount] = Field(default=None, alias="cred_last_payment")
    cred_sum_payment: Optional[Amount] = Field(default=None, alias="cred_sum_payment")
    cred_frequency_payment: Optional[Amount] = Field(default=None, alias="cred_frequency_payment")
    cred_duration: Optional[Amount] = Field(default=None, alias="cred_duration")
    cred_security: Optional[CredSecurity] = Field(default=None, alias="cred_security")
    comment: Optional[str] = Field(default=None, alias="comment")
    applicant: Optional[Applicant] = None

    @model_validator(mode="after")
    def _check_consent_period(self) -> "ApplicationDetails":
        if self.consent_end_date < self.consent_date:
            raise ValueError("consentenddate must not precede consentdate")
        return self


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------

class RegisteredAddress(XmlModel):
    xml_tag: ClassVar[str] = "addr_reg"

    owner: AddressOwner = Field(alias="owner")
    index: PostalIndex = Field(alias="index")
    total: Optional[str] = Field(default=None, alias="addr_reg_total")
    country: Country = Field(alias="country")
    region: RegionCode = Field(alias="region")
    city: str = Field(alias="city")
    district: Optional[str] = Field(default=None, alias="district")
    street: str = Field(alias="street")
    house: str = Field(alias="house")
    flat: str = Field(alias="flat")


class ActualAddress(XmlModel):
    xml_tag: ClassVar[str] = "addr_fact"

    owner: AddressOwner = Field(alias="owner")
    index: PostalIndex = Field(alias="index")
    total: Optional[str] = Field(default=None, alias="addr_fact_total")
    country: Country = Field(alias="country")
    region: RegionCode = Field(alias="region")
    city: str = Field(alias="city")
    district: Optional[str] = Field(default=None, alias="district")
    street: str = Field(alias="street")
    house: str = Field(alias="house")
    flat: str = Field(alias="flat")


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class ApplicationDocument(XmlModel):
    """One credit report request (``<request>``)."""

    xml_tag: ClassVar[str] = "request"

    num: int = xml_attribute("num", default=1, ge=0)
    date_of_report: date = xml_attribute("dateofreport", default_factory=date.today)
    subject: Subject
    purpose: Reason = Field(alias="reason")
    purpose_text: Optional[str] = Field(default=None, alias="reason_text")
    application: Optional[ApplicationDetails] = None
    registered_address: Optional[RegisteredAddress] = None
    actual_address: Optional[ActualAddress] = None
    report_type: Optional[str] = Field(default=None, alias="type")

    @model_validator(mode="after")
    def _require_text_for_other_purpose(self) -> "ApplicationDocument":
        if self.purpose is Reason.OTHER and not self.purpose_text:
            raise ValueError("reason_text is required when reason is OTHER")
        return self


class RequestEnvelope(XmlModel):
    xml_tag: ClassVar[str] = "bki_request"

    version: str = xml_attribute("version", default=PROTOCOL_VERSION)
    partner_id: str = xml_attribute("partnerid", min_length=1)
    request: ApplicationDocument
