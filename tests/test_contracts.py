from datetime import date

import pytest
from pydantic import ValidationError

from equifax_credit.contracts.application import (
    PROTOCOL_VERSION,
    ApplicationDetails,
    ApplicationDocument,
    LegalEntitySubject,
    PersonSubject,
    RequestEnvelope,
)
from equifax_credit.contracts.enums import AdmCodeInForm, Consent, Country, Reason, Resident, ResponseCode
from equifax_credit.contracts.envelopes import OpaqueSection, ReportResponse
from equifax_credit.errors import MalformedDocumentError


def test_request_envelope_defaults_to_protocol_version(minimal_document):
    envelope = RequestEnvelope(partner_id="123456", request=minimal_document)

    assert envelope.version == PROTOCOL_VERSION == "3.4"
    assert envelope.request.num == 7


def test_document_accepts_wire_aliases():
    document = ApplicationDocument.model_validate(
        {
            "subject": {"kind": "person", "lastname": "Смирнова", "firstname": "Анна", "birthday": "1990-01-02"},
            "reason": "3",
        }
    )

    assert isinstance(document.subject, PersonSubject)
    assert document.purpose is Reason.EMPLOYMENT
    assert document.date_of_report == date.today()


def test_subject_union_picks_legal_entity_by_kind():
    document = ApplicationDocument.model_validate(
        {
            "subject": {
                "kind": "legal_entity",
                "short_name": "ООО Ромашка",
                "resident": "1",
                "reg_country": "RU",
                "inn": "7701234567",
            },
            "purpose": "1",
        }
    )

    assert isinstance(document.subject, LegalEntitySubject)
    assert document.subject.resident is Resident.RESIDENT


def test_legal_entity_requires_some_name():
    with pytest.raises(ValidationError):
        LegalEntitySubject(resident=Resident.RESIDENT, reg_country=Country.RU)


def test_code_outside_closed_set_is_rejected():
    with pytest.raises(ValidationError):
        ApplicationDocument(
            subject=PersonSubject(last_name="А", first_name="Б", birthday=date(1990, 1, 1)),
            purpose="42",
        )


def test_other_purpose_needs_text():
    with pytest.raises(ValidationError):
        ApplicationDocument(
            subject=PersonSubject(last_name="А", first_name="Б", birthday=date(1990, 1, 1)),
            purpose=Reason.OTHER,
        )


def test_consent_period_cannot_end_before_it_starts():
    with pytest.raises(ValidationError):
        ApplicationDetails(
            consent=Consent.YES,
            consent_date=date(2026, 10, 1),
            consent_end_date=date(2026, 9, 1),
            adm_code_inform=AdmCodeInForm.INFORMED,
            application_date=date(2026, 10, 1),
        )


def test_person_inn_must_have_twelve_digits():
    with pytest.raises(ValidationError):
        PersonSubject(last_name="А", first_name="Б", birthday=date(1990, 1, 1), inn="12345")


def test_unknown_fields_are_rejected():
    with pytest.raises(ValidationError):
        PersonSubject(last_name="А", first_name="Б", birthday=date(1990, 1, 1), nickname="x")


@pytest.mark.parametrize(
    "code, expected",
    [("0", ResponseCode.ACCEPTED), (" 1 ", ResponseCode.NOT_FOUND), ("3", ResponseCode.ERROR), ("77", ResponseCode.UNKNOWN)],
)
def test_response_outcome_from_code(code, expected):
    response = ReportResponse(code=code)

    assert response.outcome is expected
    assert response.code == code
    assert response.accepted is (expected is ResponseCode.ACCEPTED)


def test_opaque_section_parses_on_demand():
    section = OpaqueSection(name="base_part", raw="<credit><sum>1</sum></credit>".encode("cp1251"), encoding="windows-1251")

    element = section.to_element()

    assert element.tag == "base_part"
    assert element.find("credit/sum").text == "1"


def test_opaque_section_reports_malformed_markup():
    section = OpaqueSection(name="add_part", raw=b"<open>", encoding="windows-1251")

    with pytest.raises(MalformedDocumentError):
        section.to_element()
