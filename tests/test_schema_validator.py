import pytest

from equifax_credit.codec.schema_validator import load_schema, validate_request
from equifax_credit.codec.serializer import serialize_request
from equifax_credit.contracts.application import RequestEnvelope
from equifax_credit.errors import MalformedDocumentError, SchemaUnavailableError, SchemaValidationError


def test_conforming_request_passes(minimal_document, permissive_schema_file):
    data = serialize_request(RequestEnvelope(partner_id="123456", request=minimal_document))

    validate_request(data, permissive_schema_file)


def test_every_violation_is_reported(minimal_document, schema_file):
    data = serialize_request(RequestEnvelope(partner_id="ABC", request=minimal_document))

    with pytest.raises(SchemaValidationError) as excinfo:
        validate_request(data, schema_file)

    messages = excinfo.value.messages
    assert len(messages) >= 2
    assert any("partnerid" in message for message in messages)
    assert any("channel" in message for message in messages)
    assert all(message.startswith("line ") for message in messages)


def test_missing_schema_is_unavailable(minimal_document, tmp_path):
    data = serialize_request(RequestEnvelope(partner_id="123456", request=minimal_document))

    with pytest.raises(SchemaUnavailableError):
        validate_request(data, tmp_path / "missing.xsd")


def test_broken_schema_is_unavailable(tmp_path):
    path = tmp_path / "broken.xsd"
    path.write_text("<xs:schema xmlns:xs='http://www.w3.org/2001/XMLSchema'><xs:element/></xs:schema>")

    with pytest.raises(SchemaUnavailableError):
        load_schema(path)


def test_request_that_is_not_xml_is_malformed(permissive_schema_file):
    with pytest.raises(MalformedDocumentError):
        validate_request(b"<bki_request>", permissive_schema_file)


def test_schema_is_reread_on_every_call(minimal_document, schema_file, permissive_schema_file):
    data = serialize_request(RequestEnvelope(partner_id="ABC", request=minimal_document))
    with pytest.raises(SchemaValidationError):
        validate_request(data, schema_file)

    schema_file.write_text(permissive_schema_file.read_text(encoding="utf-8"), encoding="utf-8")

    validate_request(data, schema_file)
