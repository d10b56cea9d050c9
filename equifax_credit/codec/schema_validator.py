"""
Optional XSD conformance check of the encoded request.

The schema file is read on every call, so a schema replaced on disk takes
effect on the next exchange. All violations are reported together.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

from lxml import etree

from equifax_credit.errors import MalformedDocumentError, SchemaUnavailableError, SchemaValidationError

logger = logging.getLogger(__name__)


def load_schema(schema_path: Union[str, Path]) -> etree.XMLSchema:
    path = Path(schema_path)
    if not path.is_file():
        raise SchemaUnavailableError(f"Schema file not found: {path}")
    try:
        return etree.XMLSchema(etree.parse(str(path)))
    except (OSError, etree.LxmlError) as exc:
        raise SchemaUnavailableError(f"Cannot load schema {path}: {exc}") from exc


def validate_request(data: bytes, schema_path: Union[str, Path]) -> None:
    """
    Validate encoded request bytes against the XSD at ``schema_path``.

    Raises:
        SchemaUnavailableError: the schema is missing or does not compile
        MalformedDocumentError: ``data`` is not well-formed XML
        SchemaValidationError: one or more violations; ``messages`` lists all of them
    """
    schema = load_schema(schema_path)
    try:
        document = etree.fromstring(data, etree.XMLParser(resolve_entities=False, no_network=True))
    except etree.XMLSyntaxError as exc:
        raise MalformedDocumentError(f"Request is not well-formed: {exc}") from exc

    if schema.validate(document):
        logger.debug("Request conforms to schema %s", schema_path)
        return

    messages: List[str] = [f"line {entry.line}: {entry.message}" for entry in schema.error_log]
    logger.warning("Request failed schema validation with %d error(s)", len(messages))
    raise SchemaValidationError(messages)
