"""
XML serialization of the request and reply envelopes.

The mapping is driven by the contract models themselves (see
``contracts/base.py``): a model becomes an element named ``xml_tag``, its
scalar fields become child elements or attributes named by their alias, and
``None`` fields are left out. The four report sections of a reply are never
parsed into the tree: their inner bytes are cut out of the payload using the
parser's byte offsets and stored as ``OpaqueSection`` values.
"""

from __future__ import annotations

import logging
import types
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, Iterable, List, Optional, Tuple, Type, TypeVar, Union, get_args, get_origin
from xml.parsers import expat

from lxml import etree
from pydantic import ValidationError

from equifax_credit.contracts.application import RequestEnvelope
from equifax_credit.contracts.base import XmlModel, is_xml_attribute
from equifax_credit.contracts.envelopes import OPAQUE_SECTION_NAMES, OpaqueSection, ReportResponse, ResponseEnvelope
from equifax_credit.errors import MalformedDocumentError, UnknownCharsetError

from .charset import WIRE_CHARSET, encode_to_wire, resolve_charset, xml_declaration

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d.%m.%Y"

ModelT = TypeVar("ModelT", bound=XmlModel)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_request(envelope: RequestEnvelope, encoding: str = WIRE_CHARSET) -> str:
    """Request document as text, declaring ``encoding``."""
    return xml_declaration(encoding) + _render(envelope)


def serialize_request(envelope: RequestEnvelope, encoding: str = WIRE_CHARSET) -> bytes:
    data = encode_to_wire(render_request(envelope, encoding), encoding)
    logger.debug("Serialized request num=%s: %d bytes in %s", envelope.request.num, len(data), encoding)
    return data


def deserialize_request(data: bytes, default_charset: str = WIRE_CHARSET) -> RequestEnvelope:
    charset = resolve_charset(data, default=default_charset)
    root = _parse(data, charset)
    _expect_root(root, RequestEnvelope)
    return _validate(RequestEnvelope, _collect(RequestEnvelope, root))


def serialize_response(envelope: ResponseEnvelope) -> bytes:
    """Reply document in ``envelope.encoding`` with the report sections spliced in verbatim."""
    encoding = envelope.encoding
    skeleton = encode_to_wire(xml_declaration(encoding) + _render(envelope), encoding)

    # Placeholders are located in the skeleton before anything is spliced in,
    # so section content can never be mistaken for a later placeholder.
    # Typed text is escaped, so the literal empty tag can only be the placeholder.
    splices: List[Tuple[int, int, bytes]] = []
    for name, section in envelope.response.sections().items():
        if section.encoding.lower() != encoding.lower():
            raise MalformedDocumentError(
                f"Section '{name}' is held in {section.encoding}, reply is written in {encoding}"
            )
        if not section.raw:
            continue
        placeholder = encode_to_wire(f"<{name}/>", encoding)
        start = skeleton.find(placeholder)
        if start < 0:
            raise MalformedDocumentError(f"No placeholder for section '{name}' in the rendered reply")
        filled = encode_to_wire(f"<{name}>", encoding) + section.raw + encode_to_wire(f"</{name}>", encoding)
        splices.append((start, start + len(placeholder), filled))

    data = skeleton
    for start, end, filled in sorted(splices, reverse=True):
        data = data[:start] + filled + data[end:]
    return data


def deserialize_response(data: bytes, default_charset: str = WIRE_CHARSET) -> ResponseEnvelope:
    charset = resolve_charset(data, default=default_charset)
    root = _parse(data, charset)
    _expect_root(root, ResponseEnvelope)
    sections = capture_sections(
        data,
        charset,
        parent_path=(ResponseEnvelope.xml_tag, ReportResponse.xml_tag),
        names=OPAQUE_SECTION_NAMES,
    )
    fields = _collect(ResponseEnvelope, root, sections)
    fields["encoding"] = charset
    envelope = _validate(ResponseEnvelope, fields)
    logger.debug(
        "Decoded reply: code=%s sections=%s charset=%s",
        envelope.response.code,
        sorted(sections),
        charset,
    )
    return envelope


def capture_sections(
    data: bytes,
    charset: str,
    parent_path: Tuple[str, ...],
    names: Iterable[str],
) -> Dict[str, OpaqueSection]:
    """Inner byte ranges of the elements ``names`` found directly under ``parent_path``.

    Only the first occurrence of each name is kept. Offsets are byte offsets
    into ``data``, so the capture is exact for ASCII-compatible charsets.
    """
    wanted = set(names)
    parser = expat.ParserCreate(encoding=charset)
    path: List[str] = []
    opened: Dict[str, int] = {}
    sections: Dict[str, OpaqueSection] = {}

    def on_start(name: str, attrs: Dict[str, str]) -> None:
        if tuple(path) == parent_path and name in wanted and name not in opened:
            opened[name] = parser.CurrentByteIndex
        path.append(name)

    def on_end(name: str) -> None:
        path.pop()
        if tuple(path) != parent_path or name not in opened or name in sections:
            return
        inner_start = _end_of_start_tag(data, opened[name])
        if data[inner_start - 2:inner_start] == b"/>":
            raw = b""
        else:
            raw = data[inner_start:parser.CurrentByteIndex]
        sections[name] = OpaqueSection(name=name, raw=raw, encoding=charset)

    parser.StartElementHandler = on_start
    parser.EndElementHandler = on_end
    try:
        parser.Parse(data, True)
    except expat.ExpatError as exc:
        raise MalformedDocumentError(f"Document is not well-formed: {exc}") from exc
    return sections


# ---------------------------------------------------------------------------
# Model -> tree
# ---------------------------------------------------------------------------

def _render(model: XmlModel) -> str:
    try:
        return etree.tostring(_build(model), encoding="unicode")
    except ValueError as exc:
        # lxml refuses control characters and NUL in text and attributes
        raise MalformedDocumentError(f"Cannot serialize <{model.xml_tag}>: {exc}") from exc


def _build(model: XmlModel, parent: Optional[etree._Element] = None) -> etree._Element:
    if parent is None:
        element = etree.Element(model.xml_tag)
    else:
        element = etree.SubElement(parent, model.xml_tag)

    for name, field in type(model).model_fields.items():
        if field.exclude:
            continue
        value = getattr(model, name)
        if value is None:
            continue
        if isinstance(value, XmlModel):
            _build(value, element)
            continue
        tag = field.alias or name
        if isinstance(value, OpaqueSection):
            etree.SubElement(element, tag)
            continue
        if is_xml_attribute(field):
            element.set(tag, _format_value(value))
        else:
            etree.SubElement(element, tag).text = _format_value(value)
    return element


def _format_value(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


# ---------------------------------------------------------------------------
# Tree -> model
# ---------------------------------------------------------------------------

def _parse(data: bytes, charset: str) -> etree._Element:
    try:
        parser = etree.XMLParser(encoding=charset, resolve_entities=False, no_network=True)
    except LookupError as exc:
        raise UnknownCharsetError(charset) from exc
    try:
        return etree.fromstring(data, parser)
    except etree.XMLSyntaxError as exc:
        raise MalformedDocumentError(f"Document is not well-formed: {exc}") from exc


def _expect_root(root: etree._Element, model_type: Type[XmlModel]) -> None:
    if root.tag != model_type.xml_tag:
        raise MalformedDocumentError(f"Expected <{model_type.xml_tag}> root element, got <{root.tag}>")


def _collect(
    model_type: Type[XmlModel],
    element: etree._Element,
    sections: Optional[Dict[str, OpaqueSection]] = None,
) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    for name, field in model_type.model_fields.items():
        if field.exclude:
            continue
        candidates = _field_types(field.annotation)
        nested = [c for c in candidates if isinstance(c, type) and issubclass(c, XmlModel)]
        if nested:
            for nested_type in nested:
                child = element.find(nested_type.xml_tag)
                if child is not None:
                    fields[name] = _validate(nested_type, _collect(nested_type, child, sections))
                    break
            continue

        tag = field.alias or name
        if OpaqueSection in candidates:
            if sections and tag in sections:
                fields[name] = sections[tag]
            continue

        if is_xml_attribute(field):
            raw = element.get(tag)
        else:
            child = element.find(tag)
            raw = None if child is None else (child.text or "")
        if raw is not None:
            fields[name] = _parse_value(raw, candidates, tag)
    return fields


def _parse_value(raw: str, candidates: List[Any], tag: str) -> Any:
    if date in candidates:
        try:
            return datetime.strptime(raw.strip(), DATE_FORMAT).date()
        except ValueError as exc:
            raise MalformedDocumentError(f"<{tag}> holds '{raw}', expected a DD.MM.YYYY date") from exc
    if str in candidates or any(isinstance(c, type) and issubclass(c, Enum) for c in candidates):
        return raw
    return raw.strip()


def _validate(model_type: Type[ModelT], fields: Dict[str, Any]) -> ModelT:
    try:
        return model_type.model_validate(fields)
    except ValidationError as exc:
        raise MalformedDocumentError(f"<{model_type.xml_tag}> does not match the contract: {exc}") from exc


def _field_types(annotation: Any) -> List[Any]:
    """Flatten Optional/Union/Annotated into the list of concrete member types."""
    origin = get_origin(annotation)
    if origin is Annotated:
        return _field_types(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        flattened: List[Any] = []
        for arg in get_args(annotation):
            if arg is not type(None):
                flattened.extend(_field_types(arg))
        return flattened
    return [annotation]


def _end_of_start_tag(data: bytes, start: int) -> int:
    """Offset just past the ``>`` closing the start tag that begins at ``start``."""
    quote = None
    for offset in range(start, len(data)):
        byte = data[offset]
        if quote is not None:
            if byte == quote:
                quote = None
        elif byte in (0x22, 0x27):
            quote = byte
        elif byte == 0x3E:
            return offset + 1
    raise MalformedDocumentError(f"Unterminated start tag at offset {start}")
