"""
Reply contracts.

``<bki_response>`` carries a typed header (version, partner id, timestamp)
and a ``<response>`` with a result code, a human-readable string and four
report sections. The report sections belong to the bureau's report format,
not to this protocol: they are kept as opaque byte captures and handed back
exactly as received.
"""

from __future__ import annotations

from typing import ClassVar, Optional

from lxml import etree
from pydantic import BaseModel, ConfigDict, Field

from equifax_credit.errors import MalformedDocumentError

from .base import XmlModel, xml_attribute
from .enums import ResponseCode

OPAQUE_SECTION_NAMES = ("title_part", "base_part", "add_part", "information_parts")


class OpaqueSection(BaseModel):
    """Raw inner bytes of one report section, in the reply's own charset."""

    model_config = ConfigDict(frozen=True)

    name: str
    raw: bytes = b""
    encoding: str

    def text(self) -> str:
        try:
            return self.raw.decode(self.encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            raise MalformedDocumentError(f"Section '{self.name}' is not valid {self.encoding}") from exc

    def to_element(self) -> etree._Element:
        """Parse the section on demand, wrapped in an element named after it."""
        markup = f"<{self.name}>{self.text()}</{self.name}>"
        try:
            return etree.fromstring(markup, etree.XMLParser(resolve_entities=False, no_network=True))
        except etree.XMLSyntaxError as exc:
            raise MalformedDocumentError(f"Section '{self.name}' is not well-formed: {exc}") from exc


class ReportResponse(XmlModel):
    xml_tag: ClassVar[str] = "response"

    num: Optional[str] = xml_attribute("num", default=None)
    code: str = Field(alias="responsecode")
    text: str = Field(default="", alias="responsestring")
    title_part: Optional[OpaqueSection] = Field(default=None, alias="title_part")
    base_part: Optional[OpaqueSection] = Field(default=None, alias="base_part")
    add_part: Optional[OpaqueSection] = Field(default=None, alias="add_part")
    information_parts: Optional[OpaqueSection] = Field(default=None, alias="information_parts")

    @property
    def outcome(self) -> ResponseCode:
        return ResponseCode.from_code(self.code)

    @property
    def accepted(self) -> bool:
        return self.outcome is ResponseCode.ACCEPTED

    def sections(self) -> dict:
        return {
            name: getattr(self, name)
            for name in OPAQUE_SECTION_NAMES
            if getattr(self, name) is not None
        }


class ResponseEnvelope(XmlModel):
    xml_tag: ClassVar[str] = "bki_response"

    version: str = xml_attribute("version")
    partner_id: str = xml_attribute("partnerid")
    timestamp: Optional[str] = xml_attribute("datetime", default=None)
    response: ReportResponse
    encoding: str = Field(default="windows-1251", exclude=True)
