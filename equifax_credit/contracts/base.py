"""Shared base for the XML-mapped document models.

Each model names its element in ``xml_tag``. Scalar fields map to child
elements named by their alias; fields declared with :func:`xml_attribute`
map to attributes of the model's element. Nested models are written under
their own ``xml_tag``.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.fields import FieldInfo

XML_ATTRIBUTE = "attribute"


class XmlModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    xml_tag: ClassVar[str] = ""


def xml_attribute(alias: str, **kwargs: Any) -> Any:
    """Declare a field rendered as an attribute of the enclosing element."""
    return Field(alias=alias, json_schema_extra={"xml": XML_ATTRIBUTE}, **kwargs)


def is_xml_attribute(field: FieldInfo) -> bool:
    extra = field.json_schema_extra
    return isinstance(extra, dict) and extra.get("xml") == XML_ATTRIBUTE
