"""
Charset handling for wire documents.

Requests go out in the bureau's single-byte Cyrillic codepage. Replies name
their own charset in the XML declaration; when they do not, the configured
default applies. Internally all text is ``str``.

Encoding is strict: a character the codepage cannot represent is an error,
never a substitution.
"""

from __future__ import annotations

import codecs
import logging
import re
from typing import Optional

from equifax_credit.errors import MalformedDocumentError, UnknownCharsetError, UnsupportedCharacterError

logger = logging.getLogger(__name__)

WIRE_CHARSET = "windows-1251"

_DECLARATION_RE = re.compile(rb"""^\s*<\?xml\s[^>]*?\bencoding\s*=\s*["']([A-Za-z][A-Za-z0-9._:-]*)["']""")

# Checked longest first so UTF-32 is not mistaken for UTF-16.
_BOMS = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def codec_name(charset: str) -> str:
    """Python codec name for an IANA/XML charset name (``windows-1251`` -> ``cp1251``)."""
    try:
        return codecs.lookup(charset).name
    except LookupError as exc:
        raise UnknownCharsetError(charset) from exc


def xml_declaration(encoding: str = WIRE_CHARSET) -> str:
    return f'<?xml version="1.0" encoding="{encoding}"?>\n'


def declared_charset(data: bytes) -> Optional[str]:
    """Charset named by a byte-order mark or by the XML declaration, if any."""
    for bom, name in _BOMS:
        if data.startswith(bom):
            return name
    match = _DECLARATION_RE.match(data[:512])
    if match:
        return match.group(1).decode("ascii")
    return None


def resolve_charset(data: bytes, default: str = WIRE_CHARSET, declared: Optional[str] = None) -> str:
    """Effective charset: explicit ``declared``, then the document's own, then ``default``."""
    charset = declared or declared_charset(data) or default
    codec_name(charset)
    if charset != default:
        logger.debug("Using charset %s (default %s)", charset, default)
    return charset


def encode_to_wire(text: str, encoding: str = WIRE_CHARSET) -> bytes:
    try:
        return text.encode(codec_name(encoding), errors="strict")
    except UnicodeEncodeError as exc:
        raise UnsupportedCharacterError(exc.object[exc.start], exc.start, encoding) from exc


def decode_from_wire(data: bytes, declared: Optional[str] = None, default: str = WIRE_CHARSET) -> str:
    charset = resolve_charset(data, default=default, declared=declared)
    try:
        text = data.decode(codec_name(charset), errors="strict")
    except UnicodeDecodeError as exc:
        raise MalformedDocumentError(
            f"Byte 0x{data[exc.start]:02X} at offset {exc.start} is not valid {charset}"
        ) from exc
    return text.lstrip("\ufeff")
