"""
Parameter and Property Marshalling
==================================

Conversions between Python values and the values stored by the engine
transformer.

Parameters are stored either as parsed documents (markup values, mappings,
objects and lists) or as strings (everything else). The string conversion
is one-way: ``3.14`` comes back as ``'3.14'`` and ``True`` as ``'true'``.
Documents come back as new lxml elements that keep the synthetic ``root``
wrapper added by the encoder.
"""

from typing import Any, Optional, Union

from lxml import etree

from xsltbridge.xml.encoder import encode_to_bytes, serialize_markup
from xsltbridge.xml.values import ValueKind, classify, to_text


def to_engine_parameter(value: Any,
                        parser: etree.XMLParser) -> Union[str, etree._ElementTree]:
    """
    Convert a value into its stored parameter form.

    Raises:
        MarkupEncodingError: If a composite value cannot be encoded
        etree.XMLSyntaxError: If the markup form does not parse
    """
    kind = classify(value)

    if kind is ValueKind.MARKUP:
        data = serialize_markup(value)
    elif kind in (ValueKind.COMPOSITE, ValueKind.LIST):
        data = encode_to_bytes(value)
    else:
        return to_text(value)

    return etree.ElementTree(etree.fromstring(data, parser))


def from_engine_parameter(stored: Optional[Union[str, etree._ElementTree]],
                          parser: etree.XMLParser) -> Optional[Union[str, etree._Element]]:
    """Convert a stored parameter back into a Python value (None if unset)."""
    if stored is None:
        return None
    if isinstance(stored, etree._ElementTree):
        data = etree.tostring(stored, xml_declaration=False)
        return etree.fromstring(data, parser)
    return to_text(stored)


def to_property_value(value: Any) -> str:
    """Output property values are always strings; absent or null is empty."""
    return to_text(value)
