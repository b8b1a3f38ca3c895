"""
Value to Markup Encoder
=======================

Serialises arbitrary Python values into a canonical markup tree wrapped in
a synthetic ``root`` element:

    [1, 2]              -> <root><item index="0">1</item><item index="1">2</item></root>
    {'hello': 'world'}  -> <root><hello>world</hello></root>
    True                -> <root>true</root>
    None                -> <root/>

Keys become element names as they are. A key that is not a valid XML
name raises MarkupEncodingError rather than being escaped or renamed.
"""

import copy
import logging
from typing import Any

from lxml import etree

from xsltbridge.exceptions import MarkupEncodingError
from xsltbridge.xml.values import ValueKind, classify, composite_items, to_text

logger = logging.getLogger(__name__)

ROOT_TAG = "root"
ITEM_TAG = "item"
INDEX_ATTRIBUTE = "index"


def _append_child(parent: etree._Element, tag: str) -> etree._Element:
    try:
        return etree.SubElement(parent, tag)
    except ValueError as e:
        raise MarkupEncodingError(
            f"Cannot encode key {tag!r} as an element name: {e}", key=tag
        ) from e


def _set_text(element: etree._Element, text: str) -> None:
    if not text:
        return
    try:
        element.text = text
    except ValueError as e:
        raise MarkupEncodingError(
            f"Cannot encode text {text!r} inside <{element.tag}>: {e}"
        ) from e


def _encode_into(parent: etree._Element, value: Any) -> None:
    kind = classify(value)

    if kind is ValueKind.LIST:
        for index, item in enumerate(value):
            child = _append_child(parent, ITEM_TAG)
            child.set(INDEX_ATTRIBUTE, str(index))
            _encode_into(child, item)

    elif kind is ValueKind.COMPOSITE:
        for key, item in composite_items(value):
            child = _append_child(parent, to_text(key))
            _encode_into(child, item)

    elif kind is ValueKind.MARKUP:
        node = value.getroot() if isinstance(value, etree._ElementTree) else value
        parent.append(copy.deepcopy(node))

    else:
        # absent, null, text, scalar and callable values all become text
        _set_text(parent, to_text(value))


def encode(value: Any) -> etree._Element:
    """
    Encode a value as a markup tree under the synthetic root element.

    Args:
        value: Any Python value

    Returns:
        A new ``root`` element holding the encoded value

    Raises:
        MarkupEncodingError: If a key is not a valid element name, a
            string contains characters XML cannot represent, or the value
            contains itself
    """
    root = etree.Element(ROOT_TAG)
    try:
        _encode_into(root, value)
    except RecursionError as e:
        logger.error(f"Value of type {type(value).__name__} is self-referencing or too deep")
        raise MarkupEncodingError(
            f"Cannot encode self-referencing or too deeply nested value: {e}"
        ) from e
    return root


def encode_to_bytes(value: Any) -> bytes:
    """Encode a value and serialise it (UTF-8, no XML declaration)."""
    return etree.tostring(encode(value), encoding="UTF-8", xml_declaration=False)


def serialize_markup(value: Any) -> bytes:
    """
    Serialise a markup value with the native lxml serializer.

    Element trees keep their doctype; bare elements are serialised as a
    standalone fragment.
    """
    return etree.tostring(
        value, encoding="UTF-8", xml_declaration=False, with_tail=False
    )


def markup_base_url(value: Any):
    """Return the document URL a markup value was parsed from, if any."""
    tree = value if isinstance(value, etree._ElementTree) else value.getroottree()
    return tree.docinfo.URL
