"""
Value and Markup Utilities
==========================

Classification of Python values and their encoding as markup.
"""

from xsltbridge.xml.values import (
    MISSING,
    ValueKind,
    classify,
    composite_items,
    is_absent,
    is_null,
    is_text,
    is_callable,
    is_composite,
    is_list,
    is_markup,
    to_text,
)

from xsltbridge.xml.encoder import (
    ROOT_TAG,
    encode,
    encode_to_bytes,
    serialize_markup,
)

__all__ = [
    "MISSING",
    "ValueKind",
    "classify",
    "composite_items",
    "is_absent",
    "is_null",
    "is_text",
    "is_callable",
    "is_composite",
    "is_list",
    "is_markup",
    "to_text",
    "ROOT_TAG",
    "encode",
    "encode_to_bytes",
    "serialize_markup",
]
