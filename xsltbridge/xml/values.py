"""
Value Classification
====================

Classifies Python values into the categories the processor coerces
differently. Every coercion site dispatches on ``classify()`` instead of
ad-hoc ``isinstance`` chains.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from lxml import etree


class _Missing:
    """Marker for an argument that was not supplied."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


class ValueKind(Enum):
    """Value categories recognised by the processor."""
    ABSENT = "absent"
    NULL = "null"
    TEXT = "text"
    SCALAR = "scalar"
    CALLABLE = "callable"
    LIST = "list"
    COMPOSITE = "composite"
    MARKUP = "markup"


MARKUP_TYPES = (etree._Element, etree._ElementTree)


def classify(value: Any) -> ValueKind:
    """
    Return the category of a value.

    Checks run from most to least specific: markup values are lxml elements
    or element trees; lists are ``list`` and ``tuple``; composites are
    mappings or plain objects carrying a ``__dict__`` (callables excluded).

    Example:
        >>> classify({'hello': 'world'})
        <ValueKind.COMPOSITE: 'composite'>
    """
    if value is MISSING:
        return ValueKind.ABSENT
    if value is None:
        return ValueKind.NULL
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, MARKUP_TYPES):
        return ValueKind.MARKUP
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    if isinstance(value, Mapping):
        return ValueKind.COMPOSITE
    if callable(value):
        return ValueKind.CALLABLE
    if hasattr(value, "__dict__"):
        return ValueKind.COMPOSITE
    return ValueKind.SCALAR


def is_absent(value: Any) -> bool:
    return classify(value) is ValueKind.ABSENT


def is_null(value: Any) -> bool:
    return classify(value) is ValueKind.NULL


def is_text(value: Any) -> bool:
    return classify(value) is ValueKind.TEXT


def is_callable(value: Any) -> bool:
    return classify(value) is ValueKind.CALLABLE


def is_composite(value: Any) -> bool:
    """True for non-null, non-primitive containers (mappings, objects, lists)."""
    return classify(value) in (ValueKind.COMPOSITE, ValueKind.LIST)


def is_list(value: Any) -> bool:
    return classify(value) is ValueKind.LIST


def is_markup(value: Any) -> bool:
    return classify(value) is ValueKind.MARKUP


def composite_items(value: Any) -> list:
    """
    Return the (key, value) pairs of a composite value in iteration order.

    Mappings yield their items; plain objects yield their public instance
    attributes in definition order.
    """
    if isinstance(value, Mapping):
        return list(value.items())
    return [(k, v) for k, v in vars(value).items() if not k.startswith("_")]


def to_text(value: Any) -> str:
    """
    Return the canonical string form of a value.

    Absent and null become an empty string, booleans the XPath literals
    ``true``/``false``. Markup values are serialised without declaration.
    """
    kind = classify(value)
    if kind in (ValueKind.ABSENT, ValueKind.NULL):
        return ""
    if kind is ValueKind.TEXT:
        return value
    if kind is ValueKind.MARKUP:
        return etree.tostring(value, encoding="unicode")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
