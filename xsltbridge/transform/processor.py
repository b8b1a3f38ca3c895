"""
XSLT Processor
==============

The public façade. A processor is bound to one stylesheet at construction
and can then run any number of transformations with varying input.

Example:
    processor = XSLTProcessor("report.xsl")
    processor.set_parameter("title", "Quarterly report")
    processor.set_parameter("rows", [{"name": "a"}, {"name": "b"}])
    processor.set_output_property("indent", "yes")
    print(processor.transform("data.xml"))

A processor is not safe for concurrent use; give each thread its own
instance or serialise access externally.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from lxml import etree

from xsltbridge.exceptions import (
    InputNotFound,
    MarkupEncodingError,
    ParameterGetFailed,
    ParameterSetFailed,
    StylesheetNotFound,
    TransformFailed,
    XSLTBridgeError,
)
from xsltbridge.transform.engine import RESERVED_PARAMETERS, EngineTransformer
from xsltbridge.transform.marshalling import (
    from_engine_parameter,
    to_engine_parameter,
    to_property_value,
)
from xsltbridge.transform.resolver import UriCallback
from xsltbridge.xml.encoder import encode_to_bytes, markup_base_url, serialize_markup
from xsltbridge.xml.values import MISSING, ValueKind, classify, to_text

logger = logging.getLogger(__name__)


def _read_file(path: str) -> Tuple[bytes, str]:
    """Read a document file, returning its bytes and absolute location."""
    file_path = Path(path)
    return file_path.read_bytes(), str(file_path.resolve())


def _path_of(value: Any) -> Optional[str]:
    """Return the file path a value designates, or None if it is not one."""
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    if classify(value) is ValueKind.TEXT:
        return value
    return None


class XSLTProcessor:
    """
    XSLT processor bound to a single stylesheet.

    Args:
        stylesheet: An lxml element/tree holding the stylesheet, or the
            path of a stylesheet file

    Raises:
        StylesheetNotFound: If the stylesheet file cannot be read
        StylesheetInvalid: If the engine rejects the stylesheet
    """

    def __init__(self, stylesheet: Union[str, os.PathLike, etree._Element, etree._ElementTree]):
        if classify(stylesheet) is ValueKind.MARKUP:
            data = serialize_markup(stylesheet)
            base_url = markup_base_url(stylesheet)
        else:
            path = _path_of(stylesheet)
            if path is None:
                path = to_text(stylesheet)
            try:
                data, base_url = _read_file(path)
            except OSError as e:
                logger.error(f"Cannot read stylesheet {path}: {e}")
                raise StylesheetNotFound(path) from e
            logger.info(f"Loading XSLT stylesheet: {path}")

        self._transformer = EngineTransformer(data, base_url)

    # ------------------------------------------------------------------
    # Transformation
    # ------------------------------------------------------------------

    def transform(self, document: Any = MISSING) -> str:
        """
        Transform a document and return the serialised result.

        Args:
            document: One of
                - an lxml element or tree
                - a file path (str or os.PathLike)
                - any other value, encoded as markup under ``<root>``
                - nothing, which transforms an empty ``<root/>`` document

        Raises:
            InputNotFound: If a document path cannot be read
            TransformFailed: If encoding, parsing or the transformation fails
        """
        base_url = None
        path = _path_of(document)

        if classify(document) is ValueKind.MARKUP:
            data = serialize_markup(document)
            base_url = markup_base_url(document)
        elif path is not None:
            try:
                data, base_url = _read_file(path)
            except OSError as e:
                logger.error(f"Cannot read input document {path}: {e}")
                raise InputNotFound(path) from e
        else:
            try:
                data = encode_to_bytes(document)
            except MarkupEncodingError as e:
                raise TransformFailed(repr(document), str(e)) from e

        return self._transformer.transform(data, base_url)

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def set_parameter(self, name: str, value: Any) -> None:
        """
        Set a stylesheet parameter.

        Markup values, mappings, objects and lists are passed to the
        stylesheet as documents. Every other value is converted to a string
        first, so ``get_parameter()`` returns that string afterwards.
        Names that are not strings are ignored.

        Raises:
            ParameterSetFailed: If the value cannot be converted, or the name
                is one lxml reserves for its own keyword arguments
                (``profile_run``, ``_input``)
        """
        if not isinstance(name, str):
            logger.debug(f"Ignoring parameter with non-string name {name!r}")
            return
        if name in RESERVED_PARAMETERS:
            logger.error(f"Parameter name {name} is reserved by the XSLT engine")
            raise ParameterSetFailed(name, value)

        try:
            stored = to_engine_parameter(value, self._transformer.document_parser)
        except (XSLTBridgeError, etree.LxmlError, ValueError) as e:
            logger.error(f"Could not convert parameter {name}: {e}")
            raise ParameterSetFailed(name, value) from e

        self._transformer.set_parameter(name, stored)

    def get_parameter(self, name: str) -> Optional[Union[str, etree._Element]]:
        """
        Return a parameter value: an lxml element for document parameters,
        a string otherwise, or None if the parameter is not set.

        Raises:
            ParameterGetFailed: If the stored document cannot be re-serialised
        """
        try:
            return from_engine_parameter(
                self._transformer.get_parameter(name),
                self._transformer.document_parser,
            )
        except (etree.LxmlError, ValueError) as e:
            logger.error(f"Could not read parameter {name}: {e}")
            raise ParameterGetFailed(name) from e

    def clear_parameters(self) -> None:
        """Remove every parameter set with set_parameter()."""
        self._transformer.clear_parameters()

    # ------------------------------------------------------------------
    # Output properties
    # ------------------------------------------------------------------

    def set_output_property(self, name: str, value: Any) -> None:
        """
        Set an output property such as ``method`` or ``indent``.

        The property is sealed: it takes precedence over the stylesheet's
        own ``xsl:output`` declaration. Names that are not strings are
        ignored.

        Raises:
            OutputPropertySetFailed: If the engine rejects the property
        """
        if not isinstance(name, str):
            logger.debug(f"Ignoring output property with non-string name {name!r}")
            return
        self._transformer.set_output_property(name, to_property_value(value))

    def get_output_property(self, name: str) -> Optional[str]:
        """Return an output property, or None if it is not set."""
        return self._transformer.get_output_property(name)

    def get_output_properties(self) -> Dict[str, str]:
        """Return all output properties declared by the stylesheet or set here."""
        return self._transformer.get_output_properties()

    # ------------------------------------------------------------------
    # URI resolution
    # ------------------------------------------------------------------

    def set_uri_resolver(self, callback: Optional[UriCallback]) -> None:
        """
        Install a callback for external resources (``document()`` etc.).

        ``None`` restores the default resolution. Values that are neither
        callable nor None are ignored.
        """
        kind = classify(callback)
        if kind is ValueKind.NULL:
            self._transformer.resolver.callback = None
        elif kind is ValueKind.CALLABLE:
            self._transformer.resolver.callback = callback
        else:
            logger.debug(f"Ignoring non-callable URI resolver {callback!r}")

    def get_uri_resolver(self) -> Optional[UriCallback]:
        """Return the installed resolver callback, or None."""
        return self._transformer.resolver.callback
