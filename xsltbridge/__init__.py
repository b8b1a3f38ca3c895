"""
xsltbridge
==========

A Python façade over the libxslt engine (through lxml) that accepts
flexible input and returns plain Python values:

- Stylesheets from lxml trees or files
- Input documents from lxml trees, files, or plain Python data
- Parameters from strings, numbers, lxml trees, dicts and lists
- Sealed output properties that override ``xsl:output``
- A Python callback hook for ``document()`` and other external resources

Architecture
------------

    xsltbridge/
    ├── xml/           - Value classification and value-to-markup encoding
    ├── transform/     - Engine factory, transformer handle, resolver, processor
    ├── config/        - Configuration management
    ├── exceptions.py  - Error taxonomy
    └── cli.py         - Command-line interface

Usage
-----

    from xsltbridge import XSLTProcessor

    processor = XSLTProcessor("echo.xsl")
    processor.set_parameter("param", {"hello": "world"})
    print(processor.transform())

Plain data is wrapped in a synthetic ``<root>`` element; lists become
``<item index="N">`` children and mapping keys become element names.
"""

__version__ = "1.0.0"
__author__ = "xsltbridge developers"

from xsltbridge.exceptions import (
    XSLTBridgeError,
    StylesheetNotFound,
    StylesheetInvalid,
    InputNotFound,
    TransformFailed,
    ParameterSetFailed,
    ParameterGetFailed,
    OutputPropertySetFailed,
    MarkupEncodingError,
    EngineFactoryError,
)

from xsltbridge.xml.values import (
    MISSING,
    ValueKind,
    classify,
)

from xsltbridge.xml.encoder import (
    encode,
    encode_to_bytes,
)

from xsltbridge.transform.engine import (
    get_engine_factory,
    init_engine_factory,
)

from xsltbridge.transform.processor import XSLTProcessor

__all__ = [
    # Version
    "__version__",
    # Processor
    "XSLTProcessor",
    # Values
    "MISSING",
    "ValueKind",
    "classify",
    "encode",
    "encode_to_bytes",
    # Engine
    "get_engine_factory",
    "init_engine_factory",
    # Errors
    "XSLTBridgeError",
    "StylesheetNotFound",
    "StylesheetInvalid",
    "InputNotFound",
    "TransformFailed",
    "ParameterSetFailed",
    "ParameterGetFailed",
    "OutputPropertySetFailed",
    "MarkupEncodingError",
    "EngineFactoryError",
]
