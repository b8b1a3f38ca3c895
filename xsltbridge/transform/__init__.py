"""
Transformation Framework
========================

Provides the XSLT processor and the engine layer underneath it.

Components:
- XSLTProcessor: Public processor bound to one stylesheet
- EngineTransformer: Transformer handle wrapping lxml/libxslt
- BridgeResolver: External resource resolution hook
- get_engine_factory / init_engine_factory: Process-wide engine factory
"""

from xsltbridge.transform.engine import (
    EngineFactory,
    EngineTransformer,
    get_engine_factory,
    init_engine_factory,
    reset_engine_factory,
)

from xsltbridge.transform.resolver import BridgeResolver

from xsltbridge.transform.processor import XSLTProcessor

__all__ = [
    "EngineFactory",
    "EngineTransformer",
    "get_engine_factory",
    "init_engine_factory",
    "reset_engine_factory",
    "BridgeResolver",
    "XSLTProcessor",
]
