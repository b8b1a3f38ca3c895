"""
Resource Resolution Bridge
==========================

An lxml ``Resolver`` registered once on each processor's parser. It answers
the internal parameter-document URIs, then defers to an optional user
callback, and otherwise lets libxslt fall back to its default loading.

The callback is called as ``callback(href, base)`` and may return:

- a string: treated as a file path to load
- an lxml element or tree: serialised and loaded
- anything else: encoded as markup under ``<root>`` and loaded
"""

import logging
from typing import Any, Callable, Optional

from lxml import etree

from xsltbridge.xml.encoder import encode_to_bytes, serialize_markup
from xsltbridge.xml.values import ValueKind, classify

logger = logging.getLogger(__name__)

PARAMETER_URI_SCHEME = "xsltbridge-param"

UriCallback = Callable[[str, Optional[str]], Any]


class BridgeResolver(etree.Resolver):
    """
    Resolver delegating external resource requests to a Python callback.

    Args:
        document_lookup: Returns the serialised parameter document for an
            internal parameter URI, or None
        base_url: Base URL reported to the callback (the stylesheet location)
    """

    def __init__(self,
                 document_lookup: Callable[[str], Optional[bytes]],
                 base_url: Optional[str] = None):
        super().__init__()
        self._document_lookup = document_lookup
        self.base_url = base_url
        self.callback: Optional[UriCallback] = None

    def resolve(self, system_url, public_id, context):
        if system_url and system_url.startswith(f"{PARAMETER_URI_SCHEME}:"):
            data = self._document_lookup(system_url)
            if data is None:
                logger.warning(f"Unknown parameter document requested: {system_url}")
                return None
            return self.resolve_string(data, context, base_url=system_url)

        if self.callback is None:
            logger.debug(f"No resolver callback, default loading for {system_url}")
            return None

        source = self.callback(system_url, self.base_url)
        kind = classify(source)

        if kind is ValueKind.TEXT:
            logger.debug(f"Resolved {system_url} to file {source}")
            return self.resolve_filename(source, context)
        if kind is ValueKind.MARKUP:
            logger.debug(f"Resolved {system_url} to a markup value")
            return self.resolve_string(serialize_markup(source), context)

        logger.debug(f"Resolved {system_url} to an encoded {kind.value} value")
        return self.resolve_string(encode_to_bytes(source), context)
