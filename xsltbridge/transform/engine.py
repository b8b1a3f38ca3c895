"""
XSLT Engine Adapter
===================

Wraps libxslt (through lxml) behind two objects:

- EngineFactory: the process-wide factory. Created lazily on first use from
  the global configuration and never modified afterwards. Call
  ``init_engine_factory()`` before building the first processor to choose
  a different configuration.
- EngineTransformer: the transformer handle owned by one processor. It
  holds the compiled stylesheet, the parameter table and the output
  property overrides.
"""

import copy
import logging
from typing import Dict, Optional, Union

from lxml import etree

from xsltbridge.config.settings import EngineConfig, get_config
from xsltbridge.exceptions import (
    EngineFactoryError,
    OutputPropertySetFailed,
    StylesheetInvalid,
    TransformFailed,
)
from xsltbridge.transform.resolver import BridgeResolver, PARAMETER_URI_SCHEME

logger = logging.getLogger(__name__)

XSLT_NAMESPACE = "http://www.w3.org/1999/XSL/Transform"
XSL_OUTPUT = f"{{{XSLT_NAMESPACE}}}output"
STYLESHEET_TAGS = (
    f"{{{XSLT_NAMESPACE}}}stylesheet",
    f"{{{XSLT_NAMESPACE}}}transform",
)

# Attributes of xsl:output [XSLT 1.0 section 16]
OUTPUT_PROPERTIES = frozenset({
    'method', 'version', 'encoding', 'omit-xml-declaration', 'standalone',
    'doctype-public', 'doctype-system', 'cdata-section-elements', 'indent',
    'media-type',
})

# Defaults per output method [XSLT 1.0 section 16]
OUTPUT_DEFAULTS = {
    'xml': {
        'version': '1.0',
        'encoding': 'UTF-8',
        'indent': 'no',
        'omit-xml-declaration': 'no',
        'standalone': 'no',
        'media-type': 'text/xml',
    },
    'html': {
        'version': '4.0',
        'encoding': 'UTF-8',
        'indent': 'yes',
        'media-type': 'text/html',
    },
    'text': {
        'encoding': 'UTF-8',
        'media-type': 'text/plain',
    },
}

# Keyword arguments taken by etree.XSLT.__call__ itself
RESERVED_PARAMETERS = frozenset({'_input', 'profile_run'})

ParameterValue = Union[str, etree._ElementTree]


def _decode(data: bytes) -> str:
    return data.decode('utf-8', errors='replace')


def _format_log(error_log) -> str:
    return "\n".join(str(entry) for entry in error_log)


def is_output_property(name: str) -> bool:
    """True for xsl:output attribute names and Clark-notation extension names."""
    if name in OUTPUT_PROPERTIES:
        return True
    return name.startswith("{") and "}" in name and not name.endswith("}")


def declared_output_properties(root: etree._Element) -> Dict[str, str]:
    """
    Collect the top-level xsl:output declarations of a stylesheet.

    Later declarations override earlier ones, except for
    ``cdata-section-elements`` whose values accumulate.
    """
    properties: Dict[str, str] = {}
    for output in root.iterchildren(XSL_OUTPUT):
        for name, value in output.attrib.items():
            if name == 'cdata-section-elements' and name in properties:
                names = properties[name].split()
                names.extend(n for n in value.split() if n not in names)
                value = " ".join(names)
            properties[name] = value
    return properties


class EngineFactory:
    """
    Process-wide XSLT engine factory.

    Holds a private copy of the configuration and hands out configured
    parsers. Instances are read-only once constructed.
    """

    __slots__ = ('_config',)

    def __init__(self, config: Optional[EngineConfig] = None):
        config = copy.deepcopy(config or EngineConfig())
        object.__setattr__(self, '_config', config)

        if config.xslt_max_depth is not None:
            etree.XSLT.set_global_max_depth(config.xslt_max_depth)

        logger.info(
            f"XSLT engine initialized: lxml {self.version_string('lxml')}, "
            f"libxml2 {self.version_string('libxml2')}, "
            f"libxslt {self.version_string('libxslt')}"
        )

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is read-only")

    @property
    def config(self) -> EngineConfig:
        """A copy of the configuration the factory was created with."""
        return copy.deepcopy(self._config)

    @property
    def versions(self) -> Dict[str, tuple]:
        return {
            'lxml': etree.LXML_VERSION,
            'libxml2': etree.LIBXML_VERSION,
            'libxslt': etree.LIBXSLT_VERSION,
        }

    def version_string(self, component: str) -> str:
        return ".".join(str(part) for part in self.versions[component])

    def new_parser(self) -> etree.XMLParser:
        """Create a new XML parser with the configured options."""
        options = self._config.parser
        return etree.XMLParser(
            no_network=options.no_network,
            resolve_entities=options.resolve_entities,
            remove_blank_text=options.remove_blank_text,
            huge_tree=options.huge_tree,
        )


_engine_factory: Optional[EngineFactory] = None


def get_engine_factory() -> EngineFactory:
    """Get or create the process-wide engine factory."""
    global _engine_factory
    if _engine_factory is None:
        _engine_factory = EngineFactory(get_config())
    return _engine_factory


def init_engine_factory(config: EngineConfig) -> EngineFactory:
    """
    Create the engine factory with an explicit configuration.

    Raises:
        EngineFactoryError: If the factory already exists
    """
    global _engine_factory
    if _engine_factory is not None:
        raise EngineFactoryError(
            "Engine factory is already initialized; "
            "init_engine_factory() must run before the first processor is built"
        )
    _engine_factory = EngineFactory(config)
    return _engine_factory


def reset_engine_factory() -> None:
    """Drop the engine factory (useful for testing)."""
    global _engine_factory
    _engine_factory = None


class EngineTransformer:
    """
    Transformer handle bound to one stylesheet.

    Args:
        stylesheet: Stylesheet document as bytes
        base_url: Location of the stylesheet, used to resolve relative
            references such as ``xsl:import`` and ``document()``
        factory: Engine factory (defaults to the process-wide one)

    Raises:
        StylesheetInvalid: If the stylesheet does not parse or compile
    """

    def __init__(self,
                 stylesheet: bytes,
                 base_url: Optional[str] = None,
                 factory: Optional[EngineFactory] = None):
        self._factory = factory or get_engine_factory()
        self._stylesheet = stylesheet
        self._base_url = base_url

        self._parameters: Dict[str, ParameterValue] = {}
        self._parameter_documents: Dict[str, bytes] = {}
        self._output_overrides: Dict[str, str] = {}

        self.document_parser = self._factory.new_parser()
        self._stylesheet_parser = self._factory.new_parser()
        self.resolver = BridgeResolver(self._parameter_documents.get, base_url)
        self._stylesheet_parser.resolvers.add(self.resolver)

        try:
            root = self._parse_stylesheet()
            self._declared_output = declared_output_properties(root)
            self._xslt = etree.XSLT(root)
        except etree.XMLSyntaxError as e:
            logger.error(f"Stylesheet is not well-formed: {e}")
            raise StylesheetInvalid(_decode(stylesheet), str(e)) from e
        except etree.XSLTParseError as e:
            logger.error(f"Stylesheet rejected by the engine: {e}")
            raise StylesheetInvalid(
                _decode(stylesheet), _format_log(e.error_log) or str(e)
            ) from e

        logger.info(f"XSLT stylesheet compiled ({base_url or 'in-memory'})")

    @property
    def base_url(self) -> Optional[str]:
        return self._base_url

    def _parse_stylesheet(self) -> etree._Element:
        return etree.fromstring(
            self._stylesheet, self._stylesheet_parser, base_url=self._base_url
        )

    def _expand_simplified(self, root: etree._Element) -> etree._Element:
        """
        Rewrite a literal result element stylesheet into its full form
        [XSLT 1.0 section 2.3]: an xsl:stylesheet whose single template
        matches "/" and holds the literal result element.
        """
        version_attr = f"{{{XSLT_NAMESPACE}}}version"
        # owned by the stylesheet parser, which carries the resolver bridge
        stylesheet = self._stylesheet_parser.makeelement(
            STYLESHEET_TAGS[0], nsmap={'xsl': XSLT_NAMESPACE}
        )
        stylesheet.set('version', root.get(version_attr, '1.0'))
        template = etree.SubElement(stylesheet, f"{{{XSLT_NAMESPACE}}}template")
        template.set('match', '/')
        root.attrib.pop(version_attr, None)
        template.append(root)
        if self._base_url:
            stylesheet.getroottree().docinfo.URL = self._base_url
        return stylesheet

    def _compile(self, overrides: Dict[str, str]) -> etree.XSLT:
        """Compile the stylesheet with caller output properties sealed in."""
        root = self._parse_stylesheet()
        if root.tag not in STYLESHEET_TAGS:
            root = self._expand_simplified(root)
        for output in root.iterchildren(XSL_OUTPUT):
            for name in overrides:
                output.attrib.pop(name, None)
        sealed = etree.SubElement(root, XSL_OUTPUT)
        for name, value in overrides.items():
            sealed.set(name, value)
        return etree.XSLT(root)

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def set_parameter(self, name: str, value: ParameterValue) -> None:
        self._parameters[name] = value

    def get_parameter(self, name: str) -> Optional[ParameterValue]:
        return self._parameters.get(name)

    def clear_parameters(self) -> None:
        self._parameters.clear()

    @property
    def parameter_names(self):
        return list(self._parameters)

    def _engine_parameters(self) -> Dict[str, object]:
        """
        Build the keyword parameters for one engine call.

        Strings become quoted string parameters. Documents are served by the
        resolver under an internal URI and passed as ``document(uri)``, so
        the stylesheet sees the document node.
        """
        self._parameter_documents.clear()
        params: Dict[str, object] = {}
        for position, (name, value) in enumerate(self._parameters.items()):
            if isinstance(value, str):
                params[name] = etree.XSLT.strparam(value)
            else:
                uri = f"{PARAMETER_URI_SCHEME}:{position}"
                self._parameter_documents[uri] = etree.tostring(value)
                params[name] = f"document('{uri}')"
        return params

    # ------------------------------------------------------------------
    # Output properties
    # ------------------------------------------------------------------

    def set_output_property(self, name: str, value: str) -> None:
        """
        Seal an output property, overriding the stylesheet's xsl:output.

        Raises:
            OutputPropertySetFailed: If the name is unknown or the engine
                rejects the resulting stylesheet; the previous state is kept
        """
        if not is_output_property(name):
            raise OutputPropertySetFailed(name, value, "unknown output property")

        overrides = dict(self._output_overrides)
        overrides[name] = value
        try:
            xslt = self._compile(overrides)
        except (etree.XSLTParseError, ValueError) as e:
            logger.error(f"Engine rejected output property {name}={value!r}: {e}")
            raise OutputPropertySetFailed(name, value, str(e)) from e

        self._output_overrides = overrides
        self._xslt = xslt
        logger.debug(f"Output property sealed: {name}={value!r}")

    def get_output_properties(self) -> Dict[str, str]:
        """
        Return the effective output properties.

        Defaults for the effective method come first, then the stylesheet's
        declarations, then sealed overrides. Without a declared method the
        xml defaults are reported, even though the engine switches to html
        when the result root is an ``html`` element.
        """
        declared = dict(self._declared_output)
        declared.update(self._output_overrides)
        method = declared.get('method', 'xml')
        properties = {'method': method}
        properties.update(OUTPUT_DEFAULTS.get(method, {}))
        properties.update(declared)
        return properties

    def get_output_property(self, name: str) -> Optional[str]:
        return self.get_output_properties().get(name)

    # ------------------------------------------------------------------
    # Transformation
    # ------------------------------------------------------------------

    def transform(self, document: bytes, base_url: Optional[str] = None) -> str:
        """
        Transform a serialised document and return the serialised result.

        Raises:
            TransformFailed: If the document does not parse or the engine
                fails while applying the stylesheet
        """
        try:
            root = etree.fromstring(document, self.document_parser, base_url=base_url)
        except etree.XMLSyntaxError as e:
            logger.error(f"Input document is not well-formed: {e}")
            raise TransformFailed(_decode(document), str(e)) from e

        params = self._engine_parameters()

        try:
            result = self._xslt(etree.ElementTree(root), **params)
            output = str(result)
        except Exception as e:
            logger.error(f"XSLT transformation failed: {e}")
            if self._xslt.error_log:
                logger.error(f"Error log: {_format_log(self._xslt.error_log)}")
            raise TransformFailed(_decode(document), str(e)) from e
        finally:
            self._parameter_documents.clear()

        if self._xslt.error_log:
            logger.warning("XSLT transformation completed with warnings:")
            for entry in self._xslt.error_log:
                logger.warning(f"  {entry}")

        logger.info("XSLT transformation completed successfully")
        return output
