"""
Shared fixtures for xsltbridge tests.

Run with: pytest tests/ -v
"""

import pytest
from lxml import etree

from xsltbridge.config.settings import reset_config
from xsltbridge.transform.engine import reset_engine_factory
from xsltbridge.transform.processor import XSLTProcessor


XSL_NS = 'xmlns:xsl="http://www.w3.org/1999/XSL/Transform"'

# Echoes the "param" parameter and the input document under <root>
ECHO_XSL = f"""<xsl:stylesheet version="1.0" {XSL_NS}>
    <xsl:output indent="yes"/>
    <xsl:param name="param"/>
    <xsl:template match="/">
        <root>
            <param><xsl:copy-of select="$param"/></param>
            <input><xsl:copy-of select="current()"/></input>
        </root>
    </xsl:template>
</xsl:stylesheet>"""

# Prints the string value of an XPath over the "param" parameter
TEXT_PARAM_XSL = f"""<xsl:stylesheet version="1.0" {XSL_NS}>
    <xsl:output method="text"/>
    <xsl:param name="param" select="'default'"/>
    <xsl:template match="/"><xsl:value-of select="$param"/></xsl:template>
</xsl:stylesheet>"""


@pytest.fixture(autouse=True)
def fresh_engine():
    """Each test starts without an engine factory or global config."""
    reset_engine_factory()
    reset_config()
    yield
    reset_engine_factory()
    reset_config()


@pytest.fixture
def echo_processor():
    """Processor built from the echo stylesheet as an lxml element."""
    return XSLTProcessor(etree.XML(ECHO_XSL))


@pytest.fixture
def text_processor():
    """Processor printing $param as text."""
    return XSLTProcessor(etree.XML(TEXT_PARAM_XSL))


@pytest.fixture
def write_file(tmp_path):
    """Write text to a file under tmp_path and return its path."""
    def _write(name, content):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def canonical():
    """Parse an XML result and re-serialise it without whitespace."""
    def _canonical(text):
        parser = etree.XMLParser(remove_blank_text=True)
        return etree.tostring(etree.fromstring(text.encode("utf-8"), parser)).decode()
    return _canonical
