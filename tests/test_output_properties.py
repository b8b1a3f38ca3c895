"""
Output property tests.
"""

import pytest
from lxml import etree

from xsltbridge.exceptions import OutputPropertySetFailed
from xsltbridge.transform.processor import XSLTProcessor

from conftest import XSL_NS


XML_OUTPUT_XSL = f"""<xsl:stylesheet version="1.0" {XSL_NS}>
    <xsl:output method="xml" indent="yes"/>
    <xsl:template match="/"><out>hello</out></xsl:template>
</xsl:stylesheet>"""


SIMPLIFIED_XSL = f"""<out xsl:version="1.0" {XSL_NS}>
    <xsl:value-of select="'hello'"/>
</out>"""

XML_PROPERTIES = {
    "method": "xml",
    "version": "1.0",
    "encoding": "UTF-8",
    "indent": "yes",
    "omit-xml-declaration": "no",
    "standalone": "no",
    "media-type": "text/xml",
}


@pytest.fixture
def xml_processor():
    return XSLTProcessor(etree.XML(XML_OUTPUT_XSL))


@pytest.fixture
def simplified_processor():
    return XSLTProcessor(etree.XML(SIMPLIFIED_XSL))


class TestSealing:
    """Caller properties override xsl:output declarations."""

    def test_method_text_overrides_stylesheet_xml(self, xml_processor):
        """A caller method replaces the declared one."""
        assert xml_processor.transform().startswith("<?xml")
        xml_processor.set_output_property("method", "text")
        assert xml_processor.transform() == "hello"

    def test_omit_xml_declaration(self, xml_processor):
        """omit-xml-declaration drops the declaration."""
        xml_processor.set_output_property("omit-xml-declaration", "yes")
        assert xml_processor.transform().strip() == "<out>hello</out>"

    def test_later_set_replaces_earlier(self, xml_processor):
        """The last value set for a property wins."""
        xml_processor.set_output_property("method", "text")
        xml_processor.set_output_property("method", "xml")
        assert xml_processor.transform().startswith("<?xml")

    def test_parameters_survive_recompilation(self):
        """String parameters are kept across recompilation."""
        processor = XSLTProcessor(etree.XML(
            f"""<xsl:stylesheet version="1.0" {XSL_NS}>
                <xsl:param name="param"/>
                <xsl:template match="/"><out><xsl:value-of select="$param"/></out></xsl:template>
            </xsl:stylesheet>"""
        ))
        processor.set_parameter("param", "kept")
        processor.set_output_property("method", "text")
        assert processor.transform() == "kept"

    def test_document_parameter_survives_recompilation(self):
        """The recompiled stylesheet still serves document parameters."""
        processor = XSLTProcessor(etree.XML(
            f"""<xsl:stylesheet version="1.0" {XSL_NS}>
                <xsl:param name="param"/>
                <xsl:template match="/"><out><xsl:value-of select="$param/root/v"/></out></xsl:template>
            </xsl:stylesheet>"""
        ))
        processor.set_parameter("param", {"v": "kept"})
        processor.set_output_property("method", "text")
        assert processor.transform() == "kept"


class TestSimplifiedStylesheets:
    """Literal result element stylesheets accept output properties."""

    def test_method_text(self, simplified_processor):
        """method=text works on a literal result element stylesheet."""
        assert "<out>hello</out>" in simplified_processor.transform()
        simplified_processor.set_output_property("method", "text")
        assert simplified_processor.transform() == "hello"

    def test_literal_element_is_kept(self, simplified_processor):
        """The result element keeps its name and loses the xsl:version attribute."""
        simplified_processor.set_output_property("omit-xml-declaration", "yes")
        assert simplified_processor.transform().strip() == "<out>hello</out>"

    def test_reported(self, simplified_processor):
        """Properties set on simplified stylesheets are reported."""
        simplified_processor.set_output_property("method", "text")
        assert simplified_processor.get_output_property("method") == "text"
        assert simplified_processor.get_output_property("media-type") == "text/plain"


class TestGetOutputProperties:
    """Tests for reading the property table."""

    def test_declared_properties(self, xml_processor):
        """Declarations are reported on top of the xml method defaults."""
        assert xml_processor.get_output_properties() == XML_PROPERTIES

    def test_get_single(self, xml_processor):
        """A single declared property is returned."""
        assert xml_processor.get_output_property("method") == "xml"

    def test_defaults_without_xsl_output(self):
        """A stylesheet without xsl:output reports the xml defaults."""
        processor = XSLTProcessor(etree.XML(
            f"""<xsl:stylesheet version="1.0" {XSL_NS}>
                <xsl:template match="/"><out/></xsl:template>
            </xsl:stylesheet>"""
        ))
        assert processor.get_output_property("method") == "xml"
        assert processor.get_output_property("indent") == "no"

    def test_html_defaults(self):
        """The html method reports its own defaults."""
        processor = XSLTProcessor(etree.XML(
            f"""<xsl:stylesheet version="1.0" {XSL_NS}>
                <xsl:output method="html"/>
                <xsl:template match="/"><p/></xsl:template>
            </xsl:stylesheet>"""
        ))
        assert processor.get_output_property("media-type") == "text/html"
        assert processor.get_output_property("indent") == "yes"

    def test_unset_is_none(self, xml_processor):
        """Properties with no default and no declaration are absent."""
        assert xml_processor.get_output_property("doctype-system") is None

    def test_set_properties_are_reported(self, xml_processor):
        """Changing the method switches the defaults; declarations still apply."""
        xml_processor.set_output_property("method", "text")
        xml_processor.set_output_property("media-type", "text/csv")
        assert xml_processor.get_output_properties() == {
            "method": "text",
            "encoding": "UTF-8",
            "indent": "yes",
            "media-type": "text/csv",
        }

    def test_returned_table_is_a_copy(self, xml_processor):
        """Changing the returned table has no effect."""
        xml_processor.get_output_properties()["method"] = "html"
        assert xml_processor.get_output_property("method") == "xml"

    def test_extension_property(self, xml_processor):
        """Clark-notation properties are stored and reported."""
        name = "{http://example.com/ns}flavour"
        xml_processor.set_output_property(name, "plain")
        assert xml_processor.get_output_property(name) == "plain"


class TestSetOutputPropertyErrors:
    """Tests for rejected properties."""

    def test_unknown_property(self, xml_processor):
        """Unknown names fail with the name and value."""
        with pytest.raises(OutputPropertySetFailed) as excinfo:
            xml_processor.set_output_property("colour", "blue")
        assert excinfo.value.name == "colour"
        assert excinfo.value.value == "blue"
        assert "colour" in str(excinfo.value) and "blue" in str(excinfo.value)

    def test_rejected_property_keeps_state(self, xml_processor):
        """A rejected property leaves the processor unchanged."""
        with pytest.raises(OutputPropertySetFailed):
            xml_processor.set_output_property("colour", "blue")
        assert xml_processor.get_output_property("colour") is None
        assert xml_processor.transform().startswith("<?xml")

    def test_non_string_name_is_ignored(self, xml_processor):
        """Non-string names are a no-op."""
        xml_processor.set_output_property(3, "text")
        assert xml_processor.get_output_properties() == XML_PROPERTIES

    def test_value_is_coerced(self, xml_processor):
        """Values are converted to text."""
        xml_processor.set_output_property("media-type", None)
        assert xml_processor.get_output_property("media-type") == ""
