"""
Unit tests for LxmlTreeAdapter.
Verifies that only element names, attribute keys and child order survive parsing.
"""
import pytest
from xmlstruct.core import LxmlTreeAdapter, NamespaceMode, ParseError, IoError, StructuralNode, SignatureCanonicalizer


class TestLxmlTreeAdapter:
    """Test conversion of XML bytes into StructuralNode trees."""

    def test_parse_simple_book(self):
        xml = b"""
        <book>
            <title>Test Book</title>
            <author>Test Author</author>
            <year>2024</year>
        </book>
        """
        node = LxmlTreeAdapter().parse(xml)

        assert node.name == "book"
        assert [c.name for c in node.children] == ["title", "author", "year"]

    def test_attribute_keys_only(self):
        """Attribute values must be discarded, only keys kept."""
        node = LxmlTreeAdapter().parse(b'<book id="123" type="fiction" lang="en"></book>')

        assert node.attribute_keys == frozenset({"id", "type", "lang"})
        assert "123" not in repr(node)

    def test_ignores_text_comments_and_processing_instructions(self):
        xml = b"""<?xml version="1.0"?>
        <?xml-stylesheet href="style.xsl"?>
        <root>
            text before
            <!-- a comment -->
            <child/>
            <?target data?>
            tail text
        </root>
        """
        node = LxmlTreeAdapter().parse(xml)

        assert node.name == "root"
        assert len(node.children) == 1
        assert node.children[0].name == "child"

    def test_self_closing_and_explicit_empty_are_identical(self):
        adapter = LxmlTreeAdapter()
        assert adapter.parse(b"<a><b/></a>") == adapter.parse(b"<a><b></b></a>")

    def test_preserves_child_order(self):
        node = LxmlTreeAdapter().parse(b"<a><c/><b/><c/></a>")
        assert [c.name for c in node.children] == ["c", "b", "c"]

    def test_deep_nesting_is_built_without_recursion(self):
        depth = 200
        xml = ("<n>" * depth + "</n>" * depth).encode()
        node = LxmlTreeAdapter().parse(xml)

        levels = 0
        while node.children:
            node = node.children[0]
            levels += 1
        assert levels == depth - 1

    @pytest.mark.parametrize("data", [
        b"",
        b"   \n\t ",
        b"<not>closed",
        b"<a></b>",
        b"just text",
        b"<a/><b/>",
    ])
    def test_invalid_documents_raise_parse_error(self, data):
        with pytest.raises(ParseError):
            LxmlTreeAdapter().parse(data)

    def test_encoding_declaration_is_honoured(self):
        xml = '<?xml version="1.0" encoding="ISO-8859-1"?><caf\xe9 n="\xe9"/>'.encode("latin-1")
        node = LxmlTreeAdapter().parse(xml)
        assert node.name == "caf\xe9"

    def test_unresolved_entities_are_ignored(self):
        xml = b'<!DOCTYPE a [<!ENTITY ext SYSTEM "file:///etc/passwd">]><a>&ext;<b/></a>'
        node = LxmlTreeAdapter().parse(xml)
        assert [c.name for c in node.children] == ["b"]

    def test_internal_entity_markup_is_expanded(self):
        """Elements declared in an internal entity count as if written inline."""
        adapter = LxmlTreeAdapter()
        canonicalizer = SignatureCanonicalizer()
        with_entity = adapter.parse(b"<!DOCTYPE a [<!ENTITY e \"<b x='1'/>\">]><a>&e;<c/></a>")
        inline = adapter.parse(b"<a><b x='1'/><c/></a>")

        assert canonicalizer.canonicalize(with_entity).canonical == "a{b[x],c}"
        assert with_entity == inline

    def test_nesting_beyond_parser_limit_is_parse_error(self):
        depth = 300
        xml = ("<n>" * depth + "</n>" * depth).encode()
        with pytest.raises(ParseError, match="depth"):
            LxmlTreeAdapter().parse(xml)


class TestNamespaceModes:
    """Namespace handling is controlled by NamespaceMode."""

    TEI = b'<tei:TEI xmlns:tei="http://www.tei-c.org/ns/1.0" xml:lang="en"><tei:text/></tei:TEI>'
    TEI_DEFAULT_NS = b'<TEI xmlns="http://www.tei-c.org/ns/1.0" xml:lang="en"><text/></TEI>'

    def test_local_mode_collapses_prefixes(self):
        adapter = LxmlTreeAdapter(namespace_mode=NamespaceMode.LOCAL)
        prefixed = adapter.parse(self.TEI)
        default_ns = adapter.parse(self.TEI_DEFAULT_NS)

        assert prefixed.name == "TEI"
        assert prefixed.attribute_keys == frozenset({"lang"})
        assert prefixed == default_ns

    def test_prefixed_mode_keeps_prefixes(self):
        adapter = LxmlTreeAdapter(namespace_mode=NamespaceMode.PREFIXED)
        prefixed = adapter.parse(self.TEI)
        default_ns = adapter.parse(self.TEI_DEFAULT_NS)

        assert prefixed.name == "tei:TEI"
        assert prefixed.children[0].name == "tei:text"
        assert prefixed.attribute_keys == frozenset({"xml:lang"})
        assert default_ns.name == "TEI"
        assert prefixed != default_ns

    def test_prefixed_attribute_uses_declared_prefix(self):
        xml = b'<a xmlns:x="urn:x" x:ref="1" plain="2"/>'
        node = LxmlTreeAdapter(namespace_mode=NamespaceMode.PREFIXED).parse(xml)
        assert node.attribute_keys == frozenset({"x:ref", "plain"})


class TestParseFile:
    def test_parse_file_reads_from_disk(self, write_xml):
        path = write_xml("doc.xml", '<doc version="1"><part/></doc>')
        node = LxmlTreeAdapter().parse_file(str(path))
        assert node == StructuralNode("doc", frozenset({"version"}), [StructuralNode("part")])

    def test_missing_file_raises_io_error(self, temp_dir):
        with pytest.raises(IoError):
            LxmlTreeAdapter().parse_file(str(temp_dir / "missing.xml"))
