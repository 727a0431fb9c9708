"""
Tests for SignatureCanonicalizer.
The canonical string is the ground truth for grouping, so its exact format is pinned here.
"""
import pytest
from xmlstruct.core import LxmlTreeAdapter, SignatureCanonicalizer, StructuralNode, XXHashAlgorithmImpl
from xmlstruct.core.canonicalizer import render_node


def signature_of(xml: bytes):
    return SignatureCanonicalizer().canonicalize(LxmlTreeAdapter().parse(xml))


class TestCanonicalString:
    """Exact rendering of name[attrs]{children}."""

    def test_book_with_attribute_and_child(self):
        sig = signature_of(b'<book id="123"><title>Test</title></book>')
        assert sig.canonical == "book[id]{title}"
        assert sig.root == "book"

    def test_bare_element(self):
        assert signature_of(b"<root/>").canonical == "root"

    def test_attributes_sorted_lexicographically(self):
        sig = signature_of(b'<book type="x" id="1" lang="en"/>')
        assert sig.canonical == "book[id,lang,type]"

    def test_children_keep_document_order(self):
        sig = signature_of(b"<a><c/><b/></a>")
        assert sig.canonical == "a{c,b}"

    def test_repeated_children_are_not_collapsed(self):
        one = signature_of(b"<list><item/></list>")
        three = signature_of(b"<list><item/><item/><item/></list>")
        assert one.canonical == "list{item}"
        assert three.canonical == "list{item,item,item}"
        assert one != three

    def test_nested_structure(self):
        sig = signature_of(b'<a x="1"><b><c y="2" z="3"/></b><d/></a>')
        assert sig.canonical == "a[x]{b{c[y,z]},d}"

    def test_render_node_omits_empty_parts(self):
        assert render_node("a", frozenset(), []) == "a"
        assert render_node("a", {"b", "a"}, []) == "a[a,b]"
        assert render_node("a", frozenset(), ["b", "c"]) == "a{b,c}"

    def test_deep_tree_renders_without_recursion(self):
        depth = 2000
        root = StructuralNode("n")
        node = root
        for _ in range(depth - 1):
            child = StructuralNode("n")
            node.add_child(child)
            node = child

        canonical = SignatureCanonicalizer.canonical_string(root)
        assert canonical == "n{" * (depth - 1) + "n" + "}" * (depth - 1)

    def test_shared_child_object_renders_twice(self):
        leaf = StructuralNode("leaf")
        root = StructuralNode("root", children=[leaf, leaf])
        assert SignatureCanonicalizer.canonical_string(root) == "root{leaf,leaf}"


class TestSignatureEquivalence:
    """Documents differing only in non-structural content must share a signature."""

    @pytest.mark.parametrize("first,second", [
        (b'<book id="1"><title>A</title></book>', b'<book id="999"><title>Something else</title></book>'),
        (b'<book id="1" lang="en"/>', b'<book lang="de" id="2"/>'),
        (b"<a><b/></a>", b"<a><b></b></a>"),
        (b"<a>\n  <!-- note -->\n  <b/>\n</a>", b"<a><b/></a>"),
        (b'<?xml version="1.0"?><a><?pi data?><b/></a>', b"<a><b/></a>"),
    ])
    def test_equivalent_documents(self, first, second):
        sig1 = signature_of(first)
        sig2 = signature_of(second)
        assert sig1 == sig2
        assert sig1.hash == sig2.hash

    @pytest.mark.parametrize("first,second", [
        (b"<a><b/><c/></a>", b"<a><c/><b/></a>"),
        (b"<a><b><c/></b></a>", b"<a><b/><c/></a>"),
        (b'<book id="1"/>', b"<book/>"),
        (b'<book id="1"/>', b'<book key="1"/>'),
        (b"<book/>", b"<Book/>"),
    ])
    def test_different_documents(self, first, second):
        assert signature_of(first).canonical != signature_of(second).canonical


class TestHashing:
    def test_hash_is_xxh64_of_canonical_utf8(self):
        sig = signature_of(b'<book id="1"><title/></book>')
        assert sig.hash == XXHashAlgorithmImpl.hash("book[id]{title}".encode("utf-8"))

    def test_custom_algorithm_is_used(self):
        class ConstantHash:
            @staticmethod
            def hash(data: bytes) -> int:
                return 42

        sig = SignatureCanonicalizer(ConstantHash()).canonicalize(StructuralNode("x"))
        assert sig.hash == 42
        assert sig.canonical == "x"

    def test_non_ascii_names(self):
        sig = signature_of('<livre auteur="x"><titre/><r\xe9sum\xe9/></livre>'.encode("utf-8"))
        assert sig.canonical == "livre[auteur]{titre,r\xe9sum\xe9}"
        assert sig.hash == XXHashAlgorithmImpl.hash(sig.canonical.encode("utf-8"))


class TestToStructure:
    def test_structure_shape(self):
        node = LxmlTreeAdapter().parse(b'<book lang="en" id="1"><title/></book>')
        structure = SignatureCanonicalizer.to_structure(node)

        assert structure == {
            "name": "book",
            "attributes": {"id": None, "lang": None},
            "children": [{"name": "title", "attributes": {}, "children": []}],
        }
        assert list(structure["attributes"]) == ["id", "lang"]
