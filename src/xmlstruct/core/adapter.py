"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/adapter.py
lxml-backed tree adapter: document bytes -> StructuralNode.

Text, comments, processing instructions and external entity references are dropped.
Internal DTD entities are expanded, so markup they carry is part of the skeleton.
Attribute values are read only to learn that the key exists.
"""

from pathlib import Path
from typing import List, Optional, Tuple

from lxml import etree

from xmlstruct.core.errors import IoError, ParseError
from xmlstruct.core.models import NamespaceMode, StructuralNode

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def read_document(path: str) -> bytes:
    """Raw bytes of one document. OSError becomes IoError."""
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise IoError(f"Cannot read file: {e.strerror or e}", path=path) from e


class LxmlTreeAdapter:
    """
    Parses XML with lxml and exposes only the structural skeleton.

    The walk is iterative; nesting depth is bounded by libxml2's own limit
    (huge_tree disabled), deeper documents fail with ParseError.
    """

    def __init__(self, namespace_mode: NamespaceMode = NamespaceMode.LOCAL):
        self.namespace_mode = namespace_mode

    @staticmethod
    def _make_parser() -> etree.XMLParser:
        # lxml parsers are not thread-safe; one per call
        return etree.XMLParser(
            remove_comments=True,
            remove_pis=True,
            resolve_entities="internal",
            no_network=True,
            huge_tree=False,
        )

    def parse(self, data: bytes) -> StructuralNode:
        if not data or not data.strip():
            raise ParseError("Empty document")

        try:
            root = etree.fromstring(data, parser=self._make_parser())
        except etree.XMLSyntaxError as e:
            raise ParseError(f"Malformed XML: {e}") from e
        except (ValueError, UnicodeDecodeError) as e:
            raise ParseError(f"Cannot decode document: {e}") from e

        if root is None:
            raise ParseError("Document has no root element")

        return self._build(root)

    def parse_file(self, path: str) -> StructuralNode:
        return self.parse(read_document(path))

    def _build(self, root: etree._Element) -> StructuralNode:
        root_node = self._make_node(root)
        stack: List[Tuple[etree._Element, StructuralNode]] = [(root, root_node)]

        while stack:
            element, node = stack.pop()
            for child in element:
                # Skips comments, PIs and entity references left by the parser
                if not isinstance(child.tag, str):
                    continue
                child_node = self._make_node(child)
                node.add_child(child_node)
                stack.append((child, child_node))

        return root_node

    def _make_node(self, element: etree._Element) -> StructuralNode:
        name = self._element_name(element)
        keys = frozenset(self._attribute_name(element, key) for key in element.attrib.keys())
        return StructuralNode(name=name, attribute_keys=keys)

    def _element_name(self, element: etree._Element) -> str:
        qname = etree.QName(element)
        if self.namespace_mode is NamespaceMode.LOCAL or not qname.namespace:
            return qname.localname
        return self._prefixed(element.prefix, qname.localname)

    def _attribute_name(self, element: etree._Element, key: str) -> str:
        qname = etree.QName(key)
        if self.namespace_mode is NamespaceMode.LOCAL or not qname.namespace:
            return qname.localname
        return self._prefixed(self._prefix_for(element, qname.namespace), qname.localname)

    @staticmethod
    def _prefix_for(element: etree._Element, namespace: str) -> Optional[str]:
        if namespace == XML_NAMESPACE:
            return "xml"
        for prefix, uri in element.nsmap.items():
            if uri == namespace and prefix is not None:
                return prefix
        return None

    @staticmethod
    def _prefixed(prefix: Optional[str], localname: str) -> str:
        return f"{prefix}:{localname}" if prefix else localname
