"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/canonicalizer.py
Renders a StructuralNode tree into its canonical signature string.

Format: name[sorted,attr,keys]{child1,child2,...}
- attribute keys sorted lexicographically (the only normalization step)
- children kept in document order
- no bracket for zero attributes, no brace for zero children

XML names cannot contain '[', ']', '{', '}' or ',', so the rendering is injective.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from xmlstruct.core.hasher import XXHashAlgorithmImpl
from xmlstruct.core.interfaces import HashAlgorithm
from xmlstruct.core.models import Signature, StructuralNode


def _post_order(root: StructuralNode) -> Iterator[StructuralNode]:
    """Yields every node after all of its children, without recursion."""
    stack: List[Tuple[StructuralNode, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            yield node
            continue
        stack.append((node, True))
        for child in reversed(node.children):
            stack.append((child, False))


def render_node(name: str, attribute_keys, rendered_children: List[str]) -> str:
    parts = [name]
    if attribute_keys:
        parts.append("[" + ",".join(sorted(attribute_keys)) + "]")
    if rendered_children:
        parts.append("{" + ",".join(rendered_children) + "}")
    return "".join(parts)


class SignatureCanonicalizer:
    """
    Converts structural trees into Signature values.
    Stateless apart from the hash algorithm; safe to share between threads.
    """

    def __init__(self, algorithm: Optional[HashAlgorithm] = None):
        self.algorithm = algorithm or XXHashAlgorithmImpl()

    @staticmethod
    def canonical_string(root: StructuralNode) -> str:
        rendered: Dict[int, str] = {}
        for node in _post_order(root):
            children = [rendered[id(child)] for child in node.children]
            rendered[id(node)] = render_node(node.name, node.attribute_keys, children)
        return rendered[id(root)]

    def canonicalize(self, root: StructuralNode) -> Signature:
        canonical = self.canonical_string(root)
        return Signature(
            canonical=canonical,
            hash=self.algorithm.hash(canonical.encode("utf-8")),
            root=root.name,
        )

    @staticmethod
    def to_structure(root: StructuralNode) -> Dict[str, Any]:
        """
        Presentation form used in the JSON report:
        {"name": ..., "attributes": {key: None}, "children": [...]}
        """
        built: Dict[int, Dict[str, Any]] = {}
        for node in _post_order(root):
            built[id(node)] = {
                "name": node.name,
                "attributes": {key: None for key in sorted(node.attribute_keys)},
                "children": [built[id(child)] for child in node.children],
            }
        return built[id(root)]
