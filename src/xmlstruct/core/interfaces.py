"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the structure analyzer.
The XML parser and the directory walker sit behind these narrow seams, so either
can be swapped without touching canonicalization, grouping or orchestration.

Key Components:
---------------
- TreeAdapter: parses one document's bytes into a StructuralNode tree.
- FileScanner: lists candidate files under a root directory.
- HashAlgorithm: 64-bit hash of a canonical signature string.
- SignatureGrouper: concurrent insert-or-merge table of signature groups.
"""

from typing import Protocol, Iterator, Optional, Callable, List
from xmlstruct.core.models import StructuralNode, Signature, SignatureGroup


# ===== Interfaces =====

class TreeAdapter(Protocol):
    """Interface for turning raw document bytes into a structural tree."""

    def parse(self, data: bytes) -> StructuralNode:
        """
        Parse a single document.

        Raises:
            ParseError: malformed XML, encoding error or empty document.
        """
        ...


class FileScanner(Protocol):
    """
    Interface for listing candidate files under a root directory.

    Methods:
        iter_files: Lazily yields matching file paths as they are discovered.
    """
    def iter_files(self, stopped_flag: Optional[Callable[[], bool]] = None) -> Iterator[str]:
        ...


class HashAlgorithm(Protocol):
    """
    Interface for the signature hash function.

    Must be deterministic: same input, same output, across runs and machines.
    """

    @staticmethod
    def hash(data: bytes) -> int:
        ...


class SignatureGrouper(Protocol):
    """Interface for the shared grouping table."""

    def record(self, file_path: str, signature: Signature, structure: StructuralNode) -> SignatureGroup:
        """Insert a new group or merge the file into the matching one."""
        ...

    def groups(self) -> List[SignatureGroup]:
        ...

    def __len__(self) -> int:
        ...
