"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for structural signatures, groups and per-file outcomes.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, FrozenSet, Tuple, Iterable

from xmlstruct.core.errors import InternalInvariantError


# =============================
# Enums
# =============================

class NamespaceMode(Enum):
    """
    How namespace-qualified element and attribute names are rendered.
    """
    LOCAL = "local"
    PREFIXED = "prefixed"

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            NamespaceMode.LOCAL:
                "Collapse namespaces to local names (tei:TEI == TEI)",
            NamespaceMode.PREFIXED:
                "Keep the document prefix (tei:TEI != TEI)",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class FileState(str, Enum):
    DISCOVERED = "discovered"
    QUEUED = "queued"
    PARSING = "parsing"
    CANONICALIZING = "canonicalizing"
    GROUPING = "grouping"
    DONE = "done"
    FAILED = "failed"


# ======================
#  Core Data Models
# ======================

@dataclass
class StructuralNode:
    """
    One element of a document skeleton: tag name, attribute keys, ordered children.
    Attribute values are never stored.
    """
    name: str
    attribute_keys: FrozenSet[str] = field(default_factory=frozenset)
    children: List["StructuralNode"] = field(default_factory=list)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Element name cannot be empty")
        if not isinstance(self.attribute_keys, frozenset):
            self.attribute_keys = frozenset(self.attribute_keys)

    def add_child(self, child: "StructuralNode") -> None:
        self.children.append(child)

    def __repr__(self):
        return f"<StructuralNode name={self.name}, attrs={len(self.attribute_keys)}, children={len(self.children)}>"


@dataclass(frozen=True)
class Signature:
    """
    Canonical structural signature of a document.
    `canonical` is the ground truth for equality, `hash` is only a candidate filter.
    """
    canonical: str
    hash: int
    root: str

    def __str__(self) -> str:
        return self.canonical


@dataclass(frozen=True)
class FileFailure:
    file: str
    error: str

    def to_dict(self) -> dict:
        return {"file": self.file, "error": self.error}


@dataclass(frozen=True)
class ProcessingOutcome:
    """Result of pushing a single file through the pipeline."""
    path: str
    signature: Optional[Signature] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.signature is not None

    @staticmethod
    def success(path: str, signature: Signature) -> "ProcessingOutcome":
        return ProcessingOutcome(path=path, signature=signature)

    @staticmethod
    def failure(path: str, error: str) -> "ProcessingOutcome":
        return ProcessingOutcome(path=path, error=error)

    def to_failure(self) -> FileFailure:
        if self.ok:
            raise ValueError("Successful outcome has no failure")
        return FileFailure(file=self.path, error=self.error or "unknown error")


class SignatureGroup:
    """
    One equivalence class: a signature, one example tree and every file mapping to it.
    File list updates are guarded by the group's own lock.
    """

    def __init__(self, signature: Signature, structure: StructuralNode, file_path: str):
        self.signature = signature
        self.structure = structure
        self._files: List[str] = [file_path]
        self._paths = {file_path}
        self._lock = threading.Lock()

    @property
    def hash(self) -> int:
        return self.signature.hash

    @property
    def files(self) -> List[str]:
        with self._lock:
            return list(self._files)

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._files)

    def matches(self, signature: Signature) -> bool:
        return self.signature.hash == signature.hash and self.signature.canonical == signature.canonical

    def add_file(self, file_path: str, signature: Signature) -> None:
        if not self.matches(signature):
            raise InternalInvariantError(
                f"Refusing to merge {file_path} into group {self.signature.hash:016x}: signature differs"
            )
        with self._lock:
            if file_path in self._paths:
                raise InternalInvariantError(f"File recorded twice: {file_path}")
            self._paths.add(file_path)
            self._files.append(file_path)

    def __repr__(self):
        return f"<SignatureGroup hash={self.signature.hash:016x}, count={self.count}>"


@dataclass
class RunStats:
    """
    Statistics collected during one analysis run.
    """
    discovered: int = 0
    processed: int = 0
    failed: int = 0
    skipped: int = 0
    collisions: int = 0
    threads: int = 0
    elapsed: float = 0.0
    cancelled: bool = False

    def print_summary(self) -> str:
        lines = [
            "Run Statistics:",
            f"Total Execution Time: {self.elapsed:.3f}s",
            f"Worker threads: {self.threads}",
            f"Files discovered / grouped / failed: {self.discovered} / {self.processed} / {self.failed}",
        ]
        if self.skipped:
            lines.append(f"Skipped after stop request: {self.skipped}")
        if self.collisions:
            lines.append(f"Hash collisions resolved: {self.collisions}")
        if self.cancelled:
            lines.append("Run was cancelled before all files were processed")
        return "\n".join(lines)


@dataclass(frozen=True)
class AnalysisResult:
    """Raw output of the orchestrator, consumed by the report builder."""
    groups: Tuple[SignatureGroup, ...]
    failures: Tuple[FileFailure, ...]
    stats: RunStats


def sorted_failures(failures: Iterable[FileFailure]) -> Tuple[FileFailure, ...]:
    return tuple(sorted(failures, key=lambda f: (f.file, f.error)))
