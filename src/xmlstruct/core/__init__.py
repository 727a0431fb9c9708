"""
Core structure engine — adapter, canonicalizer, hasher, grouper, scanner and orchestrator.

This package contains the performance-critical foundation of xmlstruct:
- LxmlTreeAdapter: document bytes -> StructuralNode (element names, attribute keys, children)
- SignatureCanonicalizer: StructuralNode -> canonical signature string + xxHash64
- SignatureGrouperImpl: lock-striped concurrent table of equivalence classes
- FileScannerImpl: lazy directory walk with extension and depth filters
- StructureAnalyzer: streaming thread-pool pipeline with cooperative cancellation
- build_report: deterministic, immutable report value

No CLI or output dependencies — suitable for library usage.
"""

from .errors import AnalyzerError, IoError, ParseError, ConfigError, InternalInvariantError
from .models import (
    StructuralNode, Signature, SignatureGroup, FileFailure, ProcessingOutcome,
    FileState, NamespaceMode, RunStats, AnalysisResult)
from .adapter import LxmlTreeAdapter, read_document
from .hasher import XXHashAlgorithmImpl
from .canonicalizer import SignatureCanonicalizer
from .grouper import SignatureGrouperImpl
from .scanner import FileScannerImpl
from .orchestrator import StructureAnalyzer, ProgressTracker
from .report import StructureReport, GroupReport, build_report

__all__ = [
    "AnalyzerError",
    "IoError",
    "ParseError",
    "ConfigError",
    "InternalInvariantError",
    "StructuralNode",
    "Signature",
    "SignatureGroup",
    "FileFailure",
    "ProcessingOutcome",
    "FileState",
    "NamespaceMode",
    "RunStats",
    "AnalysisResult",
    "LxmlTreeAdapter",
    "read_document",
    "XXHashAlgorithmImpl",
    "SignatureCanonicalizer",
    "SignatureGrouperImpl",
    "FileScannerImpl",
    "StructureAnalyzer",
    "ProgressTracker",
    "StructureReport",
    "GroupReport",
    "build_report",
]
