"""
xmlstruct — group XML/TEI documents by their structural skeleton.

Core features:
- Canonical signatures: element names, sorted attribute keys, ordered children
- Stable xxHash64 of each signature, collision-safe grouping
- Parallel, streaming directory processing with cooperative cancellation
- Deterministic JSON report (rerun on unchanged input -> identical bytes)
- CLI interface with TOML configuration
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("xmlstruct")
except Exception:
    __version__ = "0.0.0"

# Public API — only what users should import directly
from xmlstruct.commands import StructureAnalysisCommand
from xmlstruct.config import AnalyzerConfig
from xmlstruct.core import (
    StructuralNode, Signature, NamespaceMode, StructureReport, StructureAnalyzer,
    SignatureCanonicalizer, LxmlTreeAdapter,
    AnalyzerError, IoError, ParseError, ConfigError, InternalInvariantError)
from xmlstruct.services import ReportService

__all__ = [
    "StructureAnalysisCommand",
    "AnalyzerConfig",
    "StructuralNode",
    "Signature",
    "NamespaceMode",
    "StructureReport",
    "StructureAnalyzer",
    "SignatureCanonicalizer",
    "LxmlTreeAdapter",
    "AnalyzerError",
    "IoError",
    "ParseError",
    "ConfigError",
    "InternalInvariantError",
    "ReportService",
    "__version__",
]
