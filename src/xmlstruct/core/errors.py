"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy shared by the scanner, adapter, grouper and orchestrator.

Per-file errors (IoError, ParseError) are captured into the failure list.
Root and configuration errors abort the run before any work is dispatched.
InternalInvariantError is a defect signal and is never captured.
"""


class AnalyzerError(Exception):
    """Base class for all xmlstruct errors."""


class IoError(AnalyzerError):
    """A file or directory could not be read."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class ParseError(AnalyzerError):
    """A document is malformed, empty or cannot be decoded."""


class ConfigError(AnalyzerError, ValueError):
    """Invalid configuration value (thread count, extensions, log level...)."""


class InternalInvariantError(AnalyzerError):
    """The grouping table was asked to do something that must never happen."""
