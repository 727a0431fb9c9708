"""
Configuration for the structure analyzer, loaded from TOML and overridden by CLI flags.
Interface-agnostic — used by both the CLI and library callers.

Example file (config/default.toml):

    [processing]
    num_threads = 0
    max_depth = 0
    file_extensions = ["xml", "tei"]
    namespace_mode = "local"

    [output]
    output_file = "xml_structures.json"
    pretty_print = true
    include_paths = true

    [logging]
    level = "info"
    log_file = ""
"""
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Python < 3.11: pip install tomli

from xmlstruct.core.errors import ConfigError
from xmlstruct.core.models import NamespaceMode
from xmlstruct.core.scanner import normalize_extensions
from xmlstruct.utils.log_utils import LOG_LEVELS

DEFAULT_CONFIG_PATH = "config/default.toml"
DEFAULT_OUTPUT_FILE = "xml_structures.json"

_EXTENSION_PATTERN = re.compile(r"^\.[a-z0-9_\-]+$")


@dataclass
class ProcessingConfig:
    num_threads: int = 0
    max_depth: int = 0
    file_extensions: List[str] = field(default_factory=lambda: ["xml", "tei"])
    namespace_mode: NamespaceMode = NamespaceMode.LOCAL


@dataclass
class OutputConfig:
    output_file: str = DEFAULT_OUTPUT_FILE
    pretty_print: bool = True
    include_paths: bool = True


@dataclass
class LoggingConfig:
    level: str = "info"
    log_file: Optional[str] = None


@dataclass
class AnalyzerConfig:
    """Full run configuration with validation."""
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def default() -> 'AnalyzerConfig':
        return AnalyzerConfig()

    @staticmethod
    def from_file(path: str) -> 'AnalyzerConfig':
        """
        Load configuration from a TOML file. Missing sections and keys keep their defaults.

        Raises:
            ConfigError: file unreadable, invalid TOML or invalid values
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e.strerror or e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e
        return AnalyzerConfig.from_dict(data)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'AnalyzerConfig':
        config = AnalyzerConfig()
        processing = _section(data, "processing")
        output = _section(data, "output")
        logging_section = _section(data, "logging")

        if "num_threads" in processing:
            config.processing.num_threads = _as_int(processing["num_threads"], "num_threads")
        if "max_depth" in processing:
            config.processing.max_depth = _as_int(processing["max_depth"], "max_depth")
        if "file_extensions" in processing:
            extensions = processing["file_extensions"]
            if not isinstance(extensions, list) or not all(isinstance(e, str) for e in extensions):
                raise ConfigError("file_extensions must be a list of strings")
            config.processing.file_extensions = list(extensions)
        if "namespace_mode" in processing:
            config.processing.namespace_mode = parse_namespace_mode(processing["namespace_mode"])

        if "output_file" in output:
            config.output.output_file = str(output["output_file"])
        if "pretty_print" in output:
            config.output.pretty_print = bool(output["pretty_print"])
        if "include_paths" in output:
            config.output.include_paths = bool(output["include_paths"])

        if "level" in logging_section:
            config.logging.level = str(logging_section["level"])
        if logging_section.get("log_file"):
            config.logging.log_file = str(logging_section["log_file"])

        config.validate()
        return config

    def validate(self) -> None:
        """Raise ConfigError on the first invalid value; normalizes extensions in place."""
        if self.processing.num_threads < 0:
            raise ConfigError("Thread count cannot be negative")
        if self.processing.max_depth < 0:
            raise ConfigError("Maximum depth cannot be negative")

        extensions = normalize_extensions(self.processing.file_extensions)
        if not extensions:
            raise ConfigError("At least one file extension is required")
        for ext in extensions:
            if not _EXTENSION_PATTERN.match(ext):
                raise ConfigError(f"Invalid file extension: '{ext}'")
        self.processing.file_extensions = extensions

        if not isinstance(self.processing.namespace_mode, NamespaceMode):
            self.processing.namespace_mode = parse_namespace_mode(self.processing.namespace_mode)

        if not self.output.output_file:
            raise ConfigError("Output file cannot be empty")

        if self.logging.level.lower() not in LOG_LEVELS:
            raise ConfigError(
                f"Invalid log level: '{self.logging.level}'. "
                f"Valid options: {', '.join(LOG_LEVELS)}"
            )

    def merge_with_cli(
            self,
            output: Optional[str] = None,
            threads: Optional[int] = None,
            max_depth: Optional[int] = None,
            extensions: Optional[List[str]] = None,
            namespace_mode: Optional[str] = None,
            log_level: Optional[str] = None,
            no_pretty: bool = False,
            no_paths: bool = False,
    ) -> 'AnalyzerConfig':
        """Apply command-line overrides; only values actually given replace the file's."""
        if output:
            self.output.output_file = output
        if threads is not None:
            self.processing.num_threads = threads
        if max_depth is not None:
            self.processing.max_depth = max_depth
        if extensions:
            self.processing.file_extensions = list(extensions)
        if namespace_mode:
            self.processing.namespace_mode = parse_namespace_mode(namespace_mode)
        if log_level:
            self.logging.level = log_level
        if no_pretty:
            self.output.pretty_print = False
        if no_paths:
            self.output.include_paths = False
        self.validate()
        return self

    def output_file_path(self) -> Path:
        return Path(self.output.output_file)

    def log_file_path(self) -> Optional[Path]:
        return Path(self.logging.log_file) if self.logging.log_file else None


def parse_namespace_mode(value: Any) -> NamespaceMode:
    try:
        return NamespaceMode(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(mode.value for mode in NamespaceMode)
        raise ConfigError(f"Invalid namespace mode: '{value}'. Valid options: {valid}") from None


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table")
    return section


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer")
    return value
