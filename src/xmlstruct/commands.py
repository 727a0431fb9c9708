"""
Unified command orchestrator for structure analysis.
This is the SINGLE source of truth for the workflow — used by the CLI and library callers.
"""
import logging
from typing import Optional, Callable, Tuple

from xmlstruct.config import AnalyzerConfig
from xmlstruct.core.adapter import LxmlTreeAdapter
from xmlstruct.core.models import RunStats
from xmlstruct.core.orchestrator import StructureAnalyzer
from xmlstruct.core.report import StructureReport, build_report
from xmlstruct.core.scanner import validate_root

logger = logging.getLogger(__name__)


class StructureAnalysisCommand:
    """
    Orchestrates the entire analysis workflow:
    1. Validate the root directory (fatal if missing or unreadable)
    2. Build adapter + analyzer from the validated configuration
    3. Run the parallel pipeline with progress/cancellation support
    4. Build the deterministic report

    Usage:
        config = AnalyzerConfig.default()
        command = StructureAnalysisCommand(config)
        report, stats = command.execute(
            "/data/tei",
            progress_callback=cli_progress_printer,
            stopped_flag=signal_handler_check
        )
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig.default()
        self.config.validate()

    def build_analyzer(self) -> StructureAnalyzer:
        processing = self.config.processing
        return StructureAnalyzer(
            num_threads=processing.num_threads,
            extensions=processing.file_extensions,
            max_depth=processing.max_depth,
            adapter=LxmlTreeAdapter(namespace_mode=processing.namespace_mode),
        )

    def execute(
            self,
            root_dir: str,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Tuple[StructureReport, RunStats]:
        """
        Analyze root_dir and return (report, statistics).

        Raises:
            IoError: If the root directory is missing or unreadable
            InternalInvariantError: If the grouping table detects a defect
        """
        validate_root(root_dir)
        analyzer = self.build_analyzer()
        result = analyzer.run(root_dir, stopped_flag=stopped_flag, progress_callback=progress_callback)

        if not result.groups and not result.failures:
            logger.info(f"No files matching {self.config.processing.file_extensions} under {root_dir}")

        report = build_report(result.groups, result.failures)
        return report, result.stats
