#!/usr/bin/env python3
"""
xmlstruct CLI — group XML/TEI files by their structural skeleton.
Runs the same core engine as the library API and writes a JSON report.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Optional, NoReturn

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import lxml  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("lxml")

try:
    import xxhash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from xmlstruct.config import AnalyzerConfig, DEFAULT_CONFIG_PATH
from xmlstruct.commands import StructureAnalysisCommand
from xmlstruct.core.errors import AnalyzerError, ConfigError
from xmlstruct.core.models import RunStats
from xmlstruct.core.report import StructureReport
from xmlstruct.services.report_service import ReportService
from xmlstruct.utils.log_utils import init_logging
from xmlstruct.aliases import (
    NAMESPACE_MODE_CHOICES, NAMESPACE_MODE_HELP_TEXT, LOG_LEVEL_CHOICES, EPILOG_TEXT
)

logger = logging.getLogger(__name__)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.show_progress: bool = True
        self._stop_event = threading.Event()

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="xmlstruct",
            description="xmlstruct — group XML/TEI files by their structural skeleton",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "input_dir",
            metavar="DIRECTORY",
            type=str,
            help="Directory containing XML files to process"
        )

        parser.add_argument(
            "--output", "-o",
            default=None,
            type=str,
            metavar="FILE",
            help="Output JSON file path. Default: from config (xml_structures.json)"
        )
        parser.add_argument(
            "--config", "-c",
            default=DEFAULT_CONFIG_PATH,
            type=str,
            metavar="FILE",
            help=f"Configuration file path. Default: {DEFAULT_CONFIG_PATH}"
        )

        # Processing options
        parser.add_argument(
            "--threads", "-t",
            default=None,
            type=int,
            metavar="N",
            help="Number of parallel threads (0 = auto-detect)"
        )
        parser.add_argument(
            "--max-depth", "-d",
            default=None,
            type=int,
            metavar="N",
            dest="max_depth",
            help="Maximum directory traversal depth (0 = unlimited)"
        )
        parser.add_argument(
            "--extensions", "-x",
            nargs="+",
            default=None,
            type=str,
            metavar="EXT",
            help="File extensions (space separated) to include (e.g., xml tei)"
        )
        parser.add_argument(
            "--namespace-mode",
            choices=NAMESPACE_MODE_CHOICES,
            default=None,
            type=str,
            dest="namespace_mode",
            help=NAMESPACE_MODE_HELP_TEXT
        )

        # Output options
        parser.add_argument(
            "--log-level", "-l",
            choices=LOG_LEVEL_CHOICES,
            default=None,
            type=str,
            dest="log_level",
            help="Log level. Default: from config (info)"
        )
        parser.add_argument(
            "--no-progress",
            action="store_true",
            help="Disable the progress indicator"
        )
        parser.add_argument(
            "--no-pretty",
            action="store_true",
            help="Write compact JSON instead of pretty-printed JSON"
        )
        parser.add_argument(
            "--no-paths",
            action="store_true",
            help="Omit file lists from the report (counts are kept)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Verbose output (equivalent to --log-level debug)"
        )

        return parser.parse_args(args)

    @staticmethod
    def effective_log_level(args: argparse.Namespace) -> Optional[str]:
        """--verbose wins over --log-level, --quiet lowers noise to errors only."""
        if args.verbose:
            return "debug"
        if args.log_level:
            return args.log_level
        if args.quiet:
            return "error"
        return None

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.verbose and args.quiet:
            self.error_exit("--verbose and --quiet cannot be used together")

        if args.threads is not None and args.threads < 0:
            self.error_exit("Thread count cannot be negative")
        if args.max_depth is not None and args.max_depth < 0:
            self.error_exit("Maximum depth cannot be negative")

        root_path = Path(args.input_dir)
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.input_dir}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.input_dir}")

    def load_config(self, args: argparse.Namespace) -> AnalyzerConfig:
        """Config file (if present) overridden by command-line flags."""
        try:
            if Path(args.config).is_file():
                config = AnalyzerConfig.from_file(args.config)
            else:
                if args.config != DEFAULT_CONFIG_PATH:
                    self.warning(f"Config file not found, using defaults: {args.config}")
                config = AnalyzerConfig.default()

            return config.merge_with_cli(
                output=args.output,
                threads=args.threads,
                max_depth=args.max_depth,
                extensions=args.extensions,
                namespace_mode=args.namespace_mode,
                log_level=self.effective_log_level(args),
                no_pretty=args.no_pretty,
                no_paths=args.no_paths,
            )
        except ConfigError as e:
            self.error_exit(f"Configuration error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.show_progress:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def stopped_flag(self) -> bool:
        """True once Ctrl+C has been pressed; the pipeline stops dispatching new files."""
        return self._stop_event.is_set()

    def _handle_sigint(self, signum, frame) -> None:
        if not self.quiet:
            sys.stderr.write("\nStopping after in-flight files (press Ctrl+C again to abort)...\n")
        self._stop_event.set()
        # A second Ctrl+C raises KeyboardInterrupt as usual
        signal.signal(signal.SIGINT, signal.default_int_handler)

    def run_analysis(self, config: AnalyzerConfig, root_dir: str) -> tuple[StructureReport, RunStats]:
        """Execute the analysis workflow."""
        command = StructureAnalysisCommand(config)
        try:
            report, stats = command.execute(
                root_dir,
                progress_callback=self.progress_callback if self.show_progress else None,
                stopped_flag=self.stopped_flag
            )
        except AnalyzerError as e:
            self.error_exit(f"Analysis failed: {e}")

        if self.show_progress:
            sys.stderr.write("\n")
        if self.verbose:
            print(stats.print_summary())
        return report, stats

    def output_results(self, report: StructureReport, output_path: Path) -> None:
        """Print the summary after the report has been written."""
        if self.quiet:
            return

        print()
        print(ReportService.format_summary(report))
        for failure in report.failures[:5]:
            print(f"   {failure.file}: {failure.error}")
        if len(report.failures) > 5:
            print(f"   ...and {len(report.failures) - 5} more failures")

        elapsed = time.time() - self.start_time
        print(f"\nTotal time: {elapsed:.2f}s")
        print(f"Results saved to: {output_path}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"Warning: {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.show_progress = not (args.no_progress or args.quiet)

        self.validate_args(args)
        config = self.load_config(args)

        try:
            init_logging(config.logging.level, config.log_file_path())
        except OSError as e:
            self.error_exit(f"Failed to initialize logging: {e}")

        logger.info(f"Input directory: {args.input_dir}")
        logger.info(f"Output file: {config.output.output_file}")

        previous_handler = None
        if threading.current_thread() is threading.main_thread():
            previous_handler = signal.signal(signal.SIGINT, self._handle_sigint)

        try:
            report, stats = self.run_analysis(config, args.input_dir)
        finally:
            if previous_handler is not None:
                signal.signal(signal.SIGINT, previous_handler)

        output_path = config.output_file_path()
        try:
            ReportService.write(
                report,
                output_path,
                pretty=config.output.pretty_print,
                include_paths=config.output.include_paths,
            )
        except AnalyzerError as e:
            self.error_exit(str(e))

        self.output_results(report, output_path)

        if stats.cancelled:
            self.warning("Run was cancelled; the report only covers files processed before the stop")
            sys.exit(130)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
