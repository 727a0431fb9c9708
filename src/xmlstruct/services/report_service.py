"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/report_service.py
JSON serialization, file output and console summary for structure reports.
"""
import json
import logging
from pathlib import Path
from typing import List

from xmlstruct.core.errors import IoError
from xmlstruct.core.report import StructureReport

logger = logging.getLogger(__name__)

SUMMARY_TOP_GROUPS = 5
SUMMARY_SIGNATURE_WIDTH = 80


class ReportService:
    @staticmethod
    def to_json(report: StructureReport, pretty: bool = True, include_paths: bool = True) -> str:
        """
        Serialize a report. Key order is fixed by the report itself, so unchanged
        input always yields byte-identical output.
        """
        data = report.to_dict(include_paths=include_paths)
        if pretty:
            return json.dumps(data, indent=2, ensure_ascii=False)
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)

    @staticmethod
    def write(report: StructureReport, output_path: Path, pretty: bool = True, include_paths: bool = True) -> None:
        """
        Write the JSON report to disk.

        Raises:
            IoError: If the output file cannot be written.
        """
        logger.info(f"Writing results to: {output_path}")
        payload = ReportService.to_json(report, pretty=pretty, include_paths=include_paths)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(payload + "\n", encoding="utf-8")
        except OSError as e:
            raise IoError(f"Failed to write to {output_path}: {e.strerror or e}", path=str(output_path)) from e
        logger.info(f"Successfully wrote results to {output_path}")

    @staticmethod
    def truncate_signature(signature: str, width: int = SUMMARY_SIGNATURE_WIDTH) -> str:
        if len(signature) > width:
            return f"{signature[:width]}..."
        return signature

    @staticmethod
    def format_summary(report: StructureReport, top: int = SUMMARY_TOP_GROUPS) -> str:
        """Human-readable totals plus the most common structures."""
        lines: List[str] = [
            "Processing Summary:",
            f"  Total files processed: {report.total_files}",
            f"  Unique structures found: {report.unique_structures}",
        ]
        if report.failures:
            lines.append(f"  Files that failed: {len(report.failures)}")

        if report.groups:
            lines.append("")
            lines.append(f"Top {min(top, len(report.groups))} most common structures:")
            for idx, group in enumerate(report.groups[:top], 1):
                signature = ReportService.truncate_signature(group.signature)
                lines.append(f"  {idx}. {group.count} files with structure: {signature}")

        return "\n".join(lines)
