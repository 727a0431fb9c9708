"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/report.py
Turns the finished grouping table into an immutable, deterministically ordered report.

Ordering:
- groups by descending file count, then ascending canonical signature
- files inside a group ascending by path
- failures ascending by path
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple

from xmlstruct.core.canonicalizer import SignatureCanonicalizer
from xmlstruct.core.models import FileFailure, SignatureGroup, sorted_failures


@dataclass(frozen=True)
class GroupReport:
    signature: str
    hash: int
    structure: Dict[str, Any]
    files: Tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.files)

    def to_dict(self, include_paths: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "signature": self.signature,
            "hash": self.hash,
            "structure": self.structure,
        }
        if include_paths:
            data["files"] = list(self.files)
        data["count"] = self.count
        return data


@dataclass(frozen=True)
class StructureReport:
    total_files: int
    unique_structures: int
    groups: Tuple[GroupReport, ...]
    failures: Tuple[FileFailure, ...]

    def to_dict(self, include_paths: bool = True) -> Dict[str, Any]:
        return {
            "total_files": self.total_files,
            "unique_structures": self.unique_structures,
            "groups": [group.to_dict(include_paths=include_paths) for group in self.groups],
            "failures": [failure.to_dict() for failure in self.failures],
        }


def _finalize_group(group: SignatureGroup) -> GroupReport:
    return GroupReport(
        signature=group.signature.canonical,
        hash=group.signature.hash,
        structure=SignatureCanonicalizer.to_structure(group.structure),
        files=tuple(sorted(group.files)),
    )


def build_report(groups: Iterable[SignatureGroup], failures: Iterable[FileFailure]) -> StructureReport:
    finalized = sorted(
        (_finalize_group(group) for group in groups),
        key=lambda g: (-g.count, g.signature),
    )
    failure_list = sorted_failures(failures)
    total_files = sum(group.count for group in finalized) + len(failure_list)
    return StructureReport(
        total_files=total_files,
        unique_structures=len(finalized),
        groups=tuple(finalized),
        failures=failure_list,
    )
