"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Lists candidate XML files under a root directory.
Features:
- Lazily yields paths as they are found, so processing can start before the walk ends
- Filters by extension (case-insensitive)
- Honours a maximum traversal depth (0 = unlimited, 1 = files directly in root)
- Skips symbolic links and unreadable directories
"""

import os
from typing import List, Optional, Callable, Iterator
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

# Local imports
from xmlstruct.core.errors import IoError


def normalize_extensions(extensions: Optional[List[str]]) -> List[str]:
    """'XML', '.tei ' -> ['.xml', '.tei']"""
    normalized = []
    for ext in extensions or []:
        ext = ext.strip().lower()
        if ext and not ext.startswith('.'):
            ext = f".{ext}"
        if ext and ext not in normalized:
            normalized.append(ext)
    return normalized


def validate_root(root_dir: str) -> Path:
    """
    Check that the root exists, is a directory and can be listed.
    Raises IoError otherwise: an inaccessible root is fatal for the whole run.
    """
    root_path = Path(root_dir)
    if not root_path.exists():
        raise IoError(f"Directory does not exist: {root_dir}", path=root_dir)
    if not root_path.is_dir():
        raise IoError(f"Not a directory: {root_dir}", path=root_dir)
    if not os.access(root_path, os.R_OK | os.X_OK):
        raise IoError(f"Directory is not readable: {root_dir}", path=root_dir)
    return root_path


class FileScannerImpl:
    """
    Walks a directory tree and yields files with accepted extensions.

    Attributes:
        root_dir: Root directory to scan
        extensions: Allowed extensions, normalized to lowercase with a leading dot
        max_depth: Maximum depth of files relative to root (0 = unlimited)
    """

    def __init__(
        self,
        root_dir: str,
        extensions: Optional[List[str]] = None,
        max_depth: int = 0,
    ):
        if max_depth < 0:
            raise ValueError("Maximum depth cannot be negative")
        self.root_dir = root_dir
        self.extensions = normalize_extensions(extensions)
        self.max_depth = max_depth

    def iter_files(self, stopped_flag: Optional[Callable[[], bool]] = None) -> Iterator[str]:
        """
        Generator over matching file paths, in walk order.
        Stops early (without error) once stopped_flag() returns True.
        """
        root_path = validate_root(self.root_dir)
        root_str = str(root_path)
        logger.debug(f"Scanning directory: {root_str}")
        logger.debug(f"Filters: extensions={self.extensions}, max_depth={self.max_depth}")

        found = 0
        for root, dirs, files in os.walk(root_str, onerror=self._on_walk_error):
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by stop request")
                return

            # Depth of files inside `root`: 1 for the root directory itself
            depth = self._depth_of(root_str, root) + 1
            if self.max_depth and depth >= self.max_depth:
                dirs[:] = []
            else:
                dirs[:] = sorted(d for d in dirs if self._prefilter_dir(Path(root) / d))

            if self.max_depth and depth > self.max_depth:
                continue

            for filename in sorted(files):
                path = Path(root) / filename
                if self._accept_file(path):
                    found += 1
                    yield str(path)

        logger.debug(f"Scan completed. Found {found} matching files.")

    def scan(self, stopped_flag: Optional[Callable[[], bool]] = None) -> List[str]:
        """Eager variant of iter_files."""
        return list(self.iter_files(stopped_flag=stopped_flag))

    @staticmethod
    def _depth_of(root_str: str, current: str) -> int:
        rel = os.path.relpath(current, root_str)
        if rel == os.curdir:
            return 0
        return len(Path(rel).parts)

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.warning(f"Error accessing path: {error}")

    @staticmethod
    def _prefilter_dir(path: Path) -> bool:
        """Skip symlinked and inaccessible directories."""
        try:
            if path.is_symlink():
                logger.debug(f"Skipping symlinked directory: {path}")
                return False
            return os.access(path, os.R_OK | os.X_OK)
        except OSError:
            logger.debug(f"Skipping inaccessible directory: {path}")
            return False

    def _accept_file(self, path: Path) -> bool:
        try:
            if path.is_symlink():
                logger.debug(f"Skipping symbolic link: {path}")
                return False
        except OSError as e:
            logger.debug(f"Could not check symlink status for {path}: {e}")
            return False

        if not self._extension_passes(path):
            return False

        logger.debug(f"Accepted file: {path}")
        return True

    def _extension_passes(self, path: Path) -> bool:
        """
        Check if file matches any of the allowed extensions.
        An empty extension list accepts every file.
        """
        if not self.extensions:
            return True
        return path.suffix.lower() in self.extensions
