"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/orchestrator.py
Parallel pipeline: discover -> read -> parse -> canonicalize -> hash -> group.

A producer thread walks the tree and feeds a bounded queue while a fixed pool of
worker threads drains it, so processing starts with the first discovered file.
Only the final merge into the grouping table is synchronized.
"""

import logging
import os
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from xmlstruct.core.adapter import LxmlTreeAdapter, read_document
from xmlstruct.core.canonicalizer import SignatureCanonicalizer
from xmlstruct.core.errors import AnalyzerError, InternalInvariantError
from xmlstruct.core.grouper import SignatureGrouperImpl
from xmlstruct.core.interfaces import FileScanner, SignatureGrouper, TreeAdapter
from xmlstruct.core.models import (
    AnalysisResult, FileFailure, FileState, ProcessingOutcome, RunStats, sorted_failures)
from xmlstruct.core.scanner import FileScannerImpl, validate_root

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, Optional[int]], None]

_SENTINEL = object()
_QUEUE_POLL_SECONDS = 0.1


def resolve_thread_count(num_threads: int) -> int:
    """0 means one worker per available CPU."""
    if num_threads < 0:
        raise ValueError("Thread count cannot be negative")
    if num_threads == 0:
        return os.cpu_count() or 1
    return num_threads


class ProgressTracker:
    """
    Monotonic completed-file counter shared by all workers.

    Workers add in batches, so the lock is taken once per `interval` files per
    worker rather than once per file. The callback runs under the lock, which
    keeps the reported values strictly increasing.
    """

    def __init__(self, callback: Optional[ProgressCallback] = None, interval: int = 50,
                 stage: str = "processing"):
        self.callback = callback
        self.interval = max(1, interval)
        self.stage = stage
        self._completed = 0
        self._lock = threading.Lock()

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def add(self, count: int, total: Optional[int] = None) -> None:
        if count <= 0:
            return
        with self._lock:
            self._completed += count
            if self.callback:
                self.callback(self.stage, self._completed, total)


class StructureAnalyzer:
    """
    Runs the per-file pipeline over a directory on a bounded thread pool.

    Usage:
        analyzer = StructureAnalyzer(num_threads=0, extensions=[".xml"])
        result = analyzer.run("/data/tei", stopped_flag=lambda: False)
    """

    def __init__(
            self,
            num_threads: int = 0,
            extensions: Optional[List[str]] = None,
            max_depth: int = 0,
            adapter: Optional[TreeAdapter] = None,
            canonicalizer: Optional[SignatureCanonicalizer] = None,
            scanner_factory: Optional[Callable[[str], FileScanner]] = None,
            progress_interval: int = 50,
    ):
        self.num_threads = resolve_thread_count(num_threads)
        self.extensions = extensions if extensions is not None else [".xml", ".tei"]
        self.max_depth = max_depth
        self.adapter = adapter or LxmlTreeAdapter()
        self.canonicalizer = canonicalizer or SignatureCanonicalizer()
        self.scanner_factory = scanner_factory or self._default_scanner
        self.progress_interval = progress_interval

    def _default_scanner(self, root_dir: str) -> FileScanner:
        return FileScannerImpl(root_dir, extensions=self.extensions, max_depth=self.max_depth)

    # =============================
    # Per-file pipeline
    # =============================
    def process_file(self, path: str, grouper: SignatureGrouper) -> ProcessingOutcome:
        """
        Read, parse, canonicalize and record one file.
        Per-file errors become a failure outcome; grouping invariant violations propagate.
        """
        state = FileState.PARSING
        try:
            logger.debug(f"{path}: {state.value}")
            node = self.adapter.parse(read_document(path))

            state = FileState.CANONICALIZING
            signature = self.canonicalizer.canonicalize(node)

            state = FileState.GROUPING
            grouper.record(path, signature, node)
        except InternalInvariantError:
            raise
        except AnalyzerError as e:
            logger.warning(f"{path}: {FileState.FAILED.value} while {state.value}: {e}")
            return ProcessingOutcome.failure(path, str(e))
        except Exception as e:
            logger.exception(f"{path}: {FileState.FAILED.value} while {state.value}")
            return ProcessingOutcome.failure(path, f"{type(e).__name__}: {e}")

        logger.debug(f"{path}: {FileState.DONE.value}")
        return ProcessingOutcome.success(path, signature)

    # =============================
    # Run
    # =============================
    def run(
            self,
            root_dir: str,
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[ProgressCallback] = None,
    ) -> AnalysisResult:
        """
        Analyze every matching file under root_dir.

        Raises:
            IoError: root directory missing or unreadable (before any work starts)
            InternalInvariantError: grouping table invariant violated
        """
        validate_root(root_dir)
        start_time = time.time()

        grouper = SignatureGrouperImpl()
        stats = RunStats(threads=self.num_threads)
        tracker = ProgressTracker(progress_callback, interval=self.progress_interval)
        failures: List[FileFailure] = []
        failures_lock = threading.Lock()
        counters_lock = threading.Lock()

        # Set on a stop request from the caller or on a fatal worker error
        halt = threading.Event()
        work_queue: "queue.Queue[object]" = queue.Queue(maxsize=self.num_threads * 4)
        producer_errors: List[BaseException] = []

        def should_stop() -> bool:
            if halt.is_set():
                return True
            if stopped_flag and stopped_flag():
                stats.cancelled = True
                halt.set()
                return True
            return False

        def put(item: object) -> bool:
            """Blocking put that gives up when halted (workers may have exited)."""
            while True:
                try:
                    work_queue.put(item, timeout=_QUEUE_POLL_SECONDS)
                    return True
                except queue.Full:
                    if halt.is_set():
                        return False

        def produce() -> None:
            try:
                scanner = self.scanner_factory(root_dir)
                for path in scanner.iter_files(stopped_flag=should_stop):
                    logger.debug(f"{path}: {FileState.DISCOVERED.value}")
                    if should_stop():
                        break
                    with counters_lock:
                        stats.discovered += 1
                    logger.debug(f"{path}: {FileState.QUEUED.value}")
                    if not put(path):
                        break
            except BaseException as e:
                producer_errors.append(e)
                halt.set()
            finally:
                for _ in range(self.num_threads):
                    if not put(_SENTINEL):
                        break

        def consume() -> None:
            pending_progress = 0
            try:
                while True:
                    try:
                        item = work_queue.get(timeout=_QUEUE_POLL_SECONDS)
                    except queue.Empty:
                        if halt.is_set() and not producer.is_alive():
                            return
                        continue
                    if item is _SENTINEL:
                        return
                    path = str(item)
                    if should_stop():
                        with counters_lock:
                            stats.skipped += 1
                        continue

                    outcome = self.process_file(path, grouper)
                    if outcome.ok:
                        with counters_lock:
                            stats.processed += 1
                    else:
                        with failures_lock:
                            failures.append(outcome.to_failure())
                        with counters_lock:
                            stats.failed += 1

                    pending_progress += 1
                    if pending_progress >= tracker.interval:
                        tracker.add(pending_progress)
                        pending_progress = 0
            except BaseException:
                halt.set()
                raise
            finally:
                tracker.add(pending_progress)

        logger.info(f"Processing files under {root_dir} with {self.num_threads} worker threads")
        producer = threading.Thread(target=produce, name="xmlstruct-discovery", daemon=True)
        producer.start()

        with ThreadPoolExecutor(max_workers=self.num_threads, thread_name_prefix="xmlstruct-worker") as executor:
            futures = [executor.submit(consume) for _ in range(self.num_threads)]
        producer.join()

        # Surface worker defects and producer errors after every thread has finished
        for future in futures:
            future.result()
        if producer_errors:
            raise producer_errors[0]

        stats.collisions = grouper.collisions
        stats.elapsed = time.time() - start_time
        result = AnalysisResult(
            groups=tuple(grouper.groups()),
            failures=sorted_failures(failures),
            stats=stats,
        )
        logger.info(
            f"Processing complete: {stats.processed + stats.failed} files, "
            f"{len(result.groups)} unique structures, {stats.failed} failures"
        )
        return result
