"""Parallel processing of independent items with input order preserved."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, Future, as_completed
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


@dataclass
class ProcessingResult:
    """Result of processing an item."""
    index: int
    item: Any
    result: Optional[Any] = None
    error: Optional[Exception] = None
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class BatchProcessingStats:
    """Statistics for batch processing."""
    total_items: int = 0
    processed: int = 0
    successful: int = 0
    failed: int = 0
    total_duration: float = 0.0

    @property
    def success_rate(self) -> float:
        return self.successful / self.processed if self.processed > 0 else 0.0

    @property
    def average_duration(self) -> float:
        return self.total_duration / self.processed if self.processed > 0 else 0.0


class ParallelProcessor:
    """Processes items on a thread pool; results come back in input order."""

    def __init__(self,
                 max_workers: int = 4,
                 progress_callback: Optional[Callable[[int, int], None]] = None):
        """
        Initialize parallel processor.

        Args:
            max_workers: Maximum number of worker threads; 1 runs in the calling thread
            progress_callback: Callback for progress updates (processed, total)
        """
        self.max_workers = max(1, max_workers)
        self.progress_callback = progress_callback

    def process_batch(self,
                      items: List[T],
                      process_func: Callable[[T], R]) -> Tuple[List[ProcessingResult], BatchProcessingStats]:
        """
        Process a batch of items.

        Args:
            items: Items to process
            process_func: Function to process each item

        Returns:
            Tuple of (results in input order, statistics)
        """
        stats = BatchProcessingStats(total_items=len(items))
        if not items:
            return [], stats

        if self.max_workers == 1:
            results = []
            for index, item in enumerate(items):
                results.append(self._process_single(index, item, process_func))
                self._update(stats, results[-1])
        else:
            results = self._process_threaded(items, process_func, stats)

        results.sort(key=lambda r: r.index)
        return results, stats

    def _process_threaded(self,
                          items: List[T],
                          process_func: Callable[[T], R],
                          stats: BatchProcessingStats) -> List[ProcessingResult]:
        results = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index: Dict[Future, int] = {
                executor.submit(self._process_single, index, item, process_func): index
                for index, item in enumerate(items)
            }

            for future in as_completed(future_to_index):
                result = future.result()
                results.append(result)
                self._update(stats, result)

        return results

    def _update(self, stats: BatchProcessingStats, result: ProcessingResult) -> None:
        stats.processed += 1
        stats.total_duration += result.duration
        if result.success:
            stats.successful += 1
        else:
            stats.failed += 1

        if self.progress_callback:
            self.progress_callback(stats.processed, stats.total_items)

    def _process_single(self, index: int, item: T, process_func: Callable[[T], R]) -> ProcessingResult:
        """Process a single item, capturing any exception."""
        start_time = time.time()

        try:
            result = process_func(item)
            return ProcessingResult(
                index=index,
                item=item,
                result=result,
                duration=time.time() - start_time
            )
        except Exception as e:
            logger.debug(f"Error processing item {index}: {e}")
            return ProcessingResult(
                index=index,
                item=item,
                error=e,
                duration=time.time() - start_time
            )
