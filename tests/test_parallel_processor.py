"""Tests for parallel processor."""

import random
import time

import pytest

from prositometry.parallel_processor import BatchProcessingStats, ParallelProcessor, ProcessingResult


class TestParallelProcessor:
    """Test cases for parallel processor."""

    def test_basic_processing(self):
        """Test basic parallel processing."""
        items = list(range(10))

        def process_func(x):
            return x * 2

        processor = ParallelProcessor(max_workers=3)
        results, stats = processor.process_batch(items, process_func)

        assert len(results) == 10
        assert all(r.success for r in results)
        assert [r.result for r in results] == [x * 2 for x in range(10)]

        assert stats.total_items == 10
        assert stats.successful == 10
        assert stats.failed == 0
        assert stats.success_rate == 1.0

    def test_results_in_input_order(self):
        """Test that results come back in input order regardless of completion order."""
        items = list(range(20))

        def process_func(x):
            time.sleep(random.uniform(0, 0.01))
            return x

        processor = ParallelProcessor(max_workers=8)
        results, _ = processor.process_batch(items, process_func)

        assert [r.index for r in results] == items
        assert [r.item for r in results] == items

    def test_error_handling(self):
        """Test error handling in parallel processing."""
        items = list(range(5))

        def process_func(x):
            if x in (1, 3):
                raise ValueError(f"Error processing {x}")
            return x * 2

        processor = ParallelProcessor(max_workers=2)
        results, stats = processor.process_batch(items, process_func)

        assert [r.success for r in results] == [True, False, True, False, True]
        assert isinstance(results[1].error, ValueError)
        assert "Error processing 1" in str(results[1].error)
        assert results[3].result is None

        assert stats.successful == 3
        assert stats.failed == 2
        assert stats.success_rate == 0.6

    def test_sequential_mode(self):
        """Test that one worker processes items in the calling thread."""
        seen = []
        processor = ParallelProcessor(max_workers=1)

        results, stats = processor.process_batch([3, 1, 2], lambda x: seen.append(x) or x)

        assert seen == [3, 1, 2]
        assert stats.processed == 3

    def test_progress_callback(self):
        """Test progress reporting."""
        updates = []

        processor = ParallelProcessor(
            max_workers=2,
            progress_callback=lambda processed, total: updates.append((processed, total))
        )
        processor.process_batch(list(range(6)), lambda x: x)

        assert len(updates) == 6
        assert updates[-1] == (6, 6)

    def test_empty_batch(self):
        processor = ParallelProcessor(max_workers=4)
        results, stats = processor.process_batch([], lambda x: x)

        assert results == []
        assert stats.total_items == 0
        assert stats.success_rate == 0.0

    @pytest.mark.parametrize("workers", [0, -3])
    def test_worker_count_floor(self, workers):
        assert ParallelProcessor(max_workers=workers).max_workers == 1


class TestDataClasses:
    """Test cases for data classes."""

    def test_processing_result(self):
        result = ProcessingResult(index=0, item="a", result="b", duration=0.5)
        assert result.success is True

        failed = ProcessingResult(index=1, item="a", error=ValueError("x"))
        assert failed.success is False

    def test_batch_stats(self):
        stats = BatchProcessingStats(total_items=4, processed=4, successful=3, failed=1, total_duration=2.0)
        assert stats.success_rate == 0.75
        assert stats.average_duration == 0.5
