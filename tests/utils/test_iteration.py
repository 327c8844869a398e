"""Tests for the iteration helpers."""

import asyncio
from unittest.mock import MagicMock

import pytest

from tickmeter.core.progress import (
    CountProgress,
    ProgressOptions,
    ThresholdProgress,
    UnknownProgress,
)
from tickmeter.utils.iteration import (
    atrack,
    gather_with_progress,
    progress_map,
    progress_pmap,
    track,
)


def _numbers(count: int, fail_at: int | None = None):
    for value in range(count):
        if value == fail_at:
            raise ValueError(f"bad item {value}")
        yield value


async def _anumbers(count: int, fail_at: int | None = None):
    for value in range(count):
        await asyncio.sleep(0)
        if value == fail_at:
            raise ValueError(f"bad item {value}")
        yield value


class TestTrack:
    """Test cases for track."""

    def test_yields_items_and_finishes(
        self, options: ProgressOptions
    ) -> None:
        """Test every item is yielded and the progress completes."""
        progress = CountProgress(3, options=options)

        assert list(track(["a", "b", "c"], progress)) == ["a", "b", "c"]
        assert progress.current == 3
        assert progress.is_done()

    def test_advances_after_each_item(self, options: ProgressOptions) -> None:
        """Test an item counts only once the loop body is done with it."""
        progress = CountProgress(2, options=options)
        seen = []

        for _ in track(range(2), progress):
            seen.append(progress.current)

        assert seen == [0, 1]

    def test_builds_count_progress_for_sized_input(
        self, sink, clock
    ) -> None:
        """Test a sized iterable gets a progress with that total."""
        items = list(track([1, 2], output=sink, clock=clock, bar_length=10))

        assert items == [1, 2]
        assert sink.frames[-1].final
        assert sink.frames[-1].fields["total"] == 2

    def test_builds_unknown_progress_for_generators(
        self, sink, clock
    ) -> None:
        """Test an unsized iterable gets a counter."""
        list(track(_numbers(3), output=sink, clock=clock))

        assert sink.frames[-1].final
        assert sink.status_lines[-1] == "Progress: 3  Time: 0:00:00"

    def test_source_error_cancels(self, options: ProgressOptions) -> None:
        """Test a failing iterable cancels the progress and re-raises."""
        progress = UnknownProgress(options=options)

        with pytest.raises(ValueError, match="bad item 2"):
            list(track(_numbers(5, fail_at=2), progress))

        assert progress.cancelled
        assert progress.counter == 2

    def test_short_input_still_finishes(
        self, options: ProgressOptions
    ) -> None:
        """Test exhausting the input finishes a larger count progress."""
        progress = CountProgress(10, options=options)

        list(track(range(4), progress))

        assert progress.is_done()

    def test_progress_and_options_conflict(
        self, options: ProgressOptions
    ) -> None:
        """Test a progress and options cannot be combined."""
        progress = CountProgress(1, options=options)

        with pytest.raises(TypeError, match="not both"):
            track([1], progress, description="x")

    def test_threshold_progress_rejected(
        self, options: ProgressOptions
    ) -> None:
        """Test item counts cannot drive a threshold progress."""
        progress = ThresholdProgress(1.0, options=options)

        with pytest.raises(TypeError, match="threshold"):
            track([1], progress)


class TestProgressMap:
    """Test cases for progress_map."""

    def test_maps_lazily(self, options: ProgressOptions) -> None:
        """Test results are computed on demand."""
        func = MagicMock(side_effect=lambda x: x * 2)
        progress = CountProgress(3, options=options)

        results = progress_map(func, [1, 2, 3], progress)

        func.assert_not_called()
        assert list(results) == [2, 4, 6]
        assert progress.is_done()

    def test_function_error_cancels(self, options: ProgressOptions) -> None:
        """Test an exception from the function cancels the progress."""
        progress = CountProgress(3, options=options)

        def explode(value: int) -> int:
            if value == 2:
                raise RuntimeError("boom")
            return value

        with pytest.raises(RuntimeError, match="boom"):
            list(progress_map(explode, [1, 2, 3], progress))

        assert progress.cancelled
        assert progress.current == 1


class TestProgressPmap:
    """Test cases for progress_pmap."""

    def test_results_in_input_order(self, options: ProgressOptions) -> None:
        """Test parallel results keep the input order."""
        progress = CountProgress(20, options=options)

        results = progress_pmap(
            lambda x: x * x, range(20), progress, max_workers=4
        )

        assert results == [x * x for x in range(20)]
        assert progress.current == 20
        assert progress.is_done()

    def test_failure_cancels(self, options: ProgressOptions) -> None:
        """Test the first failure cancels the progress and propagates."""
        progress = CountProgress(10, options=options)

        def maybe_fail(value: int) -> int:
            if value == 5:
                raise ValueError("bad item")
            return value

        with pytest.raises(ValueError, match="bad item"):
            progress_pmap(maybe_fail, range(10), progress, max_workers=2)

        assert progress.cancelled

    def test_empty_input(self, sink, clock) -> None:
        """Test an empty input finishes a zero-total progress."""
        results = progress_pmap(str, [], output=sink, clock=clock)

        assert results == []
        assert sink.frames[-1].final
        assert sink.frames[-1].fields["total"] == 0


class TestAtrack:
    """Test cases for atrack."""

    @pytest.mark.asyncio
    async def test_known_total(self, sink, clock) -> None:
        """Test an explicit total builds a count progress."""
        items = [
            item
            async for item in atrack(
                _anumbers(3), total=3, output=sink, clock=clock, bar_length=10
            )
        ]

        assert items == [0, 1, 2]
        assert sink.status_lines[-1] == (
            "Progress: 100%|██████████|  Time: 0:00:00"
        )

    @pytest.mark.asyncio
    async def test_unknown_total(self, options: ProgressOptions) -> None:
        """Test async iterables without a total get a counter."""
        progress = UnknownProgress(options=options)

        items = [item async for item in atrack(_anumbers(4), progress)]

        assert items == [0, 1, 2, 3]
        assert progress.counter == 4
        assert progress.is_done()

    @pytest.mark.asyncio
    async def test_error_cancels(self, options: ProgressOptions) -> None:
        """Test a failing async iterable cancels the progress."""
        progress = UnknownProgress(options=options)

        with pytest.raises(ValueError, match="bad item 1"):
            async for _ in atrack(_anumbers(3, fail_at=1), progress):
                pass

        assert progress.cancelled


class TestGatherWithProgress:
    """Test cases for gather_with_progress."""

    @pytest.mark.asyncio
    async def test_results_in_argument_order(
        self, options: ProgressOptions
    ) -> None:
        """Test results follow argument order and the progress finishes."""
        progress = CountProgress(3, options=options)

        async def delayed(value: int, delay: float) -> int:
            await asyncio.sleep(delay)
            return value

        results = await gather_with_progress(
            delayed(1, 0.03),
            delayed(2, 0.01),
            delayed(3, 0.0),
            progress=progress,
        )

        assert results == [1, 2, 3]
        assert progress.current == 3
        assert progress.is_done()

    @pytest.mark.asyncio
    async def test_limit_bounds_concurrency(self, sink, clock) -> None:
        """Test no more than ``limit`` awaitables run at once."""
        active = 0
        peak = 0

        async def job() -> None:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

        await gather_with_progress(
            *(job() for _ in range(6)), limit=2, output=sink, clock=clock
        )

        assert peak == 2
        assert sink.frames[-1].final

    @pytest.mark.asyncio
    async def test_invalid_limit(self) -> None:
        """Test a non-positive limit is rejected."""
        with pytest.raises(ValueError, match="limit"):
            await gather_with_progress(limit=0)

    @pytest.mark.asyncio
    async def test_failure_cancels(self, options: ProgressOptions) -> None:
        """Test a failing awaitable cancels the progress and propagates."""
        progress = CountProgress(2, options=options)

        async def fail() -> None:
            raise RuntimeError("boom")

        async def succeed() -> int:
            return 1

        with pytest.raises(RuntimeError, match="boom"):
            await gather_with_progress(succeed(), fail(), progress=progress)

        assert progress.cancelled
