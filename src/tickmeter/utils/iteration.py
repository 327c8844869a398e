"""Drive a progress while consuming an iterable or a batch of awaitables.

Each helper builds a progress from the input (a ``CountProgress`` when the
length is known, an ``UnknownProgress`` otherwise) unless one is passed in,
advances it once per item and finishes it when the input is exhausted. An
exception from the input or from the mapped function cancels the progress
and propagates.

Example:
    >>> for path in track(paths, description="Hashing: "):
    ...     digest(path)

The sequential helpers are lazy and single pass. Breaking out of a
``track`` loop leaves the progress unfinished; call ``finish`` or
``cancel`` on it if that matters.
"""

from __future__ import annotations

import asyncio
from collections.abc import (
    AsyncIterable,
    AsyncIterator,
    Awaitable,
    Callable,
    Iterable,
    Iterator,
    Sized,
)
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, TypeVar

from tickmeter.core.progress.driver import ProgressDriver
from tickmeter.core.progress.state import (
    CountProgress,
    ThresholdProgress,
    UnknownProgress,
)
from tickmeter.logger import get_logger

T = TypeVar("T")
R = TypeVar("R")

logger = get_logger(__name__)


def _resolve_progress(
    source: object,
    progress: ProgressDriver | None,
    options: dict[str, Any],
    total: int | None = None,
) -> ProgressDriver:
    """Return ``progress`` or build one sized for ``source``.

    Raises:
        TypeError: If both a progress and options are given, or the
            progress is threshold-bounded

    """
    if progress is not None:
        if options:
            msg = "pass either a progress or progress options, not both"
            raise TypeError(msg)
        if isinstance(progress, ThresholdProgress):
            msg = "a threshold progress cannot be driven by item counts"
            raise TypeError(msg)
        return progress

    if total is None and isinstance(source, Sized):
        total = len(source)
    if total is None:
        return UnknownProgress(**options)
    return CountProgress(total, **options)


def _advance(progress: ProgressDriver, completed: int) -> None:
    """Record one more completed item."""
    if isinstance(progress, CountProgress):
        progress.next()
    else:
        progress.update(completed)


def track(
    iterable: Iterable[T],
    progress: ProgressDriver | None = None,
    **options: Any,
) -> Iterator[T]:
    """Yield the items of ``iterable``, advancing after each one is handled.

    Args:
        iterable: Items to iterate over
        progress: Progress to drive; built from ``options`` when None
        **options: ProgressOptions fields for the progress built here

    Returns:
        Lazy iterator over the items

    """
    state = _resolve_progress(iterable, progress, options)
    return _track(iterable, state)


def _track(iterable: Iterable[T], progress: ProgressDriver) -> Iterator[T]:
    completed = 0
    try:
        for item in iterable:
            yield item
            completed += 1
            _advance(progress, completed)
    except Exception:
        progress.cancel()
        raise
    progress.finish()


def progress_map(
    func: Callable[[T], R],
    iterable: Iterable[T],
    progress: ProgressDriver | None = None,
    **options: Any,
) -> Iterator[R]:
    """Lazily apply ``func`` to every item, advancing per result.

    Args:
        func: Function applied to each item
        iterable: Items to map over
        progress: Progress to drive; built from ``options`` when None
        **options: ProgressOptions fields for the progress built here

    Returns:
        Lazy iterator over the results

    """
    state = _resolve_progress(iterable, progress, options)
    return _progress_map(func, iterable, state)


def _progress_map(
    func: Callable[[T], R],
    iterable: Iterable[T],
    progress: ProgressDriver,
) -> Iterator[R]:
    completed = 0
    try:
        for item in iterable:
            result = func(item)
            completed += 1
            _advance(progress, completed)
            yield result
    except Exception:
        progress.cancel()
        raise
    progress.finish()


def progress_pmap(
    func: Callable[[T], R],
    iterable: Iterable[T],
    progress: ProgressDriver | None = None,
    max_workers: int | None = None,
    **options: Any,
) -> list[R]:
    """Apply ``func`` on a thread pool, advancing as each call completes.

    Results come back in input order regardless of completion order. The
    first failure cancels calls that have not started yet, cancels the
    progress and is re-raised.

    Args:
        func: Function applied to each item
        iterable: Items to map over (consumed up front)
        progress: Progress to drive; built from ``options`` when None
        max_workers: Thread pool size (executor default when None)
        **options: ProgressOptions fields for the progress built here

    Returns:
        List of results in input order

    """
    items = list(iterable)
    state = _resolve_progress(items, progress, options)
    results: list[Any] = [None] * len(items)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(func, item): index
            for index, item in enumerate(items)
        }
        try:
            for completed, future in enumerate(as_completed(futures), 1):
                results[futures[future]] = future.result()
                _advance(state, completed)
        except Exception:
            for future in futures:
                future.cancel()
            logger.debug(
                "Parallel map for %r failed, cancelling", state.description
            )
            state.cancel()
            raise

    state.finish()
    return results


def atrack(
    aiterable: AsyncIterable[T],
    progress: ProgressDriver | None = None,
    total: int | None = None,
    **options: Any,
) -> AsyncIterator[T]:
    """Async counterpart of ``track``.

    Args:
        aiterable: Async iterable to consume
        progress: Progress to drive; built from ``options`` when None
        total: Expected item count when ``aiterable`` has no length
        **options: ProgressOptions fields for the progress built here

    Returns:
        Async iterator over the items

    """
    state = _resolve_progress(aiterable, progress, options, total=total)
    return _atrack(aiterable, state)


async def _atrack(
    aiterable: AsyncIterable[T], progress: ProgressDriver
) -> AsyncIterator[T]:
    completed = 0
    try:
        async for item in aiterable:
            yield item
            completed += 1
            _advance(progress, completed)
    except Exception:
        progress.cancel()
        raise
    progress.finish()


async def gather_with_progress(
    *aws: Awaitable[T],
    progress: ProgressDriver | None = None,
    limit: int | None = None,
    **options: Any,
) -> list[T]:
    """Await ``aws`` concurrently, advancing as each one completes.

    Args:
        *aws: Awaitables to run
        progress: Progress to drive; built from ``options`` when None
        limit: Maximum awaitables running at once (unbounded when None)
        **options: ProgressOptions fields for the progress built here

    Returns:
        Results in argument order

    Raises:
        ValueError: If ``limit`` is not positive

    """
    if limit is not None and limit < 1:
        msg = f"limit must be >= 1, got {limit}"
        raise ValueError(msg)

    state = _resolve_progress(aws, progress, options)
    semaphore = asyncio.Semaphore(limit) if limit is not None else None
    completed = 0

    async def run_one(aw: Awaitable[T]) -> T:
        nonlocal completed
        if semaphore is None:
            result = await aw
        else:
            async with semaphore:
                result = await aw
        completed += 1
        _advance(state, completed)
        return result

    try:
        results = await asyncio.gather(*(run_one(aw) for aw in aws))
    except Exception:
        state.cancel()
        raise

    state.finish()
    return list(results)
