"""Pytest configuration and fixtures for tickmeter tests."""

import logging

import pytest

from tickmeter.config import clear_settings_cache
from tickmeter.core.progress import ProgressOptions


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("tickmeter"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the settings loader at an empty per-test directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("TICKMETER_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("TICKMETER_LOG_DIR", raising=False)
    clear_settings_cache()
    yield config_dir
    clear_settings_cache()


class FakeClock:
    """Manually advanced replacement for ``time.monotonic``."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSink:
    """Output sink that keeps every frame it receives."""

    def __init__(self) -> None:
        self.frames = []

    def write(self, frame) -> None:
        self.frames.append(frame)

    @property
    def status_lines(self) -> list[str]:
        """First line of every recorded frame ("" for empty frames)."""
        return [frame.lines[0] if frame.lines else "" for frame in self.frames]


class FailingSink:
    """Output sink whose writes fail until ``broken`` is cleared."""

    def __init__(self, exc: BaseException | None = None) -> None:
        self.exc = exc or BrokenPipeError(32, "Broken pipe")
        self.broken = True
        self.frames = []

    def write(self, frame) -> None:
        if self.broken:
            raise self.exc
        self.frames.append(frame)


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake monotonic clock starting at t=100s."""
    return FakeClock()


@pytest.fixture
def sink() -> RecordingSink:
    """Provide a frame-recording sink."""
    return RecordingSink()


@pytest.fixture
def options(clock, sink) -> ProgressOptions:
    """Options wired to the fake clock and recording sink.

    A ten cell bar and a 0.1s throttle keep expected lines short and
    deterministic.
    """
    return ProgressOptions(
        clock=clock,
        output=sink,
        bar_length=10,
        min_interval=0.1,
    )


@pytest.fixture
def failing_sink() -> FailingSink:
    """Provide a sink that raises BrokenPipeError until repaired."""
    return FailingSink()
