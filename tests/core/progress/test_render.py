"""Tests for snapshot rendering."""

from dataclasses import replace

import pytest

from tickmeter.core.progress.glyphs import parse_glyphs
from tickmeter.core.progress.progress_types import (
    Comparator,
    CountSnapshot,
    SnapshotBase,
    ThresholdSnapshot,
    UnknownSnapshot,
)
from tickmeter.core.progress.render import count_fraction, render

BASE = {
    "description": "Progress: ",
    "start_time": 0.0,
    "now": 10.0,
    "extra_values": (),
    "done": False,
    "cancelled": False,
    "cancel_message": "Aborted before all tasks were completed",
    "color": "green",
    "cancel_color": "red",
}


@pytest.fixture
def count_snapshot() -> CountSnapshot:
    """Count snapshot at 25 of 100 after ten seconds."""
    return CountSnapshot(
        **BASE,
        total=100,
        current=25,
        bar_length=10,
        glyphs=parse_glyphs("[=> ]"),
        show_speed=False,
    )


@pytest.fixture
def threshold_snapshot() -> ThresholdSnapshot:
    """Threshold snapshot converging on 1e-5."""
    return ThresholdSnapshot(
        **{**BASE, "now": 2.0},
        threshold=1e-5,
        comparator=Comparator.AT_MOST,
        current_value=1e-3,
        iterations=2,
    )


class TestCountFraction:
    """Test cases for count_fraction."""

    def test_zero_total_is_complete(self) -> None:
        """Test an empty workload counts as done."""
        assert count_fraction(0, 0) == 1.0

    def test_overshoot_is_capped(self) -> None:
        """Test counts past the total cap at one."""
        assert count_fraction(10, 15) == 1.0

    def test_regular_fraction(self) -> None:
        """Test the plain ratio."""
        assert count_fraction(8, 2) == 0.25


class TestRenderCount:
    """Test cases for count-bounded lines."""

    def test_eta_line(self, count_snapshot: CountSnapshot) -> None:
        """Test 25 of 100 after 10s shows a 30s ETA."""
        frame = render(count_snapshot)

        assert frame.lines == ("Progress:  25%[==>       ]  ETA: 0:00:30",)
        assert frame.color == "green"
        assert not frame.final

    def test_empty_bar_at_zero(self, count_snapshot: CountSnapshot) -> None:
        """Test nothing done renders 0%, an empty bar and no ETA."""
        frame = render(replace(count_snapshot, current=0))

        assert frame.lines[0] == "Progress:   0%[          ]  ETA: N/A"

    def test_done_line(self, count_snapshot: CountSnapshot) -> None:
        """Test a finished progress shows elapsed time."""
        snapshot = replace(count_snapshot, current=100, now=40.0, done=True)
        frame = render(snapshot)

        assert frame.lines[0] == "Progress: 100%[==========]  Time: 0:00:40"
        assert frame.final

    def test_zero_total_renders_full(
        self, count_snapshot: CountSnapshot
    ) -> None:
        """Test total == 0 renders as complete."""
        frame = render(replace(count_snapshot, total=0, current=0))

        assert frame.lines[0].startswith("Progress: 100%[==========]")

    def test_zero_bar_length(self, count_snapshot: CountSnapshot) -> None:
        """Test a zero-length bar drops the bar and its caps."""
        frame = render(replace(count_snapshot, bar_length=0))

        assert frame.lines[0] == "Progress:  25%  ETA: 0:00:30"

    def test_speed_suffix(self, count_snapshot: CountSnapshot) -> None:
        """Test show_speed appends the time per item."""
        frame = render(replace(count_snapshot, show_speed=True))

        assert frame.lines[0].endswith("ETA: 0:00:30 (400.00 ms/it)")

    def test_extra_values(self, count_snapshot: CountSnapshot) -> None:
        """Test every extra value adds an indented line."""
        snapshot = replace(
            count_snapshot, extra_values=(("loss", 0.25), ("epoch", 3))
        )
        frame = render(snapshot)

        assert frame.lines[1:] == ("  loss: 0.25", "  epoch: 3")
        assert frame.fields["values"] == {"loss": 0.25, "epoch": 3}

    def test_fields(self, count_snapshot: CountSnapshot) -> None:
        """Test structured fields describe the count state."""
        fields = render(count_snapshot).fields

        assert fields["kind"] == "count"
        assert fields["description"] == "Progress:"
        assert fields["current"] == 25
        assert fields["total"] == 100
        assert fields["fraction"] == 0.25
        assert fields["eta"] == 30.0
        assert fields["done"] is False


class TestRenderThreshold:
    """Test cases for threshold-bounded lines."""

    def test_active_line(self, threshold_snapshot: ThresholdSnapshot) -> None:
        """Test threshold and latest value are shown."""
        frame = render(threshold_snapshot)

        assert frame.lines == (
            "Progress: (thresh = 1e-05, value = 0.001)  Time: 0:00:02",
        )

    def test_no_value_yet(self, threshold_snapshot: ThresholdSnapshot) -> None:
        """Test a progress without updates shows N/A."""
        frame = render(replace(threshold_snapshot, current_value=None))

        assert "value = N/A" in frame.lines[0]

    def test_done_line(self, threshold_snapshot: ThresholdSnapshot) -> None:
        """Test the finished line reports the iteration count."""
        snapshot = replace(
            threshold_snapshot, done=True, iterations=3, now=3.0
        )

        assert render(snapshot).lines[0] == (
            "Progress: Time: 0:00:03 (3 iterations)"
        )

    def test_fields(self, threshold_snapshot: ThresholdSnapshot) -> None:
        """Test structured fields describe the threshold state."""
        fields = render(threshold_snapshot).fields

        assert fields["kind"] == "threshold"
        assert fields["comparator"] == "<="
        assert fields["value"] == 1e-3


class TestRenderUnknown:
    """Test cases for unbounded lines."""

    def test_counter_line(self) -> None:
        """Test the counter and elapsed time are shown."""
        snapshot = UnknownSnapshot(**{**BASE, "now": 12.0}, counter=4096)

        assert render(snapshot).lines == ("Progress: 4096  Time: 0:00:12",)


class TestRenderCancelled:
    """Test cases for cancelled snapshots."""

    def test_cancel_message_replaces_status(
        self, count_snapshot: CountSnapshot
    ) -> None:
        """Test a cancelled progress renders only its message in red."""
        snapshot = replace(
            count_snapshot,
            done=True,
            cancelled=True,
            extra_values=(("loss", 1),),
        )
        frame = render(snapshot)

        assert frame.lines == ("Aborted before all tasks were completed",)
        assert frame.color == "red"
        assert frame.final
        assert frame.fields["cancelled"] is True
        assert frame.fields["message"] == snapshot.cancel_message

    def test_empty_message_renders_no_lines(
        self, count_snapshot: CountSnapshot
    ) -> None:
        """Test an empty cancel message suppresses the text."""
        snapshot = replace(
            count_snapshot, done=True, cancelled=True, cancel_message=""
        )

        assert render(snapshot).lines == ()


class TestRenderDispatch:
    """Test cases for snapshot type dispatch."""

    def test_unknown_snapshot_type(self) -> None:
        """Test a bare base snapshot cannot be rendered."""
        with pytest.raises(TypeError, match="Cannot render SnapshotBase"):
            render(SnapshotBase(**BASE))
