"""
Tests for the failure tracking state machine.

The tracker is pure, so these tests feed outcome sequences directly
without any I/O.
"""
import itertools

import pytest

from server_watchdog.monitoring.failure_tracker import (
    FailureTracker,
    ObservationState,
    TrackerPhase,
)
from server_watchdog.monitoring.health_checker import CheckOutcome

HEALTHY = CheckOutcome.HEALTHY
UNRESPONSIVE = CheckOutcome.UNRESPONSIVE


def run_window(tracker, outcomes):
    """Feed outcomes until the window ends. Returns (state, alert_iterations)."""
    state = ObservationState()
    alerts = []
    for outcome in outcomes:
        if not tracker.should_continue(state):
            break
        transition = tracker.advance(state, outcome)
        state = transition.state
        if transition.fire_alert:
            alerts.append(state.iterations_run)
    return state, alerts


class TestTransitions:
    """Tests for single transitions."""

    def test_initial_state(self):
        """Should start at zero, not alerted, monitoring."""
        tracker = FailureTracker()
        state = ObservationState()

        assert state.iterations_run == 0
        assert state.failure_count == 0
        assert state.alerted is False
        assert tracker.phase(state) == TrackerPhase.MONITORING
        assert tracker.should_continue(state)

    def test_unresponsive_increments_failures(self):
        tracker = FailureTracker()

        transition = tracker.advance(ObservationState(), UNRESPONSIVE)

        assert transition.state.iterations_run == 1
        assert transition.state.failure_count == 1
        assert transition.fire_alert is False

    def test_healthy_only_counts_iteration(self):
        tracker = FailureTracker()

        transition = tracker.advance(ObservationState(), HEALTHY)

        assert transition.state.iterations_run == 1
        assert transition.state.failure_count == 0

    def test_advance_does_not_mutate_input(self):
        """Transitions must return a new state."""
        tracker = FailureTracker()
        state = ObservationState()

        tracker.advance(state, UNRESPONSIVE)

        assert state == ObservationState()

    def test_healthy_does_not_reset_failure_count(self):
        """
        GOTCHA: The failure count is a lifetime count for the window.

        A healthy check in between failures must not reset or decrement it.
        """
        tracker = FailureTracker()
        state = ObservationState(iterations_run=4, failure_count=4)

        state = tracker.advance(state, HEALTHY).state

        assert state.failure_count == 4


class TestAlertThreshold:
    """Tests for the '> 5 failures' rule."""

    def test_never_responds_alerts_at_iteration_six(self):
        """Six straight failures fire on the sixth iteration."""
        tracker = FailureTracker()

        state, alerts = run_window(tracker, [UNRESPONSIVE] * 10)

        assert alerts == [6]
        assert state.iterations_run == 6
        assert state.failure_count == 6
        assert state.alerted is True
        assert tracker.phase(state) == TrackerPhase.ALERTED
        assert not tracker.should_continue(state)

    def test_five_failures_do_not_alert(self):
        """Exactly five failures is not enough."""
        tracker = FailureTracker()

        state, alerts = run_window(tracker, [UNRESPONSIVE] * 5 + [HEALTHY] * 5)

        assert alerts == []
        assert state.failure_count == 5
        assert tracker.phase(state) == TrackerPhase.EXHAUSTED

    def test_interleaved_failures_still_accumulate(self):
        """Failures separated by healthy checks count toward the threshold."""
        tracker = FailureTracker()
        outcomes = [UNRESPONSIVE, HEALTHY] * 3 + [UNRESPONSIVE] * 3 + [HEALTHY]

        state, alerts = run_window(tracker, outcomes)

        assert alerts == [9]
        assert state.iterations_run == 9

    def test_no_sequence_with_five_or_fewer_failures_alerts(self):
        """Check every outcome sequence over a full window."""
        tracker = FailureTracker()

        for sequence in itertools.product([HEALTHY, UNRESPONSIVE], repeat=10):
            failures = sum(1 for o in sequence if o is UNRESPONSIVE)
            state, alerts = run_window(tracker, sequence)

            if failures <= 5:
                assert alerts == []
                assert state.iterations_run == 10
            else:
                assert len(alerts) == 1
                assert state.failure_count == 6

    def test_alert_fires_exactly_once(self):
        """Advancing is refused after the alert, so it cannot fire twice."""
        tracker = FailureTracker()
        state, alerts = run_window(tracker, [UNRESPONSIVE] * 6)

        assert alerts == [6]
        with pytest.raises(ValueError):
            tracker.advance(state, UNRESPONSIVE)

    def test_custom_threshold(self):
        tracker = FailureTracker(max_iterations=4, failure_threshold=1)

        state, alerts = run_window(tracker, [UNRESPONSIVE, HEALTHY, UNRESPONSIVE, HEALTHY])

        assert alerts == [3]


class TestWindowBound:
    """Tests for the fixed observation window."""

    def test_window_ends_after_ten_iterations(self):
        tracker = FailureTracker()

        state, _ = run_window(tracker, [HEALTHY] * 15)

        assert state.iterations_run == 10
        assert not tracker.should_continue(state)
        assert tracker.phase(state) == TrackerPhase.EXHAUSTED

    def test_advance_after_window_raises(self):
        tracker = FailureTracker()
        state = ObservationState(iterations_run=10)

        with pytest.raises(ValueError, match="exhausted"):
            tracker.advance(state, HEALTHY)

    @pytest.mark.parametrize("kwargs", [
        {"max_iterations": 0},
        {"failure_threshold": -1},
    ])
    def test_rejects_invalid_parameters(self, kwargs):
        with pytest.raises(ValueError):
            FailureTracker(**kwargs)
