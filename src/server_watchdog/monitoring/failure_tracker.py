"""
Failure tracking for one endpoint's observation window.

The tracker is a pure state machine: it never performs I/O and never
mutates its input. EndpointMonitor owns the current ObservationState and
replaces it with whatever advance() returns.

States:
    MONITORING -> ALERTED   (failure_count exceeds the threshold)
    The window ends after max_iterations checks in either state.

The failure count is a lifetime count for the window. Healthy checks do not
decrement or reset it.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from server_watchdog.monitoring.health_checker import CheckOutcome

DEFAULT_MAX_ITERATIONS = 10
DEFAULT_FAILURE_THRESHOLD = 5


class TrackerPhase(Enum):
    """Phase of an observation window."""

    MONITORING = "monitoring"
    ALERTED = "alerted"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class ObservationState:
    """Per-endpoint window state."""

    iterations_run: int = 0
    failure_count: int = 0
    alerted: bool = False


@dataclass(frozen=True)
class Transition:
    """Result of feeding one outcome to the tracker."""

    state: ObservationState
    fire_alert: bool = False


class FailureTracker:
    """
    Decides when an endpoint has failed often enough to alert.

    Usage:
        tracker = FailureTracker()
        state = ObservationState()
        while tracker.should_continue(state):
            transition = tracker.advance(state, outcome)
            state = transition.state
            if transition.fire_alert:
                ...
    """

    def __init__(
        self,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if failure_threshold < 0:
            raise ValueError("failure_threshold must not be negative")
        self.max_iterations = max_iterations
        self.failure_threshold = failure_threshold

    def should_continue(self, state: ObservationState) -> bool:
        """Whether another check belongs in this window."""
        return state.iterations_run < self.max_iterations and not state.alerted

    def phase(self, state: ObservationState) -> TrackerPhase:
        if state.alerted:
            return TrackerPhase.ALERTED
        if state.iterations_run >= self.max_iterations:
            return TrackerPhase.EXHAUSTED
        return TrackerPhase.MONITORING

    def advance(self, state: ObservationState, outcome: CheckOutcome) -> Transition:
        """
        Record one completed iteration.

        Args:
            state: State before this iteration
            outcome: Outcome of the iteration's health check

        Returns:
            Transition with the new state, and fire_alert set on the single
            iteration where the threshold is first exceeded

        Raises:
            ValueError: If the window is already finished
        """
        if not self.should_continue(state):
            raise ValueError(f"Observation window already finished ({self.phase(state).value})")

        failure_count = state.failure_count
        if outcome is CheckOutcome.UNRESPONSIVE:
            failure_count += 1

        new_state = replace(
            state,
            iterations_run=state.iterations_run + 1,
            failure_count=failure_count,
        )

        if failure_count > self.failure_threshold:
            return Transition(state=replace(new_state, alerted=True), fire_alert=True)

        return Transition(state=new_state)
