"""Tests for the scan session reducer (state machine)."""

import pytest

from boxscan.core.contracts import FLOAT32_MAX, BoundingBox, ReportAck, ScanState
from boxscan.scan.estimator import estimate_box
from boxscan.scan.events import (
    ActionPressed,
    InterruptionEnded,
    PlaneAdded,
    PlaneUpdated,
    ReportFailed,
    ReportSucceeded,
    SendReport,
    SessionFailed,
    SessionInterrupted,
    StartDetection,
    StartScan,
    StopDetection,
    StopScan,
)
from boxscan.scan.reducer import (
    LABEL_RESTART,
    LABEL_START,
    LABEL_STOP,
    STATUS_INTERRUPTED,
    initial_session,
    reduce,
)
from conftest import make_plane


def run(events, session=None, report_enabled=False):
    """Apply events in order; return final session and all effects."""
    session = session or initial_session()
    effects = []
    for event in events:
        session, new_effects = reduce(session, event, report_enabled=report_enabled)
        effects.extend(new_effects)
    return session, effects


TOP = make_plane("top", width=1.0, height=2.0)
SIDE = make_plane("side", width=3.0, height=1.0)


class TestStartStop:
    def test_initial_session(self):
        session = initial_session()
        assert session.state is ScanState.NOT_STARTED
        assert session.observations == ()
        assert session.last_box is None
        assert session.action_label == LABEL_START

    def test_start_runs_detector(self):
        session, effects = run([ActionPressed()])
        assert session.state is ScanState.RUNNING
        assert session.action_label == LABEL_STOP
        assert session.generation == 1
        assert effects == [StartDetection()]

    def test_stop_with_two_faces_computes_box(self):
        session, effects = run([ActionPressed(), PlaneAdded(observation=TOP),
                                PlaneAdded(observation=SIDE), ActionPressed()])
        assert session.state is ScanState.PAUSED
        assert session.action_label == LABEL_RESTART
        assert session.last_box == estimate_box([TOP, SIDE])
        assert session.last_box.as_list() == [1.0, 2.0, 3.0]
        assert session.last_error is None
        assert StopDetection() in effects
        assert not any(isinstance(e, SendReport) for e in effects)

    @pytest.mark.parametrize("planes", [[], [TOP]])
    def test_stop_with_insufficient_data(self, planes):
        events = [ActionPressed()] + [PlaneAdded(observation=p) for p in planes] + [ActionPressed()]
        session, effects = run(events)
        assert session.state is ScanState.PAUSED
        assert session.last_box is None
        assert "Need 2 surfaces" in session.status
        assert session.last_error == session.status
        assert effects[-1] == StopDetection()

    def test_stop_with_largest_extents(self):
        huge = make_plane("huge", width=FLOAT32_MAX, height=1.0)
        session, effects = run([ActionPressed(), PlaneAdded(observation=TOP),
                                PlaneAdded(observation=huge), ActionPressed()])
        assert session.state is ScanState.PAUSED
        assert session.last_box.length == FLOAT32_MAX
        assert effects[-1] == StopDetection()

    def test_stop_sends_report_when_enabled(self):
        session, effects = run(
            [StartScan(), PlaneAdded(observation=TOP), PlaneAdded(observation=SIDE), StopScan()],
            report_enabled=True,
        )
        assert effects[-1] == SendReport(box=session.last_box, generation=session.generation)
        assert "sending" in session.status

    def test_no_report_without_box(self):
        _, effects = run([StartScan(), StopScan()], report_enabled=True)
        assert not any(isinstance(e, SendReport) for e in effects)

    def test_restart_is_full_reset(self):
        paused, _ = run([ActionPressed(), PlaneAdded(observation=TOP),
                         PlaneAdded(observation=SIDE), ActionPressed()])
        session, effects = reduce(paused, ActionPressed())
        assert session.state is ScanState.RUNNING
        assert session.observations == ()
        assert session.last_box is None
        assert session.generation == paused.generation + 1
        assert effects == [StartDetection()]

    def test_start_while_running_ignored(self):
        running, _ = run([StartScan(), PlaneAdded(observation=TOP)])
        session, effects = reduce(running, StartScan())
        assert session is running
        assert effects == []

    def test_stop_when_not_running_ignored(self):
        session = initial_session()
        assert reduce(session, StopScan()) == (session, [])


class TestCollecting:
    def test_planes_ignored_unless_running(self):
        session = initial_session()
        assert reduce(session, PlaneAdded(observation=TOP))[0].observations == ()

        paused, _ = run([StartScan(), StopScan()])
        assert reduce(paused, PlaneAdded(observation=TOP))[0].observations == ()
        assert reduce(paused, PlaneUpdated(observation=TOP))[0].observations == ()

    def test_collects_and_refines(self):
        refined = make_plane("side", width=3.2, height=1.1)
        session, _ = run([StartScan(), PlaneAdded(observation=TOP),
                          PlaneAdded(observation=SIDE), PlaneUpdated(observation=refined)])
        assert [o.id for o in session.observations] == ["top", "side"]
        assert session.observations[1].extent_width == pytest.approx(3.2)
        assert session.status == "Scanning: 2 surfaces collected"

    def test_classified_planes_leave_session_unchanged(self):
        running, _ = run([StartScan()])
        session, effects = reduce(running, PlaneAdded(observation=make_plane("w", classification="wall")))
        assert session is running
        assert effects == []


class TestInterruptions:
    def test_interrupt_running_pauses_without_estimate(self):
        session, effects = run([StartScan(), PlaneAdded(observation=TOP),
                                PlaneAdded(observation=SIDE), SessionInterrupted()])
        assert session.state is ScanState.PAUSED
        assert session.last_box is None
        assert session.status == STATUS_INTERRUPTED
        assert len(session.observations) == 2
        assert effects == [StartDetection()]

    def test_interrupt_paused_keeps_box(self):
        paused, _ = run([StartScan(), PlaneAdded(observation=TOP),
                         PlaneAdded(observation=SIDE), StopScan()])
        session, _ = reduce(paused, SessionInterrupted())
        assert session.state is ScanState.PAUSED
        assert session.last_box == paused.last_box

    def test_interrupt_not_started_ignored(self):
        session = initial_session()
        assert reduce(session, SessionInterrupted()) == (session, [])

    def test_interruption_ended_resets(self):
        interrupted, _ = run([StartScan(), PlaneAdded(observation=TOP), SessionInterrupted()])
        session, effects = reduce(interrupted, InterruptionEnded())
        assert session.state is ScanState.RUNNING
        assert session.observations == ()
        assert session.generation == interrupted.generation + 1
        assert effects == [StartDetection()]

    def test_interruption_ended_while_running_ignored(self):
        running, _ = run([StartScan()])
        assert reduce(running, InterruptionEnded()) == (running, [])

    @pytest.mark.parametrize("prefix", [[], [StartScan()], [StartScan(), StopScan()]])
    def test_failure_returns_to_not_started(self, prefix):
        before, _ = run(prefix)
        session, effects = reduce(before, SessionFailed(
            description="The AR session failed.",
            failure_reason="Camera access denied.",
            recovery_suggestion=None,
        ))
        assert session.state is ScanState.NOT_STARTED
        assert session.observations == ()
        assert session.last_box is None
        assert session.action_label == LABEL_START
        assert session.status == "The AR session failed.\nCamera access denied."
        assert session.generation == before.generation + 1
        assert effects == []


class TestReportResults:
    def _paused(self):
        return run([StartScan(), PlaneAdded(observation=TOP), PlaneAdded(observation=SIDE), StopScan()],
                   report_enabled=True)[0]

    def test_success_updates_status(self):
        paused = self._paused()
        ack = ReportAck(status_code=200, generation=paused.generation, box=paused.last_box)
        session, _ = reduce(paused, ReportSucceeded(generation=paused.generation, ack=ack))
        assert session.status == "Sent box: 1.00 x 2.00 x 3.00 m"
        assert session.last_box == paused.last_box

    def test_failure_updates_status(self):
        paused = self._paused()
        session, _ = reduce(paused, ReportFailed(generation=paused.generation, message="HTTP 500"))
        assert session.status == "Report failed: HTTP 500"
        assert session.last_error == "HTTP 500"
        assert session.last_box == paused.last_box

    def test_stale_result_ignored(self):
        paused = self._paused()
        restarted, _ = reduce(paused, ActionPressed())
        box = BoundingBox(width=1.0, height=2.0, length=3.0)
        ack = ReportAck(status_code=200, generation=paused.generation, box=box)
        for event in [ReportSucceeded(generation=paused.generation, ack=ack),
                      ReportFailed(generation=paused.generation, message="late")]:
            session, effects = reduce(restarted, event)
            assert session is restarted
            assert effects == []


def test_unknown_event_rejected():
    with pytest.raises(TypeError):
        reduce(initial_session(), object())
