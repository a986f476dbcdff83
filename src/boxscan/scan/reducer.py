"""Scan session state machine as a pure reducer.

    NOT_STARTED --start--> RUNNING --stop--> PAUSED --restart--> RUNNING
    RUNNING|PAUSED --interrupted--> PAUSED --interruption ended--> RUNNING
    * --failure--> NOT_STARTED

``reduce`` never mutates its input and performs no I/O; anything with a
side effect is returned as an effect for the controller to carry out.
"""

from __future__ import annotations

import logging

from boxscan.core.contracts import BoundingBox, ScanSession, ScanState
from boxscan.core.errors import InsufficientData, SessionFailure

from .collector import on_add, on_update
from .estimator import estimate_box
from .events import (
    ActionPressed,
    Effect,
    Event,
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

logger = logging.getLogger(__name__)

LABEL_START = "Start Scan"
LABEL_STOP = "Stop Scan"
LABEL_RESTART = "Restart Scan"

STATUS_IDLE = "Press Start Scan and point the camera at two faces of the box"
STATUS_SCANNING = "Scanning: move around the box until two faces are outlined"
STATUS_INTERRUPTED = "Session interrupted"


def initial_session() -> ScanSession:
    return ScanSession(status=STATUS_IDLE, action_label=LABEL_START)


def format_box(box: BoundingBox) -> str:
    return f"{box.width:.2f} x {box.height:.2f} x {box.length:.2f} m"


def _ignore(session: ScanSession, event: Event) -> tuple[ScanSession, list[Effect]]:
    logger.debug(f"Ignoring {type(event).__name__} in state {session.state.value}")
    return session, []


def _reset(session: ScanSession) -> tuple[ScanSession, list[Effect]]:
    """Full restart: new generation, empty observations, no box."""
    fresh = ScanSession(
        state=ScanState.RUNNING,
        generation=session.generation + 1,
        status=STATUS_SCANNING,
        action_label=LABEL_STOP,
    )
    logger.info(f"{session.state.value} -> running (generation {fresh.generation})")
    return fresh, [StartDetection()]


def _stop(session: ScanSession, report_enabled: bool) -> tuple[ScanSession, list[Effect]]:
    effects: list[Effect] = [StopDetection()]
    update = {"state": ScanState.PAUSED, "action_label": LABEL_RESTART}
    try:
        box = estimate_box(session.observations)
    except InsufficientData as e:
        logger.warning(f"running -> paused without a box: {e}")
        update.update(last_box=None, status=str(e), last_error=str(e))
        return session.model_copy(update=update), effects

    status = f"Box: {format_box(box)}"
    if report_enabled:
        status += " (sending...)"
        effects.append(SendReport(box=box, generation=session.generation))
    update.update(last_box=box, status=status, last_error=None)
    logger.info(f"running -> paused with box {format_box(box)}")
    return session.model_copy(update=update), effects


def _fail(session: ScanSession, event: SessionFailed) -> tuple[ScanSession, list[Effect]]:
    failure = SessionFailure(event.description, event.failure_reason, event.recovery_suggestion)
    logger.warning(f"{session.state.value} -> not_started: {failure.user_message!r}")
    failed = ScanSession(
        state=ScanState.NOT_STARTED,
        generation=session.generation + 1,
        status=failure.user_message,
        action_label=LABEL_START,
        last_error=failure.user_message,
    )
    return failed, []


def reduce(
    session: ScanSession,
    event: Event,
    report_enabled: bool = False,
) -> tuple[ScanSession, list[Effect]]:
    """Apply one event. Returns the new session and the effects to run."""
    state = session.state

    if isinstance(event, ActionPressed):
        if state is ScanState.RUNNING:
            return _stop(session, report_enabled)
        return _reset(session)

    if isinstance(event, StartScan):
        if state is ScanState.RUNNING:
            return _ignore(session, event)
        return _reset(session)

    if isinstance(event, StopScan):
        if state is not ScanState.RUNNING:
            return _ignore(session, event)
        return _stop(session, report_enabled)

    if isinstance(event, (PlaneAdded, PlaneUpdated)):
        if state is not ScanState.RUNNING:
            return _ignore(session, event)
        collect = on_add if isinstance(event, PlaneAdded) else on_update
        observations = collect(session.observations, event.observation)
        if observations is session.observations:
            return session, []
        count = len(observations)
        status = f"Scanning: {count} surface{'s' if count != 1 else ''} collected"
        return session.model_copy(update={"observations": observations, "status": status}), []

    if isinstance(event, SessionInterrupted):
        if state is ScanState.NOT_STARTED:
            return _ignore(session, event)
        logger.info(f"{state.value} -> paused (interrupted)")
        return session.model_copy(update={
            "state": ScanState.PAUSED,
            "status": STATUS_INTERRUPTED,
            "action_label": LABEL_RESTART,
        }), []

    if isinstance(event, InterruptionEnded):
        if state is not ScanState.PAUSED:
            return _ignore(session, event)
        # Tracking may have drifted during the interruption.
        return _reset(session)

    if isinstance(event, SessionFailed):
        return _fail(session, event)

    if isinstance(event, (ReportSucceeded, ReportFailed)):
        if event.generation != session.generation:
            logger.info(
                f"Discarding stale report result for generation {event.generation} "
                f"(live generation {session.generation})"
            )
            return session, []
        if isinstance(event, ReportSucceeded):
            status = f"Sent box: {format_box(event.ack.box)}"
            return session.model_copy(update={"status": status, "last_error": None}), []
        status = f"Report failed: {event.message}"
        return session.model_copy(update={"status": status, "last_error": event.message}), []

    raise TypeError(f"Unknown event type: {type(event).__name__}")
