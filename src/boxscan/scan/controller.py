"""Single owner of the scan session.

Detector callbacks and report completions may arrive on any thread. They
are queued with ``post`` and applied one at a time by ``pump`` under a
lock, so the reducer is the only place the session changes.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable

from boxscan.core.config import ScannerConfig
from boxscan.core.contracts import PlaneObservation, ScanSession
from boxscan.report.dispatcher import ReportDispatcher
from boxscan.report.reporter import ResultReporter

from .detector import SurfaceDetector
from .events import (
    ActionPressed,
    Effect,
    Event,
    PlaneAdded,
    PlaneUpdated,
    SendReport,
    StartDetection,
    StopDetection,
)
from .reducer import initial_session, reduce

logger = logging.getLogger(__name__)

StatusListener = Callable[[ScanSession], None]


class ScanController:
    def __init__(
        self,
        detector: SurfaceDetector,
        dispatcher: ReportDispatcher | None = None,
        auto_report: bool = True,
        on_status: StatusListener | None = None,
    ):
        self.detector = detector
        self.dispatcher = dispatcher
        self.auto_report = auto_report
        self.on_status = on_status
        self._session = initial_session()
        self._inbox: queue.SimpleQueue[Event] = queue.SimpleQueue()
        self._drain_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: ScannerConfig,
        detector: SurfaceDetector,
        on_status: StatusListener | None = None,
    ) -> "ScanController":
        controller = cls(detector, auto_report=config.auto_report, on_status=on_status)
        if config.report_url:
            reporter = ResultReporter(config.report_url)
            controller.dispatcher = ReportDispatcher(reporter, on_result=controller.post)
        return controller

    @property
    def session(self) -> ScanSession:
        return self._session

    @property
    def report_enabled(self) -> bool:
        return self.auto_report and self.dispatcher is not None

    # ── Event intake ─────────────────────────────────────────────────

    def post(self, event: Event) -> None:
        """Queue an event from any thread. Applied on the next ``pump``."""
        self._inbox.put(event)

    def dispatch(self, event: Event) -> ScanSession:
        self.post(event)
        return self.pump()

    def press_action(self) -> ScanSession:
        return self.dispatch(ActionPressed())

    def add(self, observation: PlaneObservation) -> ScanSession:
        """Detector callback for a newly detected surface."""
        return self.dispatch(PlaneAdded(observation=observation))

    def update(self, observation: PlaneObservation) -> ScanSession:
        """Detector callback for a refined surface."""
        return self.dispatch(PlaneUpdated(observation=observation))

    def pump(self) -> ScanSession:
        """Apply every queued event. Re-entrant calls return immediately."""
        while not self._inbox.empty():
            if not self._drain_lock.acquire(blocking=False):
                break
            try:
                self._drain()
            finally:
                self._drain_lock.release()
        return self._session

    def _drain(self) -> None:
        while True:
            try:
                event = self._inbox.get_nowait()
            except queue.Empty:
                return
            before = self._session
            self._session, effects = reduce(before, event, report_enabled=self.report_enabled)
            for effect in effects:
                self._run_effect(effect)
            if self._session.status != before.status and self.on_status is not None:
                self.on_status(self._session)

    def _run_effect(self, effect: Effect) -> None:
        if isinstance(effect, StartDetection):
            self.detector.start(reset=True)
        elif isinstance(effect, StopDetection):
            self.detector.stop_detection()
        elif isinstance(effect, SendReport):
            if self.dispatcher is None:
                logger.warning("SendReport requested but no collector is configured")
                return
            self.dispatcher.submit(effect.box, effect.generation)
        else:
            raise TypeError(f"Unknown effect type: {type(effect).__name__}")

    # ── Lifecycle ────────────────────────────────────────────────────

    def wait_for_reports(self, timeout: float | None = None) -> ScanSession:
        """Block until in-flight reports complete, then apply their results."""
        if self.dispatcher is not None and not self.dispatcher.wait(timeout):
            logger.warning(f"Reports still in flight after {timeout}s")
        return self.pump()

    def shutdown(self) -> None:
        self.detector.pause()
        if self.dispatcher is not None:
            self.dispatcher.shutdown()
