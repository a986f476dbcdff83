"""Runs reports off the caller's thread and turns outcomes into events."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Union

from boxscan.core.contracts import BoundingBox, ReportAck
from boxscan.core.errors import ReportError, SerializationError
from boxscan.scan.events import ReportFailed, ReportSucceeded

from .reporter import ResultReporter

logger = logging.getLogger(__name__)

ReportCallback = Callable[[Union[ReportSucceeded, ReportFailed]], None]


class ReportDispatcher:
    """Submits one report per call to an executor.

    The outcome is handed to ``on_result`` from whichever thread finished
    the report; the receiver is responsible for getting it back onto the
    session owner's thread. Reports cannot be cancelled once submitted.
    """

    def __init__(
        self,
        reporter: ResultReporter,
        on_result: ReportCallback,
        executor: Executor | None = None,
    ):
        self.reporter = reporter
        self.on_result = on_result
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="boxscan-report")
        self._inflight = 0
        self._idle = threading.Condition()

    @property
    def inflight(self) -> int:
        with self._idle:
            return self._inflight

    def submit(self, box: BoundingBox, generation: int) -> Future:
        with self._idle:
            self._inflight += 1
        future = self.executor.submit(self.reporter.report, box, generation)
        future.add_done_callback(lambda f: self._complete(f, generation))
        return future

    def _complete(self, future: Future, generation: int) -> None:
        try:
            try:
                ack: ReportAck = future.result()
            except (ReportError, SerializationError) as e:
                logger.warning(f"Report for generation {generation} failed: {e}")
                self.on_result(ReportFailed(generation=generation, message=str(e)))
                return
            except Exception as e:
                logger.exception(f"Unexpected error while reporting generation {generation}")
                self.on_result(ReportFailed(generation=generation, message=f"Unexpected error: {e}"))
                return
            self.on_result(ReportSucceeded(generation=generation, ack=ack))
        finally:
            with self._idle:
                self._inflight -= 1
                self._idle.notify_all()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until in-flight reports have been delivered. False on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: self._inflight == 0, timeout=timeout)

    def shutdown(self) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=True)
        self.reporter.close()
