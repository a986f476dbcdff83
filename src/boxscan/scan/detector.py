"""Boundary to the external surface-detection subsystem."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class SurfaceDetector(Protocol):
    """What the controller needs from a depth-sensing tracker."""

    def start(self, reset: bool = True) -> None:
        """Begin detecting horizontal and vertical planes.

        With ``reset`` the tracker forgets its world map and every surface
        it has reported so far.
        """
        ...

    def stop_detection(self) -> None:
        """Stop reporting new surfaces; tracking continues."""
        ...

    def pause(self) -> None:
        """Suspend the tracker entirely."""
        ...


class RecordingDetector:
    """Detector stand-in that records the commands it receives.

    Used when surfaces come from a replay script instead of a live sensor.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.detecting = False

    def start(self, reset: bool = True) -> None:
        self.calls.append("start:reset" if reset else "start")
        self.detecting = True
        logger.debug(f"Detector started (reset={reset})")

    def stop_detection(self) -> None:
        self.calls.append("stop_detection")
        self.detecting = False
        logger.debug("Detector stopped plane detection")

    def pause(self) -> None:
        self.calls.append("pause")
        self.detecting = False
        logger.debug("Detector paused")
