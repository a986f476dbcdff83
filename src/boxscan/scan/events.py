"""Inputs to and outputs from the scan session reducer."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict

from boxscan.core.contracts import BoundingBox, PlaneObservation, ReportAck


class _Message(BaseModel):
    model_config = ConfigDict(frozen=True)


# ── Events ───────────────────────────────────────────────────────────

class ActionPressed(_Message):
    """Primary scan button: start, stop or restart depending on state."""


class StartScan(_Message):
    pass


class StopScan(_Message):
    pass


class PlaneAdded(_Message):
    observation: PlaneObservation


class PlaneUpdated(_Message):
    observation: PlaneObservation


class SessionInterrupted(_Message):
    pass


class InterruptionEnded(_Message):
    pass


class SessionFailed(_Message):
    description: str
    failure_reason: str | None = None
    recovery_suggestion: str | None = None


class ReportSucceeded(_Message):
    generation: int
    ack: ReportAck


class ReportFailed(_Message):
    generation: int
    message: str


Event = Union[
    ActionPressed, StartScan, StopScan, PlaneAdded, PlaneUpdated,
    SessionInterrupted, InterruptionEnded, SessionFailed,
    ReportSucceeded, ReportFailed,
]


# ── Effects ──────────────────────────────────────────────────────────

class StartDetection(_Message):
    """Run the detector from scratch: reset tracking, drop known surfaces."""


class StopDetection(_Message):
    """Keep tracking but stop detecting new surfaces."""


class SendReport(_Message):
    box: BoundingBox
    generation: int


Effect = Union[StartDetection, StopDetection, SendReport]
