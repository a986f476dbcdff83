"""Scan-script runner: reads a recorded session from YAML and drives a controller.

A script is a list of detector and user events, e.g.::

    events:
      - type: press
      - type: plane_added
        plane: {id: a, extent_width: 0.3, extent_height: 0.2}
      - type: plane_updated
        plane: {id: a, extent_width: 0.31, extent_height: 0.2}
      - type: press
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from boxscan.core.contracts import PlaneObservation, ScanSession
from boxscan.core.errors import ConfigurationError
from boxscan.scan.controller import ScanController
from boxscan.scan.events import (
    ActionPressed,
    Event,
    InterruptionEnded,
    PlaneAdded,
    PlaneUpdated,
    SessionFailed,
    SessionInterrupted,
    StartScan,
    StopScan,
)

logger = logging.getLogger(__name__)

EventType = Literal[
    "press", "start", "stop", "plane_added", "plane_updated",
    "interrupted", "interruption_ended", "failed",
]


class ScriptEntry(BaseModel):
    """One line of a scan script."""

    type: EventType
    plane: PlaneObservation | None = None
    description: str = Field("", description="Failure description (type: failed)")
    failure_reason: str | None = None
    recovery_suggestion: str | None = None

    @model_validator(mode="after")
    def _plane_events_need_plane(self) -> "ScriptEntry":
        if self.type in ("plane_added", "plane_updated") and self.plane is None:
            raise ValueError(f"'{self.type}' entries need a 'plane'")
        return self

    def to_event(self) -> Event:
        if self.type == "press":
            return ActionPressed()
        if self.type == "start":
            return StartScan()
        if self.type == "stop":
            return StopScan()
        if self.type == "plane_added":
            return PlaneAdded(observation=self.plane)
        if self.type == "plane_updated":
            return PlaneUpdated(observation=self.plane)
        if self.type == "interrupted":
            return SessionInterrupted()
        if self.type == "interruption_ended":
            return InterruptionEnded()
        return SessionFailed(
            description=self.description or "The scan session failed.",
            failure_reason=self.failure_reason,
            recovery_suggestion=self.recovery_suggestion,
        )


class ScanScript(BaseModel):
    name: str = "scan"
    events: list[ScriptEntry] = Field(default_factory=list)


def load_scan_script(script_path: Path) -> ScanScript:
    """Load and validate a scan script."""
    script_path = Path(script_path)
    if not script_path.exists():
        raise ConfigurationError(f"Scan script not found: {script_path}")
    with open(script_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    try:
        return ScanScript(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid scan script {script_path}: {e}") from e


def replay(script: ScanScript, controller: ScanController, report_timeout: float | None = 30.0) -> ScanSession:
    """Feed every scripted event through ``controller`` and wait for reports."""
    logger.info(f"Replaying '{script.name}' with {len(script.events)} events")
    for i, entry in enumerate(script.events, 1):
        session = controller.dispatch(entry.to_event())
        logger.debug(f"[{i}/{len(script.events)}] {entry.type}: {session.state.value} | {session.status}")
    session = controller.wait_for_reports(timeout=report_timeout)
    logger.info(f"Replay complete: {session.state.value} | {session.status}")
    return session


def run_scan_script(script_path: Path, controller: ScanController) -> ScanSession:
    """Load ``script_path`` and replay it; the controller is shut down afterwards."""
    try:
        return replay(load_scan_script(script_path), controller)
    finally:
        controller.shutdown()
