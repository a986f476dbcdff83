"""Shared pytest fixtures for box scanner tests."""

from concurrent.futures import Executor, Future
from pathlib import Path

import pytest
import yaml

from boxscan.core.contracts import PlaneObservation
from boxscan.scan.controller import ScanController
from boxscan.scan.detector import RecordingDetector


def make_plane(plane_id="p0", width=1.0, height=1.0, classification="none", **kwargs) -> PlaneObservation:
    """Build a PlaneObservation with short argument names."""
    return PlaneObservation(
        id=plane_id,
        extent_width=width,
        extent_height=height,
        classification=classification,
        **kwargs,
    )


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class DeferredExecutor(Executor):
    """Holds submitted work until ``run_all`` is called."""

    def __init__(self):
        self.queued = []

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        self.queued.append((future, fn, args, kwargs))
        return future

    def run_all(self):
        queued, self.queued = self.queued, []
        for future, fn, args, kwargs in queued:
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as e:
                future.set_exception(e)


@pytest.fixture
def plane():
    return make_plane


@pytest.fixture
def detector() -> RecordingDetector:
    return RecordingDetector()


@pytest.fixture
def controller(detector: RecordingDetector) -> ScanController:
    """Controller without a collector endpoint."""
    return ScanController(detector)


@pytest.fixture
def script_file(tmp_path: Path):
    """Write a scan script dict to YAML and return its path."""
    def _write(data: dict, name: str = "script.yaml") -> Path:
        path = tmp_path / name
        with open(path, "w") as f:
            yaml.dump(data, f)
        return path
    return _write
