"""Common Pydantic models shared across the scanner components."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Literal, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


FLOAT32_MAX = float(np.finfo(np.float32).max)


def to_float32(value: float) -> float:
    """Round a Python float to the nearest single-precision value."""
    return float(np.float32(value))


class Vec3(BaseModel):
    """3D point or direction in the detector's world frame."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _from_sequence(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise ValueError(f"Vec3 needs 3 components, got {len(data)}")
            return {"x": data[0], "y": data[1], "z": data[2]}
        return data

    def as_list(self) -> list[float]:
        return [self.x, self.y, self.z]


class PlaneKind(str, Enum):
    """Surface labels a detector may assign to a plane."""

    WALL = "wall"
    FLOOR = "floor"
    CEILING = "ceiling"
    TABLE = "table"
    SEAT = "seat"
    WINDOW = "window"
    DOOR = "door"


class Unclassified(BaseModel):
    """The detector could not (yet) decide what the surface is."""

    model_config = ConfigDict(frozen=True)

    tag: Literal["unclassified"] = "unclassified"

    def __str__(self) -> str:
        return "unclassified"


class Known(BaseModel):
    """The detector recognised the surface as part of the environment."""

    model_config = ConfigDict(frozen=True)

    tag: Literal["known"] = "known"
    kind: PlaneKind

    def __str__(self) -> str:
        return self.kind.value


Classification = Union[Unclassified, Known]

_UNCLASSIFIED_ALIASES = {"none", "unclassified", "unknown", "indeterminate", ""}


def parse_classification(value: Any) -> Classification:
    """Build a classification from a label string, dict or model."""
    if isinstance(value, (Unclassified, Known)):
        return value
    if value is None:
        return Unclassified()
    if isinstance(value, PlaneKind):
        return Known(kind=value)
    if isinstance(value, str):
        label = value.strip().lower()
        if label in _UNCLASSIFIED_ALIASES:
            return Unclassified()
        return Known(kind=PlaneKind(label))
    if isinstance(value, dict):
        if value.get("tag", "known") == "unclassified" or value.get("kind") is None:
            return Unclassified()
        return Known(kind=PlaneKind(value["kind"]))
    raise ValueError(f"Cannot interpret classification {value!r}")


class PlaneObservation(BaseModel):
    """One planar surface reported by the detector.

    ``id`` is stable across updates of the same physical surface; the
    extents are refined as detection continues.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque surface identity")
    extent_width: float = Field(..., ge=0.0, le=FLOAT32_MAX, allow_inf_nan=False,
                                description="Extent along the plane's x axis")
    extent_height: float = Field(..., ge=0.0, le=FLOAT32_MAX, allow_inf_nan=False,
                                 description="Extent along the plane's z axis")
    classification: Classification = Field(default_factory=Unclassified)
    center: Vec3 = Field(default_factory=Vec3)
    normal: Vec3 = Field(default_factory=lambda: Vec3(x=0.0, y=1.0, z=0.0))

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("classification", mode="before")
    @classmethod
    def _coerce_classification(cls, value: Any) -> Classification:
        return parse_classification(value)

    @property
    def is_unclassified(self) -> bool:
        return isinstance(self.classification, Unclassified)


class BoundingBox(BaseModel):
    """Sorted box dimensions: smallest, middle, largest."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(..., ge=0.0, description="Smallest dimension")
    height: float = Field(..., ge=0.0, description="Middle dimension")
    length: float = Field(..., ge=0.0, description="Largest dimension")

    @field_validator("width", "height", "length")
    @classmethod
    def _single_precision(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("box dimensions must be finite")
        return to_float32(value)

    @model_validator(mode="after")
    def _check_sorted(self) -> "BoundingBox":
        if not (self.width <= self.height <= self.length):
            raise ValueError(
                f"dimensions must satisfy width <= height <= length, "
                f"got {self.width}, {self.height}, {self.length}"
            )
        return self

    def as_list(self) -> list[float]:
        return [self.width, self.height, self.length]


class ScanState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"


class ScanSession(BaseModel):
    """Snapshot of one scan session. Only the reducer produces new snapshots."""

    model_config = ConfigDict(frozen=True)

    state: ScanState = ScanState.NOT_STARTED
    observations: tuple[PlaneObservation, ...] = ()
    last_box: BoundingBox | None = None
    generation: int = Field(0, description="Incremented on every full reset")
    status: str = Field("", description="User-facing status text")
    action_label: str = Field("Start Scan", description="Label of the primary scan button")
    last_error: str | None = None


class ReportAck(BaseModel):
    """Successful delivery of a box to the collector."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    generation: int = 0
    box: BoundingBox
