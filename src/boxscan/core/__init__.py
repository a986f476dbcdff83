"""boxscan core: shared contracts, errors, config and logging."""

from .contracts import (
    BoundingBox,
    Classification,
    Known,
    PlaneKind,
    PlaneObservation,
    ReportAck,
    ScanSession,
    ScanState,
    Unclassified,
    Vec3,
)
from .config import ScannerConfig, load_config
from .errors import (
    BoxScanError,
    ConfigurationError,
    InsufficientData,
    ReportError,
    ReportRejected,
    ReportTransportError,
    SerializationError,
    SessionFailure,
)
from .logging import setup_logging

__all__ = [
    "BoundingBox",
    "Classification",
    "Known",
    "PlaneKind",
    "PlaneObservation",
    "ReportAck",
    "ScanSession",
    "ScanState",
    "Unclassified",
    "Vec3",
    "ScannerConfig",
    "load_config",
    "BoxScanError",
    "ConfigurationError",
    "InsufficientData",
    "ReportError",
    "ReportRejected",
    "ReportTransportError",
    "SerializationError",
    "SessionFailure",
    "setup_logging",
]
