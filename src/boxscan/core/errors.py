"""Exception hierarchy for the box scanner."""

from __future__ import annotations


class BoxScanError(Exception):
    """Base class for all scanner errors."""


class ConfigurationError(BoxScanError):
    """Config or scan-script file is missing or invalid."""


class InsufficientData(BoxScanError):
    """Fewer than two qualifying surfaces were collected."""

    def __init__(self, count: int, required: int = 2):
        self.count = count
        self.required = required
        super().__init__(f"Need {required} surfaces to estimate a box, have {count}")


class SerializationError(BoxScanError):
    """A box could not be encoded for transport."""


class ReportError(BoxScanError):
    """Delivery of a box to the collector failed."""


class ReportTransportError(ReportError):
    """No response was received (connection refused, DNS, reset...)."""


class ReportRejected(ReportError):
    """The collector answered with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Collector rejected report with HTTP {status_code}")


class SessionFailure(BoxScanError):
    """The surface detector reported an unrecoverable failure."""

    def __init__(
        self,
        description: str,
        failure_reason: str | None = None,
        recovery_suggestion: str | None = None,
    ):
        self.description = description
        self.failure_reason = failure_reason
        self.recovery_suggestion = recovery_suggestion
        super().__init__(self.user_message)

    @property
    def user_message(self) -> str:
        parts = [self.description, self.failure_reason, self.recovery_suggestion]
        return "\n".join(p for p in parts if p)
