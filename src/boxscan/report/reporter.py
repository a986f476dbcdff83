"""Result reporter: delivers a computed box to the collector over HTTP."""

from __future__ import annotations

import json
import logging

import numpy as np
import requests

from boxscan.core.contracts import BoundingBox, ReportAck
from boxscan.core.errors import ReportRejected, ReportTransportError, SerializationError

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


def is_success_status(status_code: int) -> bool:
    """2xx means delivered, except 204: the collector always answers with a body."""
    return 200 <= status_code <= 299 and status_code != 204


def serialize_box(box: BoundingBox) -> bytes:
    """Encode ``[width, height, length]`` as a JSON array of float32 values."""
    try:
        # str(np.float32) gives the shortest repr that round-trips in float32.
        values = [float(str(np.float32(v))) for v in box.as_list()]
        return json.dumps(values, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot encode box {box!r}: {e}") from e


class ResultReporter:
    """POSTs one box per call. No retries."""

    def __init__(self, url: str, session: requests.Session | None = None):
        self.url = url
        self.session = session or requests.Session()

    def report(self, box: BoundingBox, generation: int = 0) -> ReportAck:
        """Send ``box`` and wait for the single response.

        Raises:
            SerializationError: the box could not be encoded.
            ReportTransportError: no response was received.
            ReportRejected: the collector answered with a non-success status.
        """
        body = serialize_box(box)
        logger.info(f"Reporting box to {self.url}: {body.decode()}")
        try:
            response = self.session.post(self.url, data=body, headers=JSON_HEADERS)
        except requests.RequestException as e:
            raise ReportTransportError(f"Could not reach {self.url}: {e}") from e

        if not is_success_status(response.status_code):
            logger.warning(f"Collector rejected report: HTTP {response.status_code}")
            raise ReportRejected(response.status_code, response.text)

        logger.info(f"Collector accepted report: HTTP {response.status_code}")
        return ReportAck(status_code=response.status_code, generation=generation, box=box)

    def close(self) -> None:
        self.session.close()
