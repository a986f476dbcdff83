"""Bounding-box estimation from two roughly orthogonal box faces.

Two faces of a box share one edge. Of the four extent pairs across the
two faces, the pair with the smallest difference is taken to be that
shared edge; the remaining extents give the other two dimensions.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Sequence

import numpy as np

from boxscan.core.contracts import BoundingBox, PlaneObservation
from boxscan.core.errors import InsufficientData

logger = logging.getLogger(__name__)


class EdgePairing(IntEnum):
    """Candidate shared edges, in tie-break priority order."""

    HEIGHT_HEIGHT = 0   # |h1 - h2|
    HEIGHT_WIDTH = 1    # |h1 - w2|
    WIDTH_HEIGHT = 2    # |w1 - h2|
    WIDTH_WIDTH = 3     # |w1 - w2|


def match_shared_edge(h1: float, w1: float, h2: float, w2: float) -> EdgePairing:
    """Pick the extent pair with the smallest difference.

    Ties resolve to the earliest pairing in ``EdgePairing`` order, not to
    whichever gives the larger box.
    """
    h1, w1, h2, w2 = (np.float32(v) for v in (h1, w1, h2, w2))
    diffs = [abs(h1 - h2), abs(h1 - w2), abs(w1 - h2), abs(w1 - w2)]
    d_min = min(diffs)
    return EdgePairing(diffs.index(d_min))


def _raw_dimensions(pairing: EdgePairing, h1, w1, h2, w2) -> tuple:
    """(height, width, length) before sorting, per matched pairing."""
    # HEIGHT_HEIGHT and WIDTH_HEIGHT yield the same assignment.
    if pairing is EdgePairing.HEIGHT_HEIGHT:
        return h1, w1, w2
    if pairing is EdgePairing.HEIGHT_WIDTH:
        return h1, w1, h2
    if pairing is EdgePairing.WIDTH_HEIGHT:
        return h1, w1, w2
    return h1, h2, w2


def estimate_from_extents(h1: float, w1: float, h2: float, w2: float) -> BoundingBox:
    """Box dimensions from the (height, width) extents of two faces."""
    pairing = match_shared_edge(h1, w1, h2, w2)
    raw = _raw_dimensions(pairing, *(np.float32(v) for v in (h1, w1, h2, w2)))
    smallest, middle, largest = sorted(float(v) for v in raw)
    logger.debug(f"Shared edge {pairing.name}: raw={tuple(float(v) for v in raw)}")
    return BoundingBox(width=smallest, height=middle, length=largest)


def estimate_box(observations: Sequence[PlaneObservation]) -> BoundingBox:
    """Estimate the box from the first two collected surfaces.

    Raises:
        InsufficientData: fewer than two surfaces are available.
    """
    if len(observations) < 2:
        raise InsufficientData(len(observations))

    first, second = observations[0], observations[1]
    if len(observations) > 2:
        logger.warning(
            f"{len(observations)} surfaces collected; using the first two "
            f"({first.id}, {second.id})"
        )
    box = estimate_from_extents(
        first.extent_height, first.extent_width,
        second.extent_height, second.extent_width,
    )
    logger.info(f"Estimated box {box.width:.3f} x {box.height:.3f} x {box.length:.3f}")
    return box
