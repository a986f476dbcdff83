"""Observation collector: filters and deduplicates detector plane reports.

Only surfaces the detector left unclassified are candidate box faces;
walls, floors and the like belong to the room. The session keeps the
accepted surfaces as a tuple in first-seen order, and both operations
return a new tuple rather than mutating the old one.
"""

from __future__ import annotations

import logging

from boxscan.core.contracts import PlaneObservation

logger = logging.getLogger(__name__)


def _index_of(observations: tuple[PlaneObservation, ...], plane_id: str) -> int | None:
    for i, existing in enumerate(observations):
        if existing.id == plane_id:
            return i
    return None


def on_add(
    observations: tuple[PlaneObservation, ...],
    observation: PlaneObservation,
) -> tuple[PlaneObservation, ...]:
    """Accept a newly detected surface if it is unclassified and unseen."""
    if not observation.is_unclassified:
        logger.debug(f"Ignoring plane {observation.id}: classified as {observation.classification}")
        return observations
    if _index_of(observations, observation.id) is not None:
        logger.debug(f"Ignoring duplicate add for plane {observation.id}")
        return observations
    logger.info(f"Collected plane {observation.id} ({describe_extent(observation)})")
    return observations + (observation,)


def on_update(
    observations: tuple[PlaneObservation, ...],
    observation: PlaneObservation,
) -> tuple[PlaneObservation, ...]:
    """Refresh the extents of a known surface, or accept a late-unclassified one."""
    idx = _index_of(observations, observation.id)
    if idx is None:
        if observation.is_unclassified:
            return on_add(observations, observation)
        return observations

    # Identity, pose and label stay as first accepted; only extents are refined.
    refined = observations[idx].model_copy(update={
        "extent_width": observation.extent_width,
        "extent_height": observation.extent_height,
    })
    return observations[:idx] + (refined,) + observations[idx + 1:]


def describe_extent(observation: PlaneObservation) -> str:
    """Label shown next to a detected surface, e.g. ``0.42m x 0.30m``."""
    return f"{observation.extent_width:.2f}m x {observation.extent_height:.2f}m"
