"""Load safety summary for a finished container.

Runs after placement and never influences where boxes land. The score starts
from the area-weighted support ratio of all boxes (scaled to 10) and loses
points when the centre of mass drifts sideways from the container centreline
or rises high in the load.
"""

from __future__ import annotations

import logging

from .geometry import support_ratio
from .models import Container, Position, SafetyMetrics

logger = logging.getLogger(__name__)

MAX_SCORE = 10.0
LATERAL_PENALTY = 3.0
HEIGHT_PENALTY = 3.0
STABLE_THRESHOLD = 8.0
ACCEPTABLE_THRESHOLD = 6.0


def evaluate_container_safety(container: Container) -> SafetyMetrics:
    dims = container.dimensions
    if not container.items:
        return SafetyMetrics(
            score=MAX_SCORE,
            support_ratio=1.0,
            center_of_mass=Position(dims.length / 2, 0.0, dims.width / 2),
            description="Empty container.",
        )

    ratio = _aggregate_support_ratio(container)
    center = _center_of_mass(container)

    lateral_offset = abs(center.z - dims.width / 2) / (dims.width / 2)
    relative_height = center.y / dims.height
    score = MAX_SCORE * ratio - LATERAL_PENALTY * lateral_offset - HEIGHT_PENALTY * relative_height
    score = round(min(MAX_SCORE, max(0.0, score)), 1)

    metrics = SafetyMetrics(
        score=score,
        support_ratio=ratio,
        center_of_mass=center,
        description=_describe(score, ratio, lateral_offset),
    )
    logger.debug("Container %s safety score %.1f (support %.2f)", container.id, score, ratio)
    return metrics


def _aggregate_support_ratio(container: Container) -> float:
    total_area = 0.0
    supported_area = 0.0
    for index, placed in enumerate(container.items):
        others = container.items[:index] + container.items[index + 1 :]
        footprint = placed.footprint
        ratio = support_ratio(placed.position.y, footprint, placed.position.x, placed.position.z, others)
        total_area += footprint.area
        supported_area += min(1.0, ratio) * footprint.area
    return supported_area / total_area if total_area > 0 else 1.0


def _center_of_mass(container: Container) -> Position:
    total_weight = container.loaded_weight
    use_volume = total_weight <= 0
    total = container.loaded_volume if use_volume else total_weight

    moment_x = moment_y = moment_z = 0.0
    for placed in container.items:
        mass = placed.item.volume if use_volume else placed.weight
        moment_x += mass * (placed.position.x + placed.footprint_length / 2)
        moment_y += mass * (placed.position.y + placed.height / 2)
        moment_z += mass * (placed.position.z + placed.footprint_width / 2)
    return Position(moment_x / total, moment_y / total, moment_z / total)


def _describe(score: float, ratio: float, lateral_offset: float) -> str:
    if score >= STABLE_THRESHOLD:
        verdict = "Stable load"
    elif score >= ACCEPTABLE_THRESHOLD:
        verdict = "Acceptable load, secure with straps"
    else:
        verdict = "Unstable load, re-plan before shipping"
    return f"{verdict}: {ratio * 100:.0f}% of base area supported, centre of mass {lateral_offset * 100:.0f}% off the centreline."
