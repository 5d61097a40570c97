from __future__ import annotations

from typing import Iterable

from .models import Dimensions, Footprint, PlacedItem, Position

ALIGNMENT_TOLERANCE = 20.0
WALL_CLEARANCE = 10.0

DEPTH_WEIGHT = 500.0
HEIGHT_WEIGHT = 200.0
FRONT_WALL_BONUS = 5000.0
FORWARD_BOX_BONUS = 3000.0
SEAM_PENALTY = 100.0


def position_score(
    position: Position,
    footprint: Footprint,
    placed: list[PlacedItem],
    container_dims: Dimensions,
) -> float:
    """Desirability of a candidate placement, lower is better.

    Loads toward the front wall (x = 0) first, rewards gapless columns along
    the length axis, prefers low positions and penalises z-seams that line up
    with neighbouring boxes away from the side walls.
    """
    score = position.x / 100 * DEPTH_WEIGHT

    if position.x < ALIGNMENT_TOLERANCE:
        score -= FRONT_WALL_BONUS
    if _touches_forward_box(position, placed):
        score -= FORWARD_BOX_BONUS

    score += position.y / 100 * HEIGHT_WEIGHT
    score += _seam_penalty(position, footprint, placed, container_dims)
    return score


def _touches_forward_box(position: Position, placed: Iterable[PlacedItem]) -> bool:
    return any(
        abs(other.position.x + other.footprint_length - position.x) < ALIGNMENT_TOLERANCE for other in placed
    )


def _seam_penalty(
    position: Position,
    footprint: Footprint,
    placed: Iterable[PlacedItem],
    container_dims: Dimensions,
) -> float:
    penalty = 0.0
    end_z = position.z + footprint.width
    for other in placed:
        other_end_z = other.position.z + other.footprint_width
        if abs(position.z - other.position.z) < ALIGNMENT_TOLERANCE and position.z > WALL_CLEARANCE:
            penalty += SEAM_PENALTY
        if abs(end_z - other_end_z) < ALIGNMENT_TOLERANCE and end_z < container_dims.width - WALL_CLEARANCE:
            penalty += SEAM_PENALTY
    return penalty
