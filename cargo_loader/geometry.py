from __future__ import annotations

from typing import Iterable

from .models import Footprint, PlacedItem, Position

OVERLAP_EPSILON = 1.0
FLOOR_TOLERANCE = 5.0
SUPPORT_TOLERANCE = 10.0
MIN_SUPPORT_RATIO = 0.8
MAX_SLENDERNESS = 2.2
CONTACT_TOLERANCE = 20.0
CONTACT_HEIGHT_BAND = 500.0


def overlaps(
    position: Position,
    footprint: Footprint,
    placed: Iterable[PlacedItem],
    spacing: float,
) -> bool:
    """Return True when the candidate box intersects any placed box.

    The spacing buffer applies on the length (x) and width (z) axes only;
    stacked boxes are expected to touch along y.
    """
    for other in placed:
        other_position = other.position
        separated = (
            position.x >= other_position.x + other.footprint_length + spacing - OVERLAP_EPSILON
            or position.x + footprint.length <= other_position.x + OVERLAP_EPSILON
            or position.y >= other_position.y + other.height - OVERLAP_EPSILON
            or position.y + footprint.height <= other_position.y + OVERLAP_EPSILON
            or position.z >= other_position.z + other.footprint_width + spacing - OVERLAP_EPSILON
            or position.z + footprint.width <= other_position.z + OVERLAP_EPSILON
        )
        if not separated:
            return True
    return False


def support_ratio(
    y: float,
    footprint: Footprint,
    x: float,
    z: float,
    placed: Iterable[PlacedItem],
) -> float:
    if y <= FLOOR_TOLERANCE:
        return 1.0

    supported_area = 0.0
    for other in placed:
        if abs(other.position.y + other.height - y) > SUPPORT_TOLERANCE:
            continue
        supported_area += _overlap_length(x, footprint.length, other.position.x, other.footprint_length) * _overlap_length(
            z, footprint.width, other.position.z, other.footprint_width
        )
    return supported_area / footprint.area


def is_physically_safe(
    y: float,
    footprint: Footprint,
    x: float,
    z: float,
    placed: list[PlacedItem],
) -> bool:
    """Reject elevated boxes that are poorly supported or tall, narrow and free-standing."""
    if y <= FLOOR_TOLERANCE:
        return True

    if support_ratio(y, footprint, x, z, placed) < MIN_SUPPORT_RATIO:
        return False

    slenderness = (y + footprint.height) / min(footprint.length, footprint.width)
    if slenderness > MAX_SLENDERNESS and not has_lateral_contact(y, footprint, x, z, placed):
        return False
    return True


def has_lateral_contact(
    y: float,
    footprint: Footprint,
    x: float,
    z: float,
    placed: Iterable[PlacedItem],
) -> bool:
    for other in placed:
        if abs(other.position.y - y) > CONTACT_HEIGHT_BAND:
            continue
        side_touch = (
            abs(other.position.z + other.footprint_width - z) < CONTACT_TOLERANCE
            or abs(z + footprint.width - other.position.z) < CONTACT_TOLERANCE
        )
        front_touch = (
            abs(other.position.x + other.footprint_length - x) < CONTACT_TOLERANCE
            or abs(x + footprint.length - other.position.x) < CONTACT_TOLERANCE
        )
        if side_touch or front_touch:
            return True
    return False


def _overlap_length(start_a: float, length_a: float, start_b: float, length_b: float) -> float:
    return max(0.0, min(start_a + length_a, start_b + length_b) - max(start_a, start_b))
