from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from zlib import crc32

from .constants import DEFAULT_CONTAINER_DIMS, DEFAULT_MAX_CONTAINERS


@dataclass(frozen=True)
class Dimensions:
    length: float
    width: float
    height: float

    @property
    def volume(self) -> float:
        return float(self.length * self.width * self.height)


@dataclass(frozen=True)
class Position:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Footprint:
    """Oriented extents of a box: length along x, width along z, height along y."""

    length: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return float(self.length * self.width)


def item_color(item_id: Any) -> str:
    try:
        hue = (float(item_id) * 137.508) % 360
    except (TypeError, ValueError):
        hue = (crc32(str(item_id).encode("utf-8")) * 137.508) % 360
    return f"hsl({hue:.1f}, 65%, 55%)"


@dataclass(frozen=True)
class CargoItem:
    id: Any
    dimensions: Dimensions
    weight: float = 0.0
    color: str | None = None

    def __post_init__(self) -> None:
        if self.color is None:
            object.__setattr__(self, "color", item_color(self.id))

    @property
    def volume(self) -> float:
        return self.dimensions.volume


@dataclass(frozen=True)
class PlacedItem:
    item: CargoItem
    position: Position
    rotation: bool
    container_id: int

    @property
    def id(self) -> Any:
        return self.item.id

    @property
    def weight(self) -> float:
        return self.item.weight

    @property
    def footprint_length(self) -> float:
        dims = self.item.dimensions
        return dims.width if self.rotation else dims.length

    @property
    def footprint_width(self) -> float:
        dims = self.item.dimensions
        return dims.length if self.rotation else dims.width

    @property
    def height(self) -> float:
        return self.item.dimensions.height

    @property
    def footprint(self) -> Footprint:
        return Footprint(self.footprint_length, self.footprint_width, self.height)


@dataclass
class FreeSpace:
    x: float
    y: float
    z: float
    length: float
    width: float
    height: float


@dataclass(frozen=True)
class SafetyMetrics:
    score: float
    support_ratio: float
    center_of_mass: Position
    description: str


@dataclass
class Container:
    id: int
    dimensions: Dimensions
    items: list[PlacedItem] = field(default_factory=list)
    safety_metrics: SafetyMetrics | None = None

    @property
    def loaded_volume(self) -> float:
        return float(sum(placed.item.volume for placed in self.items))

    @property
    def loaded_weight(self) -> float:
        return float(sum(placed.weight for placed in self.items))


@dataclass
class PackingOptions:
    container_dims: Dimensions = field(default_factory=lambda: Dimensions(**DEFAULT_CONTAINER_DIMS))
    spacing: float = 0.0
    allow_stacking: bool = True
    min_containers: int = 1
    max_containers: int = DEFAULT_MAX_CONTAINERS
    seed: int = 0

    def validate(self) -> PackingOptions:
        dims = self.container_dims
        for name in ("length", "width", "height"):
            value = getattr(dims, name)
            if value is None or not value > 0:
                raise ValueError(f"`container_dims.{name}` must be positive.")
        if self.spacing < 0:
            raise ValueError("`spacing` must be non-negative.")
        if int(self.max_containers) < 1:
            raise ValueError("`max_containers` must be at least 1.")
        if int(self.min_containers) < 1:
            raise ValueError("`min_containers` must be at least 1.")
        return self
