from __future__ import annotations

from .models import Dimensions, FreeSpace, Footprint, Position

STACKING_CLEARANCE = 100.0


class FreeSpaceTracker:
    """Candidate empty regions of one container.

    Regions are over-generated and may overlap one another; every candidate is
    re-validated against the placed boxes before it is accepted.
    """

    def __init__(self, container_dims: Dimensions, spacing: float = 0.0, allow_stacking: bool = True) -> None:
        self.container_dims = container_dims
        self.spacing = spacing
        self.allow_stacking = allow_stacking
        self.spaces: list[FreeSpace] = [
            FreeSpace(
                x=0.0,
                y=0.0,
                z=0.0,
                length=container_dims.length,
                width=container_dims.width,
                height=container_dims.height,
            )
        ]

    def __len__(self) -> int:
        return len(self.spaces)

    def ordered(self) -> list[FreeSpace]:
        self.spaces.sort(key=lambda space: (space.x, space.y, space.z))
        return self.spaces

    def consume(self, index: int, position: Position, footprint: Footprint) -> list[FreeSpace]:
        new_spaces = self._split(position, footprint)
        del self.spaces[index]
        self.spaces.extend(new_spaces)
        return new_spaces

    def _split(self, position: Position, footprint: Footprint) -> list[FreeSpace]:
        dims = self.container_dims
        used_length = footprint.length + self.spacing
        used_width = footprint.width + self.spacing
        top = position.y + footprint.height

        split_spaces: list[FreeSpace] = []
        if self.allow_stacking and top + STACKING_CLEARANCE <= dims.height:
            split_spaces.append(
                FreeSpace(
                    x=position.x,
                    y=top,
                    z=position.z,
                    length=footprint.length,
                    width=footprint.width,
                    height=dims.height - top,
                )
            )
        split_spaces.append(
            FreeSpace(
                x=position.x + used_length,
                y=position.y,
                z=position.z,
                length=dims.length - (position.x + used_length),
                width=dims.width - position.z,
                height=dims.height - position.y,
            )
        )
        split_spaces.append(
            FreeSpace(
                x=position.x,
                y=position.y,
                z=position.z + used_width,
                length=dims.length - position.x,
                width=dims.width - (position.z + used_width),
                height=dims.height - position.y,
            )
        )
        return split_spaces
