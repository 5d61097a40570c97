from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key
import io
import logging
from typing import Any, Iterable, Sequence

import pandas as pd

from .constants import SAMPLE_CARGO
from .free_space import FreeSpaceTracker
from .geometry import is_physically_safe, overlaps
from .models import CargoItem, Container, Dimensions, Footprint, FreeSpace, PackingOptions, PlacedItem, Position
from .safety import evaluate_container_safety
from .scoring import position_score

logger = logging.getLogger(__name__)

MAX_SPACES_SCANNED = 100
X_OFFSETS: tuple[float, ...] = (0, 20, 50, 100)
EARLY_EXIT_DEPTH = 1000.0
VOLUME_TIE_BAND = 100_000.0


@dataclass
class PackingResult:
    containers: list[Container]
    placements: pd.DataFrame
    unpacked: pd.DataFrame
    container_summary: pd.DataFrame
    metrics: dict[str, Any]
    warnings: list[str] = field(default_factory=list)


ITEM_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id", "item_id", "item", "sku", "name"),
    "length": ("length", "l", "length_mm"),
    "width": ("width", "w", "width_mm"),
    "height": ("height", "h", "height_mm"),
    "weight": ("weight", "wt", "weight_kg"),
    "color": ("color", "colour"),
}

PLACEMENT_COLUMNS = [
    "item_id",
    "container_id",
    "x",
    "y",
    "z",
    "length",
    "width",
    "height",
    "rotated",
    "weight",
    "volume",
    "color",
]
UNPACKED_COLUMNS = ["item_id", "length", "width", "height", "weight", "volume", "reason"]


@dataclass
class _Candidate:
    space_index: int
    position: Position
    footprint: Footprint
    rotation: bool
    score: float


class ItemBacklog:
    """Unplaced items of one packing run, largest first.

    The backlog owns a private copy of the input. Each fill pass reads a
    snapshot and hands back what it placed.
    """

    def __init__(self, items: Iterable[CargoItem]) -> None:
        self._items: list[CargoItem] = sort_backlog(items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def snapshot(self) -> tuple[CargoItem, ...]:
        return tuple(self._items)

    def remove_placed(self, placed: Iterable[PlacedItem]) -> None:
        self._items = _without(self._items, [placed_item.item for placed_item in placed])


def sort_backlog(items: Iterable[CargoItem]) -> list[CargoItem]:
    return sorted(items, key=cmp_to_key(_backlog_order))


def pack_cargo(items: Sequence[CargoItem], options: PackingOptions | None = None) -> list[Container]:
    """Assign every item a container, position and rotation.

    Containers are opened one at a time until the backlog is empty or
    ``options.max_containers`` is reached. Items that never fit are absent
    from every container.
    """
    options = (options or PackingOptions()).validate()
    logger.debug("Packing %d items (seed %s has no effect on placement)", len(items), options.seed)

    backlog = ItemBacklog(items)
    containers: list[Container] = []
    while backlog and len(containers) < options.max_containers:
        container = Container(id=len(containers) + 1, dimensions=options.container_dims)
        placed = fill_container(container, backlog.snapshot(), options)
        backlog.remove_placed(placed)
        containers.append(container)
        logger.info(
            "Container %d: placed %d items, %d remaining", container.id, len(placed), len(backlog)
        )

    if backlog:
        logger.warning(
            "%d items could not be placed within %d container(s)", len(backlog), options.max_containers
        )
    return containers


def fill_container(container: Container, items: Sequence[CargoItem], options: PackingOptions) -> list[PlacedItem]:
    tracker = FreeSpaceTracker(container.dimensions, options.spacing, options.allow_stacking)
    placed_items: list[PlacedItem] = []

    for item in items:
        candidate = _find_best_candidate(item, tracker, container, options)
        if candidate is None:
            logger.debug("Item %s does not fit in container %d", item.id, container.id)
            continue

        placed = PlacedItem(
            item=item,
            position=candidate.position,
            rotation=candidate.rotation,
            container_id=container.id,
        )
        container.items.append(placed)
        tracker.consume(candidate.space_index, candidate.position, candidate.footprint)
        placed_items.append(placed)
        logger.debug(
            "Item %s -> container %d at (%g, %g, %g)%s",
            item.id,
            container.id,
            candidate.position.x,
            candidate.position.y,
            candidate.position.z,
            " rotated" if candidate.rotation else "",
        )
    return placed_items


def unpacked_items(items: Sequence[CargoItem], containers: Sequence[Container]) -> list[CargoItem]:
    placed = [placed_item.item for container in containers for placed_item in container.items]
    return _without(items, placed)


def _find_best_candidate(
    item: CargoItem,
    tracker: FreeSpaceTracker,
    container: Container,
    options: PackingOptions,
) -> _Candidate | None:
    dims = container.dimensions
    placed = container.items
    best: _Candidate | None = None

    for space_index, space in enumerate(tracker.ordered()[:MAX_SPACES_SCANNED]):
        for footprint, rotation in _orientations(item):
            if not _fits(space, footprint, options.spacing):
                continue
            for offset in X_OFFSETS:
                x = space.x + offset
                if x + footprint.length > dims.length:
                    continue
                position = Position(x, space.y, space.z)
                if not overlaps(position, footprint, placed, options.spacing) and is_physically_safe(
                    space.y, footprint, x, space.z, placed
                ):
                    score = position_score(position, footprint, placed, dims)
                    if best is None or score < best.score:
                        best = _Candidate(space_index, position, footprint, rotation, score)
                if best is not None and offset == 0:
                    break
        if best is not None and space.x > EARLY_EXIT_DEPTH and best.score < 0:
            break
    return best


def _orientations(item: CargoItem) -> list[tuple[Footprint, bool]]:
    dims = item.dimensions
    return [
        (Footprint(dims.length, dims.width, dims.height), False),
        (Footprint(dims.width, dims.length, dims.height), True),
    ]


def _fits(space: FreeSpace, footprint: Footprint, spacing: float) -> bool:
    return (
        footprint.length + spacing <= space.length
        and footprint.width + spacing <= space.width
        and footprint.height <= space.height
    )


def _backlog_order(first: CargoItem, second: CargoItem) -> float:
    volume_gap = second.volume - first.volume
    if abs(volume_gap) > VOLUME_TIE_BAND:
        return volume_gap
    return second.dimensions.height - first.dimensions.height


def _without(items: Iterable[CargoItem], removed: Sequence[CargoItem]) -> list[CargoItem]:
    pending = list(removed)
    remaining: list[CargoItem] = []
    for item in items:
        match = next((index for index, candidate in enumerate(pending) if candidate is item), None)
        if match is None:
            remaining.append(item)
        else:
            pending.pop(match)
    return remaining


def run_packing(items_df: pd.DataFrame, options: PackingOptions | None = None) -> PackingResult:
    options = (options or PackingOptions()).validate()
    items = items_from_frame(items_df)

    containers = pack_cargo(items, options)
    for container in containers:
        container.safety_metrics = evaluate_container_safety(container)
    overflow = unpacked_items(items, containers)

    warnings: list[str] = []
    if len(containers) < options.min_containers:
        warnings.append(
            f"Only {len(containers)} container(s) used, fewer than the configured minimum of "
            f"{options.min_containers}."
        )
    if overflow:
        warnings.append(
            f"{len(overflow)} item(s) could not be loaded within {options.max_containers} container(s)."
        )
    for message in warnings:
        logger.warning(message)

    placements_df = pd.DataFrame(
        [_placement_row(placed) for container in containers for placed in container.items],
        columns=PLACEMENT_COLUMNS,
    )
    unpacked_df = pd.DataFrame(
        [_unpacked_row(item, options.max_containers) for item in overflow],
        columns=UNPACKED_COLUMNS,
    )
    container_summary_df = _build_container_summary(containers)
    metrics = _build_metrics(items, containers, overflow, options)
    return PackingResult(
        containers=containers,
        placements=placements_df,
        unpacked=unpacked_df,
        container_summary=container_summary_df,
        metrics=metrics,
        warnings=warnings,
    )


def items_from_frame(items_df: pd.DataFrame) -> list[CargoItem]:
    items = _prepare_items(items_df)
    return [
        CargoItem(
            id=row["id"],
            dimensions=Dimensions(float(row["length"]), float(row["width"]), float(row["height"])),
            weight=float(row["weight"]),
            color=row["color"] if isinstance(row["color"], str) and row["color"].strip() else None,
        )
        for row in items.to_dict(orient="records")
    ]


def items_to_frame(items: Iterable[CargoItem]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "ID": item.id,
                "Length": item.dimensions.length,
                "Width": item.dimensions.width,
                "Height": item.dimensions.height,
                "Weight": item.weight,
            }
            for item in items
        ],
        columns=["ID", "Length", "Width", "Height", "Weight"],
    )


def sample_cargo() -> list[CargoItem]:
    return [
        CargoItem(id=item_id, dimensions=Dimensions(length, width, height), weight=weight)
        for item_id, length, width, height, weight in SAMPLE_CARGO
    ]


def read_cargo_workbook(file_bytes: bytes) -> pd.DataFrame:
    """Read the first sheet of a cargo workbook.

    Rows with missing or non-positive dimensions are skipped; a missing id
    falls back to the 1-based row number.
    """
    sheet = pd.read_excel(io.BytesIO(file_bytes), sheet_name=0)
    cargo = _rename_columns(sheet.copy(), ITEM_COLUMN_ALIASES)
    _require_columns(cargo, ("length", "width", "height"), entity_name="cargo")

    for column in ("length", "width", "height"):
        cargo[column] = pd.to_numeric(cargo[column], errors="coerce")
    valid = (cargo[["length", "width", "height"]] > 0).all(axis=1)
    skipped = int((~valid).sum())
    if skipped:
        logger.warning("Skipped %d cargo row(s) without positive dimensions", skipped)

    row_numbers = pd.Series(range(1, len(cargo) + 1), index=cargo.index)
    if "id" in cargo.columns:
        cargo["id"] = cargo["id"].where(cargo["id"].notna(), row_numbers)
    else:
        cargo["id"] = row_numbers
    cargo["weight"] = pd.to_numeric(cargo["weight"], errors="coerce").fillna(0.0) if "weight" in cargo.columns else 0.0
    if "color" not in cargo.columns:
        cargo["color"] = None

    cargo = cargo.loc[valid].reset_index(drop=True)
    return cargo[["id", "length", "width", "height", "weight", "color"]]


def build_template_workbook() -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        items_to_frame(sample_cargo()).to_excel(writer, index=False, sheet_name="Cargo")
    return buffer.getvalue()


def result_to_workbook(result: PackingResult) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        result.placements.to_excel(writer, index=False, sheet_name="placements")
        result.unpacked.to_excel(writer, index=False, sheet_name="unpacked")
        result.container_summary.to_excel(writer, index=False, sheet_name="containers")
        pd.DataFrame([result.metrics]).to_excel(writer, index=False, sheet_name="metrics")
    return buffer.getvalue()


def _prepare_items(items_df: pd.DataFrame) -> pd.DataFrame:
    items = _rename_columns(items_df.copy(), ITEM_COLUMN_ALIASES)
    _require_columns(items, ("length", "width", "height"), entity_name="items")

    if "id" not in items.columns:
        items["id"] = range(1, len(items) + 1)
    if items["id"].isna().any():
        raise ValueError("`items` has empty item identifiers.")
    items["id"] = items["id"].apply(_normalize_id)
    duplicated = items.loc[items["id"].duplicated(), "id"].tolist()
    if duplicated:
        raise ValueError(f"`items` has duplicate identifiers: {', '.join(str(value) for value in duplicated)}.")

    for column in ("length", "width", "height"):
        items[column] = pd.to_numeric(items[column], errors="coerce")
    _ensure_positive(items, ("length", "width", "height"), entity_name="items")

    if "weight" not in items.columns:
        items["weight"] = 0.0
    items["weight"] = pd.to_numeric(items["weight"], errors="coerce").fillna(0.0)
    if (items["weight"] < 0).any():
        raise ValueError("`items.weight` must be non-negative.")

    if "color" not in items.columns:
        items["color"] = None
    return items[["id", "length", "width", "height", "weight", "color"]]


def _placement_row(placed: PlacedItem) -> dict[str, Any]:
    return {
        "item_id": placed.id,
        "container_id": placed.container_id,
        "x": placed.position.x,
        "y": placed.position.y,
        "z": placed.position.z,
        "length": placed.footprint_length,
        "width": placed.footprint_width,
        "height": placed.height,
        "rotated": placed.rotation,
        "weight": placed.weight,
        "volume": placed.item.volume,
        "color": placed.item.color,
    }


def _unpacked_row(item: CargoItem, max_containers: int) -> dict[str, Any]:
    dims = item.dimensions
    return {
        "item_id": item.id,
        "length": dims.length,
        "width": dims.width,
        "height": dims.height,
        "weight": item.weight,
        "volume": item.volume,
        "reason": f"No feasible space found within {max_containers} container(s).",
    }


def _build_container_summary(containers: Sequence[Container]) -> pd.DataFrame:
    rows: list[dict[str, Any]] = []
    for container in containers:
        dims = container.dimensions
        capacity_volume = dims.volume
        safety = container.safety_metrics
        rows.append(
            {
                "container_id": container.id,
                "length": dims.length,
                "width": dims.width,
                "height": dims.height,
                "capacity_volume": capacity_volume,
                "packed_items": len(container.items),
                "loaded_volume": container.loaded_volume,
                "loaded_weight": container.loaded_weight,
                "volume_utilization": (container.loaded_volume / capacity_volume) if capacity_volume > 0 else 0.0,
                "safety_score": safety.score if safety else None,
                "support_ratio": safety.support_ratio if safety else None,
                "center_of_mass_x": safety.center_of_mass.x if safety else None,
                "center_of_mass_y": safety.center_of_mass.y if safety else None,
                "center_of_mass_z": safety.center_of_mass.z if safety else None,
                "safety_description": safety.description if safety else None,
            }
        )
    return pd.DataFrame(
        rows,
        columns=[
            "container_id",
            "length",
            "width",
            "height",
            "capacity_volume",
            "packed_items",
            "loaded_volume",
            "loaded_weight",
            "volume_utilization",
            "safety_score",
            "support_ratio",
            "center_of_mass_x",
            "center_of_mass_y",
            "center_of_mass_z",
            "safety_description",
        ],
    )


def _build_metrics(
    items: Sequence[CargoItem],
    containers: Sequence[Container],
    overflow: Sequence[CargoItem],
    options: PackingOptions,
) -> dict[str, Any]:
    total_items = len(items)
    unpacked_count = len(overflow)
    packed_count = total_items - unpacked_count

    total_item_volume = float(sum(item.volume for item in items))
    packed_volume = float(sum(container.loaded_volume for container in containers))
    total_container_volume = float(sum(container.dimensions.volume for container in containers))

    return {
        "total_items": total_items,
        "packed_items": packed_count,
        "unpacked_items": unpacked_count,
        "packing_rate": (packed_count / total_items) if total_items else 0.0,
        "total_item_volume": total_item_volume,
        "packed_volume": packed_volume,
        "volume_utilization": (packed_volume / total_container_volume) if total_container_volume > 0 else 0.0,
        "packed_weight": float(sum(container.loaded_weight for container in containers)),
        "containers_used": len(containers),
        "min_containers": int(options.min_containers),
        "max_containers": int(options.max_containers),
        "seed": options.seed,
    }


def _normalize_id(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _rename_columns(df: pd.DataFrame, aliases: dict[str, tuple[str, ...]]) -> pd.DataFrame:
    normalized_map = {_normalize_column_name(column): column for column in df.columns}
    rename_map: dict[str, str] = {}
    for canonical_name, options in aliases.items():
        for alias in options:
            normalized_alias = _normalize_column_name(alias)
            if normalized_alias in normalized_map:
                rename_map[normalized_map[normalized_alias]] = canonical_name
                break
    return df.rename(columns=rename_map)


def _normalize_column_name(name: Any) -> str:
    return str(name).strip().lower().replace(" ", "_")


def _require_columns(df: pd.DataFrame, required: tuple[str, ...], entity_name: str) -> None:
    missing = [column for column in required if column not in df.columns]
    if missing:
        missing_names = ", ".join(missing)
        raise ValueError(f"`{entity_name}` is missing required column(s): {missing_names}.")


def _ensure_positive(df: pd.DataFrame, columns: tuple[str, ...], entity_name: str) -> None:
    if df[list(columns)].isna().any().any():
        raise ValueError(f"`{entity_name}` contains non-numeric values in: {', '.join(columns)}.")
    invalid_rows = df[(df[list(columns)] <= 0).any(axis=1)]
    if not invalid_rows.empty:
        raise ValueError(f"`{entity_name}` has non-positive values in dimensions: {', '.join(columns)}.")
