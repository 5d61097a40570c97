"""Greedy three-dimensional cargo loading for identical containers."""

from .models import CargoItem, Container, Dimensions, FreeSpace, PackingOptions, PlacedItem, Position, SafetyMetrics
from .packing_engine import (
    ItemBacklog,
    PackingResult,
    build_template_workbook,
    fill_container,
    items_from_frame,
    items_to_frame,
    pack_cargo,
    read_cargo_workbook,
    result_to_workbook,
    run_packing,
    sample_cargo,
    unpacked_items,
)
from .safety import evaluate_container_safety
from .visualization import build_container_figure, build_container_plan, container_plan_html

__all__ = [
    "CargoItem",
    "Container",
    "Dimensions",
    "FreeSpace",
    "ItemBacklog",
    "PackingOptions",
    "PackingResult",
    "PlacedItem",
    "Position",
    "SafetyMetrics",
    "build_container_figure",
    "build_container_plan",
    "build_template_workbook",
    "container_plan_html",
    "evaluate_container_safety",
    "fill_container",
    "items_from_frame",
    "items_to_frame",
    "pack_cargo",
    "read_cargo_workbook",
    "result_to_workbook",
    "run_packing",
    "sample_cargo",
    "unpacked_items",
]
