from __future__ import annotations

from itertools import combinations

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .models import Container, Dimensions, PlacedItem

# Unit corners of a box as (length, width, height) flags. Bottom face first,
# walked counter-clockwise, then the top face in the same order.
CORNER_FLAGS: tuple[tuple[int, int, int], ...] = (
    (0, 0, 0),
    (1, 0, 0),
    (1, 1, 0),
    (0, 1, 0),
    (0, 0, 1),
    (1, 0, 1),
    (1, 1, 1),
    (0, 1, 1),
)
# Two triangles per face, indices into CORNER_FLAGS.
MESH_FACES = (
    [0, 0, 4, 4, 0, 1, 2, 3, 0, 0, 1, 2],
    [1, 2, 5, 6, 1, 2, 3, 0, 4, 3, 5, 6],
    [2, 3, 6, 7, 5, 6, 7, 4, 5, 7, 6, 7],
)
PLAN_FILL = "#f1f5f9"
PLAN_LINE = "#334155"


def plot_point(x: float, y: float, z: float) -> tuple[float, float, float]:
    """Engine (length, height, width) coordinates to Plotly (x, y, z-up)."""
    return x, z, y


def box_corners(
    x: float, y: float, z: float, length: float, width: float, height: float
) -> list[tuple[float, float, float]]:
    return [
        plot_point(x + dl * length, y + dh * height, z + dw * width) for dl, dw, dh in CORNER_FLAGS
    ]


def box_edges() -> list[tuple[int, int]]:
    return [
        (start, end)
        for start, end in combinations(range(len(CORNER_FLAGS)), 2)
        if sum(a != b for a, b in zip(CORNER_FLAGS[start], CORNER_FLAGS[end])) == 1
    ]


def build_box_mesh(
    x: float,
    y: float,
    z: float,
    length: float,
    width: float,
    height: float,
    color: str,
    hover_label: str,
) -> go.Mesh3d:
    vx, vy, vz = zip(*box_corners(x, y, z, length, width, height))
    i, j, k = MESH_FACES

    return go.Mesh3d(
        x=vx,
        y=vy,
        z=vz,
        i=i,
        j=j,
        k=k,
        color=color,
        opacity=0.8,
        flatshading=True,
        name=hover_label,
        hovertemplate=f"{hover_label}<extra></extra>",
        showscale=False,
        showlegend=False,
    )


def build_container_wireframe(dims: Dimensions) -> go.Scatter3d:
    corners = box_corners(0.0, 0.0, 0.0, float(dims.length), float(dims.width), float(dims.height))

    x_values: list[float | None] = []
    y_values: list[float | None] = []
    z_values: list[float | None] = []
    for start, end in box_edges():
        for values, axis in ((x_values, 0), (y_values, 1), (z_values, 2)):
            values.extend([corners[start][axis], corners[end][axis], None])

    return go.Scatter3d(
        x=x_values,
        y=y_values,
        z=z_values,
        mode="lines",
        line={"color": "#111827", "width": 5},
        name="Container",
        hoverinfo="skip",
        showlegend=False,
    )


def hover_label(placed: PlacedItem) -> str:
    dims = placed.item.dimensions
    return (
        f"Box #{placed.id}<br>"
        f"Container: {placed.container_id}<br>"
        f"Pos: ({placed.position.x:.0f}, {placed.position.y:.0f}, {placed.position.z:.0f})<br>"
        f"Dims: {dims.length:.0f} x {dims.width:.0f} x {dims.height:.0f}"
        f"{' (rotated)' if placed.rotation else ''}<br>"
        f"Weight: {placed.weight:g} kg"
    )


def build_container_figure(container: Container) -> go.Figure:
    dims = container.dimensions

    fig = go.Figure()
    fig.add_trace(build_container_wireframe(dims))

    for placed in container.items:
        fig.add_trace(
            build_box_mesh(
                x=float(placed.position.x),
                y=float(placed.position.y),
                z=float(placed.position.z),
                length=float(placed.footprint_length),
                width=float(placed.footprint_width),
                height=float(placed.height),
                color=placed.item.color,
                hover_label=hover_label(placed),
            )
        )

    max_dimension = max(float(dims.length), float(dims.width), float(dims.height))
    fig.update_layout(
        margin={"l": 0, "r": 0, "t": 10, "b": 0},
        scene={
            "xaxis_title": "Length (mm)",
            "yaxis_title": "Width (mm)",
            "zaxis_title": "Height (mm)",
            "xaxis": {"range": [0, float(dims.length)]},
            "yaxis": {"range": [0, float(dims.width)]},
            "zaxis": {"range": [0, float(dims.height)]},
            "aspectmode": "manual",
            "aspectratio": {
                "x": float(dims.length) / max_dimension,
                "y": float(dims.width) / max_dimension,
                "z": float(dims.height) / max_dimension,
            },
            "camera": {"eye": {"x": 1.45, "y": 1.45, "z": 1.1}},
        },
    )
    return fig


def plan_rectangles(container: Container) -> dict[str, list[tuple[str, float, float, float, float]]]:
    """Rectangles of the two loading-plan views as ``(label, x0, y0, x1, y1)``.

    The top view spans length by width (engine x by z) and the side view spans
    length by height (engine x by y). Footprints already account for rotation.
    """
    top: list[tuple[str, float, float, float, float]] = []
    side: list[tuple[str, float, float, float, float]] = []
    for placed in container.items:
        x0 = float(placed.position.x)
        x1 = x0 + float(placed.footprint_length)
        z0 = float(placed.position.z)
        y0 = float(placed.position.y)
        top.append((str(placed.id), x0, z0, x1, z0 + float(placed.footprint_width)))
        side.append((str(placed.id), x0, y0, x1, y0 + float(placed.height)))
    return {"top": top, "side": side}


def _rectangle_trace(label: str, x0: float, y0: float, x1: float, y1: float, color: str) -> go.Scatter:
    return go.Scatter(
        x=[x0, x1, x1, x0, x0],
        y=[y0, y0, y1, y1, y0],
        mode="lines",
        fill="toself",
        fillcolor=color,
        line={"color": PLAN_LINE, "width": 1},
        name=f"Box #{label}",
        hovertemplate=f"Box #{label}<extra></extra>",
        showlegend=False,
    )


def build_container_plan(container: Container) -> go.Figure:
    """Two-dimensional loading plan: top view above, side view below."""
    dims = container.dimensions
    colors = {str(placed.id): placed.item.color or PLAN_FILL for placed in container.items}
    views = plan_rectangles(container)

    fig = make_subplots(rows=2, cols=1, subplot_titles=("Top View", "Side View"), vertical_spacing=0.12)
    for row, (view, depth) in enumerate((("top", dims.width), ("side", dims.height)), start=1):
        fig.add_trace(
            _rectangle_trace("container", 0.0, 0.0, float(dims.length), float(depth), "rgba(0,0,0,0)"),
            row=row,
            col=1,
        )
        for label, x0, y0, x1, y1 in views[view]:
            fig.add_trace(_rectangle_trace(label, x0, y0, x1, y1, colors[label]), row=row, col=1)
        fig.add_trace(
            go.Scatter(
                x=[(x0 + x1) / 2 for _, x0, _, x1, _ in views[view]],
                y=[(y0 + y1) / 2 for _, _, y0, _, y1 in views[view]],
                text=[label for label, *_ in views[view]],
                mode="text",
                hoverinfo="skip",
                showlegend=False,
            ),
            row=row,
            col=1,
        )
        fig.update_xaxes(title_text="Length (mm)", range=[0, float(dims.length)], row=row, col=1)
        fig.update_yaxes(
            title_text="Width (mm)" if view == "top" else "Height (mm)",
            range=[0, float(depth)],
            scaleanchor=f"x{row}" if row > 1 else "x",
            row=row,
            col=1,
        )

    fig.update_layout(
        title_text=f"Loading Plan - Container #{container.id}",
        margin={"l": 40, "r": 10, "t": 60, "b": 40},
        plot_bgcolor="white",
    )
    return fig


def container_plan_html(container: Container) -> str:
    return build_container_plan(container).to_html(include_plotlyjs="cdn", full_html=True)
