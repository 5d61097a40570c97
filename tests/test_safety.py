import pytest

from cargo_loader.models import Container, Dimensions
from cargo_loader.safety import evaluate_container_safety

DIMS = Dimensions(1000, 1000, 1000)


def test_empty_container_is_safe():
    metrics = evaluate_container_safety(Container(id=1, dimensions=DIMS))

    assert metrics.score == 10.0
    assert metrics.support_ratio == 1.0
    assert metrics.description == "Empty container."


def test_centred_floor_load_scores_high(make_placed):
    container = Container(id=1, dimensions=DIMS, items=[make_placed(1, 0, 0, 0, 1000, 1000, 500, weight=10)])

    metrics = evaluate_container_safety(container)

    assert metrics.support_ratio == 1.0
    assert (metrics.center_of_mass.x, metrics.center_of_mass.y, metrics.center_of_mass.z) == (500, 250, 500)
    assert 9.0 <= metrics.score <= 10.0
    assert metrics.description.startswith("Stable load")


def test_center_of_mass_is_weight_weighted(make_placed):
    container = Container(
        id=1,
        dimensions=DIMS,
        items=[
            make_placed(1, 0, 0, 0, 500, 1000, 500, weight=30),
            make_placed(2, 500, 0, 0, 500, 1000, 500, weight=10),
        ],
    )

    center = evaluate_container_safety(container).center_of_mass

    assert center.x == pytest.approx((30 * 250 + 10 * 750) / 40)


def test_weightless_items_fall_back_to_volume(make_placed):
    container = Container(
        id=1,
        dimensions=DIMS,
        items=[
            make_placed(1, 0, 0, 0, 600, 1000, 500),
            make_placed(2, 600, 0, 0, 200, 1000, 500),
        ],
    )

    center = evaluate_container_safety(container).center_of_mass

    assert center.x == pytest.approx((3 * 300 + 1 * 700) / 4)


def test_unsupported_load_scores_low(make_placed):
    container = Container(
        id=1,
        dimensions=DIMS,
        items=[
            make_placed(1, 0, 0, 0, 200, 200, 200, weight=1),
            make_placed(2, 0, 500, 600, 400, 400, 400, weight=50),
        ],
    )

    metrics = evaluate_container_safety(container)

    assert metrics.support_ratio < 0.5
    assert metrics.score < 6.0
    assert metrics.description.startswith("Unstable load")
