import pytest

from cargo_loader.models import CargoItem, Dimensions, PlacedItem, Position


def _make_item(item_id, length, width, height, weight=0.0):
    return CargoItem(id=item_id, dimensions=Dimensions(length, width, height), weight=weight)


def _make_placed(item_id, x, y, z, length, width, height, rotation=False, weight=0.0, container_id=1):
    return PlacedItem(
        item=_make_item(item_id, length, width, height, weight),
        position=Position(x, y, z),
        rotation=rotation,
        container_id=container_id,
    )


@pytest.fixture
def make_item():
    return _make_item


@pytest.fixture
def make_placed():
    return _make_placed
