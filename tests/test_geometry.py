from cargo_loader.geometry import has_lateral_contact, is_physically_safe, overlaps, support_ratio
from cargo_loader.models import Footprint, Position


def test_touching_faces_do_not_overlap(make_placed):
    placed = [make_placed(1, 0, 0, 0, 1000, 1000, 1000)]
    cube = Footprint(1000, 1000, 1000)

    assert not overlaps(Position(1000, 0, 0), cube, placed, spacing=0)
    assert not overlaps(Position(0, 0, 1000), cube, placed, spacing=0)
    assert not overlaps(Position(0, 1000, 0), cube, placed, spacing=0)


def test_intersecting_boxes_overlap(make_placed):
    placed = [make_placed(1, 0, 0, 0, 1000, 1000, 1000)]

    assert overlaps(Position(500, 0, 0), Footprint(1000, 1000, 1000), placed, spacing=0)
    assert overlaps(Position(200, 200, 200), Footprint(100, 100, 100), placed, spacing=0)


def test_sub_millimetre_slack_is_tolerated(make_placed):
    placed = [make_placed(1, 0, 0, 0, 1000, 1000, 1000)]

    assert not overlaps(Position(999.5, 0, 0), Footprint(1000, 1000, 1000), placed, spacing=0)


def test_spacing_applies_to_length_and_width_only(make_placed):
    placed = [make_placed(1, 0, 0, 0, 1000, 1000, 1000)]
    cube = Footprint(1000, 1000, 1000)

    assert overlaps(Position(1000, 0, 0), cube, placed, spacing=50)
    assert overlaps(Position(0, 0, 1000), cube, placed, spacing=50)
    assert not overlaps(Position(1050, 0, 0), cube, placed, spacing=50)
    assert not overlaps(Position(0, 1000, 0), cube, placed, spacing=50)


def test_rotated_item_uses_swapped_footprint(make_placed):
    placed = [make_placed(1, 0, 0, 0, 2000, 500, 1000, rotation=True)]

    # rotated footprint is 500 long and 2000 wide
    assert not overlaps(Position(500, 0, 0), Footprint(500, 500, 500), placed, spacing=0)
    assert overlaps(Position(0, 0, 1500), Footprint(500, 400, 500), placed, spacing=0)


def test_floor_is_always_supported():
    assert support_ratio(3, Footprint(1000, 1000, 1000), 0, 0, []) == 1.0
    assert is_physically_safe(0, Footprint(100, 100, 2000), 0, 0, [])


def test_support_ratio_counts_tops_within_tolerance(make_placed):
    placed = [make_placed(1, 0, 0, 0, 1000, 1000, 1000)]
    footprint = Footprint(1000, 1000, 500)

    assert support_ratio(1000, footprint, 500, 0, placed) == 0.5
    assert support_ratio(1005, footprint, 500, 0, placed) == 0.5
    assert support_ratio(1020, footprint, 500, 0, placed) == 0.0


def test_support_ratio_sums_several_supports(make_placed):
    placed = [
        make_placed(1, 0, 0, 0, 500, 1000, 1000),
        make_placed(2, 500, 0, 0, 500, 1000, 1000),
    ]

    assert support_ratio(1000, Footprint(1000, 1000, 500), 0, 0, placed) == 1.0


def test_poorly_supported_item_is_unsafe(make_placed):
    placed = [make_placed(1, 0, 0, 0, 1000, 1000, 1000)]

    assert is_physically_safe(1000, Footprint(1000, 1000, 500), 0, 0, placed)
    assert not is_physically_safe(1000, Footprint(1000, 1000, 500), 500, 0, placed)


def test_tall_narrow_stack_needs_lateral_contact(make_placed):
    base = make_placed(1, 0, 0, 0, 300, 300, 1000)
    footprint = Footprint(300, 300, 200)

    assert not is_physically_safe(1000, footprint, 0, 0, [base])

    neighbour = make_placed(2, 300, 800, 0, 300, 300, 400)
    assert has_lateral_contact(1000, footprint, 0, 0, [base, neighbour])
    assert is_physically_safe(1000, footprint, 0, 0, [base, neighbour])


def test_squat_stack_needs_no_lateral_contact(make_placed):
    base = make_placed(1, 0, 0, 0, 1000, 1000, 1000)

    assert is_physically_safe(1000, Footprint(1000, 1000, 500), 0, 0, [base])
