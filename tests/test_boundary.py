"""
Shape boundary generator: one block per shape variant plus failure modes.
"""

import math

import pytest

from tabletop.errors import InvalidDimensionError, InvalidOutlineError
from tabletop.geometry.boundary import BOUNDARY_GENERATORS, generate_boundary
from tabletop.geometry.outline_importer import import_outline
from tabletop.models import ShapeVariant
from tabletop.schemas import TabletopConfiguration


def _config(shape, **overrides):
    fields = {"shape": shape, "length_mm": 2000, "width_mm": 900, "thickness_mm": 25}
    fields.update(overrides)
    return TabletopConfiguration(**fields)


def _extents(path):
    xs = [p[0] for p in path]
    ys = [p[1] for p in path]
    return min(xs), max(xs), min(ys), max(ys)


def test_every_shape_variant_has_a_generator():
    assert set(BOUNDARY_GENERATORS) == set(ShapeVariant)


def test_rect_is_centered_box():
    boundary = generate_boundary(_config("rect"))
    assert boundary.shape == ShapeVariant.RECT
    assert boundary.outer == ((-1000, -450), (1000, -450), (1000, 450), (-1000, 450))


def test_rounded_rect_radius_clamped_and_within_box():
    boundary = generate_boundary(_config("rounded-rect", corner_radius_mm=5000))
    assert boundary.corner_radius_mm == 450
    min_x, max_x, min_y, max_y = _extents(boundary.outer)
    assert math.isclose(max_x, 1000) and math.isclose(min_x, -1000)
    assert math.isclose(max_y, 450) and math.isclose(min_y, -450)
    # No sampled point sits in the cut-off corner square
    assert (1000, 450) not in boundary.outer


def test_rounded_rect_has_no_duplicate_points():
    boundary = generate_boundary(_config("rounded-rect", corner_radius_mm=450))
    outer = boundary.outer
    for i in range(len(outer)):
        assert outer[i] != outer[(i + 1) % len(outer)]


def test_d_end_has_flat_end_and_semicircle():
    boundary = generate_boundary(_config("d-end"))
    assert boundary.flat_length_mm == 2000 - 450
    assert boundary.corner_radius_mm == 450
    min_x, max_x, min_y, max_y = _extents(boundary.outer)
    assert math.isclose(min_x, -1000)
    assert math.isclose(max_x, 1000)
    assert math.isclose(max_y, 450)
    # Flat end corners are present
    assert (-1000, -450) in boundary.outer
    assert (-1000, 450) in boundary.outer


def test_d_end_flat_length_never_negative():
    boundary = generate_boundary(_config("d-end", length_mm=300, width_mm=900))
    assert boundary.flat_length_mm == 0


@pytest.mark.parametrize("length, width", [(300, 900), (400, 1000), (600, 900), (2000, 900)])
def test_d_end_stays_inside_declared_box(length, width):
    boundary = generate_boundary(_config("d-end", length_mm=length, width_mm=width))
    min_x, max_x, min_y, max_y = _extents(boundary.outer)
    tolerance = 1e-6
    assert min_x >= -length / 2 - tolerance and max_x <= length / 2 + tolerance
    assert min_y >= -width / 2 - tolerance and max_y <= width / 2 + tolerance
    assert math.isclose(max_x, length / 2)
    assert math.isclose(min_x, -length / 2)


def test_round_is_circle_of_diameter():
    boundary = generate_boundary(_config("round", length_mm=1200, width_mm=1200))
    assert boundary.diameter_mm == 1200
    for x, y in boundary.outer:
        assert math.isclose(math.hypot(x, y), 600, rel_tol=1e-9)


def test_ellipse_sampled_on_semi_axes():
    boundary = generate_boundary(_config("ellipse"))
    assert len(boundary.outer) == 64
    assert boundary.outer[0] == (1000, 0)
    for x, y in boundary.outer:
        assert math.isclose((x / 1000) ** 2 + (y / 450) ** 2, 1.0, rel_tol=1e-9)


def test_super_ellipse_with_exponent_two_is_an_ellipse():
    boundary = generate_boundary(_config("super-ellipse", super_ellipse_exponent=2))
    for x, y in boundary.outer:
        assert math.isclose((x / 1000) ** 2 + (y / 450) ** 2, 1.0, rel_tol=1e-9)


def test_super_ellipse_exponent_clamped():
    boundary = generate_boundary(_config("super-ellipse", super_ellipse_exponent=20))
    assert boundary.exponent == 8
    min_x, max_x, min_y, max_y = _extents(boundary.outer)
    assert math.isclose(max_x, 1000)
    assert math.isclose(max_y, 450)


def test_custom_outline_recentered_and_scaled():
    outline = import_outline([[(100, 100), (220, 100), (220, 160), (100, 160)]], unit="cm")
    boundary = generate_boundary(_config("custom"), outline)
    assert boundary.length_mm == 1200
    assert boundary.width_mm == 600
    assert _extents(boundary.outer) == (-600, 600, -300, 300)


def test_custom_keeps_holes():
    outline = import_outline([
        [(0, 0), (1000, 0), (1000, 1000), (0, 1000)],
        [(400, 400), (600, 400), (600, 600), (400, 600)],
    ])
    boundary = generate_boundary(_config("custom"), outline)
    assert len(boundary.holes) == 1
    assert _extents(boundary.holes[0]) == (-100, 100, -100, 100)


def test_custom_without_outline_fails():
    with pytest.raises(InvalidOutlineError):
        generate_boundary(_config("custom"))


@pytest.mark.parametrize("field", ["length_mm", "width_mm", "thickness_mm"])
def test_non_positive_dimension_fails(field):
    with pytest.raises(InvalidDimensionError):
        generate_boundary(_config("rect", **{field: 0}))
    with pytest.raises(InvalidDimensionError):
        generate_boundary(_config("ellipse", **{field: -10}))
