"""Tests for Pixel records and the Blob aggregate."""

from __future__ import annotations

import dataclasses

import pytest

from blobstream.engine import Blob, Pixel


def _block(size: int = 3, value: float = 1.0, origin: tuple[int, int] = (0, 0)) -> Blob:
    ox, oy = origin
    return Blob(Pixel(ox + x, oy + y, value) for y in range(size) for x in range(size))


def test_summary_tracks_insertions():
    blob = Blob()
    blob.append(Pixel(2, 5, 3.0))
    blob.append(Pixel(-1, 7, -2.0))
    blob.append(Pixel(4, 6, 10.0))

    assert blob.pixel_count() == 3
    assert blob.bounding_box() == (-1, 4, 5, 7)
    assert blob.value_range() == (-2.0, 10.0)
    assert blob.sum() == pytest.approx(11.0)


def test_duplicate_position_is_ignored():
    blob = Blob([Pixel(1, 1, 5.0)])
    assert blob.append(Pixel(1, 1, 100.0)) is False
    assert len(blob) == 1
    assert blob.sum() == 5.0
    assert blob.value_range() == (5.0, 5.0)


def test_remove_rebuilds_summary():
    blob = Blob([Pixel(0, 0, 1.0), Pixel(5, 0, 9.0), Pixel(1, 1, 2.0)])
    removed = blob.remove(1)

    assert removed.position == (5, 0)
    assert not blob.contains((5, 0))
    assert blob.bounding_box() == (0, 1, 0, 1)
    assert blob.value_range() == (1.0, 2.0)
    assert blob.sum() == pytest.approx(3.0)


def test_clear_and_empty_queries():
    blob = _block()
    blob.clear()
    assert len(blob) == 0
    assert blob.sum() == 0.0
    assert blob.centroid() == (0.0, 0.0)
    with pytest.raises(ValueError):
        blob.bounding_box()
    with pytest.raises(ValueError):
        blob.value_range()


def test_uniform_block_centroid_is_geometric_center():
    blob = _block(3, value=2.0, origin=(4, 10))
    assert blob.centroid(weighted=False) == pytest.approx((5.0, 11.0))
    assert blob.centroid(weighted=True) == pytest.approx((5.0, 11.0))


def test_bright_corner_pulls_weighted_centroid_only():
    blob = Blob(Pixel(x, y, 100.0 if (x, y) == (2, 2) else 1.0) for y in range(3) for x in range(3))

    ux, uy = blob.centroid(weighted=False)
    wx, wy = blob.centroid(weighted=True)

    assert (ux, uy) == pytest.approx((1.0, 1.0))
    assert wx > 1.5 and wy > 1.5


def test_weighted_centroid_falls_back_when_weights_vanish():
    blob = Blob([Pixel(0, 0, 0.0), Pixel(2, 0, 0.0)])
    assert blob.centroid(weighted=True) == pytest.approx((1.0, 0.0))


def test_scale_down_weights_pixels():
    blob = Blob([Pixel(0, 0, 1.0), Pixel(4, 0, 1.0, scale=0.0)])
    assert blob.centroid(weighted=False) == pytest.approx((0.0, 0.0))
    assert blob.centroid(weighted=True) == pytest.approx((0.0, 0.0))


def test_zero_scales_fall_back_to_plain_mean():
    blob = Blob([Pixel(0, 0, 1.0, scale=0.0), Pixel(4, 2, 1.0, scale=0.0)])
    assert blob.centroid(weighted=False) == pytest.approx((2.0, 1.0))


def test_contains_accepts_pixel_or_tuple():
    blob = _block(2)
    assert blob.contains((1, 1))
    assert blob.contains(Pixel(0, 1, 123.0))
    assert not blob.contains((2, 2))


def test_overlaps():
    a = _block(3)
    b = _block(3, origin=(2, 2))
    c = _block(3, origin=(3, 0))
    assert a.overlaps(b)
    assert b.overlaps(a)
    assert not a.overlaps(c)


def test_sort_by_value_ascending():
    blob = Blob([Pixel(0, 0, 3.0), Pixel(1, 0, -1.0), Pixel(2, 0, 2.0)])
    blob.sort_by_value()
    assert [p.value for p in blob] == [-1.0, 2.0, 3.0]
    assert blob[0].position == (1, 0)


def test_copy_is_independent():
    blob = _block(2)
    clone = blob.copy()
    clone.append(Pixel(9, 9, 1.0))
    clone.remove(0)
    clone.set_scale(0, 0.0)
    assert len(blob) == 4
    assert blob[0].position == (0, 0)
    assert blob[1].scale == 1.0


def test_stored_pixels_cannot_be_edited_in_place():
    blob = Blob([Pixel(0, 0, 1.0), Pixel(1, 0, 2.0)])
    with pytest.raises(dataclasses.FrozenInstanceError):
        blob[0].value = 50.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        blob[1].x = 0

    assert blob.sum() == pytest.approx(3.0)
    assert blob.value_range() == (1.0, 2.0)
    assert blob.bounding_box() == (0, 1, 0, 0)
    assert sorted(p.position for p in blob) == [(0, 0), (1, 0)]


def test_set_scale_changes_weighting_only():
    blob = Blob([Pixel(0, 0, 1.0), Pixel(4, 0, 1.0)])
    updated = blob.set_scale(1, 0.0)

    assert updated.scale == 0.0
    assert blob[1].position == (4, 0)
    assert blob.centroid(weighted=False) == pytest.approx((0.0, 0.0))
    assert blob.sum() == pytest.approx(2.0)
    assert blob.bounding_box() == (0, 4, 0, 0)


def test_swap_pixels():
    blob = Blob([Pixel(0, 0, 1.0, scale=2.0), Pixel(3, 1, 5.0)])
    blob.swap(0, 1)
    assert [p.position for p in blob] == [(3, 1), (0, 0)]

    blob.swap(0, 1, value_only=True)
    assert [p.position for p in blob] == [(3, 1), (0, 0)]
    assert [(p.value, p.scale) for p in blob] == [(1.0, 2.0), (5.0, 1.0)]
    assert blob.sum() == pytest.approx(6.0)
    assert blob.value_range() == (1.0, 5.0)
    assert blob.bounding_box() == (0, 3, 0, 1)


def test_pixel_conversions():
    p = Pixel(1, 2, 4.5)
    assert float(p) == 4.5
    assert p.scale == 1.0
    assert Pixel(0, 0, 1.0) < p
    assert sorted([p, Pixel(0, 0, -1.0)])[0].value == -1.0
