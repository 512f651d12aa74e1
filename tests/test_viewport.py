from __future__ import annotations

import math

import pytest

from ovb.core.schema import Region
from ovb.display.canvas import RecordingCanvas
from ovb.display.viewport import OFF_SCREEN, Viewport


def _viewport(width: float = 1000, start: int = 1000, end: int = 5000) -> Viewport:
    return Viewport(RecordingCanvas(width, 100), start, end, ref_name="chr1")


def test_derived_quantities() -> None:
    vp = _viewport()
    assert vp.genomic_range == 4000
    assert vp.bp_per_pixel == 4.0
    assert vp.region() == Region("chr1", 1000, 5000)


def test_genomic_to_pixel_edges() -> None:
    vp = _viewport()
    assert vp.genomic_to_pixel(1000) == 0
    assert vp.genomic_to_pixel(5000) == pytest.approx(1000)
    assert vp.genomic_to_pixel(3000) == pytest.approx(500)


@pytest.mark.parametrize("pos", [0, 999, 999.5, 5000.5, 5001, 10**9])
def test_genomic_to_pixel_off_screen(pos) -> None:
    assert _viewport().genomic_to_pixel(pos) == OFF_SCREEN == -1


def test_pixel_to_genomic_inverts() -> None:
    vp = _viewport()
    for x in (0, 137.5, 500, 1000):
        assert vp.genomic_to_pixel(vp.pixel_to_genomic(x)) == pytest.approx(x)


def test_zero_width_canvas_has_no_mapping() -> None:
    vp = _viewport(width=0)
    assert vp.bp_per_pixel == 0.0
    assert vp.genomic_to_pixel(1000) == OFF_SCREEN
    assert vp.genomic_to_pixel(3000) == OFF_SCREEN
    assert vp.pixel_extent(1000, 2000) is None

    vp.pan(250)
    assert (vp.genomic_start, vp.genomic_end) == (1000, 5000)

    vp.zoom(2, 0)
    assert vp.genomic_range == 2000
    assert vp.genomic_start + vp.genomic_range / 2 == 3000


def test_non_positive_range_is_rejected() -> None:
    with pytest.raises(ValueError):
        _viewport(start=5000, end=5000)
    with pytest.raises(ValueError):
        _viewport(start=5000, end=1000)


@pytest.mark.parametrize("delta", [1, 37.3, -12.6, 250, 0.2, -999.9])
def test_pan_round_trip(delta: float) -> None:
    vp = _viewport()
    vp.pan(delta)
    assert vp.genomic_range == 4000
    vp.pan(-delta)
    assert abs(vp.genomic_start - 1000) <= 1
    assert abs(vp.genomic_end - 5000) <= 1


def test_pan_moves_by_rounded_bp() -> None:
    vp = _viewport()
    vp.pan(10.1)
    assert (vp.genomic_start, vp.genomic_end) == (1040, 5040)


@pytest.mark.parametrize("factor, center_x", [(2, 500), (2, 250), (1.5, 0), (3, 731), (0.5, 1000)])
def test_zoom_round_trip(factor: float, center_x: float) -> None:
    vp = _viewport()
    vp.zoom(factor, center_x)
    vp.zoom(1 / factor, center_x)
    assert abs(vp.genomic_range - 4000) <= 1


def test_zoom_keeps_position_under_cursor() -> None:
    vp = _viewport()
    under = vp.pixel_to_genomic(250)
    vp.zoom(2, 250)
    assert (vp.genomic_start, vp.genomic_end) == (1500, 3500)
    assert vp.pixel_to_genomic(250) == pytest.approx(under)


@pytest.mark.parametrize("factor", [0, -2, math.nan, math.inf])
def test_zoom_rejects_bad_factor(factor: float) -> None:
    vp = _viewport()
    with pytest.raises(ValueError):
        vp.zoom(factor, 500)
    assert (vp.genomic_start, vp.genomic_end) == (1000, 5000)


def test_zoom_never_collapses_range() -> None:
    vp = _viewport()
    vp.zoom(1e9, 500)
    assert vp.genomic_end > vp.genomic_start


def test_pixel_extent_clips_partial_features() -> None:
    vp = _viewport()
    assert vp.pixel_extent(900, 1100) == (0, pytest.approx(25))
    assert vp.pixel_extent(4900, 6000) == (pytest.approx(975), pytest.approx(1000))
    assert vp.pixel_extent(5000, 5010) is None
    assert vp.pixel_extent(10, 1000) is None


def test_listeners_fire_on_change_only() -> None:
    vp = _viewport()
    seen = []
    vp.add_listener(lambda v: seen.append((v.genomic_start, v.genomic_end)))

    vp.pan(0.1)
    assert seen == []
    vp.pan(25)
    vp.set_region(2000, 3000)
    vp.set_region(2000, 3000)
    assert seen == [(1100, 5100), (2000, 3000)]

    vp.set_region(2000, 3000, ref_name="chr2")
    assert len(seen) == 3 and vp.ref_name == "chr2"


def test_canvas_resize_changes_mapping() -> None:
    canvas = RecordingCanvas(1000, 100)
    vp = Viewport(canvas, 0, 1000)
    canvas.set_client_size(500, 100)
    assert vp.bp_per_pixel == 2.0
    assert vp.genomic_to_pixel(1000) == pytest.approx(500)
