from __future__ import annotations

import asyncio

import pytest

from ovb.adapters import MockGff3Adapter, MockVcfAdapter
from ovb.display.renderer import Renderer
from ovb.display.scheduler import ManualScheduler
from ovb.display.text_canvas import BLOCK, HLINE, VLINE, TextCanvas
from ovb.display.tracks import FeatureTrack, GeneTrack
from ovb.draw.colors import Colors


def _canvas(width=80, height=40):
    canvas = TextCanvas(width, height, cell_width=8, cell_height=10)
    return canvas, canvas.get_context()


def test_grid_shape() -> None:
    canvas, ctx = _canvas()
    assert ctx.shape == (4, 10)
    assert TextCanvas.for_terminal(120, 40).get_context().shape == (40, 120)


def test_invalid_cell_size() -> None:
    with pytest.raises(ValueError):
        TextCanvas(80, 40, cell_width=0)


def test_tall_boxes_fill_thin_boxes_rule() -> None:
    canvas, ctx = _canvas()
    ctx.fill_style = "#2aa198"
    ctx.fill_rect(0, 24, 80, 2)
    ctx.fill_rect(24, 20, 16, 10)

    row = canvas.to_lines(color=False)[2]
    assert row == HLINE * 3 + BLOCK * 2 + HLINE * 5


def test_text_alignment() -> None:
    canvas, ctx = _canvas()
    ctx.fill_text("abc", 8, 15)
    ctx.text_align = "center"
    ctx.fill_text("wxyz", 40, 35)
    ctx.text_align = "right"
    ctx.fill_text("end", 80, 25)

    lines = canvas.to_lines(color=False)
    assert lines[1] == " abc"
    assert lines[2] == " " * 7 + "end"
    assert lines[3] == "   wxyz"


def test_text_clipped_at_edges() -> None:
    canvas, ctx = _canvas()
    ctx.text_align = "center"
    ctx.fill_text("1,000", 0, 15)
    assert canvas.to_lines(color=False)[1] == "000"


def test_lines() -> None:
    canvas, ctx = _canvas()
    ctx.begin_path()
    ctx.move_to(0, 30)
    ctx.line_to(80, 30)
    ctx.stroke()
    ctx.begin_path()
    ctx.move_to(16, 30)
    ctx.line_to(16, 25)
    ctx.stroke()

    lines = canvas.to_lines(color=False)
    assert lines[3] == HLINE * 10
    assert lines[2] == "  " + VLINE


def test_clear_rect() -> None:
    canvas, ctx = _canvas()
    ctx.fill_rect(0, 0, 80, 40)
    ctx.clear_rect(0, 0, 80, 20)
    lines = canvas.to_lines(color=False)
    assert lines[0] == "" and lines[1] == ""
    assert lines[2] == BLOCK * 10


def test_translate_and_scale() -> None:
    canvas, ctx = _canvas()
    ctx.save()
    ctx.translate(0, 20)
    ctx.fill_rect(0, 0, 8, 10)
    ctx.restore()
    ctx.fill_rect(8, 0, 8, 10)

    lines = canvas.to_lines(color=False)
    assert lines[0] == " " + BLOCK
    assert lines[2] == BLOCK


def test_colored_output() -> None:
    canvas, ctx = _canvas()
    ctx.fill_style = "#dc322f"
    ctx.fill_rect(0, 0, 8, 10)
    line = canvas.to_lines(color=True)[0]
    assert line.startswith(Colors.get_color("#dc322f") + BLOCK)
    assert line.endswith(Colors.RESET)
    assert "\x1b[38;2;220;50;47m" in line


def test_device_pixel_ratio_grows_grid() -> None:
    canvas = TextCanvas(80, 40, device_pixel_ratio=2.0)
    Renderer(canvas, "chr1:0-100", scheduler=ManualScheduler())
    assert canvas.get_context().shape == (8, 20)


def test_renderer_draws_to_terminal() -> None:
    canvas = TextCanvas(960, 400)
    scheduler = ManualScheduler()
    renderer = Renderer(canvas, "chr1:1000-5000", scheduler=scheduler)
    renderer.tracks.append(GeneTrack("genes", "Genes", MockGff3Adapter()))
    renderer.tracks.append(FeatureTrack("variants", "Variants", MockVcfAdapter(delay=0)))
    asyncio.run(renderer.layout_all_tracks())
    scheduler.step()

    lines = canvas.to_lines(color=False)
    assert len(lines) == 40
    assert "1,400" in lines[1] and "3,000" in lines[1]
    assert lines[3].startswith(HLINE * 10)
    assert lines[6].startswith("Genes")

    # exon boxes on the intron line
    assert BLOCK + HLINE in lines[7] and HLINE + BLOCK in lines[7]
    assert "GENE_A" in lines[10] and "GENE_B" in lines[10]

    assert lines[16].startswith("Variants")
    assert lines[17].count(BLOCK) == 3
