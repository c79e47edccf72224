"""Drawing（フェード描画・要素の順序・画像デコード失敗時の扱い）に関するテスト群。"""

from __future__ import annotations

import asyncio
import logging

import pytest

from freehand.core.data_image import DataImage, ImageDecodeError
from freehand.core.drawables import Drawables
from freehand.core.drawing import Drawing
from freehand.core.geometry import Color, Point
from freehand.core.line import Line
from freehand.core.primitives.grid import Grid
from freehand.render.base import Renderer

RED = Color(1.0, 0.0, 0.0)


class _RecordingRenderer(Renderer):
    def __init__(self, *, fail_images: bool = False) -> None:
        self.calls: list[tuple] = []
        self._fail_images = fail_images

    def reset(self) -> None:
        self.calls.append(("reset",))

    def render_line(self, line: Line, stroke_width: float, color: str) -> None:
        self.calls.append(("line", line, stroke_width, color))

    async def render_image(self, point: Point, image: DataImage) -> None:
        await asyncio.sleep(0)
        if self._fail_images:
            raise ImageDecodeError("broken")
        self.calls.append(("image", point, image))

    def swap(self) -> None:
        self.calls.append(("swap",))

    def kinds(self) -> list[str]:
        return [c[0] for c in self.calls]

    def lines(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "line"]


def _wavy(n: int = 30) -> Line:
    return Line(RED, [Point(float(i * 4), float((i % 2) * 10)) for i in range(n)])


def test_render_faded_draws_ghosts_then_final_stroke() -> None:
    drawing = Drawing(smoothing=6, passes=3, stroke=3.0)
    renderer = _RecordingRenderer()
    line = _wavy()

    drawing.render_faded(line, renderer)

    calls = renderer.lines()
    assert len(calls) == 3

    _, g1, w1, c1 = calls[0]
    _, g2, w2, c2 = calls[1]
    assert w1 == pytest.approx(1.0)
    assert w2 == pytest.approx(2.0)
    assert c1 == RED.to_rgba(1 / 3)
    assert c2 == RED.to_rgba(2 / 3)

    # ゴーストは直前のゴーストへ平滑化を 1 パスずつ重ねたもの。
    expected_g1 = line.smooth_pass(2)
    expected_g2 = expected_g1.smooth_pass(4)
    assert [(p.x, p.y) for p in g1.points] == [(p.x, p.y) for p in expected_g1.points]
    assert [(p.x, p.y) for p in g2.points] == [(p.x, p.y) for p in expected_g2.points]

    _, final, wf, cf = calls[2]
    assert wf == 3.0
    assert cf == RED.to_rgb()
    expected_final = line.smooth(6, 3)
    assert [(p.x, p.y) for p in final.points] == [(p.x, p.y) for p in expected_final.points]


def test_render_faded_does_not_modify_input_line() -> None:
    line = _wavy()
    before = [(p.x, p.y) for p in line.points]
    Drawing(smoothing=5, passes=4).render_faded(line, _RecordingRenderer())
    assert [(p.x, p.y) for p in line.points] == before


@pytest.mark.parametrize("passes", [0, -2])
def test_passes_below_one_render_single_final_stroke(passes: int) -> None:
    drawing = Drawing(smoothing=3, passes=passes, stroke=2.0)
    renderer = _RecordingRenderer()

    drawing.render_faded(_wavy(), renderer)

    calls = renderer.lines()
    assert len(calls) == 1
    assert calls[0][2] == 2.0
    assert calls[0][3] == RED.to_rgb()


def test_draw_resets_renders_in_order_and_swaps() -> None:
    drawing = Drawing(smoothing=2, passes=2, stroke=1.0)
    drawables = Drawables()
    first = drawables.append(_wavy()).item
    image = drawables.append(DataImage(Point(5, 6), b"png", 2, 2)).item
    drawables.append(Line(RED))
    renderer = _RecordingRenderer()

    asyncio.run(drawing.draw(drawables, renderer))

    assert renderer.kinds() == ["reset", "line", "line", "image", "swap"]
    assert renderer.calls[1][1].color == first.color
    assert renderer.calls[3][1] == Point(5, 6)
    assert renderer.calls[3][2] is image


def test_draw_skips_empty_lines() -> None:
    drawables = Drawables()
    drawables.append(Line(RED))
    drawables.append(Line(RED))
    renderer = _RecordingRenderer()

    asyncio.run(Drawing().draw(drawables, renderer))

    assert renderer.kinds() == ["reset", "swap"]


def test_draw_renders_grid_lines_before_drawables() -> None:
    grid = Grid(1, 1, 50, 50, ticks_per_cell=2, jitter=False)
    drawing = Drawing(smoothing=1, passes=1, grid=grid)
    drawables = Drawables()
    stroke = drawables.append(_wavy()).item
    renderer = _RecordingRenderer()

    asyncio.run(drawing.draw(drawables, renderer))

    lines = renderer.lines()
    assert len(lines) == len(grid.lines) + 1
    assert [c[1].color for c in lines[:-1]] == [g.color for g in grid.lines]
    assert lines[-1][1].color == stroke.color


def test_draw_skips_image_that_fails_to_decode(caplog: pytest.LogCaptureFixture) -> None:
    drawables = Drawables()
    drawables.append(DataImage(Point(0, 0), b"not an image", 1, 1))
    drawables.append(_wavy())
    renderer = _RecordingRenderer(fail_images=True)

    with caplog.at_level(logging.WARNING, logger="freehand.core.drawing"):
        asyncio.run(Drawing(passes=1).draw(drawables, renderer))

    assert renderer.kinds() == ["reset", "line", "swap"]
    assert any("Failed to place image" in r.getMessage() for r in caplog.records)


def test_draw_rejects_invalid_arguments() -> None:
    drawing = Drawing()
    with pytest.raises(TypeError):
        asyncio.run(drawing.draw([], _RecordingRenderer()))  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        asyncio.run(drawing.draw(Drawables(), object()))  # type: ignore[arg-type]


def test_show_grid_requires_grid_instance() -> None:
    drawing = Drawing()
    with pytest.raises(TypeError, match="invalid grid"):
        drawing.show_grid("grid")  # type: ignore[arg-type]
    assert not drawing.has_grid()

    grid = Grid(1, 1, 10, 10, jitter=False)
    drawing.show_grid(grid)
    assert drawing.has_grid()
    drawing.hide_grid()
    assert not drawing.has_grid()


def test_settings_reject_non_numeric_values() -> None:
    drawing = Drawing()
    with pytest.raises(ValueError):
        drawing.set_smoothing("much")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        drawing.set_stroke(float("nan"))
    drawing.set_passes(4)
    assert drawing.effective_passes() == 4


def test_draw_rejects_unwrapped_entries() -> None:
    drawables = Drawables()
    drawables.items.append(_wavy())  # type: ignore[arg-type]
    renderer = _RecordingRenderer()

    with pytest.raises(TypeError, match="invalid drawable"):
        asyncio.run(Drawing().draw(drawables, renderer))
    assert "line" not in renderer.kinds()
