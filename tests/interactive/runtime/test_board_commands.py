import logging
from pathlib import Path

import pytest
from PIL import Image

from freehand.core.board import Board
from freehand.core.canvas import CanvasSize
from freehand.core.geometry import Color, Point
from freehand.core.runtime_config import set_config_path
from freehand.interactive.runtime import board_commands
from freehand.interactive.runtime.board_commands import DEFAULT_PALETTE, BoardCommands

INK = Color.from_encoding("#222222")


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    set_config_path(None)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    yield
    set_config_path(None)


def _commands(**kwargs) -> BoardCommands:
    board = Board(CanvasSize(40, 30), foreground=INK, grid_columns=2, grid_rows=2, grid_ticks=1)
    board.begin_stroke(Point(0, 0))
    board.extend_stroke(Point(5, 5))
    board.extend_stroke(Point(20, 10))
    board.end_stroke()
    surface = Image.new("RGBA", (40, 30), (255, 255, 255, 255))
    return BoardCommands(board, visible_surface=lambda: surface, **kwargs)


def test_save_svg_and_png_write_under_output_dir(tmp_path: Path):
    commands = _commands()

    svg = commands.save_svg()
    png = commands.save_png()

    assert svg is not None and (tmp_path / svg).is_file()
    assert svg.parts[:3] == ("data", "output", "svg")
    assert png is not None and (tmp_path / png).is_file()
    assert png.suffix == ".png"


def test_failed_svg_save_is_logged_and_returns_none(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
):
    def fail(*_args, **_kwargs):
        raise PermissionError("read-only output dir")

    monkeypatch.setattr(board_commands, "export_svg", fail)
    commands = _commands()

    with caplog.at_level(logging.ERROR, logger="freehand.interactive.runtime.board_commands"):
        assert commands.save_svg() is None

    assert any(
        r.getMessage() == "Failed to save SVG" and r.exc_info is not None for r in caplog.records
    )
    # 失敗しても描画内容はそのまま残る。
    assert len(commands.board.drawables.lines()[0].points) == 2


def test_failed_png_save_is_logged_and_returns_none(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
):
    def fail(*_args, **_kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(board_commands, "save_png", fail)
    commands = _commands()

    with caplog.at_level(logging.ERROR, logger="freehand.interactive.runtime.board_commands"):
        assert commands.save_png() is None

    assert any(r.getMessage() == "Failed to save PNG" for r in caplog.records)


def test_palette_starts_with_board_foreground_and_recolors_current_line():
    commands = _commands()
    assert commands.palette == (INK, *DEFAULT_PALETTE)

    picked = commands.select_color(1)

    assert picked == DEFAULT_PALETTE[0]
    assert commands.board.foreground == DEFAULT_PALETTE[0]
    assert commands.board.current_line.color == DEFAULT_PALETTE[0]

    assert commands.select_color(0) == INK
    assert commands.board.current_line.color == INK


def test_select_color_out_of_range_is_ignored():
    commands = _commands(palette=[Color(0.0, 0.0, 1.0)])
    assert len(commands.palette) == 2
    assert commands.select_color(5) is None
    assert commands.select_color(-1) is None
    assert commands.board.foreground == INK


def test_grid_density_changes_regenerate_visible_grid():
    commands = _commands()
    assert commands.toggle_grid() is True

    assert commands.change_grid_columns(1) == 3
    assert commands.change_grid_rows(-1) == 1
    assert commands.change_grid_rows(-1) == 1

    grid = commands.board.drawing.grid
    assert grid is not None
    assert (grid.columns, grid.rows) == (3, 1)
    assert len(grid.lines) == 1 + 3


def test_drawing_settings_are_clamped():
    commands = _commands()
    drawing = commands.board.drawing
    drawing.set_smoothing(0.5)
    drawing.set_passes(1)
    drawing.set_stroke(1.5)

    assert commands.change_smoothing(-1) == 0.0
    assert commands.change_passes(-1) == 1
    assert commands.change_passes(2) == 3
    assert commands.change_stroke(-1) == 1.0
    assert commands.change_stroke(1) == 2.0


def test_undo_crop_and_grow_delegate_to_board():
    commands = _commands()

    assert commands.crop() == CanvasSize(15, 5)
    assert commands.grow("right") == CanvasSize(22, 5)

    commands.undo()
    assert commands.board.drawables.bounding_box() is None
