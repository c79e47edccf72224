# どこで: `src/freehand/interactive/runtime/board_commands.py`。
# 何を: キー操作に対応する Board/Drawing への命令（保存・Undo・描画面・グリッド・色・平滑化設定）を提供する。
# なぜ: pyglet のキーコード対応と命令の中身を分け、ウィンドウ無しで命令を検証できるようにするため。

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from PIL import Image

from freehand.core.board import Board
from freehand.core.canvas import CanvasSize, Edge
from freehand.core.geometry import Color
from freehand.core.output_paths import output_path
from freehand.export.image import save_png
from freehand.export.svg import export_svg

_logger = logging.getLogger(__name__)

# 数字キー 2.. に割り当てる色（1 は起動時の描画色）。
DEFAULT_PALETTE: tuple[Color, ...] = tuple(
    Color.from_encoding(text)
    for text in ("#D62728", "#1F77B4", "#2CA02C", "#FF7F0E", "#9467BD", "#8C564B")
)


class BoardCommands:
    """Board に対する対話操作の集合。

    Parameters
    ----------
    board : Board
        操作対象。
    visible_surface : Callable[[], PIL.Image.Image]
        PNG 保存に使う、最後に提示したフレームを返す関数。
    palette : Sequence[Color] or None, optional
        数字キー 2.. に割り当てる色。None の場合は `DEFAULT_PALETTE`。
        数字キー 1 は常に起動時の描画色。

    Notes
    -----
    保存の失敗（書き込み不可など）は例外を外へ出さずにログへ残し、None を返す。
    描画中の内容を失わないよう、ウィンドウのイベント処理は止めない。
    """

    def __init__(
        self,
        board: Board,
        *,
        visible_surface: Callable[[], Image.Image],
        palette: Sequence[Color] | None = None,
    ) -> None:
        self._board = board
        self._visible_surface = visible_surface
        extra = DEFAULT_PALETTE if palette is None else tuple(palette)
        self.palette: tuple[Color, ...] = (board.foreground, *extra)

    @property
    def board(self) -> Board:
        return self._board

    # ---------- 保存 ----------
    def save_svg(self) -> Path | None:
        """現在の内容を SVG として保存する。失敗時はログに残して None を返す。"""
        board = self._board
        try:
            path = export_svg(
                board.drawables,
                board.drawing,
                output_path(kind="svg", ext="svg"),
                canvas_size=board.canvas.as_tuple(),
            )
        except Exception as e:
            _logger.exception("Failed to save SVG")
            print(f"Failed to save SVG: {e}")
            return None
        print(f"Saved SVG: {path}")
        return path

    def save_png(self) -> Path | None:
        """最後に提示したフレームを PNG として保存する。失敗時はログに残して None を返す。"""
        try:
            path = save_png(self._visible_surface(), output_path(kind="png", ext="png"))
        except Exception as e:
            _logger.exception("Failed to save PNG")
            print(f"Failed to save PNG: {e}")
            return None
        print(f"Saved PNG: {path}")
        return path

    # ---------- 編集 ----------
    def undo(self) -> None:
        self._board.undo()

    def crop(self) -> CanvasSize | None:
        return self._board.crop()

    def grow(self, edge: Edge) -> CanvasSize:
        return self._board.grow(edge)

    def select_color(self, index: int) -> Color | None:
        """palette[index] を描画色にする。範囲外なら何もせず None。"""
        if not 0 <= index < len(self.palette):
            return None
        color = self.palette[index]
        self._board.set_color(color)
        return color

    # ---------- グリッド ----------
    def toggle_grid(self) -> bool:
        return self._board.toggle_grid()

    def change_grid_columns(self, delta: int) -> int:
        """グリッドの列数を delta だけ変え（最小 1）、変更後の列数を返す。"""
        board = self._board
        board.set_grid_density(max(1, board.grid_columns + int(delta)), board.grid_rows)
        return board.grid_columns

    def change_grid_rows(self, delta: int) -> int:
        """グリッドの行数を delta だけ変え（最小 1）、変更後の行数を返す。"""
        board = self._board
        board.set_grid_density(board.grid_columns, max(1, board.grid_rows + int(delta)))
        return board.grid_rows

    # ---------- 描画設定 ----------
    def change_smoothing(self, delta: float) -> float:
        drawing = self._board.drawing
        drawing.set_smoothing(max(0.0, drawing.smoothing + delta))
        return drawing.smoothing

    def change_passes(self, delta: int) -> int:
        drawing = self._board.drawing
        drawing.set_passes(max(1, drawing.passes + int(delta)))
        return drawing.passes

    def change_stroke(self, delta: float) -> float:
        drawing = self._board.drawing
        drawing.set_stroke(max(1.0, drawing.stroke + delta))
        return drawing.stroke


__all__ = ["BoardCommands", "DEFAULT_PALETTE"]
