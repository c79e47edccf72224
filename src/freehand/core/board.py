"""
どこで: `src/freehand/core/board.py`。
何を: 入力側の状態（描画中フラグ / 現在のストローク / 最後の押下位置 / 描画面寸法 / グリッド）を管理する Board を提供する。
なぜ: ポインタやキー入力の配線（pyglet）から、Drawables を操作する規則を切り離してテスト可能にするため。
"""

from __future__ import annotations

from freehand.core.canvas import CanvasSize, Edge, crop_to_content, grow
from freehand.core.data_image import DataImage
from freehand.core.drawables import Drawables
from freehand.core.drawing import Drawing
from freehand.core.geometry import Color, Point
from freehand.core.line import Line
from freehand.core.primitives.grid import DEFAULT_TICKS_PER_CELL, Grid


class Board:
    """ストローク入力と描画面操作の状態機械。

    Notes
    -----
    Drawables の末尾には常に空の Line（現在のストローク）が 1 本ある状態を保つ。
    """

    def __init__(
        self,
        canvas: CanvasSize,
        *,
        foreground: Color,
        drawing: Drawing | None = None,
        grid_columns: int = 4,
        grid_rows: int = 4,
        grid_ticks: int = DEFAULT_TICKS_PER_CELL,
        grid_seed: int | None = None,
    ) -> None:
        if not isinstance(foreground, Color):
            raise TypeError(f"Invalid color value: {foreground!r}")
        self.canvas = canvas
        self.foreground = foreground
        self.drawing = drawing if drawing is not None else Drawing()
        self.drawables = Drawables()
        self.grid_columns = int(grid_columns)
        self.grid_rows = int(grid_rows)
        self.grid_ticks = int(grid_ticks)
        self._grid_seed = grid_seed
        self.is_drawing = False
        self.last_pos = Point(0, 0)
        self.current_line = self._start_line()

    def _start_line(self) -> Line:
        line = Line(self.foreground)
        self.drawables.append(line)
        self.current_line = line
        return line

    # ---------- ストローク ----------
    def begin_stroke(self, point: Point) -> None:
        """押下: 描画を開始し、押下位置を覚える。"""
        self.is_drawing = True
        self.last_pos = point

    def extend_stroke(self, point: Point) -> None:
        """移動: 描画中なら現在のストロークへ点を追加する。"""
        if self.is_drawing:
            self.current_line.add(point)

    def end_stroke(self) -> None:
        """解放: ストロークを確定し、新しい空の Line を追加する。"""
        self.is_drawing = False
        self._start_line()

    def undo(self) -> None:
        """直近のストローク（または画像）を取り除き、空の Line を補う。"""
        self.drawables.undo_last()
        self._start_line()

    def set_color(self, color: Color) -> None:
        """描画色を変え、入力中のストロークにも反映する。"""
        if not isinstance(color, Color):
            raise TypeError(f"Invalid color value: {color!r}")
        self.foreground = color
        self.current_line.set_color(color)

    async def paste_image(self, data: bytes) -> DataImage:
        """画像を最後の押下位置に貼り付け、新しい空の Line を追加する。"""
        image = await DataImage.from_bytes_at(data, self.last_pos)
        self.drawables.append(image)
        self._start_line()
        return image

    # ---------- 描画面 ----------
    def resize(self, canvas: CanvasSize) -> None:
        """描画面寸法を差し替え、表示中のグリッドを作り直す。"""
        self.canvas = canvas
        if self.drawing.has_grid():
            self.show_grid()

    def crop(self) -> CanvasSize | None:
        """描画面を内容に合わせて切り詰める。内容が無ければ何もしない。"""
        size = crop_to_content(self.drawables)
        if size is not None:
            self.resize(size)
        return size

    def grow(self, edge: Edge) -> CanvasSize:
        """描画面を edge 側へ広げる。"""
        size = grow(self.drawables, self.canvas, edge)
        self.resize(size)
        return size

    # ---------- グリッド ----------
    def show_grid(self) -> Grid:
        """現在の密度と描画面寸法でグリッドを生成して表示する。"""
        grid = Grid(
            self.grid_columns,
            self.grid_rows,
            self.canvas.width,
            self.canvas.height,
            ticks_per_cell=self.grid_ticks,
            seed=self._grid_seed,
        )
        self.drawing.show_grid(grid)
        return grid

    def hide_grid(self) -> None:
        self.drawing.hide_grid()

    def toggle_grid(self) -> bool:
        """グリッドの表示を切り替え、切り替え後に表示中かを返す。"""
        if self.drawing.has_grid():
            self.hide_grid()
            return False
        self.show_grid()
        return True

    def set_grid_density(self, columns: int, rows: int) -> None:
        """グリッド密度を変える。表示中なら作り直す。"""
        self.grid_columns = int(columns)
        self.grid_rows = int(rows)
        if self.drawing.has_grid():
            self.show_grid()


__all__ = ["Board"]
