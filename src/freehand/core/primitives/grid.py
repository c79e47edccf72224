"""
どこで: `src/freehand/core/primitives/grid.py`。背景グリッドの Line 列生成。
何を: 列数/行数/目盛り数と描画面の寸法から、罫線の Line 列（横線 → 縦線の順）を構築する。
なぜ: 背景ガイドをストロークと同じ平滑化・フェード描画に載せ、手描き風に見せるため。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from freehand.core.geometry import Color, Point
from freehand.core.line import Line

DEFAULT_TICKS_PER_CELL = 5


@dataclass(frozen=True, slots=True)
class GridColors:
    """グリッド線の配色（通常線 / 強調線）。"""

    normal: Color = Color.from_encoding("#DDDDDD")
    accent: Color = Color.from_encoding("#BBBBBB")


class Grid:
    """背景の罫線。

    Parameters
    ----------
    columns, rows : int
        セルの列数/行数。
    width, height : float
        対象描画面の寸法。
    ticks_per_cell : int, optional
        1 セルあたりの罫線本数。`ticks_per_cell` 本ごとに強調線になる。
    colors : GridColors, optional
        配色。
    jitter : bool, optional
        True の場合は Line.between の揺らぎ付きで手描き風にする。
    seed : int or None, optional
        揺らぎの乱数シード。

    Notes
    -----
    密度や描画面寸法が変わったときは `populate` で全体を作り直す（部分更新はしない）。
    """

    def __init__(
        self,
        columns: int,
        rows: int,
        width: float,
        height: float,
        *,
        ticks_per_cell: int = DEFAULT_TICKS_PER_CELL,
        colors: GridColors | None = None,
        jitter: bool = True,
        seed: int | None = None,
    ) -> None:
        self.colors = colors if colors is not None else GridColors()
        self.jitter = bool(jitter)
        self._rng = np.random.default_rng(seed)
        self.columns = 0
        self.rows = 0
        self.ticks_per_cell = 0
        self.width = 0.0
        self.height = 0.0
        self.lines: list[Line] = []
        self.populate(columns, rows, width, height, ticks_per_cell)

    def color_for(self, tick: int) -> Color:
        """tick 番目の罫線の色を返す。"""
        if tick % self.ticks_per_cell == 0:
            return self.colors.accent
        return self.colors.normal

    def populate(
        self,
        columns: int,
        rows: int,
        width: float,
        height: float,
        ticks_per_cell: int = DEFAULT_TICKS_PER_CELL,
    ) -> list[Line]:
        """罫線を生成し直して返す。

        Returns
        -------
        list[Line]
            `rows * ticks_per_cell` 本の横線に続いて `columns * ticks_per_cell` 本の縦線。
        """
        columns_i = int(columns)
        rows_i = int(rows)
        ticks_i = int(ticks_per_cell)
        if columns_i < 1 or rows_i < 1:
            raise ValueError("grid の columns/rows は 1 以上である必要がある")
        if ticks_i < 1:
            raise ValueError("grid の ticks_per_cell は 1 以上である必要がある")
        w = float(width)
        h = float(height)
        if not (w > 0.0 and h > 0.0):
            raise ValueError("grid の width/height は正の値である必要がある")

        self.columns = columns_i
        self.rows = rows_i
        self.ticks_per_cell = ticks_i
        self.width = w
        self.height = h

        lines: list[Line] = []

        n_horizontal = rows_i * ticks_i
        spacing_y = h / n_horizontal
        for i in range(n_horizontal):
            y = i * spacing_y
            lines.append(self._line(Point(0.0, y), Point(w, y), self.color_for(i)))

        n_vertical = columns_i * ticks_i
        spacing_x = w / n_vertical
        for i in range(n_vertical):
            x = i * spacing_x
            lines.append(self._line(Point(x, 0.0), Point(x, h), self.color_for(i)))

        self.lines = lines
        return lines

    def _line(self, a: Point, b: Point, color: Color) -> Line:
        return Line.between(a, b, color, rng=self._rng, jitter=self.jitter)


__all__ = ["DEFAULT_TICKS_PER_CELL", "Grid", "GridColors"]
