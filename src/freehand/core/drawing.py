# どこで: `src/freehand/core/drawing.py`。
# 何を: Grid + Drawables + Renderer を組み合わせ、1 フレーム分のフェード描画を行う Drawing を提供する。
# なぜ: 平滑化/フェードの手順を 1 箇所にまとめ、ラスタ表示と SVG 書き出しで同じ結果を得るため。

from __future__ import annotations

import logging
from math import floor, isfinite

from freehand.core.data_image import DataImage, ImageDecodeError
from freehand.core.drawables import Drawable, Drawables
from freehand.core.line import Line
from freehand.core.primitives.grid import Grid
from freehand.render.base import Renderer

_logger = logging.getLogger(__name__)


def _as_setting(value: object, *, key: str) -> float:
    try:
        v = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} は数値である必要がある: got={value!r}") from exc
    if not isfinite(v):
        raise ValueError(f"{key} は有限値である必要がある: got={value!r}")
    return v


class Drawing:
    """描画設定（平滑化量 / パス数 / 線幅）と任意の Grid を保持し、フレームを描く。

    Parameters
    ----------
    smoothing : float, optional
        平滑化の窓幅。
    passes : int, optional
        平滑化パス数。描画時に最小 1 へ clamp する。
    stroke : float, optional
        最終ストロークの線幅。
    grid : Grid or None, optional
        背景グリッド。

    Notes
    -----
    Drawables と Renderer は `draw` の間だけ借りる（保持しない）。
    """

    def __init__(
        self,
        *,
        smoothing: float = 1,
        passes: int = 1,
        stroke: float = 1.0,
        grid: Grid | None = None,
    ) -> None:
        self.smoothing = 1.0
        self.passes = 1
        self.stroke = 1.0
        self.grid: Grid | None = None
        self.set_smoothing(smoothing)
        self.set_passes(passes)
        self.set_stroke(stroke)
        if grid is not None:
            self.show_grid(grid)

    def set_smoothing(self, value: float) -> None:
        self.smoothing = _as_setting(value, key="smoothing")

    def set_passes(self, value: int) -> None:
        self.passes = int(_as_setting(value, key="passes"))

    def set_stroke(self, value: float) -> None:
        self.stroke = _as_setting(value, key="stroke")

    def has_grid(self) -> bool:
        return isinstance(self.grid, Grid)

    def show_grid(self, grid: Grid) -> None:
        if not isinstance(grid, Grid):
            raise TypeError("invalid grid")
        self.grid = grid

    def hide_grid(self) -> None:
        self.grid = None

    def effective_passes(self) -> int:
        """描画に使うパス数（最小 1）を返す。"""
        return max(1, int(self.passes))

    def render_faded(self, line: Line, renderer: Renderer, passes: int | None = None) -> None:
        """line をゴースト（薄く細く段階的に平滑化した線）→ 最終ストロークの順に描く。

        i = 1..passes-1 について ratio = i/passes とし、直前のゴーストに
        窓幅 floor(ratio * smoothing) の平滑化を 1 パス重ね、線幅 stroke*ratio・
        不透明度 ratio で描く。最後に元の線を smoothing/passes で平滑化し、
        線幅 stroke・不透明で描く。
        """
        n = self.effective_passes() if passes is None else max(1, int(passes))
        ghost = line.clone()
        for i in range(1, n):
            ratio = i / n
            ghost = ghost.smooth_pass(floor(ratio * self.smoothing))
            renderer.render_line(ghost, self.stroke * ratio, ghost.color.to_rgba(ratio))
        renderer.render_line(
            line.smooth(self.smoothing, n),
            self.stroke,
            line.color.to_rgb(),
        )

    async def draw(self, drawables: Drawables, renderer: Renderer) -> None:
        """1 フレーム分を描画して提示する。

        Parameters
        ----------
        drawables : Drawables
            描画対象。先頭から順に描き、後ろほど上に重なる。
        renderer : Renderer
            描画先バックエンド。

        Raises
        ------
        TypeError
            drawables/renderer の型が不正、または Line/DataImage 以外の要素を含む場合。

        Notes
        -----
        画像は配置完了を await してから次の要素へ進む。
        画像のデコードに失敗した場合はその画像だけを飛ばし、残りの描画と `swap()` は続行する。
        """
        if not isinstance(drawables, Drawables):
            raise TypeError("expected drawables")
        if not isinstance(renderer, Renderer):
            raise TypeError("expected renderer")

        renderer.reset()
        passes = self.effective_passes()

        grid = self.grid
        if grid is not None:
            for grid_line in grid.lines:
                self.render_faded(grid_line, renderer, passes)

        for entry in drawables.items:
            if not isinstance(entry, Drawable):
                raise TypeError(f"invalid drawable: {entry!r}")
            item = entry.item
            if isinstance(item, DataImage):
                try:
                    await renderer.render_image(item.point, item)
                except ImageDecodeError:
                    _logger.warning("Failed to place image at %s", item.point, exc_info=True)
                continue
            if isinstance(item, Line):
                if not item.points:
                    continue
                self.render_faded(item, renderer, passes)
                continue
            raise TypeError(f"invalid drawable: {item!r}")

        renderer.swap()


__all__ = ["Drawing"]
