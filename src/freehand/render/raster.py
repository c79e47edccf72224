"""
どこで: `src/freehand/render/raster.py`。
何を: Pillow の RGBA 画像 2 枚（描画用 / 提示用）によるダブルバッファのラスタレンダラーを提供する。
なぜ: フェード描画の途中経過（ゴースト線）を見せず、描き終えたフレームだけを提示するため。
"""

from __future__ import annotations

from collections.abc import Callable
from math import ceil, floor

from PIL import Image, ImageDraw

from freehand.core.data_image import DataImage
from freehand.core.geometry import Color, Point
from freehand.core.line import Line
from freehand.render.base import Renderer, effective_stroke_width

SurfaceFactory = Callable[[int, int], Image.Image]

_TRANSPARENT = (0, 0, 0, 0)


def new_surface(width: int, height: int) -> Image.Image:
    """透明で初期化した RGBA 描画面を返す。"""
    return Image.new("RGBA", (int(width), int(height)), _TRANSPARENT)


def _rgba255(color: str) -> tuple[int, int, int, int]:
    c, opacity = Color.parse_encoding(color)
    r, g, b = c.to_rgb255()
    return r, g, b, int(round(opacity * 255.0))


class RasterRenderer(Renderer):
    """ダブルバッファのラスタレンダラー。

    Parameters
    ----------
    width, height : int
        描画面の寸法（px）。
    background : Color or None, optional
        reset 時の塗り色。None の場合は透明。
    surface_factory : SurfaceFactory or None, optional
        描画面を生成する関数。None の場合は `new_surface`。

    Notes
    -----
    `reset` は描画用の面だけを消去し、`swap` で提示用の面を消去してから描画用の面を転写する。
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        background: Color | None = None,
        surface_factory: SurfaceFactory | None = None,
    ) -> None:
        self._factory: SurfaceFactory = surface_factory or new_surface
        self._background = background
        self._width = 0
        self._height = 0
        self._draw_surface: Image.Image
        self._visible_surface: Image.Image
        self.resize(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def draw_surface(self) -> Image.Image:
        """描画中の（非表示の）面。"""
        return self._draw_surface

    @property
    def visible(self) -> Image.Image:
        """最後に提示したフレーム。"""
        return self._visible_surface

    def resize(self, width: int, height: int) -> None:
        """両方の描画面を指定寸法で作り直す。"""
        w = int(width)
        h = int(height)
        if w <= 0 or h <= 0:
            raise ValueError(f"描画面の寸法は正の値である必要がある: {(width, height)!r}")
        self._width = w
        self._height = h
        self._draw_surface = self._factory(w, h)
        self._visible_surface = self._factory(w, h)
        self.reset()

    def _fill(self) -> tuple[int, int, int, int]:
        if self._background is None:
            return _TRANSPARENT
        r, g, b = self._background.to_rgb255()
        return r, g, b, 255

    def reset(self) -> None:
        self._draw_surface.paste(self._fill(), (0, 0, self._width, self._height))

    def swap(self) -> None:
        self._visible_surface.paste(_TRANSPARENT, (0, 0, self._width, self._height))
        self._visible_surface.alpha_composite(self._draw_surface)

    def render_line(self, line: Line, stroke_width: float, color: str) -> None:
        if not isinstance(line, Line):
            raise TypeError(f"expected line: {line!r}")
        if len(line.points) < 2:
            return

        width = effective_stroke_width(stroke_width)
        fill = _rgba255(color)

        # 線の外接矩形（線幅ぶん余白を取る）だけを一時レイヤーに描いて合成する。
        xy = line.coords()
        pad = width / 2.0 + 1.0
        left = max(0, int(floor(float(xy[:, 0].min()) - pad)))
        top = max(0, int(floor(float(xy[:, 1].min()) - pad)))
        right = min(self._width, int(ceil(float(xy[:, 0].max()) + pad)) + 1)
        bottom = min(self._height, int(ceil(float(xy[:, 1].max()) + pad)) + 1)
        if right <= left or bottom <= top:
            return

        layer = Image.new("RGBA", (right - left, bottom - top), _TRANSPARENT)
        points = [(float(x) - left, float(y) - top) for x, y in xy]
        ImageDraw.Draw(layer).line(
            points, fill=fill, width=max(1, int(round(width))), joint="curve"
        )
        self._draw_surface.alpha_composite(layer, dest=(left, top))

    async def render_image(self, point: Point, image: DataImage) -> None:
        if not isinstance(point, Point):
            raise TypeError("Expected point")
        if not isinstance(image, DataImage):
            raise TypeError(f"expected data image: {image!r}")

        bitmap = await image.ensure_bitmap()

        layer = Image.new("RGBA", (self._width, self._height), _TRANSPARENT)
        layer.paste(bitmap, (int(floor(point.x)), int(floor(point.y))))
        self._draw_surface.alpha_composite(layer)


__all__ = ["RasterRenderer", "SurfaceFactory", "new_surface"]
