"""
どこで: `src/freehand/export/image.py`。
何を: Drawables をラスタレンダラーで描き、提示済みフレームを PNG として保存する関数を提供する。
なぜ: 画面プレビューと同じ画素結果を、外部ラスタライザ無しで保存できるようにするため。
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from PIL import Image

from freehand.core.drawables import Drawables
from freehand.core.drawing import Drawing
from freehand.core.geometry import Color
from freehand.export.svg import export_svg
from freehand.render.raster import RasterRenderer

_logger = logging.getLogger(__name__)

_WHITE = Color(1.0, 1.0, 1.0)


async def render_png(
    drawables: Drawables,
    drawing: Drawing,
    *,
    canvas_size: tuple[int, int],
    background: Color | None = None,
) -> Image.Image:
    """新規の RasterRenderer へ 1 回描画し、提示済みフレームを返す。"""
    canvas_w, canvas_h = canvas_size
    renderer = RasterRenderer(canvas_w, canvas_h, background=background)
    await drawing.draw(drawables, renderer)
    return renderer.visible


def save_png(surface: Image.Image, path: str | Path) -> Path:
    """描画面を PNG として保存する。"""
    _path = Path(path)
    _path.parent.mkdir(parents=True, exist_ok=True)
    surface.save(_path, format="PNG")
    _logger.info("Saved PNG: %s", _path)
    return _path


def export_png(
    drawables: Drawables,
    drawing: Drawing,
    path: str | Path,
    *,
    canvas_size: tuple[int, int] | None = None,
    background: Color | None = _WHITE,
) -> Path:
    """Drawables を PNG として保存する。"""
    if canvas_size is None:
        raise ValueError("canvas_size=None は未対応（現在は必須）")
    surface = asyncio.run(
        render_png(drawables, drawing, canvas_size=canvas_size, background=background)
    )
    return save_png(surface, path)


def export_image(
    drawables: Drawables,
    drawing: Drawing,
    path: str | Path,
    *,
    canvas_size: tuple[int, int] | None = None,
    background: Color | None = _WHITE,
) -> Path:
    """拡張子（.svg / .png）に応じて Drawables を保存する。

    Raises
    ------
    ValueError
        未対応の拡張子、または canvas_size が None の場合。
    """
    _path = Path(path)
    suffix = _path.suffix.lower()

    if suffix == ".svg":
        return export_svg(drawables, drawing, _path, canvas_size=canvas_size)
    if suffix == ".png":
        return export_png(
            drawables, drawing, _path, canvas_size=canvas_size, background=background
        )

    raise ValueError(f"未対応の画像フォーマット: {suffix!r}")


__all__ = ["export_image", "export_png", "render_png", "save_png"]
