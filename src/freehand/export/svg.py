"""
どこで: `src/freehand/export/svg.py`。
何を: Drawables を Drawing の手順でベクタレンダラーに描き、SVG として保存する関数を提供する。
なぜ: 画面と同じ平滑化/フェード結果を、ウィンドウ無しで拡大に強い文書として書き出すため。
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from freehand.core.drawables import Drawables
from freehand.core.drawing import Drawing
from freehand.render.vector import VectorRenderer

_logger = logging.getLogger(__name__)


async def render_svg(
    drawables: Drawables,
    drawing: Drawing,
    *,
    canvas_size: tuple[int, int],
) -> VectorRenderer:
    """新規の VectorRenderer へ 1 回描画し、そのレンダラーを返す。"""
    canvas_w, canvas_h = canvas_size
    renderer = VectorRenderer.for_canvas(canvas_w, canvas_h)
    await drawing.draw(drawables, renderer)
    return renderer


def export_svg(
    drawables: Drawables,
    drawing: Drawing,
    path: str | Path,
    *,
    canvas_size: tuple[int, int] | None = None,
) -> Path:
    """Drawables を SVG として保存する。

    Parameters
    ----------
    drawables : Drawables
        描画対象。
    drawing : Drawing
        平滑化/フェード設定とグリッド。
    path : str or Path
        出力先パス。親ディレクトリは必要なら作成する。
    canvas_size : tuple[int, int] or None, optional
        描画面寸法。viewBox に使う。None は未対応。

    Returns
    -------
    Path
        保存先パス。

    Raises
    ------
    ValueError
        canvas_size が None、または正でない場合。
    """
    _path = Path(path)
    if canvas_size is None:
        raise ValueError("canvas_size=None は未対応（現在は必須）")

    renderer = asyncio.run(render_svg(drawables, drawing, canvas_size=canvas_size))

    _path.parent.mkdir(parents=True, exist_ok=True)
    with _path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(renderer.to_string())

    _logger.info("Saved SVG: %s", _path)
    return _path


__all__ = ["export_svg", "render_svg"]
