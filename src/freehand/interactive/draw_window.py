# どこで: `src/freehand/interactive/draw_window.py`。
# 何を: お絵描き用の pyglet ウィンドウ生成を行う。
# なぜ: interactive 依存をこの層に閉じ込め、core/render/export をヘッドレスに保つため。

from __future__ import annotations

import pyglet
from pyglet.window import Window

from freehand.interactive.render_settings import RenderSettings


def create_draw_window(settings: RenderSettings) -> Window:
    """設定に基づき描画ウィンドウを生成する。"""
    canvas_w, canvas_h = settings.canvas_size
    window = pyglet.window.Window(  # type: ignore[abstract]
        width=int(canvas_w),
        height=int(canvas_h),
        resizable=False,
        caption="Freehand",
        file_drops=True,
    )
    x, y = settings.window_position
    window.set_location(int(x), int(y))
    return window
