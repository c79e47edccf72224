# どこで: `src/freehand/interactive/runtime/window_loop.py`。
# 何を: お絵描きウィンドウ 1 枚を `pyglet.app.run()` で回すランナーを提供する。
# なぜ: 入力イベントの配送を pyglet に任せ、描画だけを一定間隔で呼び出すため。

from __future__ import annotations

from typing import Any, Callable

import pyglet


class WindowLoop:
    """ウィンドウが閉じられるまで一定間隔で `Window.draw()` を呼ぶ。

    Parameters
    ----------
    window : pyglet.window.Window
        対象ウィンドウ。
    draw_frame : Callable[[], None]
        `on_draw` で呼ぶ描画処理。back buffer へ描くだけで、`flip()` は pyglet が行う。
    fps : float
        `Window.draw()` の呼び出し頻度。`<=0` の場合は間引かない。
    """

    def __init__(self, window: Any, draw_frame: Callable[[], None], *, fps: float) -> None:
        self._window = window
        self._draw_frame = draw_frame
        self._fps = float(fps)

    def _tick(self, dt: float) -> None:
        # 閉じた後に届いた tick は捨てる。
        if self._window in pyglet.app.windows:
            self._window.draw(dt)

    def run(self) -> None:
        """ループを実行し、ウィンドウが閉じられたら戻る。"""

        def on_close(*_: object) -> None:
            pyglet.app.exit()

        self._window.push_handlers(on_close=on_close, on_draw=self._draw_frame)

        if self._fps > 0:
            pyglet.clock.schedule_interval(self._tick, 1.0 / self._fps)
        else:
            pyglet.clock.schedule(self._tick)
        try:
            pyglet.app.run(interval=None)
        finally:
            pyglet.clock.unschedule(self._tick)
