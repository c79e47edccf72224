# どこで: `src/freehand/interactive/runtime/board_window_system.py`。
# 何を: pyglet の入力イベントを Board へ配線し、ラスタレンダラーの提示面をウィンドウへ転写するサブシステムを提供する。
# なぜ: `src/freehand/api/run.py` の `run()` を「配線」に寄せ、入力と描画の責務を独立させるため。

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pyglet
from pyglet.window import key, mouse

from freehand.core.board import Board
from freehand.core.canvas import CanvasSize, Edge
from freehand.core.data_image import ImageDecodeError
from freehand.core.geometry import Point
from freehand.interactive.draw_window import create_draw_window
from freehand.interactive.render_settings import RenderSettings
from freehand.interactive.runtime.board_commands import BoardCommands
from freehand.interactive.runtime.frame_clock import FrameThrottle
from freehand.render.raster import RasterRenderer

_logger = logging.getLogger(__name__)

_GROW_KEYS: dict[int, Edge] = {
    key.LEFT: "left",
    key.RIGHT: "right",
    key.UP: "top",
    key.DOWN: "bottom",
}

# 数字キー 1..9 は BoardCommands.palette の先頭から順に対応する。
_PALETTE_KEYS: tuple[int, ...] = (
    key._1, key._2, key._3, key._4, key._5, key._6, key._7, key._8, key._9,
)


class BoardWindowSystem:
    """お絵描き（メインウィンドウ）のサブシステム。"""

    def __init__(self, board: Board, *, settings: RenderSettings) -> None:
        """描画用の window/renderer を初期化する。"""

        self._board = board
        self._settings = settings
        self._throttle = FrameThrottle(fps=settings.fps)
        # render_image の await を毎フレーム同じループで回す。
        self._loop = asyncio.new_event_loop()
        self._dirty = True

        self.window = create_draw_window(settings)
        canvas_w, canvas_h = board.canvas.as_tuple()
        self._renderer = RasterRenderer(canvas_w, canvas_h, background=settings.background)
        self._commands = BoardCommands(board, visible_surface=lambda: self._renderer.visible)
        self.window.push_handlers(
            on_key_press=self._on_key_press,
            on_mouse_press=self._on_mouse_press,
            on_mouse_drag=self._on_mouse_drag,
            on_mouse_release=self._on_mouse_release,
            on_file_drop=self._on_file_drop,
        )

    @property
    def board(self) -> Board:
        return self._board

    # ---------- 入力 ----------
    def _to_canvas(self, x: float, y: float) -> Point:
        # pyglet は左下原点、描画面は左上原点。
        return Point(float(x), float(self.window.height - y))

    def _on_mouse_press(self, x: int, y: int, button: int, _modifiers: int) -> None:
        if button == mouse.LEFT:
            self._board.begin_stroke(self._to_canvas(x, y))

    def _on_mouse_drag(
        self, x: int, y: int, _dx: int, _dy: int, buttons: int, _modifiers: int
    ) -> None:
        if buttons & mouse.LEFT:
            self._board.extend_stroke(self._to_canvas(x, y))
            self._dirty = True

    def _on_mouse_release(self, _x: int, _y: int, button: int, _modifiers: int) -> None:
        if button == mouse.LEFT:
            self._board.end_stroke()
            self._dirty = True

    def _on_file_drop(self, _x: int, _y: int, paths: list[str]) -> None:
        for p in paths:
            try:
                data = Path(p).read_bytes()
                self._loop.run_until_complete(self._board.paste_image(data))
            except (OSError, ImageDecodeError):
                _logger.exception("Failed to paste image: %s", p)
        self._dirty = True

    def _on_key_press(self, symbol: int, modifiers: int) -> None:
        commands = self._commands
        if symbol == key.Z and modifiers & (key.MOD_CTRL | key.MOD_COMMAND):
            commands.undo()
        elif symbol == key.S:
            commands.save_svg()
        elif symbol == key.P:
            commands.save_png()
        elif symbol == key.C:
            size = commands.crop()
            if size is not None:
                self._apply_canvas(size)
        elif symbol in _GROW_KEYS:
            self._apply_canvas(commands.grow(_GROW_KEYS[symbol]))
        elif symbol == key.G:
            commands.toggle_grid()
        elif symbol in _PALETTE_KEYS:
            commands.select_color(_PALETTE_KEYS.index(symbol))
        elif symbol in (key.SEMICOLON, key.APOSTROPHE):
            delta = -1 if symbol == key.SEMICOLON else 1
            if modifiers & key.MOD_SHIFT:
                commands.change_grid_rows(delta)
            else:
                commands.change_grid_columns(delta)
        elif symbol == key.BRACKETLEFT:
            commands.change_smoothing(-1)
        elif symbol == key.BRACKETRIGHT:
            commands.change_smoothing(1)
        elif symbol == key.MINUS:
            commands.change_passes(-1)
        elif symbol == key.EQUAL:
            commands.change_passes(1)
        elif symbol == key.COMMA:
            commands.change_stroke(-1)
        elif symbol == key.PERIOD:
            commands.change_stroke(1)
        else:
            return
        self._dirty = True

    def _apply_canvas(self, size: CanvasSize) -> None:
        self._renderer.resize(size.width, size.height)
        self.window.set_size(size.width, size.height)
        self._throttle.reset()

    # ---------- 保存 ----------
    def save_svg(self) -> Path | None:
        """現在の内容を SVG として保存し、保存先パスを返す（失敗時は None）。"""
        return self._commands.save_svg()

    def save_png(self) -> Path | None:
        """最後に提示したフレームを PNG として保存し、保存先パスを返す（失敗時は None）。"""
        return self._commands.save_png()

    # ---------- 描画 ----------
    def draw_frame(self) -> None:
        """1 フレーム分の描画を行う（`flip()` は呼ばない）。"""

        if self._dirty and self._throttle.ready():
            self._dirty = False
            board = self._board
            self._loop.run_until_complete(board.drawing.draw(board.drawables, self._renderer))

        self.window.clear()
        surface = self._renderer.visible
        w, h = surface.size
        # Pillow は上から下、pyglet は下から上の行順なので負の pitch で反転する。
        image = pyglet.image.ImageData(w, h, "RGBA", surface.tobytes(), pitch=-w * 4)
        image.blit(0, 0)

    def close(self) -> None:
        """イベントループ / window 資源を解放する。"""

        self._loop.close()
        self.window.close()
