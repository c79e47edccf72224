"""
どこで: `src/freehand/api/run.py`。公開 API のランナー実装。
何を: config.yaml の既定値から Drawing / Board を組み立て、pyglet ウィンドウでお絵描きを開始する。
なぜ: `main.py` を実行して実際に線を描き、SVG/PNG に書き出せる経路を用意するため。
"""

from __future__ import annotations

from pathlib import Path

from freehand.core.board import Board
from freehand.core.canvas import CanvasSize
from freehand.core.drawing import Drawing
from freehand.core.runtime_config import runtime_config, set_config_path


def build_board(*, canvas_size: tuple[int, int] | None = None, grid: bool = False) -> Board:
    """実行時設定から Drawing と Board を組み立てて返す。"""

    cfg = runtime_config()
    drawing = Drawing(smoothing=cfg.smoothing, passes=cfg.passes, stroke=cfg.stroke)
    canvas_w, canvas_h = canvas_size if canvas_size is not None else cfg.canvas_size
    board = Board(
        CanvasSize(canvas_w, canvas_h),
        foreground=cfg.foreground,
        drawing=drawing,
        grid_columns=cfg.grid_columns,
        grid_rows=cfg.grid_rows,
        grid_ticks=cfg.grid_ticks,
    )
    if grid:
        board.show_grid()
    return board


def run(
    *,
    canvas_size: tuple[int, int] | None = None,
    grid: bool = False,
    config_path: str | Path | None = None,
) -> None:
    """pyglet ウィンドウを生成し、フリーハンド描画を開始する。

    Parameters
    ----------
    canvas_size : tuple[int, int] | None
        描画面寸法（px）。None の場合は config.yaml の `canvas.size`。
    grid : bool
        True の場合は背景グリッドを表示した状態で開始する。
    config_path : str | Path | None
        明示的に読み込む config.yaml。

    Returns
    -------
    None
        ウィンドウを閉じると制御を返す。
    """

    # interactive 依存（pyglet）はウィンドウを開くときだけ import する。
    from freehand.interactive.render_settings import RenderSettings
    from freehand.interactive.runtime.board_window_system import BoardWindowSystem
    from freehand.interactive.runtime.window_loop import WindowLoop

    if config_path is not None:
        set_config_path(config_path)
    cfg = runtime_config()

    board = build_board(canvas_size=canvas_size, grid=grid)
    settings = RenderSettings(
        canvas_size=board.canvas.as_tuple(),
        background=cfg.background,
        fps=cfg.fps,
        window_position=cfg.window_position,
    )
    system = BoardWindowSystem(board, settings=settings)
    try:
        # ウィンドウはディスプレイのリフレッシュ程度で回し、重い再描画は FrameThrottle で間引く。
        WindowLoop(system.window, system.draw_frame, fps=60.0).run()
    finally:
        system.close()


__all__ = ["build_board", "run"]
