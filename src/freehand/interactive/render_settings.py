# どこで: `src/freehand/interactive/render_settings.py`。
# 何を: interactive 描画設定の束を表すデータクラスを定義する。
# なぜ: `run` の引数を簡潔に保ちつつ、interactive 側の設定を一元管理するため。

from __future__ import annotations

from dataclasses import dataclass

from freehand.core.geometry import Color


@dataclass(frozen=True, slots=True)
class RenderSettings:
    """リアルタイム描画に用いる設定値の集合。"""

    canvas_size: tuple[int, int] = (800, 600)
    background: Color = Color(1.0, 1.0, 1.0)
    fps: float = 25.0
    window_position: tuple[int, int] = (25, 25)
