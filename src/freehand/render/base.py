# どこで: `src/freehand/render/base.py`。
# 何を: 描画バックエンドが満たすべき操作（reset / render_line / render_image / swap）を定義する。
# なぜ: Drawing がバックエンドの種類で分岐せず、ラスタ表示とベクタ書き出しを同じ経路で描けるようにするため。

from __future__ import annotations

from abc import ABC, abstractmethod

from freehand.core.data_image import DataImage
from freehand.core.geometry import Point
from freehand.core.line import Line

MIN_STROKE_WIDTH = 1.0


def effective_stroke_width(stroke_width: float) -> float:
    """描画時の線幅（最小 1 に clamp）を返す。"""
    w = float(stroke_width)
    return MIN_STROKE_WIDTH if w < MIN_STROKE_WIDTH else w


class Renderer(ABC):
    """描画バックエンドの抽象基底。

    Notes
    -----
    `render_image` は画像のデコード待ちで中断し得るため coroutine とする。
    呼び出し側は完了を await してから後続の描画を行う。
    """

    @abstractmethod
    def reset(self) -> None:
        """描画面を初期状態に戻す。"""

    @abstractmethod
    def render_line(self, line: Line, stroke_width: float, color: str) -> None:
        """line の点列を折れ線として描く。2 点未満なら何もしない。"""

    @abstractmethod
    async def render_image(self, point: Point, image: DataImage) -> None:
        """image を左上が point に来るように配置する。"""

    def swap(self) -> None:
        """描き終えたフレームを提示する（既定はバッファ無しの no-op）。"""
        return


__all__ = ["MIN_STROKE_WIDTH", "Renderer", "effective_stroke_width"]
