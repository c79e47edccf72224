"""
どこで: `src/freehand/core/canvas.py`。
何を: 描画面寸法 CanvasSize と、内容への切り詰め（crop）・辺ごとの拡張（grow）を提供する。
なぜ: 描画面の寸法変更に伴う Drawables の平行移動規則を、入力処理から切り離して検証可能にするため。
"""

from __future__ import annotations

from dataclasses import dataclass
from math import ceil
from typing import Literal

from freehand.core.drawables import Drawables

Edge = Literal["left", "right", "top", "bottom"]
EDGES: tuple[Edge, ...] = ("left", "right", "top", "bottom")


@dataclass(frozen=True, slots=True)
class CanvasSize:
    """描画面の寸法（px）。"""

    width: int
    height: int

    def __post_init__(self) -> None:
        w = int(self.width)
        h = int(self.height)
        if w <= 0 or h <= 0:
            raise ValueError(f"canvas_size は正の値である必要がある: {(self.width, self.height)!r}")
        object.__setattr__(self, "width", w)
        object.__setattr__(self, "height", h)

    def as_tuple(self) -> tuple[int, int]:
        return self.width, self.height


def crop_to_content(drawables: Drawables) -> CanvasSize | None:
    """内容の最小角が原点に来るよう全体を移動し、内容を覆う寸法を返す。

    Returns
    -------
    CanvasSize or None
        切り詰め後の寸法。覆う対象が無い場合は何もせず None。
    """
    box = drawables.bounding_box()
    if box is None:
        return None
    drawables.translate_all(-box.min.x, -box.min.y)
    return CanvasSize(max(1, int(ceil(box.width))), max(1, int(ceil(box.height))))


def grow(drawables: Drawables, canvas: CanvasSize, edge: Edge) -> CanvasSize:
    """描画面を edge 側へ現在寸法の半分だけ広げた寸法を返す。

    left/top へ広げる場合は内容が画面上で動かないよう、広げた分だけ Drawables を移動する。
    right/bottom の場合は Drawables に触れない。
    """
    if edge not in EDGES:
        raise ValueError(f"未対応の edge: {edge!r}")

    if edge in ("left", "right"):
        delta = max(1, canvas.width // 2)
        if edge == "left":
            drawables.translate_all(delta, 0)
        return CanvasSize(canvas.width + delta, canvas.height)

    delta = max(1, canvas.height // 2)
    if edge == "top":
        drawables.translate_all(0, delta)
    return CanvasSize(canvas.width, canvas.height + delta)


__all__ = ["CanvasSize", "EDGES", "Edge", "crop_to_content", "grow"]
