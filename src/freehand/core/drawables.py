"""
どこで: `src/freehand/core/drawables.py`。
何を: Line / DataImage のどちらかを包む Drawable と、その順序付き集合 Drawables を提供する。
なぜ: 平行移動・外接矩形・Undo を種類ごとの分岐込みで 1 箇所に閉じ込め、描画側を単純に保つため。
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from freehand.core.data_image import DataImage
from freehand.core.geometry import BoundingBox
from freehand.core.line import Line

DrawableItem = Union[Line, DataImage]


@dataclass(frozen=True, slots=True)
class Drawable:
    """描画対象 1 つ（Line または DataImage）。

    Notes
    -----
    item の複製は持たず、渡された Line/DataImage をそのまま参照する。
    """

    item: DrawableItem

    def __post_init__(self) -> None:
        if not isinstance(self.item, (Line, DataImage)):
            raise TypeError(f"Invalid drawable: {self.item!r}")

    def shift_by(self, dx: float, dy: float) -> None:
        """item を (dx, dy) だけ平行移動する。"""
        item = self.item
        if isinstance(item, Line):
            item.translate(dx, dy)
        elif isinstance(item, DataImage):
            item.translate(dx, dy)
        else:
            raise TypeError(f"Invalid drawable: {item!r}")

    def bounding_box(self) -> BoundingBox | None:
        """item の外接矩形を返す。点を持たない Line は None。"""
        item = self.item
        if isinstance(item, Line):
            return item.bounding_box()
        if isinstance(item, DataImage):
            return item.bounding_box()
        raise TypeError(f"Invalid drawable: {item!r}")

    def is_placeholder(self) -> bool:
        """点を持たない Line（入力待ちのプレースホルダ）かを返す。"""
        return isinstance(self.item, Line) and len(self.item.points) == 0


class Drawables:
    """Drawable の順序付き集合。後ろほど上に描かれ、Undo の対象にもなる。"""

    def __init__(self) -> None:
        self.items: list[Drawable] = []

    def __iter__(self) -> Iterator[Drawable]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def append(self, item: DrawableItem) -> Drawable:
        """item を Drawable で包んで末尾に追加し、その Drawable を返す。"""
        drawable = Drawable(item)
        self.items.append(drawable)
        return drawable

    def undo_last(self) -> None:
        """末尾の空 Line を読み飛ばしつつ、直近の意味のある要素を 1 つ取り除く。

        呼び出し側は、この後に新しい空 Line を追加してプレースホルダを補う。
        """
        while self.items:
            drawable = self.items.pop()
            if drawable.is_placeholder():
                continue
            break

    def translate_all(self, dx: float, dy: float) -> None:
        """全要素を (dx, dy) だけ平行移動する。"""
        for drawable in self.items:
            drawable.shift_by(dx, dy)

    def bounding_box(self) -> BoundingBox | None:
        """全要素を覆う最小の矩形を返す。覆う対象が無い場合は None。"""
        box: BoundingBox | None = None
        for drawable in self.items:
            b = drawable.bounding_box()
            if b is None:
                continue
            box = b if box is None else box.union(b)
        return box

    def lines(self) -> list[Line]:
        """Line 要素だけを順に返す。"""
        return [d.item for d in self.items if isinstance(d.item, Line)]

    def images(self) -> list[DataImage]:
        """DataImage 要素だけを順に返す。"""
        return [d.item for d in self.items if isinstance(d.item, DataImage)]


__all__ = ["Drawable", "DrawableItem", "Drawables"]
