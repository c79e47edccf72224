"""
どこで: `src/freehand/core/line.py`。
何を: ストローク（点列 + 色）を表す Line と、その平滑化アルゴリズムを提供する。
なぜ: ポインタ入力のガタつきを複数パスの移動平均で均し、描画側から再利用できるようにするため。
"""

from __future__ import annotations

from collections.abc import Iterable
from math import ceil, hypot

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from freehand.core.geometry import BoundingBox, Color, Point

# Line.between の揺らぎ量。距離に依らず ±_WOBBLE/2 の範囲になる。
_WOBBLE = 15.0
# Line.between の中間点の目安間隔。
_WOBBLE_SPACING = 10.0


class Line:
    """色付きの点列（ストローク）。

    Notes
    -----
    点列は外部からは追加のみ（`add`）を行い、切り詰めは行わない。
    平滑化は常に新しい Line を返し、元の点列は変更しない。
    """

    __slots__ = ("points", "color")

    def __init__(self, color: Color, points: Iterable[Point] | None = None) -> None:
        self.points: list[Point] = []
        self.color: Color
        self.set_color(color)
        if points is not None:
            for p in points:
                self.add(p)

    def __repr__(self) -> str:
        return f"Line(color={self.color!r}, points={len(self.points)})"

    def __len__(self) -> int:
        return len(self.points)

    def set_color(self, color: Color) -> None:
        """線色を差し替える。"""
        if not isinstance(color, Color):
            raise TypeError(f"Invalid color value: {color!r}")
        self.color = color

    def add(self, point: Point) -> None:
        """点を末尾に追加する。"""
        if not isinstance(point, Point):
            raise TypeError("Can't add non-point")
        self.points.append(point)

    def clone(self) -> "Line":
        """同じ色・同じ点列を持つ新しい Line を返す（点列リストは複製する）。"""
        ret = Line(self.color)
        ret.points = list(self.points)
        return ret

    def coords(self) -> np.ndarray:
        """点列を float64 shape (N, 2) の配列として返す。"""
        if not self.points:
            return np.zeros((0, 2), dtype=np.float64)
        return np.array([(p.x, p.y) for p in self.points], dtype=np.float64)

    def translate(self, dx: float, dy: float) -> None:
        """全ての点を (dx, dy) だけ移動する。"""
        self.points = [p.shifted(dx, dy) for p in self.points]

    def bounding_box(self) -> BoundingBox | None:
        """点列を覆う矩形を返す。点が無い場合は None。"""
        if not self.points:
            return None
        xy = self.coords()
        lo = xy.min(axis=0)
        hi = xy.max(axis=0)
        return BoundingBox(min=Point(float(lo[0]), float(lo[1])), max=Point(float(hi[0]), float(hi[1])))

    def smooth_pass(self, window: float) -> "Line":
        """移動平均を 1 パス適用した新しい Line を返す。

        Parameters
        ----------
        window : float
            窓幅。`window < 1` または点数が `window` 以下なら何もしない（複製を返す）。

        Returns
        -------
        Line
            先頭/末尾の点はそのまま、内部点を窓内の算術平均で置き換えた Line。

        Notes
        -----
        窓は中心 i に対し `[i - window/2, i + window/2)` を実数境界のまま走査し、
        インデックスは切り捨てで参照する。非整数の窓幅では `ceil(window)` 点の和を
        `window` で割る。
        """
        n = len(self.points)
        w = float(window)
        if w < 1 or n <= w:
            return self.clone()

        width = int(ceil(w))
        count = int(ceil(n - w))
        windows = sliding_window_view(self.coords(), width, axis=0)[:count]
        means = windows.sum(axis=-1) / w

        ret = Line(self.color)
        ret.points.append(self.points[0])
        ret.points.extend(Point(float(x), float(y)) for x, y in means)
        ret.points.append(self.points[-1])
        return ret

    def smooth(self, window: float, passes: int) -> "Line":
        """`smooth_pass` を passes 回繰り返した新しい Line を返す。

        各パスは前パスの出力を入力とする（解析的な畳み込みの合成ではない）。
        """
        ret = self.clone()
        if float(window) < 1 or len(self.points) <= float(window):
            return ret
        for _ in range(int(passes)):
            ret = ret.smooth_pass(window)
        return ret

    @staticmethod
    def between(
        a: Point,
        b: Point,
        color: Color,
        *,
        rng: np.random.Generator | None = None,
        jitter: bool = True,
    ) -> "Line":
        """a から b へ向かう手描き風の Line を生成する。

        Parameters
        ----------
        a, b : Point
            始点と終点。どちらも揺らさずにそのまま使う。
        color : Color
            線色。
        rng : numpy.random.Generator or None, optional
            揺らぎ用の乱数生成器。None の場合は新規に作る。
        jitter : bool, optional
            False の場合は中間点を置かず 2 点の直線を返す。

        Returns
        -------
        Line
            `a`、距離 10 あたり 1 個程度の揺らいだ中間点、`b` からなる Line。
        """
        if not isinstance(a, Point):
            raise TypeError("expected origin point")
        if not isinstance(b, Point):
            raise TypeError("expected destination point")
        if not isinstance(color, Color):
            raise TypeError("expected color")

        line = Line(color)
        line.add(a)

        distance = hypot(b.x - a.x, b.y - a.y)
        if jitter and distance > 0.0:
            gen = rng if rng is not None else np.random.default_rng()
            variations = max(1, int(ceil(gen.random() * (distance / _WOBBLE_SPACING))))
            t = np.arange(variations, dtype=np.float64) / float(variations)
            offsets = (gen.random((variations, 2)) - 0.5) * _WOBBLE
            xs = a.x + (b.x - a.x) * t + offsets[:, 0]
            ys = a.y + (b.y - a.y) * t + offsets[:, 1]
            line.points.extend(Point(float(x), float(y)) for x, y in zip(xs, ys))

        line.add(b)
        return line


__all__ = ["Line"]
