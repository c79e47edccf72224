# src/freehand/core/geometry.py
# freehand コアの値型（Point / Color / BoundingBox）。
# 座標と色の検証、および描画バックエンド向けの色エンコードを実装する。

from __future__ import annotations

import re
from dataclasses import dataclass
from math import isfinite

_RGB_PATTERN = re.compile(r"^rgb\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)$")
_RGBA_PATTERN = re.compile(
    r"^rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*([0-9.eE+-]+)\s*\)$"
)


def _as_finite(value: object, *, label: str) -> float:
    """値を有限 float に変換して返す。"""
    if isinstance(value, bool):
        raise TypeError(f"{label} は数値である必要がある: {value!r}")
    try:
        v = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise TypeError(f"{label} は数値である必要がある: {value!r}") from exc
    if not isfinite(v):
        raise ValueError(f"Invalid {label}: {value!r}")
    return v


def _as_unit(value: object, *, label: str) -> float:
    """値を 0..1 の有限 float に変換して返す。範囲外は clamp せずに失敗させる。"""
    v = _as_finite(value, label=label)
    if v < 0.0 or v > 1.0:
        raise ValueError(f"Invalid {label}: {value!r}")
    return v


def format_number(value: float) -> str:
    """数値を最短表記の文字列にする（整数値は小数点なし）。"""
    v = float(value)
    if v.is_integer():
        return str(int(v))
    return repr(v)


@dataclass(frozen=True, slots=True)
class Point:
    """2 次元の点。

    Parameters
    ----------
    x, y : float
        座標。いずれも有限値である必要がある。

    Raises
    ------
    ValueError
        座標が NaN/inf の場合。
    TypeError
        座標が数値でない場合。
    """

    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", _as_finite(self.x, label="coordinate X"))
        object.__setattr__(self, "y", _as_finite(self.y, label="coordinate Y"))

    def shifted(self, dx: float, dy: float) -> "Point":
        """(dx, dy) だけ平行移動した新しい Point を返す。"""
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True, slots=True)
class Color:
    """0..1 の RGB 色。

    Notes
    -----
    文字列化は描画バックエンドが受け取る「色エンコード」を返す。
    `to_rgb()` は不透明、`to_rgba(opacity)` は不透明度付き。
    """

    r: float
    g: float
    b: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "r", _as_unit(self.r, label="red channel value"))
        object.__setattr__(self, "g", _as_unit(self.g, label="green channel value"))
        object.__setattr__(self, "b", _as_unit(self.b, label="blue channel value"))

    def to_rgb255(self) -> tuple[int, int, int]:
        """0..255 int の RGB を返す。"""
        return (
            int(round(self.r * 255.0)),
            int(round(self.g * 255.0)),
            int(round(self.b * 255.0)),
        )

    def to_rgb(self) -> str:
        """`rgb(r,g,b)` 形式の不透明エンコードを返す。"""
        r, g, b = self.to_rgb255()
        return f"rgb({r},{g},{b})"

    def to_rgba(self, opacity: float) -> str:
        """`rgba(r,g,b,a)` 形式のエンコードを返す。

        Raises
        ------
        ValueError
            opacity が 0..1 の範囲外、または非有限の場合。
        """
        a = _as_unit(opacity, label="opacity value")
        r, g, b = self.to_rgb255()
        return f"rgba({r},{g},{b},{format_number(a)})"

    def to_hex(self) -> str:
        """`#RRGGBB` を返す。"""
        r, g, b = self.to_rgb255()
        return f"#{r:02X}{g:02X}{b:02X}"

    @classmethod
    def from_rgb255(cls, r: int, g: int, b: int) -> "Color":
        """0..255 int の RGB から Color を生成する。"""
        return cls(float(r) / 255.0, float(g) / 255.0, float(b) / 255.0)

    @classmethod
    def from_encoding(cls, text: str) -> "Color":
        """`#RRGGBB` 文字列から Color を生成する。

        Raises
        ------
        ValueError
            7 文字未満、または 16 進として解釈できない場合。
        """
        s = str(text)
        if len(s) < 7:
            raise ValueError(f"Invalid color string: {text!r}")
        try:
            r = int(s[1:3], 16)
            g = int(s[3:5], 16)
            b = int(s[5:7], 16)
        except ValueError as exc:
            raise ValueError(f"Invalid color string: {text!r}") from exc
        return cls.from_rgb255(r, g, b)

    @classmethod
    def parse_encoding(cls, text: str) -> tuple["Color", float]:
        """色エンコード（`rgb()` / `rgba()` / `#RRGGBB`）を (Color, opacity) に戻す。"""
        s = str(text).strip()
        m = _RGB_PATTERN.match(s)
        if m is not None:
            return cls.from_rgb255(*(_channel255(v, text) for v in m.groups())), 1.0
        m = _RGBA_PATTERN.match(s)
        if m is not None:
            rgb = (_channel255(v, text) for v in m.groups()[:3])
            opacity = _as_unit(m.group(4), label="opacity value")
            return cls.from_rgb255(*rgb), opacity
        if s.startswith("#"):
            return cls.from_encoding(s), 1.0
        raise ValueError(f"Invalid color string: {text!r}")


def _channel255(text: str, source: str) -> int:
    v = int(text)
    if v > 255:
        raise ValueError(f"Invalid color string: {source!r}")
    return v


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """軸平行な矩形 [min, max]。"""

    min: Point
    max: Point

    @property
    def width(self) -> float:
        return self.max.x - self.min.x

    @property
    def height(self) -> float:
        return self.max.y - self.min.y

    def contains(self, point: Point) -> bool:
        """点が矩形内（境界を含む）にあるかを返す。"""
        return (
            self.min.x <= point.x <= self.max.x and self.min.y <= point.y <= self.max.y
        )

    def union(self, other: "BoundingBox") -> "BoundingBox":
        """2 つの矩形を覆う最小の矩形を返す。"""
        return BoundingBox(
            min=Point(min(self.min.x, other.min.x), min(self.min.y, other.min.y)),
            max=Point(max(self.max.x, other.max.x), max(self.max.y, other.max.y)),
        )


__all__ = ["BoundingBox", "Color", "Point", "format_number"]
