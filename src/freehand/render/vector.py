"""
どこで: `src/freehand/render/vector.py`。
何を: SVG の要素ツリーへ path/image 要素を積み上げる保持型（retained）のベクタレンダラーを提供する。
なぜ: 画面表示と同じ描画手順をそのまま書き出しに使い、拡大しても劣化しない文書を得るため。
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterable

from freehand.core.data_image import DataImage
from freehand.core.geometry import Color, Point
from freehand.core.line import Line
from freehand.render.base import Renderer, effective_stroke_width

SVG_NS = "http://www.w3.org/2000/svg"
_FLOAT_DECIMALS = 3


def _fmt(value: float, *, decimals: int = _FLOAT_DECIMALS) -> str:
    """SVG 出力向けに float を決定的な文字列へ変換して返す。"""
    text = f"{float(value):.{int(decimals)}f}"
    if text.startswith("-0") and float(text) == 0.0:
        return text[1:]
    return text


def _points_to_d(points: Iterable[Point]) -> str:
    """点列を SVG path の d 属性（M/L 列）へ変換して返す。"""
    parts: list[str] = []
    for i, p in enumerate(points):
        cmd = "M" if i == 0 else "L"
        parts.append(f"{cmd} {_fmt(p.x)} {_fmt(p.y)}")
    return " ".join(parts)


def create_svg_root(width: float, height: float) -> ET.Element:
    """viewBox が描画面寸法に一致する空の `<svg>` 要素を返す。"""
    w = float(width)
    h = float(height)
    if w <= 0 or h <= 0:
        raise ValueError("canvas_size は正の値である必要がある")
    return ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "viewBox": f"0 0 {_fmt(w, decimals=0)} {_fmt(h, decimals=0)}",
            "width": _fmt(w, decimals=0),
            "height": _fmt(h, decimals=0),
        },
    )


class VectorRenderer(Renderer):
    """SVG 要素ツリーへの保持型レンダラー。

    Parameters
    ----------
    root : xml.etree.ElementTree.Element
        子要素を追加していくコンテナ要素（通常は `<svg>`）。

    Notes
    -----
    提示の段階は無いため `swap` は no-op のまま。ツリーそのものが成果物になる。
    """

    def __init__(self, root: ET.Element) -> None:
        self.root = root

    @classmethod
    def for_canvas(cls, width: float, height: float) -> "VectorRenderer":
        """描画面寸法の `<svg>` を新規に作り、それに描くレンダラーを返す。"""
        return cls(create_svg_root(width, height))

    def reset(self) -> None:
        for child in list(self.root):
            self.root.remove(child)

    def render_line(self, line: Line, stroke_width: float, color: str) -> None:
        if not isinstance(line, Line):
            raise TypeError(f"expected line: {line!r}")
        if len(line.points) < 2:
            return

        stroke, opacity = Color.parse_encoding(color)
        attrs = {
            "d": _points_to_d(line.points),
            "fill": "none",
            "stroke": stroke.to_hex(),
            "stroke-width": _fmt(effective_stroke_width(stroke_width)),
            "stroke-linecap": "round",
            "stroke-linejoin": "round",
        }
        if opacity < 1.0:
            attrs["stroke-opacity"] = _fmt(opacity)
        ET.SubElement(self.root, "path", attrs)

    async def render_image(self, point: Point, image: DataImage) -> None:
        if not isinstance(point, Point):
            raise TypeError("Expected point")
        if not isinstance(image, DataImage):
            raise TypeError(f"expected data image: {image!r}")

        attrs = {"x": _fmt(point.x), "y": _fmt(point.y)}
        if image.width > 0 and image.height > 0:
            attrs["width"] = str(image.width)
            attrs["height"] = str(image.height)
        attrs["href"] = image.data_url()
        ET.SubElement(self.root, "image", attrs)

    def to_string(self) -> str:
        """XML 宣言付きの SVG 文字列を返す。"""
        ET.indent(self.root)
        body = ET.tostring(self.root, encoding="unicode")
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


__all__ = ["SVG_NS", "VectorRenderer", "create_svg_root"]
