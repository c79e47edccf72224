# どこで: `src/freehand/__init__.py`。
# 何を: ルート `freehand` パッケージを定義する。
# なぜ: import 起点を `freehand` に統一するため。

from __future__ import annotations

from freehand.api import build_board, run
from freehand.core.board import Board
from freehand.core.data_image import DataImage, ImageDecodeError
from freehand.core.drawables import Drawable, Drawables
from freehand.core.drawing import Drawing
from freehand.core.geometry import BoundingBox, Color, Point
from freehand.core.line import Line
from freehand.core.primitives.grid import Grid

__all__ = [
    "Board",
    "BoundingBox",
    "Color",
    "DataImage",
    "Drawable",
    "Drawables",
    "Drawing",
    "Grid",
    "ImageDecodeError",
    "Line",
    "Point",
    "build_board",
    "run",
]
