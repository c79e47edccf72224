"""
どこで: `src/freehand/core/data_image.py`。
何を: 点に固定された貼り付け画像（エンコード済みバイト列 + デコード済みビットマップ）を表す DataImage を提供する。
なぜ: 画像をラスタ/ベクタ両バックエンドから同じ形で扱い、デコードを 1 回に抑えるため。
"""

from __future__ import annotations

import asyncio
import base64
import io

from PIL import Image, UnidentifiedImageError

from freehand.core.geometry import BoundingBox, Point


class ImageDecodeError(RuntimeError):
    """画像バイト列のデコードに失敗したことを表す。"""


def _open(data: bytes) -> tuple[Image.Image, str]:
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            mime = Image.MIME.get(str(im.format), "image/png")
            return im.convert("RGBA"), mime
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageDecodeError(f"画像のデコードに失敗しました: {exc}") from exc


def decode_bitmap(data: bytes) -> Image.Image:
    """エンコード済み画像を RGBA の Pillow Image にデコードして返す。

    Raises
    ------
    ImageDecodeError
        Pillow が画像として解釈できない場合。
    """
    bitmap, _mime = _open(data)
    return bitmap


class DataImage:
    """アンカー点（左上）に配置された画像。

    Parameters
    ----------
    point : Point
        左上のアンカー点。内部で複製して保持する。
    data : bytes
        エンコード済み画像（PNG 等）。データ URL 化にだけ使う。
    width, height : int
        画素寸法。bitmap を渡し 0 のままにした場合は bitmap の寸法。
    mime : str, optional
        データ URL 化に使う MIME タイプ。
    bitmap : PIL.Image.Image or None, optional
        デコード済みの RGBA ビットマップ。None の場合は `ensure_bitmap` の初回に 1 度だけデコードする。

    Notes
    -----
    生成後に変化するのはアンカー点の平行移動と、未デコード時のビットマップ設定のみ。
    """

    __slots__ = ("point", "_data", "_width", "_height", "_mime", "_bitmap")

    def __init__(
        self,
        point: Point,
        data: bytes,
        width: int = 0,
        height: int = 0,
        *,
        mime: str = "image/png",
        bitmap: Image.Image | None = None,
    ) -> None:
        if not isinstance(point, Point):
            raise TypeError("expected point")
        w = int(width)
        h = int(height)
        if w < 0 or h < 0:
            raise ValueError(f"画像寸法は 0 以上である必要がある: {(width, height)!r}")
        if bitmap is not None:
            if bitmap.mode != "RGBA":
                bitmap = bitmap.convert("RGBA")
            if w == 0 and h == 0:
                w, h = bitmap.size
        self.point = Point(point.x, point.y)
        self._data = bytes(data)
        self._width = w
        self._height = h
        self._mime = str(mime)
        self._bitmap = bitmap

    def __repr__(self) -> str:
        return (
            f"DataImage(point={self.point!r}, width={self._width}, "
            f"height={self._height}, mime={self._mime!r})"
        )

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def mime(self) -> str:
        return self._mime

    @property
    def bitmap(self) -> Image.Image | None:
        """デコード済みの RGBA ビットマップ。未デコードなら None。"""
        return self._bitmap

    async def ensure_bitmap(self) -> Image.Image:
        """デコード済みビットマップを返す。未デコードなら別スレッドで 1 度だけデコードして保持する。

        Raises
        ------
        ImageDecodeError
            画像として解釈できない場合（保持はしない）。
        """
        if self._bitmap is None:
            self._bitmap = await asyncio.to_thread(decode_bitmap, self._data)
        return self._bitmap

    def data_url(self) -> str:
        """`data:<mime>;base64,...` 形式の URL を返す。"""
        encoded = base64.b64encode(self._data).decode("ascii")
        return f"data:{self._mime};base64,{encoded}"

    def translate(self, dx: float, dy: float) -> None:
        """アンカー点のみを移動する（再デコードはしない）。"""
        self.point = self.point.shifted(dx, dy)

    def bounding_box(self) -> BoundingBox:
        """アンカー点から (width, height) までの矩形を返す。"""
        return BoundingBox(
            min=self.point,
            max=Point(self.point.x + self._width, self.point.y + self._height),
        )

    @classmethod
    async def from_bytes_at(cls, data: bytes, point: Point) -> "DataImage":
        """画像バイト列を別スレッドでデコードし、ビットマップ付きの DataImage を生成する。

        Raises
        ------
        TypeError
            point が Point でない場合。
        ImageDecodeError
            画像として解釈できない場合。
        """
        if not isinstance(point, Point):
            raise TypeError("expected point")
        encoded = bytes(data)
        bitmap, mime = await asyncio.to_thread(_open, encoded)
        return cls(point, encoded, *bitmap.size, mime=mime, bitmap=bitmap)


__all__ = ["DataImage", "ImageDecodeError", "decode_bitmap"]
