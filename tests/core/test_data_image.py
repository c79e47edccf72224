"""DataImage（寸法の検査・データ URL・平行移動）に関するテスト群。"""

from __future__ import annotations

import asyncio
import io

import pytest
from PIL import Image

from freehand.core.data_image import DataImage, ImageDecodeError, decode_bitmap
from freehand.core.geometry import Point


def _encoded(fmt: str, size: tuple[int, int] = (7, 5)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, (10, 20, 30)).save(buf, format=fmt)
    return buf.getvalue()


def test_from_bytes_at_reads_dimensions_and_mime() -> None:
    anchor = Point(3, 4)
    image = asyncio.run(DataImage.from_bytes_at(_encoded("PNG"), anchor))
    assert (image.width, image.height) == (7, 5)
    assert image.mime == "image/png"
    assert image.point == anchor

    jpeg = asyncio.run(DataImage.from_bytes_at(_encoded("JPEG"), anchor))
    assert jpeg.mime == "image/jpeg"


def test_from_bytes_at_rejects_garbage() -> None:
    with pytest.raises(ImageDecodeError):
        asyncio.run(DataImage.from_bytes_at(b"garbage", Point(0, 0)))


def test_decode_bitmap_returns_rgba() -> None:
    bitmap = decode_bitmap(_encoded("PNG", (2, 3)))
    assert bitmap.mode == "RGBA"
    assert bitmap.size == (2, 3)
    with pytest.raises(ImageDecodeError):
        decode_bitmap(b"")


def test_constructor_validates_anchor_and_size() -> None:
    with pytest.raises(TypeError):
        DataImage((0, 0), b"x")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        DataImage(Point(0, 0), b"x", -1, 5)


def test_data_url_embeds_bytes() -> None:
    image = DataImage(Point(0, 0), b"abc", 1, 1)
    assert image.data_url() == "data:image/png;base64,YWJj"


def test_translate_moves_only_anchor() -> None:
    image = DataImage(Point(1, 2), b"abc", 10, 20)
    image.translate(4, -2)
    assert image.point == Point(5, 0)
    box = image.bounding_box()
    assert (box.min, box.max) == (Point(5, 0), Point(15, 20))
    assert image.data == b"abc"


def test_from_bytes_at_keeps_decoded_bitmap() -> None:
    image = asyncio.run(DataImage.from_bytes_at(_encoded("PNG", (3, 2)), Point(0, 0)))
    bitmap = image.bitmap
    assert bitmap is not None
    assert bitmap.mode == "RGBA"
    assert bitmap.size == (3, 2)
    assert bitmap.getpixel((1, 1)) == (10, 20, 30, 255)
    assert asyncio.run(image.ensure_bitmap()) is bitmap


def test_bitmap_sets_default_dimensions() -> None:
    image = DataImage(Point(0, 0), b"abc", bitmap=Image.new("RGB", (5, 4)))
    assert (image.width, image.height) == (5, 4)
    assert image.bitmap is not None and image.bitmap.mode == "RGBA"


def test_ensure_bitmap_does_not_keep_failed_decode() -> None:
    image = DataImage(Point(0, 0), b"garbage", 1, 1)
    with pytest.raises(ImageDecodeError):
        asyncio.run(image.ensure_bitmap())
    assert image.bitmap is None
