# どこで: `src/freehand/core/output_paths.py`。
# 何を: 書き出しファイルの保存先パス（`output_root/{kind}/freehand-<時刻>.{ext}`）を決める。
# なぜ: SVG/PNG の保存先規則を 1 箇所にまとめ、ウィンドウ側とヘッドレス側で共有するため。

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

from freehand.core.runtime_config import output_root_dir


def _timestamp(now: datetime) -> str:
    """ISO 形式の時刻をファイル名に使える形に正規化して返す。"""

    return re.sub(r"[^-A-Za-z0-9]", "-", now.isoformat(timespec="seconds"))


def output_path(*, kind: str, ext: str, now: datetime | None = None) -> Path:
    """`output_root/{kind}/freehand-<時刻>.{ext}` を返す。"""

    ext_norm = str(ext).lstrip(".").strip()
    if not ext_norm:
        raise ValueError("ext は空でない必要がある")
    stamp = _timestamp(now if now is not None else datetime.now())
    return output_root_dir() / str(kind) / f"freehand-{stamp}.{ext_norm}"


__all__ = ["output_path"]
