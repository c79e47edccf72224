# どこで: `src/freehand/api/__init__.py`。
# 何を: 公開 API（run / build_board）を再エクスポートする。
# なぜ: `from freehand.api import run` の 1 行で起動できるようにするため。

from __future__ import annotations

from freehand.api.run import build_board, run

__all__ = ["build_board", "run"]
