# どこで: `src/freehand/interactive/runtime/frame_clock.py`。
# 何を: 再描画の間隔を目標 fps 以下に間引く FrameThrottle を提供する。
# なぜ: ポインタ移動の頻度と、平滑化/フェード描画の頻度を切り離すため。

from __future__ import annotations

import time


class FrameThrottle:
    """最小間隔 `1/fps` 秒で再描画を許可するフレーム間引き。

    Notes
    -----
    最初の `ready()` は常に True。以降は前回許可した時刻から `1/fps` 秒以上
    経過している場合のみ True を返し、その時刻を基準に更新する。
    """

    def __init__(self, *, fps: float = 25.0) -> None:
        _fps = float(fps)
        if _fps <= 0:
            raise ValueError("fps は正の値である必要がある")
        self._fps = _fps
        self._last: float | None = None

    @property
    def fps(self) -> float:
        """目標 fps を返す。"""

        return float(self._fps)

    @property
    def interval(self) -> float:
        """最小描画間隔（秒）を返す。"""

        return 1.0 / float(self._fps)

    def ready(self, now: float | None = None) -> bool:
        """今フレームを描画してよいかを返す。"""

        t = time.perf_counter() if now is None else float(now)
        last = self._last
        if last is not None and t - last < self.interval:
            return False
        self._last = t
        return True

    def reset(self) -> None:
        """次の `ready()` を即座に許可する。"""

        self._last = None
