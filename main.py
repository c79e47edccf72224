"""
どこで: リポジトリ直下 `main.py`。
何を: グリッド付きの描画ウィンドウを開く。
なぜ: 動作確認用の最小エントリポイントとして利用するため。
"""

from freehand import run

if __name__ == "__main__":
    run(grid=True)
