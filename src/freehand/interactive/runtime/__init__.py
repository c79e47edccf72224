# どこで: `src/freehand/interactive/runtime/__init__.py`。
# 何を: interactive runtime のサブパッケージを定義する。
# なぜ: ウィンドウ配線・フレーム間引き・ループをまとめるため。
