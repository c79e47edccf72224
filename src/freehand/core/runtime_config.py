# どこで: `src/freehand/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・マージ・検証・キャッシュ）を提供する。
# なぜ: 描画面寸法や平滑化の既定値、出力先をユーザーが指定できるようにするため。

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, TypeVar

import yaml

from freehand.core.geometry import Color

_logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_SUPPORTED_VERSION = 1
_PACKAGED_SOURCE = "freehand/resource/default_config.yaml"


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """freehand の実行時設定。

    Notes
    -----
    値はすべて同梱 default_config.yaml を土台に、発見した config.yaml、
    明示指定した config.yaml の順で後勝ちに上書きした結果。
    """

    config_path: Path | None
    output_dir: Path
    canvas_size: tuple[int, int]
    background: Color
    foreground: Color
    smoothing: float
    passes: int
    stroke: float
    grid_columns: int
    grid_rows: int
    grid_ticks: int
    window_position: tuple[int, int]
    fps: float


_explicit_path: Path | None = None
_cached: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """明示 config パスを設定し、キャッシュを捨てる。None で明示指定を解除する。"""

    global _explicit_path, _cached
    _explicit_path = None if path is None else Path(str(path)).expanduser()
    _cached = None


def _discover_config_path() -> Path | None:
    """カレント → ホームの順に config.yaml を探し、最初に見つかったものを返す。"""
    for candidate in (
        Path.cwd() / ".freehand" / "config.yaml",
        Path.home() / ".config" / "freehand" / "config.yaml",
    ):
        if candidate.is_file():
            return candidate
    return None


def _parse_yaml(text: str, *, source: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")
    return dict(data)


def _read_config_file(path: Path) -> dict[str, Any]:
    _logger.debug("config.yaml を読み込みます: %s", path)
    return _parse_yaml(path.read_text(encoding="utf-8"), source=str(path))


def _read_packaged_defaults() -> dict[str, Any]:
    text = (
        resources.files("freehand")
        .joinpath("resource", "default_config.yaml")
        .read_text(encoding="utf-8")
    )
    return _parse_yaml(text, source=_PACKAGED_SOURCE)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """mapping 同士は再帰的に、それ以外は後勝ちで上書きした dict を返す。"""
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


class _Section:
    """config の 1 セクション（`canvas:` など）から型付きで値を取り出す。"""

    def __init__(self, payload: dict[str, Any], name: str) -> None:
        raw = payload.get(name)
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise RuntimeError(f"{name} は mapping である必要があります: got={raw!r}")
        self._name = name
        self._values = raw

    def _get(self, key: str, convert: Callable[[Any], _T], expected: str) -> _T:
        dotted = f"{self._name}.{key}"
        value = self._values.get(key)
        if value is None:
            raise RuntimeError(f"{dotted} が未設定です（同梱 default_config.yaml を確認してください）")
        try:
            return convert(value)
        except (TypeError, ValueError) as exc:
            raise RuntimeError(f"{dotted} は{expected}である必要があります: got={value!r}") from exc

    def number(self, key: str) -> float:
        return self._get(key, float, "数値")

    def integer(self, key: str) -> int:
        return self._get(key, lambda v: int(float(v)), "整数")

    def pair(self, key: str) -> tuple[int, int]:
        return self._get(key, _int_pair, " [x, y] の整数配列")

    def color(self, key: str) -> Color:
        return self._get(key, lambda v: Color.from_encoding(str(v)), " #RRGGBB 形式")

    def path(self, key: str) -> Path:
        def convert(v: Any) -> Path:
            text = str(v).strip()
            if not text:
                raise ValueError("empty path")
            return Path(os.path.expandvars(os.path.expanduser(text)))

        return self._get(key, convert, "空でないパス")


def _int_pair(value: Any) -> tuple[int, int]:
    seq = list(value)
    if len(seq) != 2:
        raise ValueError("expected 2 items")
    return int(seq[0]), int(seq[1])


def _positive(value: _T, *, key: str) -> _T:
    items = value if isinstance(value, tuple) else (value,)
    if any(v <= 0 for v in items):  # type: ignore[operator]
        raise RuntimeError(f"{key} は正の値である必要があります: got={value}")
    return value


def _build(payload: dict[str, Any], *, config_path: Path | None) -> RuntimeConfig:
    version = payload.get("version")
    try:
        version_i = int(version)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != _SUPPORTED_VERSION:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    paths = _Section(payload, "paths")
    canvas = _Section(payload, "canvas")
    drawing = _Section(payload, "drawing")
    grid = _Section(payload, "grid")
    ui = _Section(payload, "ui")

    return RuntimeConfig(
        config_path=config_path,
        output_dir=paths.path("output_dir"),
        canvas_size=_positive(canvas.pair("size"), key="canvas.size"),
        background=canvas.color("background"),
        foreground=drawing.color("foreground"),
        smoothing=drawing.number("smoothing"),
        passes=drawing.integer("passes"),
        stroke=drawing.number("stroke"),
        grid_columns=grid.integer("columns"),
        grid_rows=grid.integer("rows"),
        grid_ticks=grid.integer("ticks"),
        window_position=ui.pair("window_position"),
        fps=_positive(ui.number("fps"), key="ui.fps"),
    )


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    Raises
    ------
    FileNotFoundError
        明示指定した config.yaml が存在しない場合。
    RuntimeError
        YAML として読めない場合や、version・値が不正な場合。
    """

    global _cached
    if _cached is not None:
        return _cached

    explicit = _explicit_path
    if explicit is not None and not explicit.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit}")
    discovered = _discover_config_path()

    payload = _read_packaged_defaults()
    for path in (discovered, explicit):
        if path is not None:
            payload = _merge(payload, _read_config_file(path))

    _cached = _build(payload, config_path=explicit or discovered)
    return _cached


def output_root_dir() -> Path:
    """出力ファイルを保存する既定ルートディレクトリを返す。"""

    return Path(runtime_config().output_dir)


__all__ = ["RuntimeConfig", "output_root_dir", "runtime_config", "set_config_path"]
