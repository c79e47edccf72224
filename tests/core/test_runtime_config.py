from pathlib import Path

import pytest

from freehand.core.geometry import Color
from freehand.core.runtime_config import output_root_dir, runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_output_root_dir_uses_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    assert output_root_dir() == Path("data") / "output"
    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.canvas_size == (800, 600)
    assert cfg.background == Color(1.0, 1.0, 1.0)
    assert cfg.foreground == Color.from_encoding("#222222")
    assert cfg.smoothing == 8.0
    assert cfg.passes == 3
    assert cfg.stroke == 2.0
    assert (cfg.grid_columns, cfg.grid_rows, cfg.grid_ticks) == (4, 3, 5)
    assert cfg.window_position == (25, 25)
    assert cfg.fps == 25.0


def test_discovered_config_overrides_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".freehand" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text(
        'paths:\n  output_dir: "./out_discovered"\ndrawing:\n  smoothing: 12\n',
        encoding="utf-8",
    )

    assert output_root_dir() == Path("out_discovered")
    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.smoothing == 12.0
    # 上書きしていないキーは同梱の既定値のまま。
    assert cfg.passes == 3
    assert cfg.canvas_size == (800, 600)


def test_home_config_is_discovered(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    home_cfg = tmp_path / ".config" / "freehand" / "config.yaml"
    home_cfg.parent.mkdir(parents=True, exist_ok=True)
    home_cfg.write_text("canvas:\n  size: [320, 240]\n", encoding="utf-8")

    cfg = runtime_config()
    assert cfg.config_path == home_cfg
    assert cfg.canvas_size == (320, 240)


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".freehand" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text('paths:\n  output_dir: "./out_discovered"\n', encoding="utf-8")

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text(
        'paths:\n  output_dir: "./out_explicit"\ncanvas:\n  background: "#000000"\n',
        encoding="utf-8",
    )
    set_config_path(explicit)

    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.output_dir == Path("out_explicit")
    assert cfg.background == Color(0.0, 0.0, 0.0)


def test_runtime_config_is_cached_until_path_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    first = runtime_config()
    assert runtime_config() is first

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("drawing:\n  passes: 5\n", encoding="utf-8")
    set_config_path(explicit)

    second = runtime_config()
    assert second is not first
    assert second.passes == 5


def test_missing_explicit_config_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    set_config_path(tmp_path / "missing.yaml")

    with pytest.raises(FileNotFoundError):
        runtime_config()


@pytest.mark.parametrize(
    "text",
    [
        "version: 2\n",
        "- not\n- a mapping\n",
        'canvas:\n  background: "white"\n',
        "canvas:\n  size: [800]\n",
    ],
)
def test_invalid_config_raises_runtime_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, text: str
):
    _isolate_config_discovery(tmp_path, monkeypatch)
    explicit = tmp_path / "bad.yaml"
    explicit.write_text(text, encoding="utf-8")
    set_config_path(explicit)

    with pytest.raises(RuntimeError):
        runtime_config()
