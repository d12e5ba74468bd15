# どこで: `src/tilecalc/core/runtime_config.py`。
# 何を: レベル定義のパスと出力寸法を config.yaml から読み、層ごとに上書きして返す。

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """tilecalc の実行時設定。

    Parameters
    ----------
    config_path : Path or None
        最後に適用したユーザー config（同梱デフォルトのみなら None）。
    level_data : Path or None
        レベル定義 JSON のパス。未設定なら None。
    screen_size : tuple[int, int]
        出力画像の (width, height) ピクセル。
    """

    config_path: Path | None
    level_data: Path | None
    screen_size: tuple[int, int]


_explicit_path: Path | None = None
_cached: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """明示 config のパスを設定し、キャッシュを捨てる。None で既定の探索に戻す。"""

    global _explicit_path, _cached
    _explicit_path = None if path is None else Path(str(path)).expanduser()
    _cached = None


def _discover_user_config() -> Path | None:
    """`./.tilecalc/config.yaml`、`~/.config/tilecalc/config.yaml` の順に探す。"""
    for candidate in (
        Path.cwd() / ".tilecalc" / "config.yaml",
        Path.home() / ".config" / "tilecalc" / "config.yaml",
    ):
        if candidate.is_file():
            return candidate
    return None


def _read_layer(text: str, *, source: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config を YAML として読めません: {source}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config のトップレベルは mapping である必要があります: {source}")
    return data


def _packaged_layer() -> dict[str, Any]:
    text = resources.files("tilecalc").joinpath("resource", "default_config.yaml").read_text(encoding="utf-8")
    return _read_layer(text, source="tilecalc/resource/default_config.yaml")


def _section(payload: dict[str, Any], name: str) -> dict[str, Any]:
    value = payload.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise RuntimeError(f"{name} は mapping である必要があります: got={value!r}")
    return value


def _parse_level_data(value: Any) -> Path | None:
    """paths.level_data を Path にする。`~` と `$VAR` を展開し、空なら None。"""
    if value is None:
        return None
    if not isinstance(value, str):
        raise RuntimeError(f"paths.level_data は文字列である必要があります: got={value!r}")
    text = value.strip()
    if not text:
        return None
    return Path(os.path.expandvars(os.path.expanduser(text)))


def _parse_screen_size(value: Any) -> tuple[int, int]:
    """screen.size を (width, height) にする。

    Notes
    -----
    2 要素の list/tuple のみ受け付ける。文字列（`"19"` を 1x9 と読むような解釈）や
    bool、float は拒否する。
    """
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise RuntimeError(f"screen.size は [width, height] の配列である必要があります: got={value!r}")
    if any(isinstance(v, bool) or not isinstance(v, int) for v in value):
        raise RuntimeError(f"screen.size は整数の配列である必要があります: got={value!r}")
    width, height = int(value[0]), int(value[1])
    if width <= 0 or height <= 0:
        raise ValueError(f"screen.size は正の値である必要があります: got={value!r}")
    return (width, height)


def runtime_config() -> RuntimeConfig:
    """実行時設定を返す（`set_config_path` が呼ばれるまでキャッシュ）。

    上書き順（後勝ち、トップレベルのキー単位）:
    1) 同梱 default_config.yaml
    2) 探索で見つかったユーザー config
    3) `set_config_path(...)` で指定した config
    """

    global _cached
    if _cached is not None:
        return _cached

    explicit = _explicit_path
    if explicit is not None and not explicit.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit}")
    discovered = _discover_user_config()

    payload = _packaged_layer()
    for path in (discovered, explicit):
        if path is not None:
            payload.update(_read_layer(path.read_text(encoding="utf-8"), source=str(path)))

    if payload.get("version") != 1:
        raise RuntimeError(f"未対応の config version です: got={payload.get('version')!r}")

    _cached = RuntimeConfig(
        config_path=explicit or discovered,
        level_data=_parse_level_data(_section(payload, "paths").get("level_data")),
        screen_size=_parse_screen_size(_section(payload, "screen").get("size")),
    )
    return _cached


__all__ = ["RuntimeConfig", "runtime_config", "set_config_path"]
