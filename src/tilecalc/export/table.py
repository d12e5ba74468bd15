"""
どこで: `src/tilecalc/export/table.py`。
何を: 投影結果を JSON 化可能な表（dict / 文字列）へ変換する関数を提供する。
"""

from __future__ import annotations

import json
import math
from typing import Any

from tilecalc.core.level import LevelKey
from tilecalc.core.projector import TileProjection


def _fmt(value: float, *, decimals: int | None) -> float | None:
    """座標を出力向けに丸めて返す。非有限値（カメラ平面上のマス）は None にする。"""
    v = float(value)
    if not math.isfinite(v):
        return None
    if decimals is None:
        return v
    v = round(v, int(decimals))
    # -0.0 は 0.0 に揃える。
    return 0.0 if v == 0.0 else v


def encode_level_key(key: LevelKey) -> dict[str, str]:
    """LevelKey をレベル定義と同じフィールド名の dict に変換して返す。"""
    return {
        "stageId": key.stage_id,
        "code": key.code,
        "levelId": key.level_id,
        "name": key.name,
    }


def encode_projection(
    projection: TileProjection,
    *,
    decimals: int | None = None,
) -> dict[str, Any]:
    """投影結果を JSON 化可能な dict に変換して返す。

    Parameters
    ----------
    projection : TileProjection
        `TileCalc.run` の結果。
    decimals : int or None, optional
        x/y を丸める小数桁数。None なら丸めない。

    Returns
    -------
    dict[str, Any]
        `tiles` は row-major の 2 次元配列で、各要素が画面座標とタイル属性を持つ。
        有限でない座標（カメラ平面上のマス）は None（JSON の null）になる。
    """

    height, width = projection.shape
    rows: list[list[dict[str, Any]]] = []
    for i in range(height):
        row: list[dict[str, Any]] = []
        for j in range(width):
            x, y = projection.position(i, j)
            tile = projection.tile(i, j)
            row.append(
                {
                    "x": _fmt(x, decimals=decimals),
                    "y": _fmt(y, decimals=decimals),
                    "heightType": tile.height_type,
                    "buildableType": tile.buildable_type,
                    "tileKey": tile.tile_key,
                }
            )
        rows.append(row)

    return {
        "level": encode_level_key(projection.key),
        "side": projection.side,
        "width": width,
        "height": height,
        "tiles": rows,
    }


def dumps_projection(
    projection: TileProjection,
    *,
    decimals: int | None = None,
    indent: int | None = None,
) -> str:
    """投影結果を JSON 文字列へ変換して返す。"""
    return json.dumps(
        encode_projection(projection, decimals=decimals),
        ensure_ascii=False,
        indent=indent,
        allow_nan=False,
    )


__all__ = ["dumps_projection", "encode_level_key", "encode_projection"]
