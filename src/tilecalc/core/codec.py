# どこで: `src/tilecalc/core/codec.py`。
# 何を: レベル定義 JSON（レコード配列）を Level 列へ decode する。

from __future__ import annotations

import json
from typing import Any

from .level import DEFAULT_LEVEL_NAME, Level, LevelKey, Point3, Tile


def _require(obj: dict[str, Any], key: str) -> Any:
    if key not in obj:
        raise ValueError(f"必須フィールド {key!r} がありません")
    return obj[key]


def _as_str(value: Any, *, key: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{key} は文字列である必要があります: got={value!r}")
    return value


def _as_int(value: Any, *, key: str) -> int:
    # JSON の true/false は int として扱わない。
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} は整数である必要があります: got={value!r}")
    return int(value)


def _as_float(value: Any, *, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} は数値である必要があります: got={value!r}")
    return float(value)


def _as_list(value: Any, *, key: str) -> list[Any]:
    if not isinstance(value, list):
        raise TypeError(f"{key} は配列である必要があります: got={type(value).__name__}")
    return value


def _as_point3(value: Any, *, key: str) -> Point3:
    # 先頭 3 要素だけを読む（4 要素目以降は無視）。
    seq = _as_list(value, key=key)
    if len(seq) < 3:
        raise ValueError(f"{key} は [x, y, z] を含む配列である必要があります: got={value!r}")
    return (
        _as_float(seq[0], key=f"{key}[0]"),
        _as_float(seq[1], key=f"{key}[1]"),
        _as_float(seq[2], key=f"{key}[2]"),
    )


def decode_tile(obj: object, *, key: str = "tile") -> Tile:
    """JSON 由来の dict から Tile を復元して返す。"""

    if not isinstance(obj, dict):
        raise TypeError(f"{key} は object である必要があります: got={type(obj).__name__}")

    tile_key = obj.get("tileKey")
    if tile_key is not None:
        tile_key = _as_str(tile_key, key=f"{key}.tileKey")

    return Tile(
        height_type=_as_int(_require(obj, "heightType"), key=f"{key}.heightType"),
        buildable_type=_as_int(_require(obj, "buildableType"), key=f"{key}.buildableType"),
        tile_key=tile_key,
    )


def decode_level_key(obj: dict[str, Any]) -> LevelKey:
    """レベルレコードから LevelKey を取り出して返す。"""

    name = obj.get("name")
    return LevelKey(
        stage_id=_as_str(_require(obj, "stageId"), key="stageId"),
        code=_as_str(_require(obj, "code"), key="code"),
        level_id=_as_str(_require(obj, "levelId"), key="levelId"),
        name=DEFAULT_LEVEL_NAME if name is None else _as_str(name, key="name"),
    )


def decode_level(obj: object) -> Level:
    """JSON 由来の dict から Level を復元して返す。

    Parameters
    ----------
    obj : object
        1 レベル分のレコード。

    Returns
    -------
    Level
        検証済みのレベル。

    Raises
    ------
    TypeError
        フィールドの型が不正な場合。
    ValueError
        必須フィールドの欠落、またはグリッド形状の不整合。

    Notes
    -----
    未知のフィールドは無視する。`name` が無い（または null）なら ``"null"`` を使う。
    """

    if not isinstance(obj, dict):
        raise TypeError(f"level record は object である必要があります: got={type(obj).__name__}")

    key = decode_level_key(obj)
    height = _as_int(_require(obj, "height"), key="height")
    width = _as_int(_require(obj, "width"), key="width")

    view = tuple(
        _as_point3(p, key=f"view[{i}]")
        for i, p in enumerate(_as_list(_require(obj, "view"), key="view"))
    )

    rows: list[tuple[Tile, ...]] = []
    for i, row in enumerate(_as_list(_require(obj, "tiles"), key="tiles")):
        cells = _as_list(row, key=f"tiles[{i}]")
        rows.append(tuple(decode_tile(t, key=f"tiles[{i}][{j}]") for j, t in enumerate(cells)))

    return Level(key=key, width=width, height=height, tiles=tuple(rows), view=view)


def decode_levels(obj: object) -> tuple[Level, ...]:
    """レコード配列から Level 列を復元して返す（1 件でも不正なら全体を失敗させる）。"""

    records = _as_list(obj, key="document")
    levels: list[Level] = []
    for index, record in enumerate(records):
        try:
            levels.append(decode_level(record))
        except (TypeError, ValueError) as exc:
            stage = record.get("stageId") if isinstance(record, dict) else None
            raise type(exc)(f"levels[{index}] (stageId={stage!r}): {exc}") from exc
    return tuple(levels)


def loads_levels(text: str) -> tuple[Level, ...]:
    """JSON 文字列から Level 列を復元して返す。"""

    return decode_levels(json.loads(text))


__all__ = ["decode_level", "decode_level_key", "decode_levels", "decode_tile", "loads_levels"]
