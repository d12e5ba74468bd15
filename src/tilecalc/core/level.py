# どこで: `src/tilecalc/core/level.py`。
# 何を: Tile / LevelKey / Level の不変モデルと、その不変条件の検証を定義する。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

DEFAULT_LEVEL_NAME = "null"

Point3 = tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class Tile:
    """マップ上の 1 マス。

    Parameters
    ----------
    height_type : int
        高さ段（0 が地面）。
    buildable_type : int
        配置可否の区分コード。
    tile_key : str or None
        タイル種別ラベル。無ければ None。
    """

    height_type: int
    buildable_type: int
    tile_key: str | None = None


@dataclass(frozen=True, slots=True)
class LevelKey:
    """レベルを識別するキー。"""

    stage_id: str
    code: str
    level_id: str
    name: str = DEFAULT_LEVEL_NAME

    def identifiers(self) -> tuple[str, str, str, str]:
        """自由文字列照合に参加するフィールドを返す。"""
        return (self.stage_id, self.code, self.level_id, self.name)

    def matches(self, query: str) -> bool:
        """いずれかの識別フィールドが query と完全一致すれば True を返す。

        Notes
        -----
        大文字小文字は区別し、前後の空白も除去しない。
        フィールド間に優先順位は無い（どれか 1 つが一致すればよい）。
        """
        return any(field == query for field in self.identifiers())


@dataclass(frozen=True, slots=True)
class Level:
    """1 マップ分の定義。

    Parameters
    ----------
    key : LevelKey
        識別キー。
    width, height : int
        グリッド寸法（どちらも正）。
    tiles : tuple[tuple[Tile, ...], ...]
        row-major のタイルグリッド。`height` 行 × `width` 列。
    view : tuple[Point3, ...]
        カメラのアンカー点列。index 0 が表側、index 1 が裏側。2 点以上。

    Notes
    -----
    不変条件はコンストラクタで検証し、違反時は ValueError を送出する。
    """

    key: LevelKey
    width: int
    height: int
    tiles: tuple[tuple[Tile, ...], ...]
    view: tuple[Point3, ...]

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"width/height は正である必要がある: width={self.width}, height={self.height}"
            )

        tiles = tuple(tuple(row) for row in self.tiles)
        if len(tiles) != self.height:
            raise ValueError(f"tiles の行数が height と一致しない: rows={len(tiles)}, height={self.height}")
        for i, row in enumerate(tiles):
            if len(row) != self.width:
                raise ValueError(
                    f"tiles[{i}] の列数が width と一致しない: cols={len(row)}, width={self.width}"
                )

        points: list[Point3] = []
        for i, p in enumerate(self.view):
            if len(p) != 3:
                raise ValueError(f"view[{i}] は (x, y, z) の 3 要素である必要がある: got={p!r}")
            points.append((float(p[0]), float(p[1]), float(p[2])))
        view = tuple(points)
        if len(view) < 2:
            raise ValueError(f"view は 2 点以上必要: got={len(view)}")

        object.__setattr__(self, "tiles", tiles)
        object.__setattr__(self, "view", view)

    def tile(self, row: int, col: int) -> Tile:
        """(row, col) のタイルを返す。"""
        return self.tiles[row][col]

    def anchor(self, side: bool) -> Point3:
        """side に対応するカメラのアンカー点を返す。"""
        return self.view[1 if side else 0]

    def height_types(self) -> np.ndarray:
        """高さ段を float64 shape (height, width) の配列で返す。"""
        return np.array(
            [[t.height_type for t in row] for row in self.tiles],
            dtype=np.float64,
        ).reshape(self.height, self.width)


__all__ = ["DEFAULT_LEVEL_NAME", "Level", "LevelKey", "Point3", "Tile"]
