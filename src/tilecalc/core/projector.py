# どこで: `src/tilecalc/core/projector.py`。
# 何を: レベルの全マスをカメラで投影し、画面ピクセル座標のグリッドを返す。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .aspect import adapt_aspect
from .camera import CameraModel
from .level import Level, LevelKey, Point3, Tile

# 高さ段 1 つあたりの奥行き方向オフセット。
HEIGHT_STEP = -0.4


@dataclass(frozen=True, slots=True, eq=False)
class TileProjection:
    """1 レベル分の投影結果。

    Parameters
    ----------
    key : LevelKey
        投影したレベルのキー。
    side : bool
        使用した視点（False が表側）。
    positions : np.ndarray
        float64 shape (height, width, 2) の画面座標。最後の軸は (x, y) ピクセル。
    tiles : tuple[tuple[Tile, ...], ...]
        positions と同じ形のタイルグリッド。

    Notes
    -----
    positions は writeable=False で保持する。
    """

    key: LevelKey
    side: bool
    positions: np.ndarray
    tiles: tuple[tuple[Tile, ...], ...]

    def __post_init__(self) -> None:
        positions = np.asarray(self.positions, dtype=np.float64)
        if positions.ndim != 3 or positions.shape[2] != 2:
            raise ValueError(f"positions は shape (H, W, 2) である必要がある: got={positions.shape}")
        if len(self.tiles) != positions.shape[0] or any(
            len(row) != positions.shape[1] for row in self.tiles
        ):
            raise ValueError("tiles と positions の形が一致しない")
        positions.setflags(write=False)
        object.__setattr__(self, "positions", positions)

    @property
    def shape(self) -> tuple[int, int]:
        """(height, width) を返す。"""
        return (int(self.positions.shape[0]), int(self.positions.shape[1]))

    def position(self, row: int, col: int) -> tuple[float, float]:
        """(row, col) のマスの画面座標 (x, y) を返す。"""
        x, y = self.positions[row, col]
        return (float(x), float(y))

    def tile(self, row: int, col: int) -> Tile:
        """(row, col) のマスのタイルを返す。"""
        return self.tiles[row][col]


def build_transform(camera: CameraModel, anchor: Point3, *, side: bool) -> np.ndarray:
    """アンカー点への平行移動とカメラ行列を合成した 4x4 変換を返す。

    Notes
    -----
    合成順は ``P @ X @ Y @ T``（side=True）または ``P @ X @ T``（side=False）。
    出力比の補正量は T の y/z 成分に足し込む。
    """
    x, y, z = anchor
    adjustment = adapt_aspect(
        output_width=camera.output_width,
        output_height=camera.output_height,
    )

    translate = np.eye(4, dtype=np.float64)
    translate[0, 3] = -x
    translate[1, 3] = -y - adjustment.dx
    translate[2, 3] = -z - adjustment.dy

    if side:
        return camera.perspective @ camera.tilt_x @ camera.tilt_y @ translate
    return camera.perspective @ camera.tilt_x @ translate


def grid_points(level: Level) -> np.ndarray:
    """各マスの同次座標を float64 shape (height, width, 4) で返す。

    x はグリッド中心を 0 に、y は行 0 が最上段になるよう反転する。
    z は高さ段に HEIGHT_STEP を掛けた値。
    """
    h, w = level.height, level.width
    xs = np.arange(w, dtype=np.float64) - (w - 1) / 2.0
    ys = (h - 1) / 2.0 - np.arange(h, dtype=np.float64)

    points = np.empty((h, w, 4), dtype=np.float64)
    points[..., 0] = xs[np.newaxis, :]
    points[..., 1] = ys[:, np.newaxis]
    points[..., 2] = level.height_types() * HEIGHT_STEP
    points[..., 3] = 1.0
    return points


def project_level(camera: CameraModel, level: Level, *, side: bool) -> TileProjection:
    """レベルの全マスを画面座標へ投影する。

    Parameters
    ----------
    camera : CameraModel
        出力解像度に対応するカメラ。
    level : Level
        投影対象のレベル。
    side : bool
        True なら裏側（view[1] とヨー回転）を使う。

    Returns
    -------
    TileProjection
        positions と tiles を持つ投影結果。どちらも height x width。

    Notes
    -----
    同次座標の w が 0 になるマス（カメラ平面上の点）は非有限値になる。例外は送出しない。
    """
    transform = build_transform(camera, level.anchor(side), side=side)
    clip = grid_points(level) @ transform.T

    with np.errstate(divide="ignore", invalid="ignore"):
        ndc = clip[..., :2] / clip[..., 3:4]
    ndc = (ndc + 1.0) / 2.0

    positions = np.empty((level.height, level.width, 2), dtype=np.float64)
    positions[..., 0] = ndc[..., 0] * camera.output_width
    positions[..., 1] = (1.0 - ndc[..., 1]) * camera.output_height

    return TileProjection(
        key=level.key,
        side=bool(side),
        positions=positions,
        tiles=level.tiles,
    )


__all__ = [
    "HEIGHT_STEP",
    "TileProjection",
    "build_transform",
    "grid_points",
    "project_level",
]
