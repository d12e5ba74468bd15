# どこで: `src/tilecalc/core/camera.py`。
# 何を: 固定カメラの透視投影行列と 2 つの傾き行列を出力解像度ごとに 1 度だけ構築する。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

FOV_HALF_DEG = 20.0
PITCH_DEG = 30.0
YAW_DEG = 10.0
NEAR = 0.3
FAR = 1000.0


def _readonly(mat: np.ndarray) -> np.ndarray:
    mat.setflags(write=False)
    return mat


def build_perspective(output_width: int, output_height: int) -> np.ndarray:
    """透視投影行列 P を返す（x スケールは出力のアスペクト比で補正）。"""
    cot = 1.0 / np.tan(np.deg2rad(FOV_HALF_DEG))
    ratio = float(output_height) / float(output_width)
    return np.array(
        [
            [ratio * cot, 0.0, 0.0, 0.0],
            [0.0, cot, 0.0, 0.0],
            [0.0, 0.0, -(FAR + NEAR) / (FAR - NEAR), -(2.0 * FAR * NEAR) / (FAR - NEAR)],
            [0.0, 0.0, -1.0, 0.0],
        ],
        dtype=np.float64,
    )


def build_tilt_x() -> np.ndarray:
    """ピッチ方向の傾き行列 X を返す。

    Notes
    -----
    純粋な回転ではない（y/z の対角に cos と -cos、非対角に両方 -sin を置く、反転込みの変換）。
    """
    rad = np.deg2rad(PITCH_DEG)
    c, s = np.cos(rad), np.sin(rad)
    return np.array(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, c, -s, 0.0],
            [0.0, -s, -c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=np.float64,
    )


def build_tilt_y() -> np.ndarray:
    """鉛直軸まわりのヨー回転行列 Y を返す（裏側の視点でのみ使う）。"""
    rad = np.deg2rad(YAW_DEG)
    c, s = np.cos(rad), np.sin(rad)
    return np.array(
        [
            [c, 0.0, s, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [-s, 0.0, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=np.float64,
    )


@dataclass(frozen=True, slots=True, eq=False)
class CameraModel:
    """出力解像度に紐づく固定カメラ。

    Parameters
    ----------
    output_width, output_height : int
        出力画像のピクセル寸法。
    perspective : np.ndarray
        float64 shape (4, 4) の透視投影行列 P。
    tilt_x : np.ndarray
        float64 shape (4, 4) のピッチ行列 X。
    tilt_y : np.ndarray
        float64 shape (4, 4) のヨー行列 Y。

    Notes
    -----
    行列は writeable=False で保持し、構築後に書き換えない。
    """

    output_width: int
    output_height: int
    perspective: np.ndarray
    tilt_x: np.ndarray
    tilt_y: np.ndarray

    @classmethod
    def create(cls, output_width: int, output_height: int) -> CameraModel:
        """出力寸法から 3 つの行列を計算してカメラを構築する。"""
        width = int(output_width)
        height = int(output_height)
        if width <= 0 or height <= 0:
            raise ValueError(f"出力寸法は正である必要がある: width={width}, height={height}")
        return cls(
            output_width=width,
            output_height=height,
            perspective=_readonly(build_perspective(width, height)),
            tilt_x=_readonly(build_tilt_x()),
            tilt_y=_readonly(build_tilt_y()),
        )

    @property
    def aspect_ratio(self) -> float:
        """height / width を返す。"""
        return float(self.output_height) / float(self.output_width)


__all__ = [
    "CameraModel",
    "build_perspective",
    "build_tilt_x",
    "build_tilt_y",
]
