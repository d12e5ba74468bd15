# どこで: `src/tilecalc/core/tile_calc.py`。
# 何を: カメラとカタログを束ね、識別子からタイルの画面座標を引く問い合わせ面を提供する。

from __future__ import annotations

import logging
from pathlib import Path

from .camera import CameraModel
from .catalog import LevelCatalog, LevelIdentifier, load_level_catalog
from .level import Level
from .projector import TileProjection, project_level

_logger = logging.getLogger(__name__)


class TileCalc:
    """マップのタイル座標を画面ピクセル座標へ変換する。

    Parameters
    ----------
    output_width, output_height : int
        出力画像のピクセル寸法。
    level_data_path : str or Path
        レベル定義 JSON のパス。

    Raises
    ------
    LevelLoadError
        ファイルを読めない場合。
    LevelParseError
        ドキュメントが不正な場合。

    Notes
    -----
    ロード失敗時にフォールバックしたい呼び出し側は、`load_level_catalog` の結果を見てから
    `TileCalc.from_catalog` を使う。
    """

    __slots__ = ("_camera", "_catalog")

    def __init__(
        self,
        output_width: int,
        output_height: int,
        level_data_path: str | Path,
    ) -> None:
        self._camera = CameraModel.create(output_width, output_height)
        self._catalog = load_level_catalog(level_data_path).unwrap()

    @classmethod
    def from_catalog(
        cls,
        output_width: int,
        output_height: int,
        catalog: LevelCatalog,
    ) -> TileCalc:
        """ロード済みカタログから構築する。"""
        self = cls.__new__(cls)
        self._camera = CameraModel.create(output_width, output_height)
        self._catalog = catalog
        return self

    @property
    def camera(self) -> CameraModel:
        return self._camera

    @property
    def catalog(self) -> LevelCatalog:
        return self._catalog

    def contains(self, identifier: LevelIdentifier) -> bool:
        """identifier に一致するレベルがあれば True を返す。"""
        return self._catalog.contains(identifier)

    def lookup(self, identifier: LevelIdentifier) -> Level | None:
        """identifier に一致する最初のレベルを返す。無ければ None。"""
        level = self._catalog.find(identifier)
        if level is None:
            _logger.debug("Level not found: %r", identifier)
        return level

    def run(self, identifier: LevelIdentifier, side: bool = False) -> TileProjection | None:
        """レベルを引いて全マスを投影する。

        Parameters
        ----------
        identifier : LevelKey or str
            LevelKey なら構造一致、文字列ならいずれかの識別フィールドとの完全一致で探す。
        side : bool, default False
            True なら裏側の視点で投影する。

        Returns
        -------
        TileProjection or None
            見つからなければ None（何も計算しない）。
        """
        level = self.lookup(identifier)
        if level is None:
            return None
        return project_level(self._camera, level, side=side)


__all__ = ["TileCalc"]
