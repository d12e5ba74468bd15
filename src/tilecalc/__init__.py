# どこで: `src/tilecalc/__init__.py`。
# 何を: ルート `tilecalc` パッケージを定義し、主要な型と TileCalc を再エクスポートする。

from __future__ import annotations

from tilecalc.core.aspect import AspectAdjustment, adapt_aspect
from tilecalc.core.camera import CameraModel
from tilecalc.core.catalog import (
    CatalogLoadResult,
    LevelCatalog,
    LevelDataError,
    LevelLoadError,
    LevelParseError,
    load_level_catalog,
)
from tilecalc.core.level import Level, LevelKey, Tile
from tilecalc.core.projector import TileProjection, project_level
from tilecalc.core.tile_calc import TileCalc

__all__ = [
    "AspectAdjustment",
    "CameraModel",
    "CatalogLoadResult",
    "Level",
    "LevelCatalog",
    "LevelDataError",
    "LevelKey",
    "LevelLoadError",
    "LevelParseError",
    "Tile",
    "TileCalc",
    "TileProjection",
    "adapt_aspect",
    "load_level_catalog",
    "project_level",
]
