# どこで: `src/tilecalc/core/catalog.py`。
# 何を: LevelCatalog（ロード済みレベルの不変コレクション）と、明示的なロード結果型を提供する。

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from .codec import loads_levels
from .level import Level, LevelKey

_logger = logging.getLogger(__name__)

LevelIdentifier = LevelKey | str


class LevelDataError(Exception):
    """レベル定義ドキュメントの読み込み失敗の基底クラス。"""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class LevelLoadError(LevelDataError):
    """ファイルを読めなかった。"""


class LevelParseError(LevelDataError):
    """ドキュメントが壊れている、または必須フィールドが欠けている。"""


def _key_matches(key: LevelKey, identifier: LevelIdentifier) -> bool:
    if isinstance(identifier, LevelKey):
        return key == identifier
    if isinstance(identifier, str):
        return key.matches(identifier)
    raise TypeError(f"identifier は LevelKey か str である必要がある: got={type(identifier).__name__}")


class LevelCatalog:
    """ロード済みレベルを保持し、識別子による存在確認と検索に答える。

    Notes
    -----
    構築後は不変。検索は先頭からの線形走査で、最初に一致したレベルを返す。
    """

    __slots__ = ("_levels",)

    def __init__(self, levels: Sequence[Level] = ()) -> None:
        self._levels: tuple[Level, ...] = tuple(levels)

        seen: set[LevelKey] = set()
        for level in self._levels:
            if level.key in seen:
                _logger.warning("Duplicate level key (first one wins): %s", level.key)
            seen.add(level.key)

    @classmethod
    def loads(cls, text: str) -> LevelCatalog:
        """JSON 文字列からカタログを構築する。"""
        return cls(loads_levels(text))

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> Iterator[Level]:
        return iter(self._levels)

    def keys(self) -> tuple[LevelKey, ...]:
        return tuple(level.key for level in self._levels)

    def find(self, identifier: LevelIdentifier) -> Level | None:
        """identifier に一致する最初のレベルを返す。無ければ None。"""
        for level in self._levels:
            if _key_matches(level.key, identifier):
                return level
        return None

    def contains(self, identifier: LevelIdentifier) -> bool:
        return self.find(identifier) is not None


@dataclass(frozen=True, slots=True)
class CatalogLoadResult:
    """カタログのロード結果（成功ならカタログ、失敗ならエラー）。"""

    catalog: LevelCatalog | None = None
    error: LevelDataError | None = None

    def __post_init__(self) -> None:
        if (self.catalog is None) == (self.error is None):
            raise ValueError("catalog と error はどちらか一方だけを指定する")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> LevelCatalog:
        """カタログを返す。失敗していれば保持しているエラーを送出する。"""
        if self.error is not None:
            raise self.error
        assert self.catalog is not None
        return self.catalog


def load_level_catalog(path: str | Path) -> CatalogLoadResult:
    """レベル定義 JSON を読み込んでカタログを構築する。

    Parameters
    ----------
    path : str or Path
        レベルレコード配列の JSON ファイル。

    Returns
    -------
    CatalogLoadResult
        成功時は `catalog`、失敗時は `error`（LevelLoadError / LevelParseError）を持つ。

    Notes
    -----
    一部のレコードだけをロードすることはない（全件成功か失敗）。リトライもしない。
    """

    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        error: LevelDataError = LevelLoadError(f"レベル定義を読み込めません: {p}: {exc}", path=p)
        error.__cause__ = exc
        _logger.warning("Failed to read level data: %s (%s)", p, exc)
        return CatalogLoadResult(error=error)

    try:
        catalog = LevelCatalog.loads(text)
    except (TypeError, ValueError) as exc:
        error = LevelParseError(f"レベル定義の解析に失敗しました: {p}: {exc}", path=p)
        error.__cause__ = exc
        _logger.warning("Failed to parse level data: %s (%s)", p, exc)
        return CatalogLoadResult(error=error)

    _logger.info("Loaded %d levels from %s", len(catalog), p)
    return CatalogLoadResult(catalog=catalog)


__all__ = [
    "CatalogLoadResult",
    "LevelCatalog",
    "LevelDataError",
    "LevelIdentifier",
    "LevelLoadError",
    "LevelParseError",
    "load_level_catalog",
]
