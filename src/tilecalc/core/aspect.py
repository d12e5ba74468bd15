# どこで: `src/tilecalc/core/aspect.py`。
# 何を: 16:9 以外の出力比でアンカー点をずらす補正量を計算する。

from __future__ import annotations

from dataclasses import dataclass

FROM_RATIO = 9.0 / 16.0
TO_RATIO = 3.0 / 4.0
RATIO_EPS = 1e-5

# TO_RATIO のときの補正量。
SHIFT_AT_TO_RATIO = (-1.4, -2.8)


@dataclass(frozen=True, slots=True)
class AspectAdjustment:
    """アンカー点の補正量。`dx` は y、`dy` は z の平行移動に足し込まれる。"""

    dx: float
    dy: float
    applied: bool


def adapt_aspect(*, output_width: int, output_height: int) -> AspectAdjustment:
    """出力寸法に応じた補正量を返す。

    ratio = height / width が 9/16 未満なら補正しない（applied=False）。
    それ以外は 9/16 → 3/4 を 0 → 1 として線形に補間する。上限のクランプは無い。
    """
    ratio = float(output_height) / float(output_width)
    if ratio < FROM_RATIO - RATIO_EPS:
        return AspectAdjustment(dx=0.0, dy=0.0, applied=False)

    t = (ratio - FROM_RATIO) / (TO_RATIO - FROM_RATIO)
    return AspectAdjustment(
        dx=SHIFT_AT_TO_RATIO[0] * t,
        dy=SHIFT_AT_TO_RATIO[1] * t,
        applied=True,
    )


__all__ = ["AspectAdjustment", "adapt_aspect"]
