"""adapt_aspect の補正量に関するテスト群。"""

from __future__ import annotations

import pytest

from tilecalc.core.aspect import adapt_aspect


def test_native_16_9_applies_zero_shift() -> None:
    adj = adapt_aspect(output_width=1920, output_height=1080)
    assert adj.applied is True
    assert adj.dx == 0.0
    assert adj.dy == 0.0


def test_4_3_applies_full_shift() -> None:
    adj = adapt_aspect(output_width=1024, output_height=768)
    assert adj.applied is True
    assert adj.dx == pytest.approx(-1.4)
    assert adj.dy == pytest.approx(-2.8)


def test_below_supported_range_is_not_applied() -> None:
    # ratio = 9/16 - 0.01
    adj = adapt_aspect(output_width=2000, output_height=1105)
    assert adj.applied is False
    assert (adj.dx, adj.dy) == (0.0, 0.0)


def test_ratio_within_tolerance_of_16_9_is_applied() -> None:
    # ratio = 0.562495（9/16 - 5e-6）。許容誤差 1e-5 の内側なので補正対象。
    adj = adapt_aspect(output_width=200000, output_height=112499)
    assert adj.applied is True
    assert adj.dx == pytest.approx(0.0, abs=1e-3)
    assert adj.dy == pytest.approx(0.0, abs=1e-3)


def test_1366x768_is_just_below_supported_range() -> None:
    # 768 / 1366 ≈ 0.56223 は 9/16 - 1e-5 を下回る。
    adj = adapt_aspect(output_width=1366, output_height=768)
    assert adj.applied is False


def test_ratio_between_references_interpolates_linearly() -> None:
    # 16:10 → t = (0.625 - 0.5625) / 0.1875 = 1/3
    adj = adapt_aspect(output_width=1600, output_height=1000)
    assert adj.applied is True
    assert adj.dx == pytest.approx(-1.4 / 3)
    assert adj.dy == pytest.approx(-2.8 / 3)


def test_ratio_above_4_3_extrapolates() -> None:
    adj = adapt_aspect(output_width=1000, output_height=1000)
    t = (1.0 - 9 / 16) / (3 / 4 - 9 / 16)
    assert adj.dx == pytest.approx(-1.4 * t)
    assert adj.dy == pytest.approx(-2.8 * t)
