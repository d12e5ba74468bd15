"""tilecalc CLI（run / contains / list）のテスト。"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tilecalc.cli import EXIT_ERROR, EXIT_NOT_FOUND, EXIT_OK, main
from tilecalc.core.runtime_config import set_config_path


@pytest.fixture(autouse=True)
def _isolate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    set_config_path(None)
    yield
    set_config_path(None)


@pytest.fixture
def levels_path(tmp_path: Path) -> Path:
    records = [
        {
            "stageId": "main_00-01",
            "code": "0-1",
            "levelId": "obt/main/level_main_00-01",
            "name": "坍塌",
            "height": 2,
            "width": 3,
            "view": [[0.0, -4.81, -7.76], [0.6, -4.3, -7.9]],
            "tiles": [
                [{"heightType": 0, "buildableType": 1, "tileKey": "tile_road"}] * 3,
                [{"heightType": 1, "buildableType": 2, "tileKey": "tile_wall"}] * 3,
            ],
        }
    ]
    path = tmp_path / "levels.json"
    path.write_text(json.dumps(records, ensure_ascii=False), encoding="utf-8")
    return path


def test_run_prints_projection(levels_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["run", "0-1", "--levels", str(levels_path), "--size", "1280x720", "--decimals", "2"])
    out = capsys.readouterr().out

    assert code == EXIT_OK
    payload = json.loads(out)
    assert payload["level"]["name"] == "坍塌"
    assert payload["side"] is False
    assert (payload["width"], payload["height"]) == (3, 2)
    assert len(payload["tiles"]) == 2
    assert all(len(row) == 3 for row in payload["tiles"])
    assert payload["tiles"][1][0]["tileKey"] == "tile_wall"
    assert 0.0 < payload["tiles"][0][1]["x"] < 1280.0


def test_run_side_flag(levels_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["run", "main_00-01", "--levels", str(levels_path), "--side"]) == EXIT_OK
    assert json.loads(capsys.readouterr().out)["side"] is True


def test_run_not_found(levels_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["run", "main_99-99", "--levels", str(levels_path)])
    captured = capsys.readouterr()

    assert code == EXIT_NOT_FOUND
    assert captured.out == ""
    assert "main_99-99" in captured.err


def test_run_uses_config_for_levels_and_size(
    tmp_path: Path, levels_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "tilecalc.yaml"
    config.write_text(
        f'paths:\n  level_data: "{levels_path.as_posix()}"\nscreen:\n  size: [1024, 768]\n',
        encoding="utf-8",
    )

    assert main(["--config", str(config), "run", "0-1"]) == EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert all(0.0 < cell["x"] < 1024.0 for row in payload["tiles"] for cell in row)


def test_missing_levels_path_is_an_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["run", "0-1"]) == EXIT_ERROR
    assert "--levels" in capsys.readouterr().err


def test_unreadable_levels_is_an_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["contains", "0-1", "--levels", str(tmp_path / "missing.json")]) == EXIT_ERROR
    assert "tilecalc: error" in capsys.readouterr().err


def test_malformed_levels_is_an_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("[{}]", encoding="utf-8")
    assert main(["list", "--levels", str(bad)]) == EXIT_ERROR


def test_contains(levels_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["contains", "坍塌", "--levels", str(levels_path)]) == EXIT_OK
    assert capsys.readouterr().out.strip() == "true"

    assert main(["contains", "0-2", "--levels", str(levels_path)]) == EXIT_NOT_FOUND
    assert capsys.readouterr().out.strip() == "false"


def test_list(levels_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["list", "--levels", str(levels_path)]) == EXIT_OK
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["main_00-01\t0-1\tobt/main/level_main_00-01\t坍塌"]


@pytest.mark.parametrize("size", ["1920", "axb", "0x1080"])
def test_invalid_size_is_rejected(levels_path: Path, size: str) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["run", "0-1", "--levels", str(levels_path), "--size", size])
    assert excinfo.value.code == 2
