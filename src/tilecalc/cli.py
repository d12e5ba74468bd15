"""
どこで: `src/tilecalc/cli.py`。
何を: `tilecalc` コマンド（run / contains / list）を提供する。
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tilecalc.core.catalog import LevelCatalog, LevelDataError, load_level_catalog
from tilecalc.core.runtime_config import runtime_config, set_config_path
from tilecalc.core.tile_calc import TileCalc
from tilecalc.export.table import dumps_projection

_logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


class _CliError(Exception):
    """CLI の入力・設定エラー（stderr に出して EXIT_ERROR で終了する）。"""


def _parse_size(text: str) -> tuple[int, int]:
    parts = str(text).lower().replace("*", "x").split("x")
    try:
        width, height = (int(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"--size は WIDTHxHEIGHT 形式で指定する: {text}") from None
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"--size は正の値である必要がある: {text}")
    return (width, height)


def _build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tilecalc",
        description="マップのタイル座標を画面ピクセル座標へ変換する",
    )
    parser.add_argument("--config", default=None, help="config.yaml のパス（既定の探索より優先）")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="ログを詳しくする（-v で INFO、-vv で DEBUG）",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    levels_help = "レベル定義 JSON のパス（config の paths.level_data より優先）"

    p_run = sub.add_parser("run", help="レベルの全マスの画面座標を JSON で出力する")
    p_run.add_argument("identifier", help="stageId / code / levelId / name のいずれか")
    p_run.add_argument("--side", action="store_true", help="裏側の視点で投影する")
    p_run.add_argument("--size", type=_parse_size, default=None, help="出力寸法（例: 1920x1080）")
    p_run.add_argument("--levels", default=None, help=levels_help)
    p_run.add_argument("--decimals", type=int, default=None, help="座標を丸める小数桁数")
    p_run.add_argument("--indent", type=int, default=None, help="JSON のインデント幅")

    p_contains = sub.add_parser("contains", help="レベルの有無を true/false で出力する")
    p_contains.add_argument("identifier", help="stageId / code / levelId / name のいずれか")
    p_contains.add_argument("--levels", default=None, help=levels_help)

    p_list = sub.add_parser("list", help="ロードしたレベルのキーを一覧する")
    p_list.add_argument("--levels", default=None, help=levels_help)

    return parser


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _resolve_levels_path(arg: str | None) -> Path:
    if arg is not None:
        return Path(arg).expanduser()
    level_data = runtime_config().level_data
    if level_data is None:
        raise _CliError("レベル定義のパスが未設定です（--levels か config の paths.level_data で指定）")
    return level_data


def _load_catalog(arg: str | None) -> LevelCatalog:
    result = load_level_catalog(_resolve_levels_path(arg))
    try:
        return result.unwrap()
    except LevelDataError as exc:
        raise _CliError(str(exc)) from exc


def _cmd_run(args: argparse.Namespace) -> int:
    catalog = _load_catalog(args.levels)
    width, height = args.size if args.size is not None else runtime_config().screen_size
    calc = TileCalc.from_catalog(width, height, catalog)

    projection = calc.run(args.identifier, side=bool(args.side))
    if projection is None:
        print(f"level not found: {args.identifier}", file=sys.stderr)  # noqa: T201
        return EXIT_NOT_FOUND

    print(dumps_projection(projection, decimals=args.decimals, indent=args.indent))  # noqa: T201
    return EXIT_OK


def _cmd_contains(args: argparse.Namespace) -> int:
    found = _load_catalog(args.levels).contains(args.identifier)
    print("true" if found else "false")  # noqa: T201
    return EXIT_OK if found else EXIT_NOT_FOUND


def _cmd_list(args: argparse.Namespace) -> int:
    for key in _load_catalog(args.levels).keys():
        print("\t".join(key.identifiers()))  # noqa: T201
    return EXIT_OK


_COMMANDS = {
    "run": _cmd_run,
    "contains": _cmd_contains,
    "list": _cmd_list,
}


def main(argv: list[str] | None = None) -> int:
    args = _build_argparser().parse_args(argv)
    _configure_logging(int(args.verbose))
    set_config_path(args.config)

    try:
        return _COMMANDS[args.command](args)
    except (_CliError, FileNotFoundError, RuntimeError, ValueError) as exc:
        _logger.debug("command failed", exc_info=True)
        print(f"tilecalc: error: {exc}", file=sys.stderr)  # noqa: T201
        return EXIT_ERROR


__all__ = ["main"]
