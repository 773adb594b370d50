"""
どこで: `src/tweak3d/__main__.py`。
何を: `python -m tweak3d <demo>` でデモを起動する CLI を提供する。
なぜ: スクリプトを書かずに、デモ名と設定ファイルだけで動作確認できるようにするため。
"""

from __future__ import annotations

import argparse
import logging
import sys

from tweak3d.demos import demo_registry

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="tweak3d", description="パラメータ連動の 3D シーンデモを起動する")
    p.add_argument("demo", nargs="?", default="", help="起動するデモ名（--list で一覧）")
    p.add_argument("--list", action="store_true", help="登録済みデモの一覧を表示して終了する")
    p.add_argument("--config", default=None, help="config.yaml のパス（探索より優先）")
    p.add_argument("--fps", type=float, default=None, help="目標フレームレート（省略時は config の runtime.fps）")
    p.add_argument("--no-gui", action="store_true", help="コントロールパネルを表示しない")
    p.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=_LOG_LEVELS,
        help="ログレベル",
    )
    return p.parse_args(argv)


def _print_demo_list() -> None:
    for name in demo_registry.names():
        description = demo_registry.get_description(name)
        print(f"{name:<10} {description}".rstrip())


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        _print_demo_list()
        return 0

    if not args.demo:
        print("デモ名を指定してください（--list で一覧）:", file=sys.stderr)
        _print_demo_list()
        return 2
    if args.demo not in demo_registry:
        print(f"未登録のデモです: {args.demo!r}", file=sys.stderr)
        _print_demo_list()
        return 2

    from tweak3d.api import run

    run(
        args.demo,
        config_path=args.config,
        fps=args.fps,
        parameter_gui=not args.no_gui,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
