# どこで: `src/tweak3d/api/__init__.py`。
# 何を: 公開 API（run / demo 登録デコレータ）を再エクスポートする。
# なぜ: ユーザーコードからシンプルに API を import できるようにするため。

from __future__ import annotations

from tweak3d.demos.registry import demo, demo_registry

__all__ = ["demo", "demo_registry", "run"]


def run(*args, **kwargs):
    """公開 run API へのラッパ（遅延インポートで GUI 依存を後回しにする）。"""

    from .runner import run as _run

    return _run(*args, **kwargs)
