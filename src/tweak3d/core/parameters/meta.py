# どこで: `src/tweak3d/core/parameters/meta.py`。
# 何を: ParamMeta（GUI 表示/検証のためのメタ情報）を提供する。
# なぜ: コントロールパネルの生成と値の正規化に必要な型・レンジ情報を一元管理するため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

KINDS = ("float", "int", "bool", "choice")


@dataclass(frozen=True, slots=True)
class ParamMeta:
    """パラメータの UI/検証用メタ情報。

    ui_min/ui_max/step はスライダーのレンジと刻みを示すだけで、実値をクランプしない。
    """

    kind: str  # "float" | "int" | "bool" | "choice"
    ui_min: Any | None = None
    ui_max: Any | None = None
    step: float | None = None
    choices: Sequence[str] | None = None
