# どこで: `src/tweak3d/interactive/parameter_gui/widgets.py`。
# 何を: ParameterRow.kind を pyimgui の値ウィジェット（スライダー/コンボ/チェックボックス）へ対応付けて描画する。
# なぜ: kind ごとの UI 実装を閉じ込め、パネル描画から分離するため。

from __future__ import annotations

import math
from collections.abc import Callable
from decimal import Decimal
from typing import Any

from tweak3d.core.parameters.view import ParameterRow

WidgetFn = Callable[[ParameterRow], tuple[bool, Any]]


def _float_slider_range(row: ParameterRow) -> tuple[float, float]:
    """float スライダーのレンジ (min, max) を返す。

    ui_min/ui_max が None の場合は 0.0..1.0 にフォールバックする。
    """

    min_value = 0.0 if row.ui_min is None else float(row.ui_min)
    max_value = 1.0 if row.ui_max is None else float(row.ui_max)
    if min_value > max_value:
        min_value, max_value = max_value, min_value
    return min_value, max_value


def _int_slider_range(row: ParameterRow) -> tuple[int, int]:
    """int スライダーのレンジ (min, max) を返す。

    ui_min/ui_max が None の場合は 0..100 にフォールバックする。
    """

    min_value = 0 if row.ui_min is None else int(row.ui_min)
    max_value = 100 if row.ui_max is None else int(row.ui_max)

    # ImGui の slider_int は min/max が int32 の半分レンジ以内であることを要求する。
    min_value = max(-1_073_741_824, min(1_073_741_823, min_value))
    max_value = max(-1_073_741_824, min(1_073_741_823, max_value))
    if min_value > max_value:
        min_value, max_value = max_value, min_value
    return min_value, max_value


def step_decimals(step: float | None) -> int:
    """刻み幅 `step` を表すのに必要な小数桁数を返す（None は 3 桁）。"""

    if step is None:
        return 3
    exponent = Decimal(repr(float(step))).normalize().as_tuple().exponent
    return max(0, -int(exponent)) if isinstance(exponent, int) else 3


def quantize_to_step(value: float, *, step: float | None, lo: float, hi: float) -> float:
    """`lo` を起点に `step` の格子へ丸め、[lo, hi] に収めた値を返す（純粋関数）。"""

    v = float(value)
    if not math.isfinite(v):
        return float(lo)
    if step is not None and step > 0:
        v = lo + round((v - lo) / float(step)) * float(step)
        # 格子点は lo + k*step なので、lo 側の桁も残す。
        v = round(v, max(step_decimals(step), step_decimals(lo)))
    return max(float(lo), min(float(hi), v))


def widget_float_slider(row: ParameterRow) -> tuple[bool, float]:
    """kind=float のスライダーを描画し、(changed, value) を返す。

    変更後の値は `step` の格子へ丸める。
    """

    import imgui  # type: ignore[import-untyped]

    min_value, max_value = _float_slider_range(row)
    decimals = step_decimals(row.step)
    changed, value = imgui.slider_float(
        "##value",
        float(row.value),
        min_value,
        max_value,
        format=f"%.{decimals}f",
    )
    if not changed:
        return False, float(row.value)
    quantized = quantize_to_step(value, step=row.step, lo=min_value, hi=max_value)
    return quantized != float(row.value), quantized


def widget_int_slider(row: ParameterRow) -> tuple[bool, int]:
    """kind=int のスライダーを描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    min_value, max_value = _int_slider_range(row)
    changed, value = imgui.slider_int("##value", int(row.value), min_value, max_value)
    return changed, int(value)


def widget_bool_checkbox(row: ParameterRow) -> tuple[bool, bool]:
    """kind=bool のチェックボックスを描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    clicked, state = imgui.checkbox("##value", bool(row.value))
    return clicked, bool(state)


def widget_choice_combo(row: ParameterRow) -> tuple[bool, str]:
    """kind=choice のドロップダウンを描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    if not row.choices:
        raise ValueError(f"choice には空でない choices が必要: {row.name!r}")

    choices = [str(c) for c in row.choices]
    try:
        current = choices.index(str(row.value))
    except ValueError:
        current = 0
    clicked, selected = imgui.combo("##value", current, choices)
    if not clicked or int(selected) == current:
        return False, choices[current]
    return True, choices[int(selected)]


_KIND_TO_WIDGET: dict[str, WidgetFn] = {
    "float": widget_float_slider,
    "int": widget_int_slider,
    "bool": widget_bool_checkbox,
    "choice": widget_choice_combo,
}


def render_value_widget(row: ParameterRow) -> tuple[bool, Any]:
    """row.kind に応じたウィジェットを描画し、(changed, value) を返す。

    Raises
    ------
    ValueError
        未知 kind の場合。
    """

    fn = _KIND_TO_WIDGET.get(row.kind)
    if fn is None:
        raise ValueError(f"未知の kind です: {row.kind!r}")
    return fn(row)


def widget_registry() -> dict[str, WidgetFn]:
    """kind -> widget 関数マップのコピーを返す。"""

    return dict(_KIND_TO_WIDGET)


__all__ = [
    "quantize_to_step",
    "render_value_widget",
    "step_decimals",
    "widget_registry",
]
