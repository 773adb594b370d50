import math

import pytest

from tweak3d.core.parameters import ParameterRow
from tweak3d.interactive.parameter_gui.widgets import (
    _float_slider_range,
    _int_slider_range,
    quantize_to_step,
    render_value_widget,
    step_decimals,
    widget_registry,
)


def _row(kind: str, **kwargs) -> ParameterRow:
    values = dict(
        name="x",
        label="x",
        folder=None,
        kind=kind,
        value=0,
        ui_min=None,
        ui_max=None,
        step=None,
        choices=None,
    )
    values.update(kwargs)
    return ParameterRow(**values)


def test_step_decimals():
    assert step_decimals(None) == 3
    assert step_decimals(1.0) == 0
    assert step_decimals(0.01) == 2
    assert step_decimals(0.25) == 2
    assert step_decimals(5) == 0


def test_quantize_snaps_to_step_grid_from_lower_bound():
    assert quantize_to_step(0.123, step=0.01, lo=0.0, hi=1.0) == 0.12
    assert quantize_to_step(0.126, step=0.01, lo=0.0, hi=1.0) == 0.13
    assert quantize_to_step(3.7, step=1.0, lo=0.5, hi=10.0) == 3.5
    assert quantize_to_step(2.0 * math.pi, step=0.01, lo=0.0, hi=2.0 * math.pi) == pytest.approx(
        6.28
    )


def test_quantize_keeps_lower_bound_precision_finer_than_step():
    assert quantize_to_step(0.37, step=0.1, lo=0.05, hi=1.0) == 0.35
    assert quantize_to_step(7.2, step=2.0, lo=0.25, hi=10.0) == 6.25
    assert quantize_to_step(3.7, step=1.0, lo=0.5, hi=10.0) == 3.5


def test_quantize_clamps_to_slider_range():
    assert quantize_to_step(1.2, step=0.01, lo=0.0, hi=1.0) == 1.0
    assert quantize_to_step(-0.3, step=None, lo=0.0, hi=1.0) == 0.0
    assert quantize_to_step(float("nan"), step=0.01, lo=0.25, hi=1.0) == 0.25


def test_quantize_without_step_keeps_value():
    assert quantize_to_step(0.3333, step=None, lo=0.0, hi=1.0) == 0.3333


def test_slider_ranges_fall_back_and_swap():
    assert _float_slider_range(_row("float")) == (0.0, 1.0)
    assert _float_slider_range(_row("float", ui_min=5, ui_max=1)) == (1.0, 5.0)
    assert _int_slider_range(_row("int")) == (0, 100)
    assert _int_slider_range(_row("int", ui_min=-(2**40), ui_max=2**40)) == (
        -1_073_741_824,
        1_073_741_823,
    )


def test_widget_registry_covers_all_kinds():
    assert set(widget_registry()) == {"float", "int", "bool", "choice"}


def test_render_value_widget_rejects_unknown_kind():
    with pytest.raises(ValueError):
        render_value_widget(_row("vec3"))
