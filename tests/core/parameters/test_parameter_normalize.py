from tweak3d.core.parameters import ParamMeta, normalize_input


def test_normalize_float_accepts_strings_and_rejects_bool():
    meta = ParamMeta(kind="float")

    assert normalize_input("0.5", meta) == (0.5, None)
    assert normalize_input(2, meta) == (2.0, None)
    assert normalize_input(True, meta) == (None, "invalid_float")
    assert normalize_input("x", meta) == (None, "invalid_float")


def test_normalize_int():
    meta = ParamMeta(kind="int", ui_min=0, ui_max=10)

    assert normalize_input("3", meta) == (3, None)
    assert normalize_input(False, meta) == (None, "invalid_int")
    assert normalize_input("bad", meta) == (None, "invalid_int")


def test_normalize_int_reports_truncated_fraction():
    meta = ParamMeta(kind="int", ui_min=0, ui_max=10)

    assert normalize_input(2.7, meta) == (2, "int_truncated")
    assert normalize_input(-2.7, meta) == (-2, "int_truncated")
    assert normalize_input(3.0, meta) == (3, None)
    assert normalize_input("2.7", meta) == (None, "invalid_int")
    assert normalize_input(float("nan"), meta) == (None, "invalid_int")
    assert normalize_input(float("inf"), meta) == (None, "invalid_int")


def test_normalize_bool_understands_words():
    meta = ParamMeta(kind="bool")

    assert normalize_input("on", meta) == (True, None)
    assert normalize_input(" False ", meta) == (False, None)
    assert normalize_input(1, meta) == (True, None)


def test_normalize_choice_falls_back_to_first_choice():
    meta = ParamMeta(kind="choice", choices=("bridge", "park"))

    assert normalize_input("park", meta) == ("park", None)
    assert normalize_input("lab", meta) == ("bridge", "choice_coerced")
