# どこで: `src/tweak3d/core/parameters/meta_spec.py`。
# 何を: ユーザー入力（dict spec）を `ParamMeta` へ正規化する関数を提供する。
# なぜ: デモ定義側が `ParamMeta` import を要求されずに meta を書けるようにしつつ、内部表現を統一するため。

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .meta import KINDS, ParamMeta

_ALLOWED_META_SPEC_KEYS = {"kind", "ui_min", "ui_max", "step", "choices"}


def meta_from_spec(spec: ParamMeta | Mapping[str, object]) -> ParamMeta:
    """dict spec または `ParamMeta` から `ParamMeta` を返す。

    Parameters
    ----------
    spec : ParamMeta | Mapping[str, object]
        `ParamMeta` または dict spec。

        dict spec の形式:
        - kind: str（必須、"float" | "int" | "bool" | "choice"）
        - ui_min/ui_max: object（任意）
        - step: float（任意、正の値）
        - choices: Sequence[str]（kind="choice" では必須）

    Raises
    ------
    TypeError
        spec の型が不正な場合。
    ValueError
        必須キー欠落や未知キーなど、spec の内容が不正な場合。
    """

    if isinstance(spec, ParamMeta):
        return spec
    if not isinstance(spec, Mapping):
        raise TypeError("meta spec は ParamMeta または dict である必要があります")

    unknown = set(spec.keys()) - _ALLOWED_META_SPEC_KEYS
    if unknown:
        names = ", ".join(sorted(str(k) for k in unknown))
        raise ValueError(f"meta spec に未知キーがあります: {names}")

    if "kind" not in spec:
        raise ValueError("meta spec には 'kind' が必要です")
    kind = spec["kind"]
    if not isinstance(kind, str):
        raise TypeError("meta spec の 'kind' は str である必要があります")
    if kind not in KINDS:
        raise ValueError(f"meta spec の 'kind' が未知です: {kind!r}")

    ui_min = spec.get("ui_min", None)
    ui_max = spec.get("ui_max", None)

    raw_step = spec.get("step", None)
    step: float | None
    if raw_step is None:
        step = None
    else:
        try:
            step = float(raw_step)  # type: ignore[arg-type]
        except Exception as exc:
            raise TypeError("meta spec の 'step' は数値である必要があります") from exc
        if step <= 0.0:
            raise ValueError(f"meta spec の 'step' は正の値である必要があります: got={step}")

    raw_choices = spec.get("choices", None)
    choices: Sequence[str] | None
    if raw_choices is None:
        choices = None
    else:
        if isinstance(raw_choices, (str, bytes)):
            raise TypeError("meta spec の 'choices' は Sequence[str] である必要があります")
        if not isinstance(raw_choices, Sequence):
            raise TypeError("meta spec の 'choices' は Sequence[str] である必要があります")
        choices = tuple(str(x) for x in raw_choices)

    if kind == "choice" and not choices:
        raise ValueError("kind='choice' には空でない 'choices' が必要です")

    return ParamMeta(kind=str(kind), ui_min=ui_min, ui_max=ui_max, step=step, choices=choices)


__all__ = ["meta_from_spec"]
