"""
どこで: `src/tweak3d/core/scene/texture_loader.py`。
何を: キューブテクスチャ 6 面のデコードをワーカースレッドへ投げ、完了分をループスレッドで反映するローダーを提供する。
なぜ: テクスチャ切替のたびに描画を止めず、かつ追い越された古いロード結果で新しい選択を上書きしないため。
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .textures import CUBE_REFLECTION_MAPPING, CubeTexture

_logger = logging.getLogger(__name__)

DecodeFn = Callable[[Path], np.ndarray]


def _decode_faces(decode: DecodeFn, paths: tuple[Path, ...]) -> tuple[np.ndarray, ...]:
    return tuple(decode(path) for path in paths)


@dataclass(frozen=True, slots=True)
class _PendingLoad:
    channel: str | None
    seq: int
    future: Future
    textures: tuple[CubeTexture, ...]
    source: str


class CubeTextureLoader:
    """キューブテクスチャの非同期ローダー。

    Parameters
    ----------
    decode : Callable[[Path], np.ndarray]
        画像 1 枚を shape (S,S,3) uint8（上から下の行順）へデコードする関数。
        ワーカースレッドから呼ばれる。
    executor : Executor | None
        デコードを実行する Executor。None の場合は ThreadPoolExecutor を内部で作る。

    Notes
    -----
    - `load()` は空の CubeTexture を即座に返す。画像は `poll()` で後から入る。
    - `channel` を指定したロードには、channel ごとに単調増加する連番が付く。
      `poll()` は最新の連番のロードだけを反映し、追い越された結果は捨てる。
    """

    def __init__(
        self,
        decode: DecodeFn,
        executor: Executor | None = None,
        *,
        max_workers: int = 2,
    ) -> None:
        self._decode = decode
        self._owns_executor = executor is None
        self._executor: Executor = (
            ThreadPoolExecutor(max_workers=int(max_workers), thread_name_prefix="tweak3d-texture")
            if executor is None
            else executor
        )
        self._latest_seq: dict[str, int] = {}
        self._pending: list[_PendingLoad] = []
        self._closed = False

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def latest_seq(self, channel: str) -> int:
        """channel に最後に発行した連番（未発行なら 0）を返す。"""

        return int(self._latest_seq.get(str(channel), 0))

    def load(
        self,
        paths: Sequence[str | Path],
        *,
        mappings: Sequence[str] = (CUBE_REFLECTION_MAPPING,),
        channel: str | None = None,
        source: str = "",
    ) -> tuple[CubeTexture, ...]:
        """6 面画像のロードを開始し、mapping ごとの CubeTexture を返す。

        同じ 6 面の画像は 1 回だけデコードし、返すテクスチャ全てで共有する。

        Raises
        ------
        ValueError
            paths が 6 個でない場合、または mappings が空の場合。
        RuntimeError
            close() 済みの場合。
        """

        if self._closed:
            raise RuntimeError("CubeTextureLoader は close 済みです")
        face_paths = tuple(Path(p) for p in paths)
        if len(face_paths) != 6:
            raise ValueError(f"キューブテクスチャには 6 面のパスが必要: got={len(face_paths)}")
        if not mappings:
            raise ValueError("mappings が空です")

        label = str(source) if source else str(face_paths[0].parent)
        textures = tuple(CubeTexture(mapping=m, source=label) for m in mappings)

        seq = 0
        if channel is not None:
            key = str(channel)
            seq = self._latest_seq.get(key, 0) + 1
            self._latest_seq[key] = seq

        future = self._executor.submit(_decode_faces, self._decode, face_paths)
        self._pending.append(
            _PendingLoad(
                channel=None if channel is None else str(channel),
                seq=seq,
                future=future,
                textures=textures,
                source=label,
            )
        )
        _logger.debug("テクスチャロード開始: source=%s channel=%s seq=%d", label, channel, seq)
        return textures

    def poll(self) -> int:
        """完了したロードを反映し、反映した件数を返す。ループスレッドから呼ぶ。"""

        if not self._pending:
            return 0

        applied = 0
        still_pending: list[_PendingLoad] = []
        for load in self._pending:
            if not load.future.done():
                still_pending.append(load)
                continue

            if load.channel is not None and load.seq != self._latest_seq.get(load.channel, 0):
                _logger.debug(
                    "古いテクスチャロードを破棄: source=%s channel=%s seq=%d latest=%d",
                    load.source,
                    load.channel,
                    load.seq,
                    self._latest_seq.get(load.channel, 0),
                )
                continue

            try:
                faces = load.future.result()
                for texture in load.textures:
                    texture.set_faces(faces)
            except Exception:
                _logger.exception("テクスチャのロードに失敗しました: %s", load.source)
                continue
            applied += 1
            _logger.debug("テクスチャロード完了: source=%s seq=%d", load.source, load.seq)

        self._pending = still_pending
        return applied

    def close(self) -> None:
        """未反映のロードを捨て、内部 Executor を停止する。"""

        if self._closed:
            return
        self._closed = True
        for load in self._pending:
            load.future.cancel()
        self._pending.clear()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)


__all__ = ["CubeTextureLoader", "DecodeFn"]
