"""
どこで: `src/tweak3d/interactive/gl/gpu_mesh.py`。
何を: BufferGeometry を VBO/IBO/VAO へ転送し、ジオメトリ単位でキャッシュする。
なぜ: 変化しないジオメトリを毎フレーム転送せず、`version` が変わったときだけ張り直すため。
"""

from __future__ import annotations

from typing import Any

import numpy as np

from tweak3d.core.scene import BufferGeometry

# 属性名 -> (シェーダ入力名, フォーマット)
_ATTRIBUTE_LAYOUT = (
    ("positions", "in_position", "3f"),
    ("normals", "in_normal", "3f"),
    ("colors", "in_color", "3f"),
    ("line_distance", "in_line_distance", "f"),
)


def _attribute_array(geometry: BufferGeometry, name: str) -> np.ndarray:
    """属性配列を返す。未設定の属性は既定値（法線 +Z / 白 / 距離 0）で埋める。"""

    n = geometry.vertex_count
    if name == "positions":
        return geometry.positions
    if name == "normals":
        if geometry.normals is not None:
            return geometry.normals
        out = np.zeros((n, 3), dtype=np.float32)
        out[:, 2] = 1.0
        return out
    if name == "colors":
        if geometry.colors is not None:
            return geometry.colors
        return np.ones((n, 3), dtype=np.float32)
    values = geometry.attributes.get(name)
    if values is not None:
        return np.ascontiguousarray(values, dtype=np.float32)
    return np.zeros((n,), dtype=np.float32)


class GpuGeometry:
    """1 つの BufferGeometry に対応する GPU バッファ群。"""

    def __init__(self, ctx: Any, geometry: BufferGeometry) -> None:
        self.ctx = ctx
        self.geometry = geometry
        self.version = int(geometry.version)
        self._buffers: dict[str, Any] = {}
        for attr, _input_name, _fmt in _ATTRIBUTE_LAYOUT:
            data = np.ascontiguousarray(_attribute_array(geometry, attr), dtype=np.float32)
            self._buffers[attr] = ctx.buffer(data.tobytes())
        self.ibo = None
        if geometry.index is not None:
            self.ibo = ctx.buffer(np.ascontiguousarray(geometry.index, dtype=np.uint32).tobytes())
        self.draw_count = int(geometry.draw_count)
        self._vaos: dict[int, Any] = {}

    def vao(self, program: Any) -> Any:
        """`program` 用の VAO を返す（プログラムごとに 1 度だけ作る）。"""

        key = id(program)
        vao = self._vaos.get(key)
        if vao is not None:
            return vao

        content = []
        for attr, input_name, fmt in _ATTRIBUTE_LAYOUT:
            # 最適化で消えた入力は VAO に含めない。
            if program.get(input_name, None) is None:
                continue
            content.append((self._buffers[attr], fmt, input_name))
        vao = self.ctx.vertex_array(program, content, index_buffer=self.ibo, index_element_size=4)
        self._vaos[key] = vao
        return vao

    def release(self) -> None:
        for vao in self._vaos.values():
            vao.release()
        self._vaos.clear()
        for buffer in self._buffers.values():
            buffer.release()
        self._buffers.clear()
        if self.ibo is not None:
            self.ibo.release()
            self.ibo = None


class GpuGeometryCache:
    """BufferGeometry -> GpuGeometry のキャッシュ。

    Notes
    -----
    - キーは geometry オブジェクトの id。エントリが geometry への参照を持つため、
      キャッシュ中に id が再利用されることはない。
    - `end_frame()` は、そのフレームで一度も使われなかったエントリを解放する。
    """

    def __init__(self, ctx: Any) -> None:
        self.ctx = ctx
        self._entries: dict[int, GpuGeometry] = {}
        self._used: set[int] = set()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, geometry: BufferGeometry) -> GpuGeometry:
        key = id(geometry)
        entry = self._entries.get(key)
        if entry is not None and entry.version != int(geometry.version):
            entry.release()
            entry = None
        if entry is None:
            entry = GpuGeometry(self.ctx, geometry)
            self._entries[key] = entry
        self._used.add(key)
        return entry

    def end_frame(self) -> None:
        for key in [k for k in self._entries if k not in self._used]:
            self._entries.pop(key).release()
        self._used.clear()

    def release(self) -> None:
        for entry in self._entries.values():
            entry.release()
        self._entries.clear()
        self._used.clear()


__all__ = ["GpuGeometry", "GpuGeometryCache"]
