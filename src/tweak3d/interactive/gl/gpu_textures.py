# どこで: `src/tweak3d/interactive/gl/gpu_textures.py`。
# 何を: CubeTexture の 6 面画像を ModernGL の TextureCube へ転送し、テクスチャ単位でキャッシュする。
# なぜ: テクスチャ切替で参照されなくなった GPU テクスチャを次のフレームで確実に解放するため。

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from tweak3d.core.scene import CubeTexture

_logger = logging.getLogger(__name__)


class _Entry:
    __slots__ = ("texture", "version", "gpu")

    def __init__(self, texture: CubeTexture, version: int, gpu: Any) -> None:
        self.texture = texture
        self.version = version
        self.gpu = gpu


class GpuTextureCache:
    """CubeTexture -> moderngl.TextureCube のキャッシュ。"""

    def __init__(self, ctx: Any) -> None:
        self.ctx = ctx
        self._entries: dict[int, _Entry] = {}
        self._used: set[int] = set()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, texture: CubeTexture) -> Any | None:
        """GPU テクスチャを返す。画像未到着なら None。"""

        if not texture.is_ready:
            return None
        key = id(texture)
        entry = self._entries.get(key)
        if entry is not None and entry.version != texture.version:
            entry.gpu.release()
            entry = None
        if entry is None:
            entry = _Entry(texture, texture.version, self._upload(texture))
            self._entries[key] = entry
        self._used.add(key)
        return entry.gpu

    def _upload(self, texture: CubeTexture) -> Any:
        import moderngl

        assert texture.faces is not None
        size = texture.size
        # +X, -X, +Y, -Y, +Z, -Z の順に連結する（行は上から下のまま）。
        data = np.concatenate([np.ascontiguousarray(f, dtype=np.uint8).reshape(-1) for f in texture.faces])
        gpu = self.ctx.texture_cube((size, size), 3, data.tobytes())
        gpu.build_mipmaps()
        gpu.filter = (moderngl.LINEAR_MIPMAP_LINEAR, moderngl.LINEAR)
        _logger.debug("キューブテクスチャを転送しました: %r size=%d", texture, size)
        return gpu

    def end_frame(self) -> None:
        for key in [k for k in self._entries if k not in self._used]:
            entry = self._entries.pop(key)
            entry.gpu.release()
            _logger.debug("キューブテクスチャを解放しました: %r", entry.texture)
        self._used.clear()

    def release(self) -> None:
        for entry in self._entries.values():
            entry.gpu.release()
        self._entries.clear()
        self._used.clear()


__all__ = ["GpuTextureCache"]
