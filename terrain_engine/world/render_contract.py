# terrain_engine/world/render_contract.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Protocol, Tuple

import numpy as np

from ..core.types import MeshData


class ChunkRenderer(Protocol):
    """То, что хост-движок предоставляет каждому чанку. Вызывается только из основного потока."""

    def submit_mesh(self, mesh: MeshData) -> None: ...
    def submit_texture(self, texture: np.ndarray, width: int, height: int) -> None: ...
    def submit_collision_mesh(self, mesh: MeshData) -> None: ...
    def set_visible(self, visible: bool) -> None: ...
    def set_transform(self, position: Tuple[float, float, float], scale: float) -> None: ...


@dataclass
class RecordingRenderer:
    """Рендерер без движка: просто запоминает последнее, что ему отдали."""

    mesh: Optional[MeshData] = None
    texture: Optional[np.ndarray] = None
    collision_mesh: Optional[MeshData] = None
    visible: bool = False
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    scale: float = 1.0
    mesh_submissions: int = 0

    def submit_mesh(self, mesh: MeshData) -> None:
        self.mesh = mesh
        self.mesh_submissions += 1

    def submit_texture(self, texture: np.ndarray, width: int, height: int) -> None:
        self.texture = texture

    def submit_collision_mesh(self, mesh: MeshData) -> None:
        self.collision_mesh = mesh

    def set_visible(self, visible: bool) -> None:
        self.visible = bool(visible)

    def set_transform(self, position: Tuple[float, float, float], scale: float) -> None:
        self.position = position
        self.scale = scale
