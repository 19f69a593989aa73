# ==============================================================================
# Файл: terrain_engine/core/types.py
# Назначение: Структуры данных, которые передаются между воркерами и
#             основным потоком (карта высот, меш, отложенный результат).
# ==============================================================================
from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Optional

import numpy as np


class VertexKind(IntEnum):
    """Тег вершины: обычная (уходит в рендер) или бордюрная (только для нормалей)."""

    INTERIOR = 0
    BORDER = 1


# Ссылка на вершину в бордюрных треугольниках: (тип, индекс внутри своего массива).
VERTEX_REF_DTYPE = np.dtype([("kind", np.uint8), ("index", np.int32)])


@dataclass
class MapData:
    """Результат генерации данных чанка: высоты (с бордюром) + раскраска."""

    height_map: np.ndarray
    color_map: Any  # ColorField
    center: tuple[float, float] = (0.0, 0.0)


@dataclass
class MeshData:
    """
    Буферы меша, готовые к передаче в рендер.

    vertices/triangles/uvs/normals описывают только видимую часть чанка.
    border_vertices/border_triangles - "теневой" набор: участвует в расчёте
    нормалей, в рендер никогда не передаётся.
    """

    vertices: np.ndarray
    triangles: np.ndarray
    uvs: np.ndarray
    normals: Optional[np.ndarray] = None
    border_vertices: np.ndarray = field(
        default_factory=lambda: np.zeros((0, 3), dtype=np.float32)
    )
    border_triangles: np.ndarray = field(
        default_factory=lambda: np.zeros((0, 3), dtype=VERTEX_REF_DTYPE)
    )
    lod: int = 0
    flat_shaded: bool = False

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.triangles.shape[0])

    def recalculate_normals(self) -> np.ndarray:
        """Нормали только по переданной геометрии (как это делает движок)."""
        v = self.vertices.astype(np.float64)
        t = self.triangles
        face = np.cross(v[t[:, 1]] - v[t[:, 0]], v[t[:, 2]] - v[t[:, 0]])
        acc = np.zeros_like(v)
        for corner in range(3):
            np.add.at(acc, t[:, corner], face)
        lengths = np.linalg.norm(acc, axis=1, keepdims=True)
        lengths[lengths == 0.0] = 1.0
        self.normals = (acc / lengths).astype(np.float32)
        return self.normals


@dataclass
class PendingResult:
    """Пара (callback, payload), которую воркер кладёт в общую очередь."""

    callback: Callable[[Any], None]
    payload: Any = None
    error: Optional[BaseException] = None
    on_error: Optional[Callable[[BaseException], None]] = None
