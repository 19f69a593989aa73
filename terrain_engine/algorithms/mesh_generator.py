# ==============================================================================
# Файл: terrain_engine/algorithms/mesh_generator.py
# Назначение: Карта высот (с бордюром в 1 клетку) -> буферы меша с LOD.
# ==============================================================================
from __future__ import annotations
import logging
from typing import List

import numpy as np

from ..core.types import MeshData, VertexKind, VERTEX_REF_DTYPE

logger = logging.getLogger(__name__)


def simplification_increment(level_of_detail: int) -> int:
    return 1 if level_of_detail == 0 else level_of_detail * 2


def _sample_axis(bordered_size: int, increment: int) -> np.ndarray:
    """Индексы выборки вдоль оси: бордюр, видимая часть с шагом increment, бордюр."""
    last_inner = bordered_size - 2
    inner: List[int] = list(range(1, last_inner, increment)) + [last_inner]
    return np.array([0] + inner + [bordered_size - 1], dtype=np.int64)


def vertices_per_line(bordered_size: int, level_of_detail: int) -> int:
    return _sample_axis(bordered_size, simplification_increment(level_of_detail)).size - 2


def generate_terrain_mesh(
    height_map: np.ndarray,
    height_multiplier: float,
    height_curve,
    level_of_detail: int,
    use_flat_shading: bool = False,
) -> MeshData:
    """
    Строит меш чанка. height_map - квадрат (S+2)x(S+2): внешнее кольцо клеток
    принадлежит соседям и используется только для нормалей на краях.

    LOD 0 - каждая клетка, LOD k>0 - шаг 2k клеток (равномерная децимация).
    Вершины в плоскости XZ, центр чанка в начале координат, Y - высота,
    строки карты идут в сторону -Z.

    Кривую отклика каждый вызов копирует себе: её кэш не потокобезопасен.
    """
    curve = height_curve.copy()
    bordered_size = int(height_map.shape[0])
    mesh_size = bordered_size - 2
    increment = simplification_increment(level_of_detail)

    axis = _sample_axis(bordered_size, increment)
    n = axis.size
    py, px = np.meshgrid(axis, axis, indexing="ij")

    # --- Тегирование вершин: INTERIOR / BORDER + индекс внутри своего типа ---
    is_border = np.zeros((n, n), dtype=bool)
    is_border[0, :] = is_border[-1, :] = True
    is_border[:, 0] = is_border[:, -1] = True
    is_border = is_border.ravel()
    kind = np.where(is_border, VertexKind.BORDER, VertexKind.INTERIOR).astype(np.uint8)
    local = np.empty(n * n, dtype=np.int32)
    local[~is_border] = np.arange(int((~is_border).sum()), dtype=np.int32)
    local[is_border] = np.arange(int(is_border.sum()), dtype=np.int32)

    # --- Позиции и UV ---
    top_left_x = (mesh_size - 1) / -2.0
    top_left_z = (mesh_size - 1) / 2.0
    span = float(max(mesh_size - 1, 1))
    gx = (px.ravel() - 1).astype(np.float64)
    gy = (py.ravel() - 1).astype(np.float64)
    heights = np.asarray(curve.evaluate(height_map[py, px].ravel()), dtype=np.float64)
    positions = np.stack(
        [top_left_x + gx, heights * height_multiplier, top_left_z - gy], axis=1
    )
    uvs = np.stack([gx / span, gy / span], axis=1)

    # --- Треугольники: два на квадрат (a, d, c) и (d, a, b) ---
    i, j = np.mgrid[0:n - 1, 0:n - 1]
    a = (i * n + j).ravel()
    b = a + 1
    c = a + n
    d = a + n + 1
    tris = np.stack(
        [np.stack([a, d, c], axis=1), np.stack([d, a, b], axis=1)], axis=1
    ).reshape(-1, 3)
    border_tri = np.any(is_border[tris], axis=1)

    interior_tris = local[tris[~border_tri]]
    border_tris = tris[border_tri]
    border_refs = np.zeros(border_tris.shape, dtype=VERTEX_REF_DTYPE)
    border_refs["kind"] = kind[border_tris]
    border_refs["index"] = local[border_tris]

    vertices = positions[~is_border].astype(np.float32)
    mesh_uvs = uvs[~is_border].astype(np.float32)
    border_vertices = positions[is_border].astype(np.float32)

    if use_flat_shading:
        # у каждого треугольника свои три вершины -> жёсткие грани в рендере
        flat_idx = interior_tris.ravel()
        mesh = MeshData(
            vertices=vertices[flat_idx],
            triangles=np.arange(flat_idx.size, dtype=np.int32).reshape(-1, 3),
            uvs=mesh_uvs[flat_idx],
            normals=None,
            border_vertices=border_vertices,
            border_triangles=border_refs,
            lod=level_of_detail,
            flat_shaded=True,
        )
    else:
        normals = _bake_normals(positions, tris)[~is_border]
        mesh = MeshData(
            vertices=vertices,
            triangles=interior_tris.astype(np.int32),
            uvs=mesh_uvs,
            normals=normals.astype(np.float32),
            border_vertices=border_vertices,
            border_triangles=border_refs,
            lod=level_of_detail,
            flat_shaded=False,
        )

    logger.debug(
        "Mesh built: lod=%d, vertices=%d, triangles=%d, flat=%s",
        level_of_detail, mesh.vertex_count, mesh.triangle_count, use_flat_shading,
    )
    return mesh


def _bake_normals(positions: np.ndarray, tris: np.ndarray) -> np.ndarray:
    """Ненормированные векторные произведения граней копятся в вершинах (включая бордюр)."""
    p0 = positions[tris[:, 0]]
    face = np.cross(positions[tris[:, 1]] - p0, positions[tris[:, 2]] - p0)
    acc = np.zeros_like(positions)
    for corner in range(3):
        np.add.at(acc, tris[:, corner], face)
    lengths = np.linalg.norm(acc, axis=1, keepdims=True)
    lengths[lengths == 0.0] = 1.0
    return acc / lengths
