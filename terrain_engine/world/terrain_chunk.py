# ==============================================================================
# Файл: terrain_engine/world/terrain_chunk.py
# Назначение: Чанк бесконечного ландшафта и кэш его LOD-мешей.
#             Всё здесь живёт только в основном потоке.
# ==============================================================================
from __future__ import annotations
import logging
import math
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from ..algorithms.textures import texture_from_color_map
from ..core.preset import LODInfo
from ..core.types import MapData, MeshData
from .render_contract import ChunkRenderer

logger = logging.getLogger(__name__)


class ChunkState(str, Enum):
    CREATED = "created"
    AWAITING_HEIGHT_DATA = "awaiting_height_data"
    READY = "ready"


class LODMesh:
    """Меш одного уровня детализации. Запрашивается не более одного раза."""

    def __init__(self, lod: int, update_callback: Callable[[], None]):
        self.lod = lod
        self.mesh: Optional[MeshData] = None
        self.has_requested_mesh = False
        self.has_mesh = False
        self._update_callback = update_callback

    def _on_mesh_data_received(self, mesh_data: MeshData) -> None:
        self.mesh = mesh_data
        self.has_mesh = True
        self._update_callback()

    def request_mesh(self, map_data: MapData, map_generator) -> None:
        self.has_requested_mesh = True
        map_generator.request_mesh_data(map_data, self.lod, self._on_mesh_data_received)


class TerrainChunk:
    def __init__(
        self,
        coord: Tuple[int, int],
        size: int,
        lods: Sequence[LODInfo],
        map_generator,
        renderer: ChunkRenderer,
        viewer_source: Callable[[], Tuple[float, float]],
        on_visibility_changed: Callable[["TerrainChunk", bool], None],
        uniform_scale: float = 1.0,
    ):
        self.coord = (int(coord[0]), int(coord[1]))
        self.size = size
        self.position = (float(self.coord[0] * size), float(self.coord[1] * size))
        self.lods = tuple(lods)
        self.max_view_distance = self.lods[-1].visible_dst_threshold
        self.renderer = renderer
        self._map_generator = map_generator
        self._viewer_source = viewer_source
        self._on_visibility_changed = on_visibility_changed

        self.state = ChunkState.CREATED
        self.map_data: Optional[MapData] = None
        self.map_data_received = False
        self.previous_lod_index = -1
        self.has_set_collider = False
        self._visible = False

        self.lod_meshes: List[LODMesh] = []
        self.collision_lod_mesh: Optional[LODMesh] = None
        for info in self.lods:
            lod_mesh = LODMesh(info.lod, self.update_terrain_chunk)
            self.lod_meshes.append(lod_mesh)
            if info.use_for_collider:
                self.collision_lod_mesh = lod_mesh

        self.renderer.set_transform(
            (self.position[0] * uniform_scale, 0.0, self.position[1] * uniform_scale),
            uniform_scale,
        )

        map_generator.request_map_data(self.position, self._on_map_data_received)
        self.state = ChunkState.AWAITING_HEIGHT_DATA
        self.set_visible(False)

    # --- Геометрия ---
    def sqr_distance_to(self, point: Tuple[float, float]) -> float:
        """Квадрат расстояния от точки до квадрата чанка (0 внутри)."""
        half = self.size / 2.0
        dx = max(abs(point[0] - self.position[0]) - half, 0.0)
        dy = max(abs(point[1] - self.position[1]) - half, 0.0)
        return dx * dx + dy * dy

    def lod_index_for(self, distance: float) -> int:
        # ближе -> детальнее; последний порог отвечает только за видимость
        index = 0
        for i in range(len(self.lods) - 1):
            if distance > self.lods[i].visible_dst_threshold:
                index = i + 1
            else:
                break
        return index

    # --- Жизненный цикл ---
    def _on_map_data_received(self, map_data: MapData) -> None:
        self.map_data = map_data
        self.map_data_received = True
        self.state = ChunkState.READY

        h, w = map_data.color_map.shape
        self.renderer.submit_texture(texture_from_color_map(map_data.color_map), w, h)
        logger.debug("Chunk %s received map data", self.coord)
        self.update_terrain_chunk()

    def update_terrain_chunk(self) -> None:
        if not self.map_data_received:
            return

        sqr_dst = self.sqr_distance_to(self._viewer_source())
        visible = sqr_dst <= self.max_view_distance * self.max_view_distance

        if visible:
            lod_index = self.lod_index_for(math.sqrt(sqr_dst))

            if lod_index != self.previous_lod_index:
                lod_mesh = self.lod_meshes[lod_index]
                if lod_mesh.has_mesh:
                    self.previous_lod_index = lod_index
                    self.renderer.submit_mesh(lod_mesh.mesh)
                elif not lod_mesh.has_requested_mesh:
                    lod_mesh.request_mesh(self.map_data, self._map_generator)

            if lod_index == 0:
                self._update_collision_mesh()

        self.set_visible(visible)

    def _update_collision_mesh(self) -> None:
        lod_mesh = self.collision_lod_mesh
        if lod_mesh is None or self.has_set_collider:
            return
        if lod_mesh.has_mesh:
            self.renderer.submit_collision_mesh(lod_mesh.mesh)
            self.has_set_collider = True
        elif not lod_mesh.has_requested_mesh:
            lod_mesh.request_mesh(self.map_data, self._map_generator)

    def set_visible(self, visible: bool) -> None:
        self._visible = bool(visible)
        self.renderer.set_visible(self._visible)
        self._on_visibility_changed(self, self._visible)

    def is_visible(self) -> bool:
        return self._visible

    @property
    def current_lod(self) -> Optional[int]:
        if self.previous_lod_index < 0:
            return None
        return self.lods[self.previous_lod_index].lod
