# ==============================================================================
# Файл: terrain_engine/world/endless_terrain.py
# Назначение: Стриминг чанков вокруг наблюдателя: создание, видимость, LOD.
# ==============================================================================
from __future__ import annotations
import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..core.preset import Preset
from .map_generator import MapGenerator
from .render_contract import ChunkRenderer, RecordingRenderer
from .terrain_chunk import TerrainChunk

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


class EndlessTerrain:
    """
    Владеет словарём coord -> TerrainChunk. update() вызывается раз в тик с
    мировой позицией наблюдателя (x, z) и только из одного потока.

    Чанки не удаляются: вышедшие из окна просто прячутся.
    """

    def __init__(
        self,
        preset: Preset,
        map_generator: Optional[MapGenerator] = None,
        renderer_factory: Optional[Callable[[Coord], ChunkRenderer]] = None,
    ):
        self.preset = preset
        self.map_generator = map_generator or MapGenerator(preset)
        self.renderer_factory = renderer_factory or (lambda coord: RecordingRenderer())

        self.uniform_scale = preset.terrain.uniform_scale
        self.chunk_size = preset.terrain.chunk_size
        self.max_view_distance = preset.max_view_distance
        self.chunks_visible_in_view_dst = int(round(self.max_view_distance / self.chunk_size))

        self.chunks: Dict[Coord, TerrainChunk] = {}
        self._visible_chunks: Dict[Coord, TerrainChunk] = {}

        self.viewer_position: Tuple[float, float] = (0.0, 0.0)
        self._previous_viewer_position: Optional[Tuple[float, float]] = None
        self.viewer_coord: Coord = (0, 0)

    # --- Тик ---
    def update(self, viewer_position: Tuple[float, float]) -> None:
        self.viewer_position = (
            float(viewer_position[0]) / self.uniform_scale,
            float(viewer_position[1]) / self.uniform_scale,
        )
        # результаты воркеров применяем с уже актуальной позицией наблюдателя
        self.map_generator.drain()

        if self._needs_update():
            self._previous_viewer_position = self.viewer_position
            self.update_visible_chunks()

    def _needs_update(self) -> bool:
        if self._previous_viewer_position is None or self.preset.streaming.update_every_tick:
            return True
        dx = self.viewer_position[0] - self._previous_viewer_position[0]
        dy = self.viewer_position[1] - self._previous_viewer_position[1]
        return dx * dx + dy * dy > self.preset.streaming.sqr_move_threshold

    def update_visible_chunks(self) -> None:
        for chunk in list(self._visible_chunks.values()):
            chunk.set_visible(False)
        self._visible_chunks.clear()

        cx = int(round(self.viewer_position[0] / self.chunk_size))
        cy = int(round(self.viewer_position[1] / self.chunk_size))
        self.viewer_coord = (cx, cy)

        n = self.chunks_visible_in_view_dst
        for y_offset in range(-n, n + 1):
            for x_offset in range(-n, n + 1):
                coord = (cx + x_offset, cy + y_offset)
                chunk = self.chunks.get(coord)
                if chunk is not None:
                    chunk.update_terrain_chunk()
                else:
                    self.chunks[coord] = self._create_chunk(coord)

    def _create_chunk(self, coord: Coord) -> TerrainChunk:
        logger.debug("Creating chunk %s", coord)
        return TerrainChunk(
            coord,
            self.chunk_size,
            self.preset.lods,
            self.map_generator,
            self.renderer_factory(coord),
            viewer_source=lambda: self.viewer_position,
            on_visibility_changed=self._on_chunk_visibility_changed,
            uniform_scale=self.uniform_scale,
        )

    def _on_chunk_visibility_changed(self, chunk: TerrainChunk, visible: bool) -> None:
        if visible:
            self._visible_chunks[chunk.coord] = chunk
        else:
            self._visible_chunks.pop(chunk.coord, None)

    # --- Для хоста и тестов ---
    def visible_coords(self) -> List[Coord]:
        return sorted(self._visible_chunks)

    def shutdown(self) -> None:
        self.map_generator.queue.shutdown()
