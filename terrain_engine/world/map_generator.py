# ==============================================================================
# Файл: terrain_engine/world/map_generator.py
# Назначение: Фасад генерации: данные карты (шум + раскраска) и меши по
#             запросу, через GenerationQueue; превью одиночной карты.
# ==============================================================================
from __future__ import annotations
import logging
import time
from typing import Any, Callable, Tuple

from ..algorithms.falloff import apply_falloff, generate_falloff_map
from ..algorithms.mesh_generator import generate_terrain_mesh
from ..algorithms.noise_map import generate_noise_map
from ..algorithms.regions import build_color_map
from ..algorithms.textures import texture_from_color_map, texture_from_height_map
from ..core.constants import DrawMode
from ..core.preset import Preset
from ..core.types import MapData, MeshData
from .generation_queue import GenerationQueue

logger = logging.getLogger(__name__)


class MapGenerator:
    def __init__(self, preset: Preset, queue: GenerationQueue | None = None):
        self.preset = preset
        self.queue = queue or GenerationQueue(
            max_workers=preset.streaming.max_workers,
            max_pending=preset.streaming.max_pending,
        )
        # карта с бордюром: +1 клетка с каждой стороны
        self.bordered_size = preset.terrain.map_chunk_size + 2
        # маска статична для размера карты: считаем один раз, до любых воркеров
        self.falloff_map = generate_falloff_map(
            self.bordered_size, preset.falloff.a, preset.falloff.b
        )

    # --- Синхронные операции (выполняются в воркерах) ---
    def generate_map_data(self, center: Tuple[float, float] = (0.0, 0.0)) -> MapData:
        t0 = time.perf_counter()
        noise_cfg = self.preset.noise
        noise = noise_cfg.with_offset(
            (center[0] + noise_cfg.offset[0], center[1] + noise_cfg.offset[1])
        )
        height_map = generate_noise_map(self.bordered_size, self.bordered_size, noise)
        if self.preset.terrain.use_falloff:
            height_map = apply_falloff(height_map, self.falloff_map)

        # текстура без бордюра: S x S
        color_map = build_color_map(height_map[1:-1, 1:-1], self.preset.regions)
        logger.debug(
            "Map data for center=%s generated in %.2f ms",
            center, (time.perf_counter() - t0) * 1000,
        )
        return MapData(height_map=height_map, color_map=color_map, center=tuple(center))

    def generate_mesh_data(self, map_data: MapData, level_of_detail: int) -> MeshData:
        terrain = self.preset.terrain
        return generate_terrain_mesh(
            map_data.height_map,
            terrain.height_multiplier,
            terrain.height_curve.copy(),
            level_of_detail,
            terrain.flat_shading,
        )

    # --- Асинхронные запросы (из основного потока) ---
    def request_map_data(self, center: Tuple[float, float], callback: Callable[[MapData], None]) -> None:
        center = (float(center[0]), float(center[1]))
        self.queue.submit(lambda: self.generate_map_data(center), callback)

    def request_mesh_data(self, map_data: MapData, level_of_detail: int,
                          callback: Callable[[MeshData], None]) -> None:
        self.queue.submit(lambda: self.generate_mesh_data(map_data, level_of_detail), callback)

    def drain(self) -> int:
        return self.queue.drain()

    # --- Превью одиночной карты ---
    def draw_map(self, draw_mode: DrawMode | str = DrawMode.NOISE_MAP,
                 level_of_detail: int = 0) -> Any:
        """NOISE_MAP/COLOR_MAP/FALLOFF_MAP -> RGBA-текстура, MESH -> (MeshData, текстура)."""
        mode = DrawMode(draw_mode)
        size = self.preset.terrain.map_chunk_size
        if mode is DrawMode.FALLOFF_MAP:
            return texture_from_height_map(generate_falloff_map(size, self.preset.falloff.a, self.preset.falloff.b))

        map_data = self.generate_map_data()
        if mode is DrawMode.NOISE_MAP:
            return texture_from_height_map(map_data.height_map[1:-1, 1:-1])
        if mode is DrawMode.COLOR_MAP:
            return texture_from_color_map(map_data.color_map)
        mesh = self.generate_mesh_data(map_data, level_of_detail)
        return mesh, texture_from_color_map(map_data.color_map)
