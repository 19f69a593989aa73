# ========================
# file: terrain_engine/core/preset/model.py
# ========================
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..constants import FALLOFF_A, FALLOFF_B, VIEWER_MOVE_THRESHOLD, NormalizeMode, NoisePrimitive
from ...algorithms.height_curve import HeightCurve


@dataclass(frozen=True)
class NoiseSettings:
    normalize_mode: NormalizeMode = NormalizeMode.GLOBAL
    primitive: NoisePrimitive = NoisePrimitive.PERLIN
    seed: int = 0
    scale: float = 50.0
    octaves: int = 5
    lacunarity: float = 2.0
    persistence: float = 0.5
    offset: Tuple[float, float] = (0.0, 0.0)

    def with_offset(self, offset: Tuple[float, float]) -> "NoiseSettings":
        return NoiseSettings(
            normalize_mode=self.normalize_mode,
            primitive=self.primitive,
            seed=self.seed,
            scale=self.scale,
            octaves=self.octaves,
            lacunarity=self.lacunarity,
            persistence=self.persistence,
            offset=(float(offset[0]), float(offset[1])),
        )


@dataclass(frozen=True)
class TerrainSettings:
    uniform_scale: float = 2.5
    height_multiplier: float = 30.0
    height_curve: HeightCurve = field(default_factory=HeightCurve.linear)
    use_falloff: bool = False
    flat_shading: bool = False
    chunk_vertices: int = 241
    flat_chunk_vertices: int = 97

    @property
    def map_chunk_size(self) -> int:
        """Число вершин на сторону чанка при LOD 0 (без бордюра)."""
        return self.flat_chunk_vertices if self.flat_shading else self.chunk_vertices

    @property
    def chunk_size(self) -> int:
        """Сторона чанка в мировых единицах (до uniform_scale)."""
        return self.map_chunk_size - 1


@dataclass(frozen=True)
class Region:
    name: str
    height: float
    color: Any


@dataclass(frozen=True)
class LODInfo:
    lod: int
    visible_dst_threshold: float
    use_for_collider: bool = False


@dataclass(frozen=True)
class StreamingSettings:
    move_threshold: float = VIEWER_MOVE_THRESHOLD
    update_every_tick: bool = False
    max_workers: Optional[int] = None
    max_pending: Optional[int] = None

    @property
    def sqr_move_threshold(self) -> float:
        return self.move_threshold * self.move_threshold


@dataclass(frozen=True)
class FalloffSettings:
    a: float = FALLOFF_A
    b: float = FALLOFF_B


@dataclass(frozen=True)
class Preset:
    id: str
    noise: NoiseSettings
    terrain: TerrainSettings
    regions: Tuple[Region, ...]
    lods: Tuple[LODInfo, ...]
    streaming: StreamingSettings = field(default_factory=StreamingSettings)
    falloff: FalloffSettings = field(default_factory=FalloffSettings)

    @property
    def max_view_distance(self) -> float:
        return self.lods[-1].visible_dst_threshold

    @property
    def collider_lod_index(self) -> Optional[int]:
        for i, info in enumerate(self.lods):
            if info.use_for_collider:
                return i
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "noise": {
                "normalize_mode": self.noise.normalize_mode.value,
                "primitive": self.noise.primitive.value,
                "seed": self.noise.seed,
                "scale": self.noise.scale,
                "octaves": self.noise.octaves,
                "lacunarity": self.noise.lacunarity,
                "persistence": self.noise.persistence,
                "offset": list(self.noise.offset),
            },
            "terrain": {
                "uniform_scale": self.terrain.uniform_scale,
                "height_multiplier": self.terrain.height_multiplier,
                "height_curve": [list(k) for k in self.terrain.height_curve.keys],
                "use_falloff": self.terrain.use_falloff,
                "flat_shading": self.terrain.flat_shading,
                "chunk_vertices": self.terrain.chunk_vertices,
                "flat_chunk_vertices": self.terrain.flat_chunk_vertices,
            },
            "regions": [
                {"name": r.name, "height": r.height, "color": r.color}
                for r in self.regions
            ],
            "lods": [
                {
                    "lod": l.lod,
                    "visible_dst_threshold": l.visible_dst_threshold,
                    "use_for_collider": l.use_for_collider,
                }
                for l in self.lods
            ],
            "streaming": {
                "move_threshold": self.streaming.move_threshold,
                "update_every_tick": self.streaming.update_every_tick,
                "max_workers": self.streaming.max_workers,
                "max_pending": self.streaming.max_pending,
            },
            "falloff": {"a": self.falloff.a, "b": self.falloff.b},
        }
