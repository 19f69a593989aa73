# ==============================================================================
# Файл: terrain_engine/__init__.py
# Процедурный ландшафт: шум -> карта высот -> меш с LOD -> стриминг чанков.
# ==============================================================================
from .core.preset import Preset, load_preset
from .world.map_generator import MapGenerator
from .world.endless_terrain import EndlessTerrain

__all__ = ["Preset", "load_preset", "MapGenerator", "EndlessTerrain"]
