# ========================
# file: terrain_engine/core/preset/__init__.py
# ========================
from .model import (
    FalloffSettings,
    LODInfo,
    NoiseSettings,
    Preset,
    Region,
    StreamingSettings,
    TerrainSettings,
)
from .loader import load_preset, deep_merge
from .defaults import DEFAULT_PRESET
from .errors import PresetError, ValidationError, NotFoundError
from .registry import add_search_folder, resolve_preset_path

__all__ = [
    "FalloffSettings",
    "LODInfo",
    "NoiseSettings",
    "Preset",
    "Region",
    "StreamingSettings",
    "TerrainSettings",
    "load_preset",
    "deep_merge",
    "DEFAULT_PRESET",
    "PresetError",
    "ValidationError",
    "NotFoundError",
    "add_search_folder",
    "resolve_preset_path",
]
