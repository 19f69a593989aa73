# ========================
# file: terrain_engine/core/preset/defaults.py
# ========================
from __future__ import annotations
from typing import Any, Dict

from ..constants import FALLOFF_A, FALLOFF_B, VIEWER_MOVE_THRESHOLD

# Python-зеркало data/presets/default.json
DEFAULT_PRESET: Dict[str, Any] = {
    "id": "default",
    "noise": {
        "normalize_mode": "global",
        "primitive": "perlin",
        "seed": 0,
        "scale": 50.0,
        "octaves": 5,
        "lacunarity": 2.0,
        "persistence": 0.5,
        "offset": [0.0, 0.0],
    },
    "terrain": {
        "uniform_scale": 2.5,
        "height_multiplier": 30.0,
        # (t, value) ключи кривой отклика высоты
        "height_curve": [[0.0, 0.0], [0.3, 0.02], [0.45, 0.1], [1.0, 1.0]],
        "use_falloff": False,
        "flat_shading": False,
        # 240 делится на 2*lod для всех lod 0..6
        "chunk_vertices": 241,
        "flat_chunk_vertices": 97,
    },
    # Порядок строго по возрастанию высоты!
    "regions": [
        {"name": "water_deep", "height": 0.3, "color": "#1f3d7a"},
        {"name": "water_shallow", "height": 0.4, "color": "#3660b0"},
        {"name": "sand", "height": 0.45, "color": "#d2cf7f"},
        {"name": "grass", "height": 0.55, "color": "#569a1c"},
        {"name": "grass_dark", "height": 0.6, "color": "#3e6b14"},
        {"name": "rock", "height": 0.7, "color": "#5e4a3b"},
        {"name": "rock_dark", "height": 0.9, "color": "#4a3b30"},
        {"name": "snow", "height": 1.0, "color": "#ffffff"},
    ],
    # Порядок строго по возрастанию дистанции; последний порог = max view distance
    "lods": [
        {"lod": 0, "visible_dst_threshold": 200.0, "use_for_collider": True},
        {"lod": 1, "visible_dst_threshold": 400.0, "use_for_collider": False},
        {"lod": 4, "visible_dst_threshold": 600.0, "use_for_collider": False},
    ],
    "streaming": {
        "move_threshold": VIEWER_MOVE_THRESHOLD,
        "update_every_tick": False,
        "max_workers": None,
        "max_pending": None,
    },
    "falloff": {"a": FALLOFF_A, "b": FALLOFF_B},
}
