# ==============================================================================
# Файл: terrain_engine/core/constants.py
# Назначение: Глобальные константы генератора (режимы, пороги, диапазоны).
# ==============================================================================
from __future__ import annotations
from enum import Enum


class NormalizeMode(str, Enum):
    # LOCAL: min/max конкретной карты. Только для одиночной карты, на стыках чанков будут швы.
    LOCAL = "local"
    # GLOBAL: деление на теоретический максимум амплитуды, одинаково для всех чанков.
    GLOBAL = "global"


class NoisePrimitive(str, Enum):
    PERLIN = "perlin"
    SIMPLEX = "simplex"


class DrawMode(str, Enum):
    NOISE_MAP = "noise_map"
    COLOR_MAP = "color_map"
    MESH = "mesh"
    FALLOFF_MAP = "falloff_map"


# --- Шум ---
MIN_NOISE_SCALE = 1e-4
OCTAVE_OFFSET_RANGE = 100_000

# --- Falloff-маска: v^a / (v^a + (b - b*v)^a) ---
FALLOFF_A = 3.0
FALLOFF_B = 2.2

# --- LOD ---
MIN_LOD = 0
MAX_LOD = 6

# --- Стриминг ---
VIEWER_MOVE_THRESHOLD = 25.0
