# ==============================================================================
# Файл: terrain_engine/algorithms/falloff.py
# Назначение: Статическая радиальная маска для островов (0 в центре, 1 у края).
# ==============================================================================
from __future__ import annotations

import numpy as np

from ..core.constants import FALLOFF_A, FALLOFF_B


def evaluate_falloff(value: np.ndarray, a: float = FALLOFF_A, b: float = FALLOFF_B) -> np.ndarray:
    # v^a / (v^a + (b - b*v)^a): ~0 у центра, ~1 у края
    va = np.power(value, a)
    return va / (va + np.power(b - b * value, a))


def generate_falloff_map(size: int, a: float = FALLOFF_A, b: float = FALLOFF_B) -> np.ndarray:
    """Маска (size, size) в [0, 1]. Не зависит от сида, считается один раз на размер карты."""
    coords = np.arange(size, dtype=np.float64) / size * 2.0 - 1.0
    xx, yy = np.meshgrid(coords, coords, indexing="xy")
    value = np.maximum(np.abs(xx), np.abs(yy))
    return evaluate_falloff(value, a, b)


def apply_falloff(height_map: np.ndarray, falloff_map: np.ndarray) -> np.ndarray:
    return np.clip(height_map - falloff_map, 0.0, 1.0)
