# ==============================================================================
# Файл: terrain_engine/algorithms/noise_map.py
# Назначение: Фрактальная карта шума (fBm) по сиду, с нормализацией.
# ==============================================================================
from __future__ import annotations
import logging

import numpy as np
from opensimplex import OpenSimplex

from ..core.constants import MIN_NOISE_SCALE, OCTAVE_OFFSET_RANGE, NoisePrimitive, NormalizeMode
from ..numerics.fast_noise_2d import fbm_grid_perlin
from ..numerics.fast_noise_helpers import PRIMITIVE_SEED, fbm_amplitude, octave_offsets

logger = logging.getLogger(__name__)


def _fbm_grid_simplex(width: int, height: int, offsets: np.ndarray, scale: float,
                      lacunarity: float, persistence: float) -> np.ndarray:
    gen = OpenSimplex(PRIMITIVE_SEED)
    xs = np.arange(width, dtype=np.float64) - width / 2.0
    ys = np.arange(height, dtype=np.float64) - height / 2.0
    total = np.zeros((height, width), dtype=np.float64)
    amp, freq = 1.0, 1.0
    for ox, oy in offsets:
        # opensimplex отдаёт [-1, 1]; приводим к [0, 1] как у перлина, затем общий ремап
        native = 0.5 * (gen.noise2array((xs + ox) / scale * freq, (ys + oy) / scale * freq) + 1.0)
        total += (native * 2.0 - 1.0) * amp
        freq *= lacunarity
        amp *= persistence
    return total


def generate_noise_map(width: int, height: int, noise) -> np.ndarray:
    """
    Генерирует карту шума (height, width) со значениями, нормализованными в [0, 1].

    noise: NoiseSettings (seed, scale, octaves, lacunarity, persistence,
    offset, normalize_mode, primitive). Параметры считаются уже проверенными на
    границе конфигурации; здесь подменяется только scale <= 0.

    LOCAL  - линейно по min/max этой карты.
    GLOBAL - (h + 1) / sum(persistence^i), снизу зажато нулём. Сверху НЕ зажимается:
             одинаковое отображение для всех чанков важнее жёсткого 1.0.
    """
    scale = noise.scale if noise.scale > 0.0 else MIN_NOISE_SCALE
    offsets = octave_offsets(
        int(noise.seed), int(noise.octaves),
        float(noise.offset[0]), float(noise.offset[1]),
        OCTAVE_OFFSET_RANGE,
    )

    if NoisePrimitive(noise.primitive) is NoisePrimitive.SIMPLEX:
        raw = _fbm_grid_simplex(width, height, offsets, scale, noise.lacunarity, noise.persistence)
    else:
        raw = fbm_grid_perlin(width, height, offsets, float(scale),
                              float(noise.lacunarity), float(noise.persistence))

    if NormalizeMode(noise.normalize_mode) is NormalizeMode.LOCAL:
        lo, hi = float(raw.min()), float(raw.max())
        if hi - lo <= 0.0:
            return np.zeros_like(raw)
        return (raw - lo) / (hi - lo)

    max_possible = fbm_amplitude(float(noise.persistence), int(noise.octaves))
    return np.maximum((raw + 1.0) / max_possible, 0.0)
