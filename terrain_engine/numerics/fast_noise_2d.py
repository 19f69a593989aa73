# terrain_engine/numerics/fast_noise_2d.py
from __future__ import annotations
import math

import numpy as np
from numba import njit
from .fast_noise_helpers import _hash2, _fade, _lerp, _grad, PRIMITIVE_SEED


@njit(inline='always', cache=True)
def perlin_noise_2d(x: float, z: float, seed: int) -> float:
    """Градиентный шум Перлина, результат в [0, 1]."""
    xf0 = math.floor(x); zf0 = math.floor(z)
    xi = int(xf0); zi = int(zf0)
    xf = x - xf0; zf = z - zf0
    u = _fade(xf); v = _fade(zf)
    n00 = _grad(_hash2(xi, zi, seed), xf, zf)
    n10 = _grad(_hash2(xi + 1, zi, seed), xf - 1.0, zf)
    n01 = _grad(_hash2(xi, zi + 1, seed), xf, zf - 1.0)
    n11 = _grad(_hash2(xi + 1, zi + 1, seed), xf - 1.0, zf - 1.0)
    nx0 = _lerp(n00, n10, u); nx1 = _lerp(n01, n11, u)
    n = _lerp(nx0, nx1, v)
    # [-1, 1] -> [0, 1]
    out = 0.5 * (n + 1.0)
    if out < 0.0:
        return 0.0
    if out > 1.0:
        return 1.0
    return out


# nogil=True: ядро вызывается одновременно из нескольких потоков-воркеров,
# parallel=True здесь нельзя (workqueue не потокобезопасен).
@njit(cache=True, nogil=True)
def fbm_grid_perlin(
        width: int,
        height: int,
        offsets: np.ndarray,
        scale: float,
        lacunarity: float,
        persistence: float,
) -> np.ndarray:
    octaves = offsets.shape[0]
    half_w = width / 2.0
    half_h = height / 2.0
    output = np.empty((height, width), dtype=np.float64)
    for y in range(height):
        for x in range(width):
            amp = 1.0
            freq = 1.0
            total = 0.0
            for o in range(octaves):
                sx = (x - half_w + offsets[o, 0]) / scale * freq
                sy = (y - half_h + offsets[o, 1]) / scale * freq
                # без ремапа в [-1, 1] высота только растёт с каждой октавой
                sample = perlin_noise_2d(sx, sy, PRIMITIVE_SEED) * 2.0 - 1.0
                total += sample * amp
                freq *= lacunarity
                amp *= persistence
            output[y, x] = total
    return output
