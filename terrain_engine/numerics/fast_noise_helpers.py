# terrain_engine/numerics/fast_noise_helpers.py
from __future__ import annotations
import numpy as np
from numba import njit

# Фиксированный сид примитива. Случайность генератора - только в смещениях октав.
PRIMITIVE_SEED = 0x5EED


@njit(inline='always', cache=True)
def _u32(x: int) -> int: return x & 0xFFFFFFFF


@njit(inline='always', cache=True)
def _hash2(ix: int, iz: int, seed: int) -> int:
    a, b, c = 0x9e3779b3, 0x9e3779b3, 0x9e3779b3
    a = _u32(a + ix); b = _u32(b + iz); c = _u32(c + seed)
    a = _u32(a - b - c) ^ (c >> 13); b = _u32(b - c - a) ^ _u32(a << 8); c = _u32(c - a - b) ^ (b >> 13)
    a = _u32(a - b - c) ^ (c >> 12); b = _u32(b - c - a) ^ _u32(a << 16); c = _u32(c - a - b) ^ (b >> 5)
    a = _u32(a - b - c) ^ (c >> 3); b = _u32(b - c - a) ^ _u32(a << 10); c = _u32(c - a - b) ^ (b >> 15)
    return _u32(c)


@njit(inline='always', cache=True)
def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


@njit(inline='always', cache=True)
def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


@njit(inline='always', cache=True)
def _grad(h: int, x: float, z: float) -> float:
    # 8 направлений: оси и диагонали
    g = h & 7
    if g == 0:
        return x + z
    if g == 1:
        return -x + z
    if g == 2:
        return x - z
    if g == 3:
        return -x - z
    if g == 4:
        return x
    if g == 5:
        return -x
    if g == 6:
        return z
    return -z


def fbm_amplitude(persistence: float, octaves: int) -> float:
    """Сумма амплитуд sum(persistence^i), i in [0, octaves)."""
    if persistence == 1.0:
        return float(octaves)
    return (1.0 - persistence ** octaves) / (1.0 - persistence)


def octave_offsets(seed: int, octaves: int, offset_x: float, offset_y: float, spread: int) -> np.ndarray:
    """Смещения октав из сидированного ГПСЧ. Единственное место, где есть случайность."""
    rng = np.random.default_rng(seed & 0xFFFFFFFF)
    draws = rng.integers(-spread, spread, size=(octaves, 2))
    out = np.empty((octaves, 2), dtype=np.float64)
    out[:, 0] = draws[:, 0] + offset_x
    # ось строк карты направлена против мировой +Y
    out[:, 1] = draws[:, 1] - offset_y
    return out
