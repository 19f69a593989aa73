# terrain_engine/algorithms/textures.py
from __future__ import annotations

import numpy as np

from .regions import ColorField


def texture_from_height_map(height_map: np.ndarray) -> np.ndarray:
    """Серая текстура (H, W, 4) uint8: 0 -> чёрный, 1 -> белый."""
    grey = (np.clip(height_map, 0.0, 1.0) * 255.0).round().astype(np.uint8)
    out = np.empty(height_map.shape + (4,), dtype=np.uint8)
    out[..., 0] = grey
    out[..., 1] = grey
    out[..., 2] = grey
    out[..., 3] = 255
    return out


def texture_from_color_map(color_map: ColorField) -> np.ndarray:
    return color_map.to_rgba()
