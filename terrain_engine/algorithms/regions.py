# ==============================================================================
# Файл: terrain_engine/algorithms/regions.py
# Назначение: Классификация высот по полосам регионов (вода/суша/горы...).
# ==============================================================================
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Sequence, Tuple

import numpy as np


@dataclass
class ColorField:
    """Индекс полосы на каждую клетку + палитра полос."""

    indices: np.ndarray
    palette: Tuple[Any, ...]

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.indices.shape

    def colors(self) -> np.ndarray:
        lut = np.empty(len(self.palette), dtype=object)
        lut[:] = list(self.palette)
        return lut[self.indices]

    def to_rgba(self) -> np.ndarray:
        """(H, W, 4) uint8. Цвета палитры: '#RRGGBB' / '#AARRGGBB' или кортежи RGB(A)."""
        lut = np.array([color_to_rgba(c) for c in self.palette], dtype=np.uint8)
        return lut[self.indices]


def color_to_rgba(color: Any) -> Tuple[int, int, int, int]:
    if isinstance(color, str):
        s = color.lstrip("#")
        if len(s) == 3:
            s = "".join(c * 2 for c in s)
        if len(s) == 6:
            return int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16), 255
        if len(s) == 8:
            return int(s[2:4], 16), int(s[4:6], 16), int(s[6:8], 16), int(s[0:2], 16)
        raise ValueError(f"Bad color string: {color!r}")
    rgba = tuple(int(c) for c in color)
    if len(rgba) == 3:
        return rgba[0], rgba[1], rgba[2], 255
    return rgba[0], rgba[1], rgba[2], rgba[3]


def _band_table(regions: Sequence[Any]) -> Tuple[np.ndarray, Tuple[Any, ...]]:
    thresholds, colors = [], []
    for r in regions:
        if isinstance(r, (tuple, list)):
            thresholds.append(float(r[0])); colors.append(r[1])
        else:
            thresholds.append(float(r.height)); colors.append(r.color)
    return np.asarray(thresholds, dtype=np.float64), tuple(colors)


def build_color_map(height_map: np.ndarray, regions: Sequence[Any]) -> ColorField:
    """
    Каждой клетке - первая полоса, для которой height <= threshold.

    regions: Region(name, height, color) или пары (threshold, color), строго по
    возрастанию порога (проверяется при загрузке пресета). Значения выше
    последнего порога (GLOBAL-нормализация) получают последнюю полосу.
    """
    thresholds, palette = _band_table(regions)
    idx = np.searchsorted(thresholds, height_map, side="left")
    idx = np.minimum(idx, len(thresholds) - 1)
    return ColorField(indices=idx.astype(np.int32), palette=palette)
