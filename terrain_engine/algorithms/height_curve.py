# ==============================================================================
# Файл: terrain_engine/algorithms/height_curve.py
# Назначение: Монотонная кривая отклика высоты (аналог AnimationCurve).
# ==============================================================================
from __future__ import annotations
from typing import Iterable, Sequence, Tuple

import numpy as np
from scipy.interpolate import PchipInterpolator


class HeightCurve:
    """
    Кривая отклика высоты, заданная ключами (t, value).

    Между ключами - PCHIP (сохраняет монотонность, без "перелётов" как у
    обычного сплайна). Вход зажимается в диапазон ключей.

    ВАЖНО: интерполятор строится лениво и кэшируется в экземпляре, поэтому
    экземпляр не делится между потоками. Каждая задача меша работает со своей
    копией (см. copy()).
    """

    def __init__(self, keys: Iterable[Sequence[float]]):
        self.keys: Tuple[Tuple[float, float], ...] = tuple(
            (float(k[0]), float(k[1])) for k in keys
        )
        self._interp: PchipInterpolator | None = None

    @classmethod
    def linear(cls) -> "HeightCurve":
        return cls([(0.0, 0.0), (1.0, 1.0)])

    def copy(self) -> "HeightCurve":
        return HeightCurve(self.keys)

    def _build(self) -> PchipInterpolator:
        times = np.array([k[0] for k in self.keys], dtype=np.float64)
        values = np.array([k[1] for k in self.keys], dtype=np.float64)
        return PchipInterpolator(times, values, extrapolate=False)

    def evaluate(self, t):
        if len(self.keys) == 1:
            return np.full(np.shape(t), self.keys[0][1]) if np.ndim(t) else self.keys[0][1]

        if self._interp is None:
            self._interp = self._build()

        lo, hi = self.keys[0][0], self.keys[-1][0]
        out = self._interp(np.clip(t, lo, hi))
        return out if np.ndim(t) else float(out)

    __call__ = evaluate

    def __repr__(self) -> str:
        return f"HeightCurve({list(self.keys)!r})"
