# ========================
# file: terrain_engine/core/preset/validators.py
# ========================
from __future__ import annotations
import logging
from typing import Any, Dict

from .errors import ValidationError
from ..constants import (
    MAX_LOD,
    MIN_LOD,
    MIN_NOISE_SCALE,
    NoisePrimitive,
    NormalizeMode,
)

logger = logging.getLogger(__name__)


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ValidationError(msg)


def _clamp(section: Dict[str, Any], key: str, lo=None, hi=None, cast=float) -> None:
    """Поправляет числовой параметр на месте, пишет warning если значение изменилось."""
    raw = section.get(key)
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number, got {raw!r}")
    fixed = value
    if lo is not None and fixed < lo:
        fixed = cast(lo)
    if hi is not None and fixed > hi:
        fixed = cast(hi)
    if fixed != value:
        logger.warning("Preset value %s=%r out of range, clamped to %r", key, raw, fixed)
    section[key] = fixed


def _check_noise(noise: Dict[str, Any]) -> None:
    modes = {m.value for m in NormalizeMode}
    _require(
        str(noise.get("normalize_mode")) in modes,
        f"noise.normalize_mode must be one of {sorted(modes)}",
    )
    prims = {p.value for p in NoisePrimitive}
    _require(
        str(noise.get("primitive")) in prims,
        f"noise.primitive must be one of {sorted(prims)}",
    )
    _clamp(noise, "seed", cast=int)

    # scale <= 0 не ошибка: подменяем маленьким положительным числом
    scale = float(noise.get("scale", 0.0))
    if scale <= 0.0:
        logger.warning("noise.scale=%r must be > 0, using %r", scale, MIN_NOISE_SCALE)
        scale = MIN_NOISE_SCALE
    noise["scale"] = scale

    _clamp(noise, "octaves", lo=1, cast=int)
    _clamp(noise, "lacunarity", lo=1.0)
    _clamp(noise, "persistence", lo=0.0, hi=1.0)

    offset = noise.get("offset", (0.0, 0.0))
    _require(
        isinstance(offset, (list, tuple)) and len(offset) == 2,
        "noise.offset must be a pair [x, y]",
    )
    noise["offset"] = (float(offset[0]), float(offset[1]))


def _check_terrain(terrain: Dict[str, Any]) -> None:
    _clamp(terrain, "uniform_scale", lo=MIN_NOISE_SCALE)
    _clamp(terrain, "height_multiplier")
    _clamp(terrain, "chunk_vertices", lo=3, cast=int)
    _clamp(terrain, "flat_chunk_vertices", lo=3, cast=int)
    terrain["use_falloff"] = bool(terrain.get("use_falloff", False))
    terrain["flat_shading"] = bool(terrain.get("flat_shading", False))

    keys = list(terrain.get("height_curve") or [])
    _require(len(keys) >= 1, "terrain.height_curve needs at least one key")
    for i, k in enumerate(keys):
        _require(
            isinstance(k, (list, tuple)) and len(k) == 2,
            f"terrain.height_curve[{i}] must be a pair [t, value]",
        )
    times = [float(k[0]) for k in keys]
    _require(
        all(b > a for a, b in zip(times, times[1:])),
        "terrain.height_curve key times must be strictly increasing",
    )
    values = [float(k[1]) for k in keys]
    # PCHIP сохраняет монотонность только на монотонных ключах
    _require(
        all(b >= a for a, b in zip(values, values[1:])),
        "terrain.height_curve key values must be non-decreasing",
    )


def _check_regions(regions: list) -> None:
    _require(len(regions) >= 1, "regions must contain at least one band")
    for i, r in enumerate(regions):
        _require("height" in r, f"regions[{i}].height is required")
        _require("color" in r, f"regions[{i}].color is required")
    heights = [float(r["height"]) for r in regions]
    # Классификация идёт по "height <= threshold", поэтому таблица строго по возрастанию
    _require(
        all(b > a for a, b in zip(heights, heights[1:])),
        "regions must be sorted by strictly increasing height",
    )


def _check_lods(lods: list) -> None:
    _require(len(lods) >= 1, "lods must contain at least one level")
    for i, info in enumerate(lods):
        _require("visible_dst_threshold" in info, f"lods[{i}].visible_dst_threshold is required")
        _clamp(info, "lod", lo=MIN_LOD, hi=MAX_LOD, cast=int)
        info["use_for_collider"] = bool(info.get("use_for_collider", False))
    dists = [float(info["visible_dst_threshold"]) for info in lods]
    _require(dists[0] > 0.0, "lods[0].visible_dst_threshold must be > 0")
    _require(
        all(b > a for a, b in zip(dists, dists[1:])),
        "lods must be sorted by strictly increasing visible_dst_threshold",
    )
    levels = [info["lod"] for info in lods]
    # в чанке один LODMesh на уровень
    _require(len(set(levels)) == len(levels), "lods must not repeat the same lod level")
    colliders = sum(1 for info in lods if info["use_for_collider"])
    _require(colliders <= 1, "only one lod may be flagged use_for_collider")


def _check_streaming(streaming: Dict[str, Any]) -> None:
    _clamp(streaming, "move_threshold", lo=0.0)
    streaming["update_every_tick"] = bool(streaming.get("update_every_tick", False))
    for key in ("max_workers", "max_pending"):
        if streaming.get(key) is not None:
            _clamp(streaming, key, lo=1, cast=int)


def validate_and_clamp(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Проверка пресета на границе конфигурации.

    Числовые параметры вне диапазона исправляются на месте (с warning в лог),
    структурные ошибки (сортировка таблиц, неизвестные режимы) поднимают
    ValidationError. Ядро генерации повторно ничего не проверяет.
    """
    _require(
        isinstance(cfg.get("id"), str) and cfg["id"],
        "Preset.id must be non-empty string",
    )
    _check_noise(cfg["noise"])
    _check_terrain(cfg["terrain"])
    _check_regions(list(cfg.get("regions") or []))
    _check_lods(list(cfg.get("lods") or []))
    _check_streaming(cfg["streaming"])

    falloff = cfg["falloff"]
    _clamp(falloff, "a", lo=MIN_NOISE_SCALE)
    _clamp(falloff, "b", lo=MIN_NOISE_SCALE)
    return cfg
