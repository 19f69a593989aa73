# ========================
# file: terrain_engine/core/preset/loader.py
# ========================
from __future__ import annotations
import os
import json
import copy
from typing import Any, Dict, Union, Mapping

from .defaults import DEFAULT_PRESET
from .model import (
    FalloffSettings,
    LODInfo,
    NoiseSettings,
    Preset,
    Region,
    StreamingSettings,
    TerrainSettings,
)
from .registry import resolve_preset_path
from .validators import validate_and_clamp
from ..constants import NoisePrimitive, NormalizeMode
from ...algorithms.height_curve import HeightCurve


def deep_merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursive dict merge. Lists/tuples are replaced, not merged element-wise."""
    out = copy.deepcopy(base)
    for k, v in overrides.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


def _load_json_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_preset(
    source: Union[str, Dict[str, Any], None] = None,
    overrides: Mapping[str, Any] | None = None,
) -> Preset:
    """Load a preset from id/path/dict, merge with defaults, clamp and validate.

    Args:
        source: preset id (e.g., 'default'), or file path to JSON, or raw dict.
                None means the built-in defaults.
        overrides: mapping of ad-hoc overrides (last layer)
    Returns:
        Preset (immutable dataclass) ready for use
    """
    if source is None:
        data: Dict[str, Any] = {}
    elif isinstance(source, str):
        if os.path.isfile(source):
            data = _load_json_file(source)
        else:
            # treat as id
            path = resolve_preset_path(source)
            data = _load_json_file(path)
    elif isinstance(source, dict):
        data = source
    else:
        raise TypeError("source must be str path/id or dict")

    merged = deep_merge(DEFAULT_PRESET, data)
    if overrides:
        merged = deep_merge(merged, overrides)

    validate_and_clamp(merged)
    return _build_preset(merged)


def _build_preset(merged: Dict[str, Any]) -> Preset:
    n = merged["noise"]
    t = merged["terrain"]
    s = merged["streaming"]
    f = merged["falloff"]

    noise = NoiseSettings(
        normalize_mode=NormalizeMode(str(n["normalize_mode"])),
        primitive=NoisePrimitive(str(n["primitive"])),
        seed=int(n["seed"]),
        scale=float(n["scale"]),
        octaves=int(n["octaves"]),
        lacunarity=float(n["lacunarity"]),
        persistence=float(n["persistence"]),
        offset=(float(n["offset"][0]), float(n["offset"][1])),
    )
    terrain = TerrainSettings(
        uniform_scale=float(t["uniform_scale"]),
        height_multiplier=float(t["height_multiplier"]),
        height_curve=HeightCurve(t["height_curve"]),
        use_falloff=bool(t["use_falloff"]),
        flat_shading=bool(t["flat_shading"]),
        chunk_vertices=int(t["chunk_vertices"]),
        flat_chunk_vertices=int(t["flat_chunk_vertices"]),
    )
    regions = tuple(
        Region(
            name=str(r.get("name", f"region_{i}")),
            height=float(r["height"]),
            color=r["color"],
        )
        for i, r in enumerate(merged["regions"])
    )
    lods = tuple(
        LODInfo(
            lod=int(l["lod"]),
            visible_dst_threshold=float(l["visible_dst_threshold"]),
            use_for_collider=bool(l.get("use_for_collider", False)),
        )
        for l in merged["lods"]
    )
    streaming = StreamingSettings(
        move_threshold=float(s["move_threshold"]),
        update_every_tick=bool(s["update_every_tick"]),
        max_workers=s.get("max_workers"),
        max_pending=s.get("max_pending"),
    )
    return Preset(
        id=str(merged["id"]),
        noise=noise,
        terrain=terrain,
        regions=regions,
        lods=lods,
        streaming=streaming,
        falloff=FalloffSettings(a=float(f["a"]), b=float(f["b"])),
    )
