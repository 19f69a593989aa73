# terrain_engine/export/preview.py
from __future__ import annotations
import logging
import os
from pathlib import Path

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def _ensure_path_exists(path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def write_preview_png(path: str, texture: np.ndarray, upscale: int = 1) -> None:
    """Сохраняет RGBA-текстуру (H, W, 4) в PNG атомарно."""
    _ensure_path_exists(path)
    img = Image.fromarray(np.ascontiguousarray(texture, dtype=np.uint8))
    if upscale > 1:
        img = img.resize((img.width * upscale, img.height * upscale), Image.Resampling.NEAREST)
    tmp_path = path + ".tmp"
    img.save(tmp_path, format="PNG")
    os.replace(tmp_path, path)
    logger.info("Preview saved: %s (%dx%d)", path, img.width, img.height)
