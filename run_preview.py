# run_preview.py
# Рендерит превью одиночной карты (шум / цвета / falloff) в PNG
# и/или гоняет стриминг чанков по прямой без движка.
import argparse
import logging
import time

from terrain_engine.core.constants import DrawMode
from terrain_engine.core.preset import add_search_folder, load_preset
from terrain_engine.export.preview import write_preview_png
from terrain_engine.setup_logging import setup_logging
from terrain_engine.world.endless_terrain import EndlessTerrain
from terrain_engine.world.map_generator import MapGenerator

logger = logging.getLogger("run_preview")


def _preview(args) -> None:
    preset = load_preset(args.preset, overrides={"noise": {"seed": args.seed}} if args.seed is not None else None)
    generator = MapGenerator(preset)
    result = generator.draw_map(args.mode)
    texture = result[1] if DrawMode(args.mode) is DrawMode.MESH else result
    if DrawMode(args.mode) is DrawMode.MESH:
        mesh = result[0]
        logger.info("Mesh: %d vertices, %d triangles", mesh.vertex_count, mesh.triangle_count)
    write_preview_png(args.out, texture, upscale=args.upscale)


def _walk(args) -> None:
    preset = load_preset(args.preset)
    terrain = EndlessTerrain(preset)
    x = 0.0
    try:
        for tick in range(args.ticks):
            terrain.update((x, 0.0))
            if tick % 10 == 0:
                logger.info(
                    "tick=%d viewer=%s chunks=%d visible=%d in_flight=%d",
                    tick, terrain.viewer_coord, len(terrain.chunks),
                    len(terrain.visible_coords()), terrain.map_generator.queue.in_flight,
                )
            x += args.speed
            time.sleep(1.0 / 60.0)
    finally:
        terrain.shutdown()


def main():
    parser = argparse.ArgumentParser(description="Procedural terrain preview")
    parser.add_argument("--preset", default="default", help="preset id or path to JSON")
    parser.add_argument("--preset-dir", action="append", default=[],
                        help="extra folder searched for preset ids (repeatable)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("preview", help="render one map to PNG")
    p.add_argument("--mode", default=DrawMode.COLOR_MAP.value, choices=[m.value for m in DrawMode])
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--out", default="artifacts/preview.png")
    p.add_argument("--upscale", type=int, default=2)
    p.set_defaults(func=_preview)

    w = sub.add_parser("walk", help="stream chunks around a moving viewer")
    w.add_argument("--ticks", type=int, default=300)
    w.add_argument("--speed", type=float, default=5.0)
    w.set_defaults(func=_walk)

    args = parser.parse_args()
    setup_logging()
    for folder in args.preset_dir:
        add_search_folder(folder)
    args.func(args)


if __name__ == "__main__":
    main()
