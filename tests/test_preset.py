# ==============================================================================
# Файл: tests/test_preset.py
# Назначение: Загрузка пресетов, исправление параметров, валидация таблиц.
# ==============================================================================
import json
import os
import tempfile
import unittest
from unittest import mock

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from terrain_engine.core.constants import MIN_NOISE_SCALE, VIEWER_MOVE_THRESHOLD, NormalizeMode
from terrain_engine.core.preset import (
    NotFoundError,
    StreamingSettings,
    ValidationError,
    add_search_folder,
    load_preset,
)
from terrain_engine.core.preset import registry

VALIDATOR_LOGGER = "terrain_engine.core.preset.validators"


class TestPresetLoading(unittest.TestCase):

    def test_default_preset_by_id(self):
        preset = load_preset("default")
        self.assertEqual(preset.id, "default")
        self.assertEqual(preset.noise.normalize_mode, NormalizeMode.GLOBAL)
        self.assertEqual(preset.terrain.map_chunk_size, 241)
        self.assertEqual(preset.terrain.chunk_size, 240)
        self.assertEqual(preset.max_view_distance, preset.lods[-1].visible_dst_threshold)
        self.assertEqual(preset.collider_lod_index, 0)
        self.assertEqual(preset.streaming.move_threshold, VIEWER_MOVE_THRESHOLD)
        self.assertEqual(StreamingSettings().move_threshold, VIEWER_MOVE_THRESHOLD)

    def test_islands_preset_overrides_defaults(self):
        preset = load_preset("islands")
        self.assertEqual(preset.noise.normalize_mode, NormalizeMode.LOCAL)
        self.assertTrue(preset.terrain.use_falloff)
        # остальное из дефолтов
        self.assertEqual(len(preset.regions), 8)

    def test_flat_shading_uses_smaller_chunk(self):
        preset = load_preset(overrides={"terrain": {"flat_shading": True}})
        self.assertEqual(preset.terrain.map_chunk_size, 97)

    def test_load_from_file_and_round_trip(self):
        preset = load_preset(overrides={"noise": {"seed": 99}})
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "custom.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump(preset.to_dict(), f)
            again = load_preset(path)
        self.assertEqual(again.noise, preset.noise)
        self.assertEqual(again.lods, preset.lods)
        self.assertEqual(again.regions, preset.regions)
        self.assertEqual(again.terrain.height_curve.keys, preset.terrain.height_curve.keys)

    def test_extra_search_folder_resolves_ids(self):
        folders = list(registry._DEFAULT_PRESET_FOLDERS)
        with tempfile.TemporaryDirectory() as tmp, \
                mock.patch.object(registry, "_DEFAULT_PRESET_FOLDERS", folders):
            with open(os.path.join(tmp, "mountains.json"), "w", encoding="utf-8") as f:
                json.dump({"id": "mountains", "noise": {"seed": 5}}, f)
            with self.assertRaises(NotFoundError):
                load_preset("mountains")
            add_search_folder(tmp)
            add_search_folder(tmp)
            preset = load_preset("mountains")
        self.assertEqual(preset.id, "mountains")
        self.assertEqual(preset.noise.seed, 5)
        self.assertEqual(folders.count(os.path.abspath(tmp)), 1)

    def test_unknown_id_and_bad_source(self):
        with self.assertRaises(NotFoundError):
            load_preset("no/such/preset")
        with self.assertRaises(TypeError):
            load_preset(42)


class TestPresetClamping(unittest.TestCase):

    def test_numeric_parameters_are_clamped(self):
        with self.assertLogs(VALIDATOR_LOGGER, level="WARNING"):
            preset = load_preset(overrides={"noise": {
                "scale": -5.0, "lacunarity": 0.5, "persistence": 1.5, "octaves": 0,
            }})
        self.assertEqual(preset.noise.scale, MIN_NOISE_SCALE)
        self.assertEqual(preset.noise.lacunarity, 1.0)
        self.assertEqual(preset.noise.persistence, 1.0)
        self.assertEqual(preset.noise.octaves, 1)

    def test_lod_index_is_clamped(self):
        with self.assertLogs(VALIDATOR_LOGGER, level="WARNING"):
            preset = load_preset(overrides={"lods": [{"lod": 9, "visible_dst_threshold": 100.0}]})
        self.assertEqual(preset.lods[0].lod, 6)


class TestPresetValidation(unittest.TestCase):

    def assertInvalid(self, overrides):
        with self.assertRaises(ValidationError):
            load_preset(overrides=overrides)

    def test_regions_must_be_ascending(self):
        self.assertInvalid({"regions": [
            {"name": "land", "height": 0.6, "color": "#00ff00"},
            {"name": "water", "height": 0.3, "color": "#0000ff"},
        ]})
        self.assertInvalid({"regions": []})

    def test_lods_must_be_ascending(self):
        self.assertInvalid({"lods": [
            {"lod": 0, "visible_dst_threshold": 300.0},
            {"lod": 1, "visible_dst_threshold": 200.0},
        ]})
        self.assertInvalid({"lods": []})

    def test_single_collider_lod(self):
        self.assertInvalid({"lods": [
            {"lod": 0, "visible_dst_threshold": 100.0, "use_for_collider": True},
            {"lod": 1, "visible_dst_threshold": 200.0, "use_for_collider": True},
        ]})

    def test_unknown_modes(self):
        self.assertInvalid({"noise": {"normalize_mode": "sideways"}})
        self.assertInvalid({"noise": {"primitive": "worley"}})

    def test_height_curve_keys(self):
        self.assertInvalid({"terrain": {"height_curve": []}})
        self.assertInvalid({"terrain": {"height_curve": [[0.5, 0.0], [0.2, 1.0]]}})
        # ключи по возрастанию t, но значение падает
        self.assertInvalid({"terrain": {"height_curve": [[0.0, 0.0], [0.5, 0.8], [1.0, 0.4]]}})

    def test_lod_levels_must_be_unique(self):
        self.assertInvalid({"lods": [
            {"lod": 0, "visible_dst_threshold": 2.0},
            {"lod": 0, "visible_dst_threshold": 12.0},
            {"lod": 2, "visible_dst_threshold": 16.0},
        ]})

    def test_plateau_curve_is_accepted(self):
        preset = load_preset(overrides={"terrain": {"height_curve": [[0.0, 0.0], [0.5, 0.0], [1.0, 1.0]]}})
        self.assertEqual(len(preset.terrain.height_curve.keys), 3)


if __name__ == '__main__':
    unittest.main()
