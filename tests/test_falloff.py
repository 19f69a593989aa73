import unittest
import numpy as np

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from terrain_engine.algorithms.falloff import apply_falloff, generate_falloff_map


class TestFalloffMap(unittest.TestCase):

    def test_shape_and_range(self):
        mask = generate_falloff_map(33)
        self.assertEqual(mask.shape, (33, 33))
        self.assertGreaterEqual(mask.min(), 0.0)
        self.assertLessEqual(mask.max(), 1.0)

    def test_zero_near_center_one_near_border(self):
        mask = generate_falloff_map(64)
        self.assertLess(mask[32, 32], 1e-3)
        self.assertGreater(mask[0, 0], 0.99)
        self.assertGreater(mask[0, 32], 0.99)
        # монотонно растёт от центра к краю по строке
        row = mask[32, 32:]
        self.assertTrue(np.all(np.diff(row) >= 0.0))

    def test_symmetric_across_axes(self):
        mask = generate_falloff_map(40)
        np.testing.assert_allclose(mask, mask.T)

    def test_apply_falloff_clamps(self):
        heights = np.full((8, 8), 0.5)
        out = apply_falloff(heights, generate_falloff_map(8))
        self.assertGreaterEqual(out.min(), 0.0)
        self.assertLess(out[0, 0], heights[0, 0])


if __name__ == '__main__':
    unittest.main()
