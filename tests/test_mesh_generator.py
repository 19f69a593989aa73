# ==============================================================================
# Файл: tests/test_mesh_generator.py
# Назначение: Тесты построения меша из карты высот: LOD, бордюр, нормали.
# ==============================================================================
import dataclasses
import unittest
import numpy as np

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from terrain_engine.algorithms.height_curve import HeightCurve
from terrain_engine.algorithms.mesh_generator import generate_terrain_mesh, vertices_per_line
from terrain_engine.core.types import VertexKind


class TestMeshGenerator(unittest.TestCase):

    def setUp(self):
        rng = np.random.default_rng(7)
        # S = 9 вершин на сторону, +1 клетка бордюра с каждой стороны
        self.heights = rng.random((11, 11))
        self.curve = HeightCurve.linear()

    def test_lod_vertex_counts_are_monotonic(self):
        counts = []
        for lod in range(0, 5):
            mesh = generate_terrain_mesh(self.heights, 10.0, self.curve, lod)
            counts.append(mesh.vertex_count)
        self.assertEqual(counts[0], 81)
        self.assertEqual(counts[0], max(counts))
        for finer, coarser in zip(counts, counts[1:]):
            self.assertLessEqual(coarser, finer)
        # LOD1 - шаг 2: 5 вершин на сторону
        self.assertEqual(counts[1], 25)

    def test_smooth_vertex_count_is_vertices_per_line_squared(self):
        for lod in (0, 1, 2):
            vpl = vertices_per_line(11, lod)
            mesh = generate_terrain_mesh(self.heights, 10.0, self.curve, lod, use_flat_shading=False)
            self.assertEqual(mesh.vertex_count, vpl * vpl)
            self.assertEqual(mesh.triangle_count, (vpl - 1) * (vpl - 1) * 2)
            self.assertEqual(mesh.normals.shape, (vpl * vpl, 3))

    def test_flat_shading_triples_vertices(self):
        for lod in (0, 1, 2):
            mesh = generate_terrain_mesh(self.heights, 10.0, self.curve, lod, use_flat_shading=True)
            self.assertEqual(mesh.vertex_count, 3 * mesh.triangle_count)
            self.assertTrue(np.array_equal(mesh.triangles.ravel(), np.arange(mesh.vertex_count)))
            self.assertIsNone(mesh.normals)
            self.assertTrue(mesh.flat_shaded)

    def test_border_is_excluded_from_render_buffers(self):
        mesh = generate_terrain_mesh(self.heights, 10.0, self.curve, 0)
        # 11x11 выборок -> 10x10 квадратов -> 200 треугольников, из них 8x8x2 внутри
        self.assertEqual(mesh.triangle_count, 128)
        self.assertEqual(len(mesh.border_triangles), 72)
        self.assertEqual(len(mesh.border_vertices), 11 * 11 - 81)
        self.assertTrue(np.all(mesh.triangles < mesh.vertex_count))

        kinds = mesh.border_triangles["kind"]
        self.assertTrue(np.all(np.any(kinds == VertexKind.BORDER, axis=1)))
        idx = mesh.border_triangles["index"]
        border = kinds == VertexKind.BORDER
        self.assertTrue(np.all(idx[border] < len(mesh.border_vertices)))
        self.assertTrue(np.all(idx[~border] < mesh.vertex_count))

    def test_edge_normals_match_larger_surface(self):
        """Нормаль на краю чанка та же, что у этой точки внутри большой карты."""
        rng = np.random.default_rng(3)
        big = rng.random((13, 13))
        chunk = big[1:12, 1:12]

        big_mesh = generate_terrain_mesh(big, 5.0, self.curve, 0)
        chunk_mesh = generate_terrain_mesh(chunk, 5.0, self.curve, 0)

        # вершина на правом краю чанка: строка 5, столбец 9 карты чанка = big[6, 10]
        chunk_idx = (5 - 1) * 9 + (9 - 1)
        big_idx = (6 - 1) * 11 + (10 - 1)
        np.testing.assert_allclose(chunk_mesh.normals[chunk_idx], big_mesh.normals[big_idx], atol=1e-5)

        # без бордюра (только отрисовываемая геометрия) нормаль на краю другая
        naive = dataclasses.replace(chunk_mesh, normals=None)
        naive.recalculate_normals()
        self.assertFalse(np.allclose(naive.normals[chunk_idx], big_mesh.normals[big_idx], atol=1e-3))

    def test_flat_ground_normals_point_up(self):
        mesh = generate_terrain_mesh(np.full((11, 11), 0.5), 10.0, self.curve, 0)
        np.testing.assert_allclose(mesh.normals, np.tile([0.0, 1.0, 0.0], (81, 1)), atol=1e-6)
        np.testing.assert_allclose(mesh.vertices[:, 1], 5.0)

    def test_layout_and_uvs(self):
        mesh = generate_terrain_mesh(self.heights, 1.0, self.curve, 0)
        # центр в начале координат, строки идут в -Z
        self.assertEqual(mesh.vertices[0, 0], -4.0)
        self.assertEqual(mesh.vertices[0, 2], 4.0)
        self.assertEqual(mesh.vertices[-1, 0], 4.0)
        self.assertEqual(mesh.vertices[-1, 2], -4.0)
        self.assertEqual(mesh.uvs.min(), 0.0)
        self.assertEqual(mesh.uvs.max(), 1.0)

    def test_height_curve_is_applied(self):
        curve = HeightCurve([(0.0, 0.0), (0.5, 0.0), (1.0, 1.0)])
        mesh = generate_terrain_mesh(np.full((11, 11), 0.4), 10.0, curve, 0)
        np.testing.assert_allclose(mesh.vertices[:, 1], 0.0, atol=1e-9)
        self.assertIsNone(curve._interp, "caller curve must not be evaluated in place")


if __name__ == '__main__':
    unittest.main()
