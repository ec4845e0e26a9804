"""Matrix layout configuration and index mapping tests."""

import unittest

from led_layout import LayoutConfigurationError, MatrixLayout


class MatrixLayoutTests(unittest.TestCase):
    def test_default_layout(self):
        layout = MatrixLayout()
        self.assertEqual(layout.total_leds, 320)
        self.assertEqual(layout.leds_per_matrix, 64)
        self.assertEqual(layout.linear_extent, 40)
        self.assertEqual(layout.grid_width, 16)
        self.assertEqual(layout.grid_height, 24)

    def test_two_wide_tiling(self):
        layout = MatrixLayout()
        self.assertEqual(layout.coordinate(0), (0, 0))
        self.assertEqual(layout.coordinate(7), (7, 0))
        self.assertEqual(layout.coordinate(8), (0, 1))
        self.assertEqual(layout.coordinate(64), (8, 0))
        self.assertEqual(layout.coordinate(128), (0, 8))
        self.assertEqual(layout.coordinate(319), (7, 23))
        self.assertEqual(layout.matrix_index(319), 4)

    def test_custom_tiling(self):
        layout = MatrixLayout.from_dimensions(matrix_size=4, total_matrices=6, tiles_per_row=3)
        self.assertEqual(layout.total_leds, 96)
        self.assertEqual(layout.coordinate(16 * 2), (8, 0))
        self.assertEqual(layout.coordinate(16 * 3), (0, 4))
        self.assertEqual(len(layout.coordinates()), 96)

    def test_led_count_mismatch_fails_fast(self):
        with self.assertRaises(LayoutConfigurationError):
            MatrixLayout(total_leds=300)
        with self.assertRaises(LayoutConfigurationError):
            MatrixLayout(leds_per_matrix=60, total_leds=300)
        with self.assertRaises(ValueError):
            MatrixLayout(total_matrices=0, total_leds=0)


if __name__ == "__main__":
    unittest.main()
