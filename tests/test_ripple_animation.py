"""Ripple plugin tests: parameter checking and frame generation."""

import math
import unittest

from animation_manager import PreviewLEDController
from animations.ripple import RippleAnimation


class RippleAnimationTests(unittest.TestCase):
    def setUp(self):
        self.animation = RippleAnimation(PreviewLEDController(), {'seed': 1})

    def test_rejects_out_of_range_tunables(self):
        bad_updates = [
            {'ripple_spread': 0},
            {'smoothing_factor': 3.0},
            {'max_ripples': 2.5},
            {'max_ripples': True},
            {'dark_spot_chance': 'often'},
            {'ripple_spread': float('nan')},
            {'amplitude': 'loud'},
            {'amplitude': float('inf')},
        ]
        for update in bad_updates:
            with self.assertRaises(ValueError):
                self.animation.update_parameters(update)

        tuning = self.animation.engine.tuning
        self.assertEqual(tuning.ripple_spread, 0.2)
        self.assertEqual(tuning.smoothing_factor, 0.1)
        self.assertEqual(self.animation.engine.amplitude, 2000.0)

    def test_invalid_update_applies_nothing(self):
        with self.assertRaises(ValueError):
            self.animation.update_parameters({'max_ripples': 3, 'ripple_spread': 0})
        self.assertEqual(self.animation.engine.tuning.max_ripples, 8)
        self.assertEqual(self.animation.params['max_ripples'], 8)

    def test_valid_update_is_coerced_to_schema_type(self):
        self.animation.update_parameters({'max_ripples': 3.0, 'ripple_spread': 1, 'amplitude': 5000})
        tuning = self.animation.engine.tuning
        self.assertEqual(tuning.max_ripples, 3)
        self.assertIsInstance(tuning.max_ripples, int)
        self.assertIsInstance(tuning.ripple_spread, float)
        self.assertEqual(self.animation.engine.amplitude, 5000)

    def test_invalid_config_rejected_at_construction(self):
        with self.assertRaises(ValueError):
            RippleAnimation(PreviewLEDController(), {'smoothing_factor': 3.0})
        with self.assertRaises(ValueError):
            RippleAnimation(PreviewLEDController(), {'ripple_spread': 0})

    def test_frames_stay_bounded_at_schema_limits(self):
        self.animation.update_parameters({
            'smoothing_factor': 1.0,
            'ripple_spread': 0.05,
            'new_ripple_chance': 1.0,
            'max_ripples': 32,
        })
        for frame_count in range(200):
            frame = self.animation.generate_frame(frame_count * 0.02, frame_count)
            self.assertEqual(len(frame), 320)
            self.assertTrue(all(0 <= c <= 255 for pixel in frame for c in pixel))
        self.assertTrue(all(math.isfinite(c) for pixel in self.animation.engine.pixels for c in pixel))

    def test_base_color_override_lasts_until_next_tick(self):
        self.animation.set_base_color(0.0, 1.0, 0.0)
        self.assertEqual(self.animation.engine.base_color, (0.0, 1.0, 0.0))
        self.animation.generate_frame(0.0, 0)
        self.assertEqual(self.animation.engine.base_color[1], 0.0)


if __name__ == "__main__":
    unittest.main()
