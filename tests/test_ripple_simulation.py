"""Ripple regression tests driven by the shared simulation harness."""

import unittest

from debugging.ripple_simulation import SimulationConfig, run_simulation


class RippleSimulationTests(unittest.TestCase):
    def test_frames_stay_valid_and_scene_features_appear(self):
        observed = {'max_ripples': 0, 'max_dark': 0, 'dark_seen': set(), 'bad_frames': 0}

        def on_frame(animation, frame):
            engine = animation.engine
            observed['max_ripples'] = max(observed['max_ripples'], len(engine.ripples))
            observed['max_dark'] = max(observed['max_dark'], len(engine.dark_matrices))
            observed['dark_seen'].update(engine.dark_matrices)
            if len(frame) != 320 or any(not 0 <= c <= 255 for pixel in frame for c in pixel):
                observed['bad_frames'] += 1

        samples = run_simulation(SimulationConfig(duration_s=16.0, fps=20.0, sample_every_s=1.0),
                                 on_frame=on_frame)

        self.assertEqual(observed['bad_frames'], 0)
        self.assertGreaterEqual(observed['max_ripples'], 1, "no ripple ever spawned")
        self.assertEqual(observed['max_dark'], 1, "dark spots missing or over the cap")
        self.assertGreaterEqual(len(observed['dark_seen']), 2, "dark spots never moved between matrices")
        self.assertTrue(any(s['lit_pixels'] > 0 for s in samples), "ambient field never lit")

    def test_stats_schema(self):
        samples = run_simulation(SimulationConfig(duration_s=2.0, fps=20.0, sample_every_s=0.5))
        self.assertGreaterEqual(len(samples), 4)
        for sample in samples:
            self.assertEqual(sample['current_animation'], "Ripple")
            self.assertEqual(sample['frame_length'], 320)
            stats = sample['stats']
            self.assertIn('ripple_count', stats)
            self.assertIn('dark_matrices', stats)
            self.assertGreaterEqual(stats['amplitude'], 800)

    def test_disabled_ripples_stay_disabled(self):
        samples = run_simulation(SimulationConfig(duration_s=2.0, fps=20.0,
                                                  animation_config={'max_ripples': 0}))
        self.assertTrue(all(s['stats']['ripple_count'] == 0 for s in samples))


if __name__ == "__main__":
    unittest.main()
