"""Animation manager playback tests against the no-I/O preview controller."""

import time
import unittest

from animation_manager import AnimationManager, PreviewLEDController
from animations.ripple import RippleAnimation


def wait_for(predicate, timeout=3.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return False


class AnimationManagerTests(unittest.TestCase):
    def setUp(self):
        self.controller = PreviewLEDController()
        self.manager = AnimationManager(self.controller)
        self.manager.target_fps = 60

    def tearDown(self):
        self.manager.stop_animation()

    def test_lists_ripple_animation(self):
        animations = self.manager.list_animations()
        self.assertEqual([a['plugin_name'] for a in animations], ['ripple'])
        info = animations[0]
        self.assertEqual(info['name'], "Ripple")
        self.assertIn('amplitude', info['parameters'])
        self.assertIn('dark_spot_chance', info['parameters'])
        self.assertIsNone(self.manager.get_animation_info('missing'))

    def test_unknown_animation_does_not_start(self):
        self.assertFalse(self.manager.start_animation('missing'))
        self.assertFalse(self.manager.is_running)

    def test_runs_frames_and_forwards_controls(self):
        self.assertTrue(self.manager.start_animation('ripple', {'seed': 3}))
        self.assertTrue(wait_for(lambda: self.manager.frame_count > 2))

        frame = self.manager.get_current_frame()
        self.assertEqual(len(frame['frame_data']), 320)
        self.assertEqual(frame['current_animation'], 'ripple')
        self.assertEqual(len(self.controller.last_frame), 320)

        animation = self.manager.current_animation
        self.assertIsInstance(animation, RippleAnimation)
        self.assertTrue(self.manager.set_amplitude(999999))
        self.assertEqual(animation.engine.amplitude, 10000)
        self.assertTrue(self.manager.set_base_color(0.2, 0.0, 0.4))
        self.assertTrue(self.manager.update_animation_parameters({'max_ripples': 0}))
        self.assertEqual(animation.engine.tuning.max_ripples, 0)

        status = self.manager.get_current_status()
        self.assertTrue(status['is_running'])
        self.assertIn('ripple_count', status['animation_stats'])
        self.assertEqual(status['led_info']['total_leds'], 320)

    def test_rejected_parameters_raise_and_keep_running(self):
        self.assertTrue(self.manager.start_animation('ripple', {'seed': 6}))
        with self.assertRaises(ValueError):
            self.manager.update_animation_parameters({'ripple_spread': 0})
        self.assertEqual(self.manager.current_animation.engine.tuning.ripple_spread, 0.2)
        count = self.manager.frame_count
        self.assertTrue(wait_for(lambda: self.manager.frame_count > count + 2))

    def test_invalid_start_config_does_not_start(self):
        self.assertFalse(self.manager.start_animation('ripple', {'smoothing_factor': 3.0}))
        self.assertFalse(self.manager.is_running)
        self.assertIsNone(self.manager.current_animation)

    def test_stop_clears_state(self):
        self.manager.start_animation('ripple')
        self.manager.stop_animation()
        self.assertFalse(self.manager.is_running)
        self.assertIsNone(self.manager.current_animation)
        self.assertEqual(self.manager.get_current_frame()['frame_data'], [])
        self.assertEqual(self.controller.last_frame, [])
        self.assertFalse(self.manager.set_amplitude(5000))
        self.assertFalse(self.manager.set_base_color(1.0, 0.0, 0.0))

    def test_speed_scale_applied_on_start(self):
        manager = AnimationManager(self.controller, animation_speed_scale=0.5)
        try:
            manager.start_animation('ripple')
            self.assertAlmostEqual(manager.current_animation.params['speed'], 0.5)
        finally:
            manager.stop_animation()

    def test_preview_renders_without_starting(self):
        preview = self.manager.get_animation_preview('ripple', frames=5)
        self.assertTrue(preview['preview'])
        self.assertEqual(len(preview['frame_data']), 320)
        self.assertFalse(self.manager.is_running)
        with self.assertRaises(ValueError):
            self.manager.get_animation_preview('missing')


if __name__ == "__main__":
    unittest.main()
