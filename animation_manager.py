#!/usr/bin/env python3
"""
Animation Manager Service

Drives the active animation at a target FPS, hands frames to the LED
controller, and exposes status/frame data for the web interface.
"""

import time
import threading
import traceback
from collections import deque
from typing import Optional, Dict, Any, List, Type

from animation_system import AnimationBase
from animations.ripple import RippleAnimation
from led_layout import MatrixLayout


class PreviewLEDController:
    """
    Controller that performs no I/O.

    Used for previews and headless runs; the hardware transport lives outside
    this project and only needs the same set_all_pixels/show/clear surface.
    """
    def __init__(self, layout: Optional[MatrixLayout] = None, debug: bool = False):
        self.layout = layout or MatrixLayout()
        self.total_leds = self.layout.total_leds
        self.debug = debug
        self.inline_show = True
        self.last_frame: List[Any] = []

    def set_all_pixels(self, pixel_data):
        self.last_frame = pixel_data
        if self.debug and len(pixel_data) > 0:
            r, g, b = pixel_data[0]
            print(f"📊 Frame: First pixel = RGB({r}, {g}, {b})")

    def show(self, *_args, **_kwargs):
        pass

    def clear(self, *_args, **_kwargs):
        self.last_frame = []

    def configure(self, *_args, **_kwargs):
        pass


class AnimationManager:
    """Manages animation playback"""

    ANIMATIONS: Dict[str, Type[AnimationBase]] = {
        "ripple": RippleAnimation,
    }

    def __init__(self, controller, animation_speed_scale: float = 1.0):
        """
        Initialize animation manager

        Args:
            controller: LED controller instance (needs `layout`, `total_leds`, `set_all_pixels`)
            animation_speed_scale: Multiplier applied to each animation's speed parameter at start
        """
        self.controller = controller

        # Animation state
        self.current_animation: Optional[AnimationBase] = None
        self.current_animation_name: Optional[str] = None
        self.is_running = False
        self.target_fps = 40
        self.frame_count = 0
        self.start_time = 0.0
        self.animation_speed_scale = animation_speed_scale

        # Threading
        self.animation_thread: Optional[threading.Thread] = None
        self.stop_event = threading.Event()
        # Engines are single-writer; web requests and the loop share this lock
        self.animation_lock = threading.Lock()

        # Performance tracking
        self.frame_timestamps = deque(maxlen=240)  # ~4 seconds at 60 FPS
        self.perf_samples = deque(maxlen=300)
        self.perf_lock = threading.Lock()

        # Current frame data for web interface
        self.current_frame_data = []
        self.frame_data_lock = threading.Lock()

        self.preview_controller = PreviewLEDController(self.controller.layout)

    def _led_info(self) -> Dict[str, Any]:
        layout = self.controller.layout
        return {
            'total_leds': layout.total_leds,
            'matrix_size': layout.matrix_size,
            'total_matrices': layout.total_matrices,
            'leds_per_matrix': layout.leds_per_matrix,
            'tiles_per_row': layout.tiles_per_row,
            'grid_width': layout.grid_width,
            'grid_height': layout.grid_height,
        }

    def _apply_speed_scale(self):
        """Apply global speed scaling to the current animation if supported"""
        if not self.current_animation:
            return
        if 'speed' not in self.current_animation.params:
            return
        base_speed = self.current_animation.params['speed']
        scaled_speed = base_speed * self.animation_speed_scale
        # Prevent negative or zero speeds
        if scaled_speed <= 0:
            scaled_speed = base_speed
        self.current_animation.update_parameters({'speed': scaled_speed})

    def list_animations(self) -> List[Dict[str, Any]]:
        """Get list of available animations with metadata"""
        return [self.get_animation_info(name) for name in self.ANIMATIONS]

    def get_animation_info(self, animation_name: str) -> Optional[Dict[str, Any]]:
        """Get detailed info about a specific animation"""
        animation_class = self.ANIMATIONS.get(animation_name)
        if animation_class is None:
            return None
        info = animation_class(self.preview_controller).get_info()
        info['plugin_name'] = animation_name
        return info

    def start_animation(self, animation_name: str, config: Dict[str, Any] = None) -> bool:
        """
        Start playing an animation

        Args:
            animation_name: Registered animation name
            config: Animation configuration parameters

        Returns:
            True if started successfully
        """
        try:
            self.stop_animation()

            animation_class = self.ANIMATIONS.get(animation_name)
            if animation_class is None:
                print(f"✗ Animation not found: {animation_name}")
                return False

            self.current_animation = animation_class(self.controller, config or {})
            self.current_animation_name = animation_name
            self._apply_speed_scale()

            # Ensure controller is configured before frames start flowing
            if hasattr(self.controller, "configure"):
                try:
                    self.controller.configure()
                except Exception as controller_error:
                    print(f"⚠️ Controller configure failed: {controller_error}")

            self.current_animation.start()
            self.is_running = True
            self.stop_event.clear()
            self.frame_count = 0
            self.frame_timestamps.clear()
            self.start_time = time.perf_counter()

            self.animation_thread = threading.Thread(target=self._animation_loop, daemon=True)
            self.animation_thread.start()
            print(f"✓ Started animation: {animation_name}")
            return True

        except Exception as e:
            print(f"✗ Failed to start animation {animation_name}: {e}")
            traceback.print_exc()
            self.current_animation = None
            self.current_animation_name = None
            return False

    def stop_animation(self):
        """Stop current animation"""
        if not self.is_running:
            return

        self.is_running = False
        self.stop_event.set()

        if self.animation_thread and self.animation_thread.is_alive():
            self.animation_thread.join(timeout=1.0)
        self.animation_thread = None

        if self.current_animation:
            self.current_animation.cleanup()
            self.current_animation = None

        self.current_animation_name = None
        self.frame_timestamps.clear()
        with self.frame_data_lock:
            self.current_frame_data = []

        self.controller.clear()
        print("✓ Animation stopped")

    def update_animation_parameters(self, params: Dict[str, Any]) -> bool:
        """
        Update current animation parameters in real-time

        Raises:
            ValueError: If the animation rejects a parameter value
        """
        if not self.current_animation:
            return False
        try:
            with self.animation_lock:
                self.current_animation.update_parameters(params)
            print(f"✓ Updated animation parameters: {params}")
            return True
        except ValueError as e:
            print(f"✗ Rejected animation parameters: {e}")
            raise
        except Exception as e:
            print(f"✗ Failed to update parameters: {e}")
            return False

    def set_amplitude(self, value: float) -> bool:
        """Forward an amplitude change to the running animation"""
        animation = self.current_animation
        if animation is None or not hasattr(animation, 'set_amplitude'):
            return False
        with self.animation_lock:
            animation.set_amplitude(value)
        return True

    def set_base_color(self, r: float, g: float, b: float) -> bool:
        """
        Override the running animation's ambient color (0-1 channels)

        The ambient color cycle replaces the override on the next tick, so it
        only shows in frames rendered before that tick.
        """
        animation = self.current_animation
        if animation is None or not hasattr(animation, 'set_base_color'):
            return False
        with self.animation_lock:
            animation.set_base_color(r, g, b)
        return True

    def get_current_status(self) -> Dict[str, Any]:
        """Get current animation status and performance info"""
        status = {
            'is_running': self.is_running,
            'current_animation': self.current_animation_name,
            'frame_count': self.frame_count,
            'uptime': (time.perf_counter() - self.start_time) if self.is_running else 0,
            'target_fps': self.target_fps,
            'animation_speed_scale': self.animation_speed_scale,
            'actual_fps': self._calculate_fps(),
            'led_info': self._led_info(),
        }

        status['animation_info'] = None
        status['animation_stats'] = {}
        animation = self.current_animation
        if animation:
            status['animation_info'] = animation.get_info()
            try:
                with self.animation_lock:
                    stats = animation.get_runtime_stats()
                if isinstance(stats, dict):
                    status['animation_stats'] = stats
            except Exception as exc:
                status['animation_stats'] = {'error': str(exc)}

        performance = self._get_perf_summary()
        if performance:
            status['performance'] = performance

        return status

    def get_current_frame(self) -> Dict[str, Any]:
        """Get current animation frame data for web rendering"""
        with self.frame_data_lock:
            frame_data = list(self.current_frame_data)

        return {
            'frame_data': frame_data,
            'led_info': self._led_info(),
            'is_running': self.is_running,
            'frame_count': self.frame_count,
            'current_animation': self.current_animation_name if self.is_running else None,
            'timestamp': time.time()
        }

    def get_animation_preview(self, animation_name: str, frames: int = 30) -> Dict[str, Any]:
        """Render a few frames of an animation headlessly and return the last one"""
        animation_class = self.ANIMATIONS.get(animation_name)
        if animation_class is None:
            raise ValueError(f"Animation '{animation_name}' not found")

        temp_animation = animation_class(self.preview_controller, {})
        temp_animation.start()
        frame_data = None
        for i in range(max(1, frames)):
            frame_data = temp_animation.generate_frame(i / float(self.target_fps or 40), i)

        return {
            'frame_data': self._normalize_frame(frame_data),
            'led_info': self._led_info(),
            'is_running': False,
            'frame_count': frames,
            'current_animation': animation_name,
            'timestamp': time.time(),
            'preview': True
        }

    def _animation_loop(self):
        """Main animation loop running in separate thread"""
        target_frame_time = 1.0 / max(1, int(self.target_fps) or 1)

        while self.is_running and not self.stop_event.is_set():
            loop_start = time.perf_counter()
            generate_duration = 0.0
            send_duration = 0.0

            try:
                animation = self.current_animation
                if not animation:
                    break

                time_elapsed = loop_start - self.start_time
                gen_start = time.perf_counter()
                with self.animation_lock:
                    colors = animation.generate_frame(time_elapsed, self.frame_count)
                frame = self._normalize_frame(colors)
                generate_duration = time.perf_counter() - gen_start

                with self.frame_data_lock:
                    self.current_frame_data = frame

                send_start = time.perf_counter()
                self.controller.set_all_pixels(frame)
                if not getattr(self.controller, "inline_show", False) and hasattr(self.controller, "show"):
                    self.controller.show()
                send_duration = time.perf_counter() - send_start

                self.frame_count += 1
                self._update_fps_tracking(loop_start)

            except Exception as e:
                print(f"✗ Animation loop error: {e}")
                traceback.print_exc()
                time.sleep(0.05)

            # Sleep to maintain target FPS
            loop_duration = time.perf_counter() - loop_start
            sleep_time = max(0.0, target_frame_time - loop_duration)
            if sleep_time > 0:
                self.stop_event.wait(sleep_time)

            self._record_perf_sample({
                'generate': generate_duration,
                'send': send_duration,
                'process': loop_duration,
                'sleep': sleep_time,
            })

    def _normalize_frame(self, colors: Optional[List[Any]]) -> List[Any]:
        """Ensure frame length matches the LED count and is always a list"""
        total_pixels = self.controller.total_leds

        if colors is None:
            return [(0, 0, 0)] * total_pixels

        frame = list(colors)

        if len(frame) < total_pixels:
            frame.extend([(0, 0, 0)] * (total_pixels - len(frame)))
        elif len(frame) > total_pixels:
            frame = frame[:total_pixels]

        return frame

    def _update_fps_tracking(self, timestamp: Optional[float] = None):
        """Record frame timestamps for FPS calculation"""
        now = timestamp if timestamp is not None else time.perf_counter()
        self.frame_timestamps.append(now)

        # Keep only a small window of timestamps to reflect current performance
        while self.frame_timestamps and (now - self.frame_timestamps[0]) > 5.0:
            self.frame_timestamps.popleft()

    def _calculate_fps(self) -> float:
        """Calculate current FPS"""
        if len(self.frame_timestamps) < 2:
            return 0.0
        duration = self.frame_timestamps[-1] - self.frame_timestamps[0]
        if duration <= 0:
            return 0.0
        return (len(self.frame_timestamps) - 1) / duration

    def _record_perf_sample(self, sample: Dict[str, float]):
        with self.perf_lock:
            self.perf_samples.append(sample)

    def _get_perf_summary(self) -> Dict[str, Any]:
        """Summarize recent performance metrics"""
        with self.perf_lock:
            if not self.perf_samples:
                return {}

            count = len(self.perf_samples)
            totals = {key: 0.0 for key in ('generate', 'send', 'process', 'sleep')}
            for sample in self.perf_samples:
                for key in totals.keys():
                    totals[key] += sample.get(key, 0.0)

            summary = {
                'samples': count,
                'target_frame_ms': 1000.0 / max(1, float(self.target_fps or 1)),
            }
            for key, total in totals.items():
                summary[f'avg_{key}_ms'] = (total / count) * 1000.0
            return summary
