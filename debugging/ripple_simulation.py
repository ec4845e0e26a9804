"""Reusable headless simulator for the Ripple animation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from animations.ripple import RippleAnimation
from led_layout import DEFAULT_MATRIX_SIZE, DEFAULT_TOTAL_MATRICES, MatrixLayout


@dataclass
class SimulationConfig:
    duration_s: float = 30.0
    fps: float = 60.0
    sample_every_s: float = 1.0
    matrix_size: int = DEFAULT_MATRIX_SIZE
    total_matrices: int = DEFAULT_TOTAL_MATRICES
    seed: Optional[int] = 1234
    animation_config: Optional[Dict[str, Any]] = None


class _SimulationController:
    """Minimal controller stub so the animation can run headless."""

    def __init__(self, layout: MatrixLayout):
        self.layout = layout
        self.total_leds = layout.total_leds
        self.inline_show = True

    def set_all_pixels(self, *_args, **_kwargs):
        pass

    def show(self):
        pass

    def clear(self):
        pass


def run_simulation(config: SimulationConfig,
                   on_frame: Optional[Callable[[RippleAnimation, list], None]] = None) -> List[Dict[str, Any]]:
    """
    Execute the animation for `duration_s` seconds of simulated time.

    The engine clock follows simulated time so dark spots expire on schedule.
    `on_frame` is called with (animation, frame) after every frame.
    """
    layout = MatrixLayout.from_dimensions(config.matrix_size, config.total_matrices)
    controller = _SimulationController(layout)
    animation_config = dict(config.animation_config or {})
    if config.seed is not None:
        animation_config.setdefault('seed', config.seed)

    animation = RippleAnimation(controller, animation_config)
    sim_time = [0.0]
    animation.engine.clock = lambda: sim_time[0]
    animation.start()

    dt = 1.0 / max(1.0, config.fps)
    samples: List[Dict[str, Any]] = []
    sample_interval_frames = max(1, int(round(config.sample_every_s * config.fps)))
    total_frames = int(round(config.duration_s * config.fps))

    for frame_index in range(total_frames + 1):
        t = frame_index * dt
        sim_time[0] = t
        frame = animation.generate_frame(t, frame_index)
        if on_frame is not None:
            on_frame(animation, frame)
        if frame_index == 0 or frame_index % sample_interval_frames == 0 or frame_index >= total_frames:
            samples.append(_snapshot(animation, frame, t, frame_index + 1))

    return samples


def _snapshot(animation: RippleAnimation, frame: list, time_elapsed: float, frame_count: int) -> Dict[str, Any]:
    """Build a structure that mirrors `/api/status`."""
    lit = sum(1 for r, g, b in frame if r or g or b)
    return {
        'current_animation': animation.ANIMATION_NAME,
        'frame_count': frame_count,
        'timestamp': time_elapsed,
        'frame_length': len(frame),
        'lit_pixels': lit,
        'stats': animation.get_runtime_stats(),
    }


def run_and_print(config: Optional[SimulationConfig] = None):
    """Helper for manual CLI runs."""
    cfg = config or SimulationConfig()
    samples = run_simulation(cfg)
    print(f"Ran {cfg.duration_s}s simulation ({len(samples)} samples)")
    for sample in samples:
        stats = sample['stats']
        print(
            f"t={sample['timestamp']:6.1f}s lit={sample['lit_pixels']:4d} "
            f"ripples={stats['ripple_count']} dark={stats['dark_matrices']} "
            f"chance={stats['new_ripple_chance']:.3f} color={stats['base_color']}"
        )


if __name__ == "__main__":
    run_and_print()
