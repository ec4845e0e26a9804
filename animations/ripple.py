#!/usr/bin/env python3
"""
Ripple Animation Plugin

Drifting ripple rings over a breathing purple/red/blue ambient field,
spread across the whole matrix array.
"""

import math
import random
from typing import List, Tuple, Dict, Any, Optional

from animation_system import AnimationBase, RippleAnimationEngine, RippleTuning

# Params forwarded straight to RippleTuning
TUNING_PARAMS = {
    'base_speed_factor': {'type': 'float', 'min': 0.1, 'max': 5.0, 'description': 'Time speed at low amplitude'},
    'max_speed_factor': {'type': 'float', 'min': 0.5, 'max': 10.0, 'description': 'Time speed at full amplitude'},
    'max_ripples': {'type': 'int', 'min': 0, 'max': 32, 'description': 'Maximum simultaneous ripples'},
    'new_ripple_chance': {'type': 'float', 'min': 0.0, 'max': 1.0, 'description': 'Initial per-frame spawn probability (drifts afterwards)'},
    'ripple_spread': {'type': 'float', 'min': 0.05, 'max': 2.0, 'description': 'Ring thickness (gaussian sigma, in LEDs)'},
    'smoothing_factor': {'type': 'float', 'min': 0.01, 'max': 1.0, 'description': 'How fast frames blend toward the new target'},
    'color_variation': {'type': 'float', 'min': 0.0, 'max': 1.0, 'description': 'Per-LED color shimmer'},
    'ripple_intensity': {'type': 'float', 'min': 0.0, 'max': 50.0, 'description': 'Initial ring brightness (drifts afterwards)'},
    'min_intensity': {'type': 'float', 'min': 0.0, 'max': 1.0, 'description': 'Ambient intensity floor'},
    'max_intensity': {'type': 'float', 'min': 0.1, 'max': 30.0, 'description': 'Ambient intensity ceiling'},
    'matrix_variance': {'type': 'float', 'min': 0.0, 'max': 1.0, 'description': 'Random per-matrix brightness spread'},
    'brightness_oscillation_speed': {'type': 'float', 'min': 0.0, 'max': 5.0, 'description': 'Breathing speed'},
    'brightness_oscillation_amplitude': {'type': 'float', 'min': 0.0, 'max': 3.0, 'description': 'Breathing depth'},
    'dark_spot_chance': {'type': 'float', 'min': 0.0, 'max': 1.0, 'description': 'Per-frame chance a matrix goes dark'},
    'dark_spot_duration': {'type': 'float', 'min': 0.1, 'max': 30.0, 'description': 'Seconds a dark matrix stays dark'},
}


def check_tuning_value(name: str, value: Any):
    """
    Validate a tunable against its TUNING_PARAMS entry

    Returns:
        The value coerced to the schema type

    Raises:
        ValueError: If the value is not a finite number inside the schema range
    """
    entry = TUNING_PARAMS[name]
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value!r}")
    if entry['type'] == 'int':
        if value != int(value):
            raise ValueError(f"{name} must be a whole number, got {value!r}")
        value = int(value)
    else:
        value = float(value)
    if not entry['min'] <= value <= entry['max']:
        raise ValueError(f"{name} must be between {entry['min']} and {entry['max']}, got {value!r}")
    return value


def check_amplitude(value: Any) -> float:
    """Amplitude may be out of range (it gets clamped) but must be a finite number"""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"amplitude must be a finite number, got {value!r}")
    return float(value)


class RippleAnimation(AnimationBase):
    """Noise-driven ripples over an ambient color field"""

    ANIMATION_NAME = "Ripple"
    ANIMATION_DESCRIPTION = "Meandering ripple rings over a slowly cycling purple/red/blue field"
    ANIMATION_AUTHOR = "LED Grid Team"
    ANIMATION_VERSION = "1.0"

    def __init__(self, controller, config: Dict[str, Any] = None):
        super().__init__(controller, config)

        defaults = RippleTuning()
        self.default_params.update({name: getattr(defaults, name) for name in TUNING_PARAMS})
        self.default_params.update({
            'amplitude': defaults.amplitude,
            'seed': None,            # Fixed seed for repeatable runs
        })

        self.params = {**self.default_params, **self.config}
        for name in TUNING_PARAMS.keys() & self.config.keys():
            self.params[name] = check_tuning_value(name, self.config[name])
        self.params['amplitude'] = check_amplitude(self.params['amplitude'])

        seed = self.params.get('seed')
        self.engine = RippleAnimationEngine(
            layout=self.get_layout(),
            tuning=RippleTuning.from_params(self.params),
            rng=random.Random(seed) if seed is not None else None,
        )
        self.engine.set_amplitude(self.params['amplitude'])
        self.last_time: Optional[float] = None

    def get_parameter_schema(self) -> Dict[str, Dict[str, Any]]:
        schema = super().get_parameter_schema()
        for name, entry in TUNING_PARAMS.items():
            schema[name] = {**entry, 'default': self.default_params[name]}
        schema['amplitude'] = {
            'type': 'float',
            'min': 0.0,
            'max': self.engine.tuning.max_amplitude,
            'default': self.default_params['amplitude'],
            'description': 'Intensity ceiling; never drops below 800 while running'
        }
        return schema

    def update_parameters(self, new_params: Dict[str, Any]):
        """Apply live changes; nothing is applied if any tunable is invalid"""
        checked = dict(new_params)
        for name in TUNING_PARAMS.keys() & checked.keys():
            checked[name] = check_tuning_value(name, checked[name])
        if 'amplitude' in checked:
            checked['amplitude'] = check_amplitude(checked['amplitude'])

        super().update_parameters(checked)
        tuning = self.engine.tuning
        for name, value in checked.items():
            if name in TUNING_PARAMS:
                setattr(tuning, name, value)
                if name in ('ripple_intensity', 'new_ripple_chance'):
                    setattr(self.engine, name, value)
        if 'amplitude' in checked:
            self.engine.set_amplitude(checked['amplitude'])

    def set_amplitude(self, value: float):
        self.engine.set_amplitude(value)
        self.params['amplitude'] = self.engine.amplitude

    def set_base_color(self, r: float, g: float, b: float):
        self.engine.set_base_color(r, g, b)

    def start(self):
        super().start()
        self.last_time = None

    def generate_frame(self, time_elapsed: float, frame_count: int) -> List[Tuple[int, int, int]]:
        """Advance the engine by the time since the previous frame"""
        if self.last_time is None:
            dt = 0.0
        else:
            dt = max(0.0, time_elapsed - self.last_time)
        self.last_time = time_elapsed

        speed = max(0.0, float(self.params.get('speed', 1.0)))
        frame = self.engine.advance(dt * speed)
        if self.params.get('brightness', 1.0) >= 1.0:
            return frame
        return [self.apply_brightness(color) for color in frame]

    def get_runtime_stats(self) -> Dict[str, Any]:
        return self.engine.get_stats()
