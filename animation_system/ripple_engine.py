#!/usr/bin/env python3
"""
Ripple animation engine

Expanding ripple rings drawn over a slowly drifting purple/red/blue ambient
field, with random per-matrix brightness, temporary "dark spot" matrices and
exponential smoothing between frames.
"""

import math
import random
import time
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from led_layout import MatrixLayout

from .noise import NoiseField
from .utils import clamp, distance, map_range, rgb_to_hex, unit_to_byte

NOISE_STEP = 0.03          # noise_t advance per tick, independent of dt
MIN_AMPLITUDE = 800.0


@dataclass
class RippleTuning:
    """Tunable engine parameters"""

    base_speed_factor: float = 1.2
    max_speed_factor: float = 5.0
    min_speed_factor: float = 0.05
    max_ripples: int = 8
    new_ripple_chance: float = 0.1
    ripple_spread: float = 0.2
    smoothing_factor: float = 0.1
    color_variation: float = 0.3
    base_variation: float = 0.25
    ripple_intensity: float = 18.0
    min_intensity: float = 0.0001
    max_intensity: float = 15.0
    matrix_variance: float = 0.5
    brightness_oscillation_speed: float = 1.0
    brightness_oscillation_amplitude: float = 0.8

    # Noise cycle periods (in units of noise_t)
    color_cycle_period: float = 14.0
    intensity_cycle_period: float = 15.0
    factor_cycle_period: float = 12.0
    brightness_cycle_period: float = 5.0
    ripple_speed_cycle_period: float = 8.0  # recognized, not read by any tick step

    dark_spot_chance: float = 0.15
    dark_spot_intensity: float = 0.001
    dark_spot_duration: float = 2.0

    max_amplitude: float = 10000.0
    amplitude: float = 2000.0

    def __post_init__(self):
        if not self.ripple_spread > 0:
            raise ValueError(f"ripple_spread must be positive, got {self.ripple_spread!r}")
        if not 0 < self.smoothing_factor <= 1:
            raise ValueError(f"smoothing_factor must be in (0, 1], got {self.smoothing_factor!r}")
        if self.max_ripples < 0:
            raise ValueError(f"max_ripples must not be negative, got {self.max_ripples!r}")

    @classmethod
    def from_params(cls, params: Optional[Dict[str, Any]]) -> 'RippleTuning':
        """Build tuning from a params dict, ignoring keys that aren't tunables"""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (params or {}).items() if k in known})


def ambient_color(hue_mix: float, variation: float) -> Tuple[float, float, float]:
    """
    Blue → red → blue blend for a hue mix in [0, 1]; green stays off.

    `variation` is added to red and blue before clamping.
    """
    if hue_mix < 0.5:
        blend = hue_mix * 2
        r = blend * 0.9
        b = (1 - blend) * 0.7
    else:
        blend = (hue_mix - 0.5) * 2
        r = (1 - blend) * 0.9
        b = blend * 0.7
    return clamp(r + variation), 0.0, clamp(b + variation)


def smooth_frame(current: List[List[float]], target: List[List[float]], factor: float) -> List[List[float]]:
    """Exponential moving average of every channel toward the target frame"""
    keep = 1.0 - factor
    return [
        [c[0] * keep + n[0] * factor, c[1] * keep + n[1] * factor, c[2] * keep + n[2] * factor]
        for c, n in zip(current, target)
    ]


class Ripple:
    """A single expanding ring; its age doubles as the ring radius"""

    def __init__(self, x: float, y: float, rng: Optional[random.Random] = None):
        rng = rng or random.Random()
        self.x = x
        self.y = y
        self.age = 0.0
        self.base_speed = rng.uniform(12.0, 25.0)
        self.speed_phase = rng.random() * 1000
        self.direction_phase = rng.random() * 1000

    def advance(self, dt: float, noise: NoiseField):
        """Grow the ring and let its center meander"""
        speed_variation = (noise.sample(self.age * 0.15 + self.speed_phase) + 1) / 2 * 0.6 + 0.7
        direction_variation = noise.sample(self.age * 0.1 + self.direction_phase) * 2 * math.pi

        self.age += dt * self.base_speed * speed_variation
        self.x += math.sin(self.age * 0.5 + direction_variation) * 0.3
        self.y += math.cos(self.age * 0.5 + direction_variation) * 0.3

    def __repr__(self) -> str:
        return f"<Ripple x={self.x:.2f} y={self.y:.2f} age={self.age:.2f}>"


class RippleAnimationEngine:
    """Owns all animation state; call advance(dt) once per tick"""

    def __init__(self, layout: Optional[MatrixLayout] = None,
                 tuning: Optional[RippleTuning] = None,
                 rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], float]] = None):
        """
        Initialize the engine

        Args:
            layout: Matrix layout (validated on construction)
            tuning: Tunable parameters, defaults when omitted
            rng: Random source for spawns, jitter and dark spots; seed it for repeatable runs
            clock: Zero-arg callable returning seconds, used for dark-spot expiry
        """
        self.layout = layout or MatrixLayout()
        self.tuning = tuning or RippleTuning()
        self.rng = rng or random.Random()
        self.clock = clock or time.monotonic
        self.noise = NoiseField()

        self.pixels: List[List[float]] = [[0.0, 0.0, 0.0] for _ in range(self.layout.total_leds)]
        self.ripples: List[Ripple] = []
        self.t = 0.0
        self.noise_t = 0.0
        self.amplitude = float(self.tuning.amplitude)
        self.base_color: Tuple[float, float, float] = (0.5, 0.0, 0.5)

        self.dark_matrices: Set[int] = set()
        self.dark_spot_expiry: Dict[int, float] = {}

        # Drift every tick with the ripple noise factor
        self.ripple_intensity = self.tuning.ripple_intensity
        self.new_ripple_chance = self.tuning.new_ripple_chance

        self._coordinates = self.layout.coordinates()
        self._matrix_of = [self.layout.matrix_index(i) for i in range(self.layout.total_leds)]
        self.last_speed_factor = 0.0

    # ------------------------------------------------------------------
    # Public controls
    # ------------------------------------------------------------------
    def set_amplitude(self, value: float):
        """Set the intensity ceiling, clamped to [0, max_amplitude]"""
        self.amplitude = clamp(float(value), 0.0, self.tuning.max_amplitude)

    def set_base_color(self, r: float, g: float, b: float):
        """Override the ambient color until the next tick recomputes it"""
        self.base_color = (clamp(r), clamp(g), clamp(b))

    def current_color(self) -> Tuple[float, float, float]:
        """Ambient color for the current noise_t"""
        hue_mix = self.noise.cyclic_value(self.noise_t * 0.08, self.tuning.color_cycle_period)
        variation = self.noise.cyclic_value(self.noise_t * 0.5, self.tuning.color_cycle_period, 100) * 0.05
        return ambient_color(hue_mix, variation)

    def spawn_ripple(self, x: Optional[float] = None, y: Optional[float] = None) -> Ripple:
        """Add a ripple at (x, y), or at a random spot within the grid extent"""
        extent = self.layout.linear_extent
        if x is None:
            x = self.rng.random() * extent
        if y is None:
            y = self.rng.random() * extent
        ripple = Ripple(x, y, self.rng)
        self.ripples.append(ripple)
        return ripple

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def advance(self, dt: float) -> List[Tuple[int, int, int]]:
        """
        Step the animation by dt seconds

        Args:
            dt: Elapsed time, finite and non-negative

        Returns:
            List of (r, g, b) tuples (0-255) for every LED

        Raises:
            ValueError: If dt is NaN, infinite or negative
        """
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be a finite, non-negative number of seconds, got {dt!r}")

        tuning = self.tuning
        noise = self.noise

        self.amplitude = clamp(self.amplitude, MIN_AMPLITUDE, tuning.max_amplitude)
        self.noise_t += NOISE_STEP

        intensity_factor = noise.cyclic_value(self.noise_t, tuning.intensity_cycle_period) * 0.9 + 0.1
        ripple_factor = noise.cyclic_value(self.noise_t, tuning.factor_cycle_period, 1.0) * 1.2 - 0.6
        speed_variation = noise.cyclic_value(self.noise_t, tuning.factor_cycle_period, 2.0) * 1.2 - 0.6
        overall_brightness = noise.cyclic_value(
            self.noise_t * 0.25, tuning.brightness_cycle_period, 3.0) * 0.7 + 0.6

        base_intensity = map_range(intensity_factor * 0.4, 0.0, 1.0, tuning.min_intensity, tuning.max_intensity)
        amplitude_factor = (self.amplitude / tuning.max_amplitude) ** 0.8

        self.base_color = self.current_color()

        oscillation = (math.sin(self.t * tuning.brightness_oscillation_speed) *
                       tuning.brightness_oscillation_amplitude)
        intensity = max(tuning.min_intensity, base_intensity + oscillation * amplitude_factor)

        speed_factor = (tuning.base_speed_factor +
                        (tuning.max_speed_factor - tuning.base_speed_factor) *
                        amplitude_factor ** 1.2 * speed_variation)
        # Strong negative speed variation would otherwise run time backwards
        speed_factor = max(tuning.min_speed_factor, speed_factor)
        self.last_speed_factor = speed_factor
        self.t += speed_factor * dt

        matrix_factors = self._update_matrix_factors()
        frame = self._ambient_frame(intensity, amplitude_factor, matrix_factors)

        if len(self.ripples) < tuning.max_ripples and self.rng.random() < self.new_ripple_chance:
            self.spawn_ripple()

        ring_scale = (0.95 + 0.05 * intensity_factor) * self.ripple_intensity * 1.5
        for ripple in self.ripples:
            ripple.advance(dt * speed_factor, noise)
            self._render_ripple(frame, ripple, ring_scale, matrix_factors)

        for pixel in frame:
            pixel[0] *= overall_brightness
            pixel[1] *= overall_brightness
            pixel[2] *= overall_brightness

        self.pixels = smooth_frame(self.pixels, frame, tuning.smoothing_factor)

        extent = self.layout.linear_extent
        self.ripples = [r for r in self.ripples if r.age <= extent]

        self.ripple_intensity = 12.0 * (0.7 + 0.6 * ripple_factor)
        self.new_ripple_chance = 0.08 * (0.7 + 0.6 * ripple_factor)

        return [(unit_to_byte(r), unit_to_byte(g), unit_to_byte(b)) for r, g, b in self.pixels]

    def _update_matrix_factors(self) -> List[float]:
        """Expire and trigger dark spots, then pick one brightness factor per matrix"""
        tuning = self.tuning
        now = self.clock()

        released = [m for m, expiry in self.dark_spot_expiry.items() if now > expiry]
        for matrix in released:
            self.dark_matrices.discard(matrix)
            del self.dark_spot_expiry[matrix]

        # Released matrices stay normal for this tick
        dark_cap = self.layout.total_matrices // 3
        factors = []
        for matrix in range(self.layout.total_matrices):
            if matrix in self.dark_matrices:
                factors.append(tuning.dark_spot_intensity)
            elif (matrix not in released and len(self.dark_matrices) < dark_cap
                  and self.rng.random() < tuning.dark_spot_chance):
                self.dark_matrices.add(matrix)
                self.dark_spot_expiry[matrix] = now + tuning.dark_spot_duration
                factors.append(tuning.dark_spot_intensity)
            else:
                factors.append(self.rng.uniform(1 - tuning.matrix_variance, 1 + tuning.matrix_variance))
        return factors

    def _ambient_frame(self, intensity: float, amplitude_factor: float,
                       matrix_factors: List[float]) -> List[List[float]]:
        tuning = self.tuning
        base_r, base_g, base_b = self.base_color
        frame = []
        for i in range(self.layout.total_leds):
            matrix_factor = matrix_factors[self._matrix_of[i]]
            wave = tuning.base_variation * math.sin(self.t * 5 + i * 0.5)
            shimmer = tuning.color_variation * math.sin(self.t * 3 + i * 0.3)

            r = clamp(base_r + wave + shimmer)
            g = clamp(base_g + shimmer)
            b = clamp(base_b + wave + shimmer)

            gain = intensity * matrix_factor * (1 + self.rng.uniform(-0.1, 0.1))
            frame.append([
                r * gain + wave * amplitude_factor,
                g * gain,
                b * gain + wave * amplitude_factor,
            ])
        return frame

    def _render_ripple(self, frame: List[List[float]], ripple: Ripple, ring_scale: float,
                       matrix_factors: List[float]):
        two_sigma_sq = 2 * self.tuning.ripple_spread ** 2
        for i, (x, y) in enumerate(self._coordinates):
            d = distance(x, y, ripple.x, ripple.y)
            ring = math.exp(-((d - ripple.age) ** 2) / two_sigma_sq)
            amount = ring * ring_scale * matrix_factors[self._matrix_of[i]]
            # Every channel is clamped, including LEDs the ring doesn't reach
            pixel = frame[i]
            pixel[0] = clamp(pixel[0] + amount)
            pixel[1] = clamp(pixel[1] + amount)
            pixel[2] = clamp(pixel[2] + amount)

    def get_stats(self) -> Dict[str, Any]:
        """Snapshot of the engine state for status reporting"""
        return {
            'ripple_count': len(self.ripples),
            'ripple_ages': [round(r.age, 3) for r in self.ripples],
            'dark_matrices': sorted(self.dark_matrices),
            'amplitude': self.amplitude,
            't': self.t,
            'noise_t': self.noise_t,
            'speed_factor': self.last_speed_factor,
            'ripple_intensity': self.ripple_intensity,
            'new_ripple_chance': self.new_ripple_chance,
            'base_color': rgb_to_hex(*(unit_to_byte(c) for c in self.base_color)),
        }
