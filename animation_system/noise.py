"""
Cheap deterministic pseudo-noise built from three sine harmonics.

Not coherent noise: the fixed harmonic mix gives the ripple effect its
cadence, so the formula must stay exactly as written.
"""

import math


class NoiseField:
    """Stateless scalar noise used for color, intensity and ripple jitter"""

    @staticmethod
    def sample(x: float) -> float:
        """Noise value in [-1, 1] for input x"""
        return math.sin(x * 0.1) * 0.5 + math.sin(x * 0.2) * 0.3 + math.sin(x * 0.4) * 0.2

    def cyclic_value(self, t: float, period: float, offset: float = 0.0) -> float:
        """
        Sample the field on a time axis and remap it to [0, 1]

        Args:
            t: Time accumulator
            period: Divides t to stretch the cycle
            offset: Phase offset used to decorrelate parallel samples
        """
        return (self.sample(t / period + offset) + 1) / 2
