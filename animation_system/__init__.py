#!/usr/bin/env python3
"""
LED Matrix Animation System

Ripple-over-ambient-field animation engine for tiled LED matrices.
"""

from .animation_base import AnimationBase
from .noise import NoiseField
from .ripple_engine import Ripple, RippleAnimationEngine, RippleTuning

__version__ = "1.0.0"
__all__ = ["AnimationBase", "NoiseField", "Ripple", "RippleAnimationEngine", "RippleTuning"]
