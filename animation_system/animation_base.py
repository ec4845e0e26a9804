#!/usr/bin/env python3
"""
Base animation class for the LED matrix array
"""

from abc import ABC, abstractmethod
from typing import List, Tuple, Dict, Any

from led_layout import MatrixLayout


class AnimationBase(ABC):
    """Base class for all LED matrix animations"""

    def __init__(self, controller, config: Dict[str, Any] = None):
        """
        Initialize animation

        Args:
            controller: LED controller instance (exposes `layout` and `total_leds`)
            config: Animation configuration parameters
        """
        self.controller = controller
        self.config = config or {}
        self.is_running = False

        # Animation metadata
        self.name = getattr(self, 'ANIMATION_NAME', self.__class__.__name__)
        self.description = getattr(self, 'ANIMATION_DESCRIPTION', 'No description')
        self.author = getattr(self, 'ANIMATION_AUTHOR', 'Unknown')
        self.version = getattr(self, 'ANIMATION_VERSION', '1.0')

        # Default parameters that can be overridden
        self.default_params = {
            'speed': 1.0,
            'brightness': 1.0,
        }

        # Merge default params with config
        self.params = {**self.default_params, **self.config}

    @abstractmethod
    def generate_frame(self, time_elapsed: float, frame_count: int) -> List[Tuple[int, int, int]]:
        """
        Generate a single frame of animation

        Args:
            time_elapsed: Time since animation started (seconds)
            frame_count: Number of frames rendered so far

        Returns:
            List of (r, g, b) tuples for all pixels
        """
        pass

    def get_parameter_schema(self) -> Dict[str, Dict[str, Any]]:
        """
        Return schema describing configurable parameters

        Returns:
            Dict with parameter definitions including type, range, description
        """
        return {
            'speed': {
                'type': 'float',
                'min': 0.1,
                'max': 5.0,
                'default': 1.0,
                'description': 'Animation speed multiplier'
            },
            'brightness': {
                'type': 'float',
                'min': 0.0,
                'max': 1.0,
                'default': 1.0,
                'description': 'Overall brightness (0.0 - 1.0)'
            }
        }

    def update_parameters(self, new_params: Dict[str, Any]):
        """Update animation parameters in real-time"""
        self.params.update(new_params)

    def get_info(self) -> Dict[str, Any]:
        """Get animation metadata"""
        return {
            'name': self.name,
            'description': self.description,
            'author': self.author,
            'version': self.version,
            'parameters': self.get_parameter_schema(),
            'current_params': self.params
        }

    def get_runtime_stats(self) -> Dict[str, Any]:
        """
        Optional hook for animations to expose debugging/telemetry data.
        Default implementation returns an empty dict.
        """
        return {}

    def start(self):
        """Called when animation starts"""
        self.is_running = True

    def stop(self):
        """Called when animation stops"""
        self.is_running = False

    def cleanup(self):
        """Called when animation is being destroyed"""
        self.stop()

    # Utility methods for common operations
    def apply_brightness(self, color: Tuple[int, int, int]) -> Tuple[int, int, int]:
        """Apply brightness parameter to a color"""
        r, g, b = color
        brightness = self.params.get('brightness', 1.0)
        return (
            int(r * brightness),
            int(g * brightness),
            int(b * brightness)
        )

    def get_layout(self) -> MatrixLayout:
        """Get the controller's matrix layout"""
        return self.controller.layout
