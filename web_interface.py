#!/usr/bin/env python3
"""
Web Interface for the Ripple Matrix Animation

Flask JSON API for starting/stopping the animation, steering amplitude and
color, and adjusting parameters in real-time.
"""

import math
import time

from flask import Flask, jsonify, request

from animation_manager import AnimationManager
from animation_system.utils import hex_to_rgb


class AnimationWebInterface:
    """Web interface for animation management"""

    def __init__(self, manager: AnimationManager,
                 host: str = '0.0.0.0',
                 port: int = 5000):
        """
        Initialize web interface

        Args:
            manager: AnimationManager driving the LEDs
            host: Host to bind to
            port: Port to listen on
        """
        self.manager = manager
        self.host = host
        self.port = port

        self.app = Flask(__name__)
        self._register_routes()

    def _register_routes(self):
        """Register Flask routes"""

        @self.app.route('/')
        @self.app.route('/api/status')
        def api_get_status():
            """API: Get current status"""
            return jsonify(self.manager.get_current_status())

        @self.app.route('/api/animations')
        def api_list_animations():
            """API: Get list of available animations"""
            return jsonify(self.manager.list_animations())

        @self.app.route('/api/animations/<animation_name>')
        def api_get_animation(animation_name):
            """API: Get detailed info about specific animation"""
            info = self.manager.get_animation_info(animation_name)
            if info:
                return jsonify(info)
            return jsonify({'error': 'Animation not found'}), 404

        @self.app.route('/api/start/<animation_name>', methods=['POST'])
        def api_start_animation(animation_name):
            """API: Start an animation"""
            if animation_name not in self.manager.ANIMATIONS:
                return jsonify({'error': 'Animation not found'}), 404
            config = request.get_json(silent=True) or {}
            success = self.manager.start_animation(animation_name, config)
            return jsonify({'success': success})

        @self.app.route('/api/stop', methods=['POST'])
        def api_stop_animation():
            """API: Stop current animation"""
            self.manager.stop_animation()
            return jsonify({'success': True})

        @self.app.route('/api/frame')
        def api_get_frame():
            """API: Get current animation frame data"""
            return jsonify(self.manager.get_current_frame())

        @self.app.route('/api/preview/<animation_name>')
        def api_get_preview(animation_name):
            """API: Get preview frame data for a specific animation"""
            try:
                return jsonify(self.manager.get_animation_preview(animation_name))
            except ValueError as e:
                return jsonify({'error': str(e), 'frame_data': [], 'timestamp': time.time()}), 404

        @self.app.route('/api/parameters', methods=['POST'])
        def api_update_parameters():
            """API: Update animation parameters"""
            params = request.get_json(silent=True)
            if not isinstance(params, dict):
                return jsonify({'error': 'Expected a JSON object of parameters'}), 400
            try:
                success = self.manager.update_animation_parameters(params)
            except ValueError as e:
                return jsonify({'error': str(e)}), 400
            return jsonify({'success': success})

        @self.app.route('/api/amplitude', methods=['POST'])
        def api_set_amplitude():
            """API: Set the ripple amplitude"""
            data = request.get_json(silent=True) or {}
            try:
                value = float(data['value'])
            except (KeyError, TypeError, ValueError):
                return jsonify({'error': 'Body must be {"value": <number>}'}), 400
            if not math.isfinite(value):
                return jsonify({'error': 'Amplitude must be finite'}), 400

            success = self.manager.set_amplitude(value)
            return jsonify({'success': success})

        @self.app.route('/api/color', methods=['POST'])
        def api_set_color():
            """
            API: Override the ambient base color (hex or 0-1 RGB)

            The override lasts until the next tick, when the ambient color
            cycle recomputes the base color.
            """
            data = request.get_json(silent=True) or {}
            try:
                if 'hex' in data:
                    r, g, b = (c / 255.0 for c in hex_to_rgb(data['hex']))
                else:
                    r, g, b = (float(data[key]) for key in ('r', 'g', 'b'))
            except (KeyError, TypeError, ValueError) as e:
                return jsonify({'error': f'Invalid color: {e}'}), 400

            success = self.manager.set_base_color(r, g, b)
            return jsonify({
                'success': success,
                'color': [r, g, b],
                'note': 'Replaced by the ambient color cycle on the next tick',
            })

    def run(self, debug=False):
        """Start the web server"""
        print(f"🌐 Starting web interface at http://{self.host}:{self.port}")
        print(f"   Status: http://{self.host}:{self.port}/api/status")
        print(f"   Frame:  http://{self.host}:{self.port}/api/frame")

        # The reloader would spawn a second animation thread
        self.app.run(host=self.host, port=self.port, debug=debug, threaded=True, use_reloader=False)


def create_app(manager: AnimationManager, host: str = '0.0.0.0', port: int = 5000) -> AnimationWebInterface:
    """Factory function to create the web application"""
    return AnimationWebInterface(manager, host=host, port=port)

