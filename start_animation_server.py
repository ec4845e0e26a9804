#!/usr/bin/env python3
"""
LED Animation Server Startup Script

Runs the animation loop against a headless controller and, unless
--headless is given, serves the Flask control API alongside it.
"""

import argparse
import sys
import time
from pathlib import Path

# Add current directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent))

from animation_manager import AnimationManager, PreviewLEDController
from led_layout import (DEFAULT_MATRIX_SIZE, DEFAULT_TOTAL_MATRICES, DEFAULT_TILES_PER_ROW,
                        MatrixLayout)
from web_interface import create_app


def build_manager(args) -> AnimationManager:
    """Create the controller + manager pair and start the requested animation."""
    layout = MatrixLayout.from_dimensions(
        matrix_size=args.matrix_size,
        total_matrices=args.matrices,
        tiles_per_row=args.tiles_per_row,
    )
    controller = PreviewLEDController(layout, debug=args.controller_debug)
    manager = AnimationManager(controller, animation_speed_scale=args.animation_speed_scale)
    manager.target_fps = args.target_fps

    config = {'amplitude': args.amplitude}
    if args.seed is not None:
        config['seed'] = args.seed
    if not manager.start_animation(args.animation, config):
        raise RuntimeError(f"Could not start animation '{args.animation}'")
    return manager


def run_headless(manager: AnimationManager, status_interval: float):
    """Keep the loop running and print a one-line status periodically."""
    print("🎛️ Headless mode (Ctrl+C to stop)")
    try:
        while True:
            time.sleep(status_interval)
            status = manager.get_current_status()
            stats = status.get('animation_stats') or {}
            print(f"📊 {status['current_animation']} @ {status['actual_fps']:.1f} FPS | "
                  f"ripples={stats.get('ripple_count', 0)} "
                  f"dark={stats.get('dark_matrices', [])} "
                  f"amplitude={stats.get('amplitude', 0):.0f}")
    except KeyboardInterrupt:
        print("\n👋 Stopped by user")


def main():
    parser = argparse.ArgumentParser(description='LED Matrix Ripple Animation Server')

    # Layout
    parser.add_argument('--matrix-size', type=int, default=DEFAULT_MATRIX_SIZE,
                        help=f'LEDs along one matrix edge (default: {DEFAULT_MATRIX_SIZE})')
    parser.add_argument('--matrices', type=int, default=DEFAULT_TOTAL_MATRICES,
                        help=f'Number of matrices (default: {DEFAULT_TOTAL_MATRICES})')
    parser.add_argument('--tiles-per-row', type=int, default=DEFAULT_TILES_PER_ROW,
                        help=f'Matrices per row in the grid (default: {DEFAULT_TILES_PER_ROW})')

    # Animation
    parser.add_argument('--animation', default='ripple',
                        help='Animation to start (default: ripple)')
    parser.add_argument('--amplitude', type=float, default=2000.0,
                        help='Initial amplitude, 0-10000 (default: 2000)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed the random source for a repeatable run')
    parser.add_argument('--target-fps', type=int, default=40,
                        help='Target animation FPS (default: 40)')
    parser.add_argument('--animation-speed-scale', type=float, default=1.0,
                        help='Multiplier applied to the animation\'s speed parameter (default: 1.0)')
    parser.add_argument('--controller-debug', action='store_true',
                        help='Print the first pixel of every frame')

    # Web
    parser.add_argument('--headless', action='store_true',
                        help='Run the animation loop without the web interface')
    parser.add_argument('--status-interval', type=float, default=2.0,
                        help='Seconds between status lines in headless mode')
    parser.add_argument('--host', default='0.0.0.0',
                        help='Host to bind to (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=5000,
                        help='Port to listen on (default: 5000)')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug mode for Flask')

    args = parser.parse_args()

    print("🎨 LED Matrix Ripple Server")
    print("=" * 40)
    print(f"Layout: {args.matrices} matrices × {args.matrix_size}×{args.matrix_size} LEDs "
          f"= {args.matrices * args.matrix_size * args.matrix_size} total")
    print(f"Target FPS: {args.target_fps}")
    print()

    manager = None
    try:
        manager = build_manager(args)
        if args.headless:
            run_headless(manager, args.status_interval)
        else:
            create_app(manager, host=args.host, port=args.port).run(debug=args.debug)
    except Exception as e:
        print(f"❌ Error starting server: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
    finally:
        if manager is not None:
            manager.stop_animation()


if __name__ == '__main__':
    main()
