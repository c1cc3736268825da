#!/usr/bin/env python3
"""
Ecosystem Field Simulation

Grass and trees spread across a rectangular field while deer graze and
fire burns through both.

Usage:
    python -m ecosystem_ca.main [--config configs/default.yaml] [options]

Examples:
    python -m ecosystem_ca.main
    python -m ecosystem_ca.main --config configs/default.yaml --gif --out-dir results/
    python -m ecosystem_ca.main --depth 40 --width 60 --steps 500 --seed 42
    python -m ecosystem_ca.main --no-csv --no-snapshot --quiet
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from .config import default_config, load_config
from .model.engine import SimulationEngine
from .export.csv_writer import CSVWriter
from .export.visualizer import Visualizer
from .export.reporter import Reporter


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Grid-based ecosystem simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m ecosystem_ca.main
    python -m ecosystem_ca.main --config configs/default.yaml --gif --out-dir results/
    python -m ecosystem_ca.main --depth 40 --width 60 --steps 500 --seed 42
    python -m ecosystem_ca.main --no-csv --no-snapshot --quiet
        """
    )

    parser.add_argument('--config', type=Path, default=None,
                        help='Path to YAML configuration file (default: built-in)')

    # Optional overrides
    parser.add_argument('--steps', type=int, default=None,
                        help='Override max simulation steps')
    parser.add_argument('--depth', type=int, default=None,
                        help='Override field depth (rows)')
    parser.add_argument('--width', type=int, default=None,
                        help='Override field width (columns)')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV export (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV export')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Enable final snapshot (default)')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable final snapshot')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')

    parser.add_argument('--delay', type=int, default=None,
                        help='Pause between ticks in milliseconds')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')

    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s'
    )

    # Load configuration
    try:
        config = load_config(args.config) if args.config else default_config()
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except (ValueError, TypeError, KeyError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.steps is not None:
        config.max_steps = args.steps
    if args.depth is not None:
        config.grid.depth = args.depth
    if args.width is not None:
        config.grid.width = args.width
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    if args.delay is not None:
        config.delay_ms = args.delay
    config.quiet = args.quiet
    if args.seed is not None:
        config.seed = args.seed
    config.out_dir = args.out_dir

    if not config.quiet:
        print("Initializing simulation...")
        print(f"  Species: {', '.join(config.act_order)}")
        print(f"  Max steps: {config.max_steps}")

    engine = SimulationEngine(config)

    if not config.quiet:
        print(f"  Field: {engine.field.depth}x{engine.field.width}")
        counts = engine.population_counts()
        print("  Founders: " + ', '.join(f"{k}={v}" for k, v in counts.items()))

    # Initialize exporters
    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'population_log.csv')
        csv_writer.open()

    visualizer = Visualizer(
        engine.field.depth, engine.field.width,
        [config.species[name] for name in engine.species_names]
    )

    reporter = Reporter(str(args.config) if args.config else None, config.seed)

    if not config.quiet:
        print("\nRunning simulation...")

    final_state = engine.snapshot()
    reporter.update(final_state)
    if csv_writer:
        csv_writer.append(final_state)

    try:
        while not engine.is_finished():
            state = engine.step()
            final_state = state

            if csv_writer:
                csv_writer.append(state)

            # Buffer GIF frame (every N steps to reduce memory)
            if config.gif_enabled:
                if state.step % config.gif_every == 0 or engine.is_finished():
                    visualizer.buffer_frame(state)

            reporter.update(state)

            if not config.quiet and state.step % 100 == 0:
                counts = ', '.join(f"{k}={v}" for k, v in state.populations.items())
                print(f"  Step {state.step}: {counts}")

            if config.delay_ms > 0:
                time.sleep(config.delay_ms / 1000)

    except KeyboardInterrupt:
        if not config.quiet:
            print("\nSimulation interrupted by user.")
    finally:
        if csv_writer:
            csv_writer.close()

    if csv_writer and not config.quiet:
        print(f"\nCSV saved: {config.out_dir / 'population_log.csv'}")

    if config.snapshot_enabled:
        snapshot_path = config.out_dir / 'final_state.png'
        visualizer.save_snapshot(final_state, snapshot_path)
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'simulation.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(visualizer.frames)} frames)...")
        visualizer.generate_gif(gif_path, fps=10)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    if not config.quiet:
        report = reporter.generate_summary(
            final_state,
            engine.get_summary(),
            config.out_dir,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled
        )
        print(report)

    return 0


if __name__ == '__main__':
    sys.exit(main())
