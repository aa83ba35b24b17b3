"""
Interceptor Engagement Simulation - CLI

Command-line entry point for running a single engagement or a batch of
dispersed engagements and printing a summary.
"""

import argparse
import logging
import sys
from dataclasses import replace

from .batch import create_dispersed_configs, run_batch
from .config import create_default_config
from .engagement import extract_metrics, run_engagement
from .phase_manager import Strategy
from .validation import ConfigurationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Interceptor engagement simulation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--strategy", "-s",
        choices=[s.name.lower() for s in Strategy],
        default="phase_based",
        help="Guidance strategy"
    )
    parser.add_argument(
        "--interceptors", "-n",
        type=int,
        default=None,
        help="Number of interceptors in the salvo"
    )
    parser.add_argument(
        "--maneuver-aoa",
        type=float,
        default=None,
        help="Target maneuver angle of attack (deg)"
    )
    parser.add_argument(
        "--maneuver-time",
        type=float,
        default=None,
        help="Target maneuver start time (s); disables the altitude trigger"
    )
    parser.add_argument(
        "--launch-delay",
        type=float,
        default=None,
        help="Target launch delay (s)"
    )
    parser.add_argument(
        "--batch",
        type=int,
        default=0,
        help="Run this many dispersed engagements instead of one"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker processes for batch runs (1 forces serial)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for batch dispersions"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress verbose output"
    )
    return parser.parse_args(argv)


def build_config(args):
    """Apply command-line overrides to the default configuration."""
    config = create_default_config()
    overrides = {}
    if args.interceptors is not None:
        overrides['num_interceptors'] = args.interceptors
    if args.maneuver_aoa is not None:
        overrides['target_maneuver_aoa_deg'] = args.maneuver_aoa
    if args.maneuver_time is not None:
        overrides['maneuver_start_time'] = args.maneuver_time
        overrides['maneuver_altitude'] = None
    if args.launch_delay is not None:
        overrides['target_launch_delay'] = args.launch_delay
    overrides['silent'] = args.quiet
    return replace(config, **overrides)


def main(argv=None):
    """Main execution flow."""
    args = parse_args(argv)

    # Configure verbosity
    if args.quiet:
        logging.getLogger('intercept_sim').setLevel(logging.WARNING)

    strategy = Strategy[args.strategy.upper()]
    config = build_config(args)

    print(f"\n{'='*70}\nINTERCEPTOR ENGAGEMENT SIMULATION ({strategy.name})\n{'='*70}\n")

    try:
        if args.batch > 0:
            configs = create_dispersed_configs(config, n_runs=args.batch, seed=args.seed)
            run_batch(configs, strategy, max_workers=args.workers, verbose=True)
            return 0

        result = run_engagement(config, strategy)
        metrics = extract_metrics(result)

        print("\n" + "="*60)
        print("ENGAGEMENT SUMMARY")
        print("="*60)
        for key, value in metrics.items():
            print(f"{key:25s}: {value}")
        for i, (effort, mode) in enumerate(zip(result.effort, result.final_modes)):
            print(f"  interceptor {i}: effort={effort:.1f} ft/s, final mode={mode.name}")
        print("="*60 + "\n")
        return 0

    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"\n[ERROR] Invalid configuration: {e}")
        return 2
    except Exception as e:
        logger.error(f"Simulation failed: {e}", exc_info=True)
        print(f"\n[ERROR] Simulation failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
