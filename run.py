#!/usr/bin/env python3
"""
Multiple Shipping Addresses Scenario — Entry Point.

Runs the commercetools "multiple shipping addresses" tutorial scenarios and
saves every request body and cart snapshot as JSON. Configuration comes from
a .env file or the environment:

    CTP_AUTH_URL="https://auth.europe-west1.gcp.commercetools.com"
    CTP_API_URL="https://api.europe-west1.gcp.commercetools.com"
    CTP_PROJECT_KEY="your-project-key"
    CTP_CLIENT_ID="your-client-id"
    CTP_CLIENT_SECRET="your-client-secret"

Usage:
    python run.py                  # Run both scenarios, save snapshots to ./dynamic
    python run.py --debug          # Verbose output (incl. HTTP connection logging)
    python run.py --output ./docs  # Override snapshot directory
    python run.py --no-save        # Don't write snapshots
    python run.py --quantity 50    # Line item quantity
    python run.py --version        # Show version
"""

import sys
import logging
import argparse
from pathlib import Path

from core import ShippingScenarioOrchestrator

# Read version from the repo-root VERSION file (e.g., "0.1.0").
VERSION_FILE = Path(__file__).resolve().parent / "VERSION"
VERSION = VERSION_FILE.read_text().strip() if VERSION_FILE.exists() else "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the commercetools multiple shipping addresses scenarios"
    )
    parser.add_argument("--env", "-e", default="./.env", help="Path to .env file")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--output", "-o", help="Directory for request/response snapshots")
    parser.add_argument("--no-save", action="store_true", help="Don't write snapshots")
    parser.add_argument("--quantity", type=int, help="Line item quantity for both scenarios")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")
    return parser


def main(argv=None):
    """Parse CLI arguments and run the scenarios."""
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"multiple-shipping-addresses {VERSION}")
        sys.exit(0)

    # Show urllib3 connection logging alongside the step output
    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(name)s - %(levelname)s - %(message)s'
        )
        logging.getLogger('urllib3').setLevel(logging.DEBUG)

    orchestrator = ShippingScenarioOrchestrator(env_file=args.env)

    # Apply CLI overrides on top of .env values
    if args.debug:
        orchestrator.debug = True
    if args.output:
        orchestrator.output_manager.base_dir = args.output
    if args.no_save:
        orchestrator.save_json = False
    if args.quantity is not None:
        orchestrator.cart_quantity = args.quantity

    print(f"\n{'='*60}")
    print(f"MULTIPLE SHIPPING ADDRESSES SCENARIO v{VERSION}")
    print("="*60)
    print(f"API: {orchestrator.api_url}")
    print(f"Project: {orchestrator.project_key}")
    print(f"Snapshots: {orchestrator.output_manager.base_dir if orchestrator.save_json else 'disabled'}")

    if not orchestrator.validate_config():
        sys.exit(1)

    if orchestrator.save_json and orchestrator.output_manager.retention_days > 0:
        try:
            deleted = orchestrator.output_manager.cleanup_old_folders(orchestrator.debug)
        except OSError as e:
            print(f"Warning: Could not clean up old output folders: {e}")
            deleted = 0
        if deleted > 0:
            print(f"Cleaned up {deleted} old output folder(s)")

    results = orchestrator.run()
    orchestrator.print_summary(results)

    if not results.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
