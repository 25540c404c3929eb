#!/usr/bin/env python3
"""Ripples multi-device simulator.

Runs several complete client runtimes side by side, each walking randomly
around a shared center, so the ripple service sees a realistic crowd.

Usage:
    # 5 devices walking around Manhattan for 60 seconds
    python -m tools.simulator.simulate --service http://localhost:8080/location --devices 5

    # Dense crowd, fast fixes, party mode on
    python -m tools.simulator.simulate --service http://localhost:8080/location \
        --devices 40 --interval 0.5 --party-mode
"""

from __future__ import annotations

import argparse
import asyncio
import time
import uuid

from ripples.client import RippleClient
from ripples.config import AppConfig
from ripples.main import setup_logging


def make_config(args: argparse.Namespace) -> AppConfig:
    config = AppConfig()
    config.service.base_url = args.service
    config.reporting.party_mode = args.party_mode
    config.identity.user_id = str(uuid.uuid4())
    config.location.source = "simulated"
    config.location.sim_center = args.center
    config.location.sim_interval_seconds = args.interval
    config.logging.level = args.log_level
    return config


async def run_simulation(args: argparse.Namespace) -> None:
    """Run the full simulation."""
    configs = [make_config(args) for _ in range(args.devices)]
    setup_logging(configs[0])
    clients = [RippleClient(c) for c in configs]

    print(f"Starting simulation: {args.devices} devices, one fix every {args.interval}s")
    print(f"  Center: {args.center}")
    print(f"  Duration: {args.duration}s")
    print(f"  Service: {args.service}")
    print(f"  Party mode: {args.party_mode}")
    print()

    start = time.monotonic()
    for client in clients:
        await client.start()
    try:
        await asyncio.sleep(args.duration)
    finally:
        for client in clients:
            await client.stop()
    elapsed = time.monotonic() - start

    totals = {"reports_sent": 0, "reports_succeeded": 0, "reports_failed": 0,
              "fixes_dropped_busy": 0, "joins": 0}
    for client in clients:
        snap = client.stats.snapshot()
        for key in totals:
            totals[key] += snap[key]

    print(f"\nSimulation complete in {elapsed:.1f}s")
    print(f"  Reports sent: {totals['reports_sent']}")
    print(f"  Succeeded: {totals['reports_succeeded']}")
    print(f"  Failed: {totals['reports_failed']}")
    print(f"  Fixes dropped while busy: {totals['fixes_dropped_busy']}")
    print(f"  Ripple joins: {totals['joins']}")

    print("\nFinal device states:")
    for client in clients:
        state = client.store.snapshot()
        print(f"  {client.user_id[:8]}  ripples={len(state.nearby_ripples)}"
              f"  current={state.current_ripple_id}  error={state.last_error}")


def main():
    parser = argparse.ArgumentParser(description="Ripples multi-device simulator")
    parser.add_argument("--service", default="http://localhost:8080/location",
                        help="Ripple service report URL")
    parser.add_argument("--devices", type=int, default=5, help="Number of simulated devices")
    parser.add_argument("--duration", type=float, default=60, help="Simulation duration in seconds")
    parser.add_argument("--interval", type=float, default=1.0, help="Seconds between fixes per device")
    parser.add_argument("--center", type=str, default="40.730610,-73.935242",
                        help="Center lat,lon (default: New York)")
    parser.add_argument("--party-mode", action="store_true", help="Report with party mode enabled")
    parser.add_argument("--log-level", default="warning", help="Client log level")

    args = parser.parse_args()
    asyncio.run(run_simulation(args))


if __name__ == "__main__":
    main()
