#!/usr/bin/env python3
"""
EventLens Synthetic Data Generator

Generates a deterministic event collection and prints its KPI summary.
Optionally:
1. Writes the events as CSV
2. Pipes the batch through a running EventLens API (/api/events/import)
   so the server-side import path sees production-like data
"""

import logging
import sys
import time

import requests

from eventlens.core.config import Settings, configure_logging
from eventlens.core.errors import GenerationCancelled
from eventlens.core.reference_data import DEFAULT_DAYS, DEFAULT_EVENT_COUNT, DEFAULT_SEED
from eventlens.services.breakdown import breakdown_by
from eventlens.services.csv_io import export_events_csv
from eventlens.services.kpis import compute_kpis
from eventlens.services.synthesizer import generate_events

logger = logging.getLogger("generate-synthetic-data")

# Configuration
EVENTLENS_API_URL = 'http://localhost:8000'


def check_api(base_url: str, max_retries: int = 5) -> bool:
    """Wait for the API health endpoint"""
    for attempt in range(max_retries):
        try:
            response = requests.get(f"{base_url}/health", timeout=3)
            if response.status_code == 200:
                return True
        except requests.RequestException as e:
            logger.debug("Health check failed: %s", e)
        if attempt < max_retries - 1:
            logger.info("Waiting for EventLens API (attempt %d/%d)...", attempt + 1, max_retries)
            time.sleep(2)
    return False


def publish_via_api(base_url: str, csv_text: str) -> int:
    """POST the CSV batch to the import endpoint; returns the accepted count"""
    response = requests.post(
        f"{base_url}/api/events/import",
        data=csv_text.encode("utf-8"),
        headers={"Content-Type": "text/csv"},
        timeout=60
    )
    response.raise_for_status()
    return len(response.json()["data"])


def print_summary(events, days: int):
    kpis = compute_kpis(events)

    print(f"\n📊 Data Summary ({len(events):,} events over {days} days)")
    print(f"Unique users:    {kpis.unique_users:,}")
    print(f"Unique sessions: {kpis.unique_sessions:,}")
    print(f"Conversion rate: {kpis.conversion_rate:.2%}")
    print(f"Total revenue:   {kpis.total_revenue:,.2f}")

    for field in ('event_type', 'device'):
        print(f"\nBy {field}:")
        for entry in breakdown_by(events, field):
            print(f"  {entry.value:<12} {entry.count:>8,}  {entry.percentage:5.1f}%")


def main(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description='Generate deterministic EventLens synthetic data')
    parser.add_argument('--seed', type=int, default=DEFAULT_SEED, help=f'Random seed (default: {DEFAULT_SEED})')
    parser.add_argument('--days', type=int, default=DEFAULT_DAYS, help=f'Trailing window in days (default: {DEFAULT_DAYS})')
    parser.add_argument('--count', type=int, default=DEFAULT_EVENT_COUNT,
                        help=f'Number of events to generate (default: {DEFAULT_EVENT_COUNT})')
    parser.add_argument('--reference-time', type=int, help='"Now" in epoch ms, for reproducible runs')
    parser.add_argument('--csv', metavar='PATH', help='Write the events to a CSV file')
    parser.add_argument('--publish', action='store_true', help='Send the batch to a running EventLens API')
    parser.add_argument('--api-url', default=EVENTLENS_API_URL, help=f'API base URL (default: {EVENTLENS_API_URL})')
    parser.add_argument('--dry-run', action='store_true', help='Generate and summarize without publishing')
    args = parser.parse_args(argv)

    configure_logging(Settings().log_level)

    started = time.monotonic()
    try:
        events = generate_events(args.seed, args.days, args.count, reference_time=args.reference_time)
    except (ValueError, GenerationCancelled) as e:
        logger.error("Generation failed: %s", e)
        return 1
    logger.info("Generated %d events in %.2fs", len(events), time.monotonic() - started)

    print_summary(events, args.days)

    csv_text = None
    if args.csv:
        csv_text = export_events_csv(events)
        with open(args.csv, 'w', encoding='utf-8', newline='') as f:
            f.write(csv_text)
        print(f"\n✅ Wrote {len(events):,} events to {args.csv}")

    if args.publish:
        if args.dry_run:
            print(f"\n✅ Would publish {len(events):,} events to {args.api_url} (dry run)")
            return 0
        if not check_api(args.api_url):
            logger.error("EventLens API not reachable at %s", args.api_url)
            return 1
        try:
            accepted = publish_via_api(args.api_url, csv_text or export_events_csv(events))
        except requests.RequestException as e:
            logger.error("Failed to publish via API: %s", e)
            return 1
        print(f"\n✅ API accepted {accepted:,}/{len(events):,} events")

    return 0


if __name__ == "__main__":
    sys.exit(main())
