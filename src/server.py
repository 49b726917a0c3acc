"""Protean Engine runner for PurePlatter domains.

Used with the production configuration, where events are processed
asynchronously:
- OutboxProcessor: polls outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams, invokes projectors and event handlers

This is how Notifications receives OrderPlaced/OrderStatusChanged and
Reviews receives OrderDelivered from the Ordering domain.

Usage:
    python src/server.py                         # Run all domain engines
    python src/server.py --domain notifications  # Run a single engine
"""

import argparse
import asyncio

from protean.server.engine import Engine

DOMAIN_NAMES = ["ordering", "notifications", "reviews"]


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name == "ordering":
        from ordering.domain import ordering as domain
    elif name == "notifications":
        from notifications.domain import notifications as domain
    elif name == "reviews":
        from reviews.domain import reviews as domain
    else:
        raise ValueError(f"Unknown domain: {name}")

    domain.init()
    return domain


async def run(domain_names):
    engines = [Engine(_get_domain(name)) for name in domain_names]
    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    from ordering.utils.logging import configure_logging

    parser = argparse.ArgumentParser(description="PurePlatter Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        help="Run a single domain engine (default: run all)",
    )
    args = parser.parse_args()

    configure_logging()
    domain_names = [args.domain] if args.domain else DOMAIN_NAMES

    asyncio.run(run(domain_names))


if __name__ == "__main__":
    main()
