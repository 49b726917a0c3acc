"""PurePlatter management CLI.

Creates and drops database schemas for all domains, and runs the
notification outbox worker.

Usage:
    python src/manage.py setup-db                # Create all tables
    python src/manage.py drop-db                 # Drop all tables
    python src/manage.py dispatch-notifications  # Send pending notifications once
"""

import argparse
import sys

DOMAIN_NAMES = ["ordering", "notifications", "reviews"]


def _domains():
    from notifications.domain import notifications
    from ordering.domain import ordering
    from reviews.domain import reviews

    return {"ordering": ordering, "notifications": notifications, "reviews": reviews}


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    all_domains = _domains()
    targets = {d: all_domains[d] for d in domains} if domains else all_domains

    for name, domain in targets.items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    all_domains = _domains()
    targets = {d: all_domains[d] for d in domains} if domains else all_domains

    for name, domain in targets.items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def dispatch_notifications(limit=None):
    """Run the notification outbox worker once and print a summary."""
    from notifications.domain import notifications
    from notifications.notification.outbox import DispatchPendingNotifications
    from ordering.utils.logging import configure_logging

    configure_logging()
    notifications.init()
    with notifications.domain_context():
        summary = notifications.process(DispatchPendingNotifications(limit=limit), asynchronous=False)

    print(f"Sent: {summary['sent']}  Failed: {summary['failed']}  Exhausted: {summary['exhausted']}")
    return summary


def main():
    parser = argparse.ArgumentParser(description="PurePlatter management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        nargs="*",
        help="Specific domain(s) to drop (default: all)",
    )

    dispatch_parser = subparsers.add_parser("dispatch-notifications", help="Send pending notifications")
    dispatch_parser.add_argument("--limit", type=int, help="Maximum notifications to handle")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "dispatch-notifications":
        dispatch_notifications(args.limit)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
