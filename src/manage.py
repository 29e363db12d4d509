"""ChronoShop management CLI.

Provides commands to create and drop database schemas for both domains,
create back-office admins and run the stale-application cleanup.

Usage:
    python src/manage.py setup-db              # Create all tables
    python src/manage.py drop-db               # Drop all tables
    python src/manage.py create-admin --username admin --email admin@example.com --password s3cretpass
    python src/manage.py cleanup-applications  # Delete rejected applications older than 30 days
"""

import argparse
import sys


def _domains():
    from careers.domain import careers
    from storefront.domain import storefront

    return {"storefront": storefront, "careers": careers}


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


def create_admin(username, email, password):
    """Create a back-office admin account and return its id."""
    from storefront.customer.admin_user import CreateAdminUser

    storefront = _domains()["storefront"]
    storefront.init()
    with storefront.domain_context():
        admin_id = storefront.process(
            CreateAdminUser(username=username, email=email, password=password),
            asynchronous=False,
        )
    print(f"Admin '{username}' created ({admin_id}).")
    return admin_id


def cleanup_applications(status="rejected", age_days=30):
    """Delete applications left in ``status`` for more than ``age_days`` days."""
    from careers.application.cleanup import DeleteApplicationsOlderThan

    careers = _domains()["careers"]
    careers.init()
    with careers.domain_context():
        deleted = careers.process(
            DeleteApplicationsOlderThan(status=status, age_days=age_days),
            asynchronous=False,
        )
    print(f"Deleted {deleted} {status} application(s) older than {age_days} days.")
    return deleted


def main(argv=None):
    parser = argparse.ArgumentParser(description="ChronoShop management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup_parser = subparsers.add_parser("setup-db", help="Create all database tables")
    setup_parser.add_argument(
        "--domain",
        choices=["storefront", "careers"],
        nargs="*",
        help="Specific domain(s) to set up (default: all)",
    )

    drop_parser = subparsers.add_parser("drop-db", help="Drop all database tables")
    drop_parser.add_argument(
        "--domain",
        choices=["storefront", "careers"],
        nargs="*",
        help="Specific domain(s) to drop (default: all)",
    )

    admin_parser = subparsers.add_parser("create-admin", help="Create a back-office admin account")
    admin_parser.add_argument("--username", required=True)
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)

    cleanup_parser = subparsers.add_parser("cleanup-applications", help="Delete stale job applications")
    cleanup_parser.add_argument("--status", default="rejected")
    cleanup_parser.add_argument("--age-days", type=int, default=30)

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "create-admin":
        create_admin(args.username, args.email, args.password)
    elif args.command == "cleanup-applications":
        cleanup_applications(args.status, args.age_days)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
