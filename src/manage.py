"""Storefront database management CLI.

Provides commands to create and drop database schemas for both domains,
seed the merchant catalogue and inspect the storefront's local order backups.

Usage:
    python src/manage.py setup-db                     # Create all tables
    python src/manage.py drop-db                      # Drop all tables
    python src/manage.py seed-catalogue catalogue.json
    python src/manage.py list-backups
"""

import argparse
import json
import sys

from shared.logging import configure_logging

DOMAIN_NAMES = ["storefront", "merchant"]


def _domains():
    from merchant.domain import merchant
    from storefront.domain import storefront

    return {"storefront": storefront, "merchant": merchant}


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    all_domains = _domains()
    targets = {d: all_domains[d] for d in domains} if domains else all_domains

    for name, domain in targets.items():
        print(f"Initializing {name} domain...")
        domain.init()
        print(f"Creating {name} database schema...")
        prepared = setup_db(domain)
        print(f"  {name} schema ready ({', '.join(prepared) or 'in-memory, nothing to create'}).")

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


def load_catalogue(data):
    """Process categories and products through the merchant commands.

    ``data`` holds ``{"categories": ["Hoodies", ...], "products": [{...}, ...]}``
    with products in the ``GET /products`` shape (without ids). Must run inside
    the merchant domain context. Returns ``(added, skipped)``.
    """
    from protean.exceptions import ValidationError
    from protean.utils.globals import current_domain

    from merchant.catalogue.management import AddCategory, AddProduct

    added = skipped = 0
    for name in data.get("categories", []):
        try:
            current_domain.process(AddCategory(name=name), asynchronous=False)
        except ValidationError as exc:
            print(f"  Skipping category {name!r}: {exc.messages}")
            skipped += 1

    for record in data.get("products", []):
        try:
            current_domain.process(
                AddProduct(
                    name=record["name"],
                    price=record["price"],
                    description=record.get("description"),
                    category=record.get("category"),
                    sizes=json.dumps(record.get("sizes") or []),
                    colors=json.dumps(record.get("colors") or []),
                    main_image=record.get("main_image"),
                    images=json.dumps(record.get("images") or []),
                    color_images=json.dumps(record.get("color_images") or {}),
                    quantity=record.get("quantity", 0),
                    available=record.get("available", True),
                ),
                asynchronous=False,
            )
            added += 1
        except ValidationError as exc:
            print(f"  Skipping product {record.get('name')!r}: {exc.messages}")
            skipped += 1

    return added, skipped


def seed_catalogue(path):
    """Load categories and products from a JSON file into the merchant domain."""
    from merchant.domain import merchant

    with open(path, encoding="utf-8") as fp:
        data = json.load(fp)

    merchant.init()
    with merchant.domain_context():
        added, skipped = load_catalogue(data)

    print(f"Seeded {added} products ({skipped} records skipped).")
    return added


def read_backups():
    """Orders kept in the storefront's local backup log. Needs the storefront context."""
    from storefront.persistence.state import LocalStore, StateKey

    return LocalStore().read(StateKey.ORDERS, default=[])


def list_backups():
    """Print the orders kept in the storefront's local backup log."""
    from storefront.domain import storefront

    storefront.init()
    with storefront.domain_context():
        backups = read_backups()

    if not backups:
        print("No orders backed up.")
        return backups

    for entry in backups:
        print(
            f"{entry.get('date', '?')}  {entry.get('customerName', '?'):<25} "
            f"{len(entry.get('items', []))} item(s)  total {entry.get('total')}"
        )
    return backups


def main():
    configure_logging()

    parser = argparse.ArgumentParser(description="Storefront database management")
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

    seed_parser = subparsers.add_parser("seed-catalogue", help="Load products and categories from JSON")
    seed_parser.add_argument("path", help="Path to the catalogue JSON file")

    subparsers.add_parser("list-backups", help="Show locally backed-up orders")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "seed-catalogue":
        seed_catalogue(args.path)
    elif args.command == "list-backups":
        list_backups()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
