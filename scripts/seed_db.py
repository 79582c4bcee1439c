#!/usr/bin/env python3
"""
Seed the product database from the deterministic generator, or report what
is already in it.
"""

import argparse
import os
import sys

# Add the parent directory to sys.path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from product_browser.config import load_config
from product_browser.di import build_container


def main():
    parser = argparse.ArgumentParser(description="Seed or inspect the product database")
    parser.add_argument("--db", help="SQLite database path (defaults to the configured one)")
    parser.add_argument("--rows", type=int, help="Rows to generate")
    parser.add_argument("--seed", type=int, help="Generator seed")
    parser.add_argument("--reset", action="store_true", help="Delete every product before seeding")
    parser.add_argument("--check", action="store_true", help="Only print the row count")
    args = parser.parse_args()

    config = load_config()
    if args.db:
        config["sqlite"]["db_path"] = args.db
    rows = args.rows if args.rows is not None else config["dataset"]["rows"]
    seed = args.seed if args.seed is not None else config["dataset"]["seed"]

    container = build_container(config)
    try:
        service = container.product_service
        if args.check:
            total = service.page(page=1, per_page=1).total
            print(f"{config['sqlite']['db_path']}: {total} products")
            return 0

        if args.reset:
            inserted = service.reseed(rows=rows, seed=seed)
        else:
            inserted = service.ensure_seeded(rows=rows, seed=seed)

        if inserted:
            print(f"Inserted {inserted} products into {config['sqlite']['db_path']}")
        else:
            print("Database already populated; use --reset to regenerate")
        return 0
    finally:
        container.close()


if __name__ == "__main__":
    sys.exit(main())
