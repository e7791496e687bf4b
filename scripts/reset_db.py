#!/usr/bin/env python3
"""Database reset script for CSR Project Tracker.

Clears every tracker table and re-seeds with fake data.
Useful for resetting to a known state during development and testing.

Usage:
    python scripts/reset_db.py

WARNING: This will delete ALL existing tracker data!
"""
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app import create_app, db, get_store
from app.models import MODELS_BY_TABLE
from scripts.seed_data import seed_database

# Child tables first so foreign keys never dangle
DELETE_ORDER = [
    'utilization_certificates',
    'media_articles',
    'calendar_events',
    'daily_reports',
    'bills',
    'budget_categories',
    'budget_utilization',
    'budget_allocation',
    'tasks',
    'projects',
    'csr_partners',
]


def clear_tables(store) -> int:
    """Delete every row from every tracker table.

    Returns:
        Number of rows deleted.
    """
    return sum(store.delete(table, []) for table in DELETE_ORDER)


def main():
    """Main entry point for reset script."""
    app = create_app()

    with app.app_context():
        db.create_all()
        store = get_store()

        existing_count = sum(store.count(table) for table in MODELS_BY_TABLE)
        print(f"Current database has {existing_count} rows.")

        # Confirm reset
        if existing_count > 0:
            response = input("This will delete all tracker data. Continue? [y/N]: ")
            if response.lower() != 'y':
                print("Aborted.")
                return

        print("Deleting all rows...")
        deleted = clear_tables(store)
        print(f"Deleted {deleted} rows.")

        # Re-seed
        print("\nSeeding database with fake CSR data...")
        count = seed_database(store)
        print(f"Created {count} projects.")

        print("\nReset complete!")


if __name__ == "__main__":
    main()
