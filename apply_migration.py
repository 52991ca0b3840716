#!/usr/bin/env python3
"""Print the folder/file/share schema migrations for the Supabase SQL editor."""
import sys
from pathlib import Path
from typing import List

MIGRATIONS_DIR = Path(__file__).parent / "migrations"


def pending_migrations(only: List[str] | None = None) -> List[Path]:
    """Migration files in apply order, optionally restricted to the given names."""
    files = sorted(MIGRATIONS_DIR.glob("*.sql"))
    if only:
        files = [f for f in files if f.name in only]
    return files


def apply_migration(only: List[str] | None = None) -> bool:
    """Read the migration SQL and print it with instructions."""
    files = pending_migrations(only)
    if not files:
        print(f"[ERROR] No migration files found in {MIGRATIONS_DIR}")
        return False

    # The Supabase Python client cannot run raw SQL, so it goes through the dashboard.
    for migration_file in files:
        sql = migration_file.read_text(encoding="utf-8")
        print(f"[INFO] Migration SQL: {migration_file.name}")
        print(sql)

    print("\n[IMPORTANT] Please execute the above SQL in your Supabase SQL Editor:")
    print("1. Go to https://supabase.com/dashboard")
    print("2. Select your project")
    print("3. Go to SQL Editor")
    print("4. Paste and run the migration SQL above")
    return True

if __name__ == "__main__":
    sys.exit(0 if apply_migration(sys.argv[1:]) else 1)
