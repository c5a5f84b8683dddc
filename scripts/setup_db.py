"""Prepare the MySQL database for the back office.

    python scripts/setup_db.py             # apply database/schema.sql
    python scripts/setup_db.py --seed      # schema, then seed.sql and the demo logins
    python scripts/setup_db.py --seed-only # seed an existing schema

APP_ENV picks the settings module (and so the target database).
"""
from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_admin.school_admin.database.bootstrap import (
    DEMO_ACCOUNTS,
    apply_schema,
    apply_seed_sql,
    ensure_demo_accounts,
    list_tables,
)

DATABASE_DIR = REPO_ROOT / "database"


def _describe(db_config: dict) -> str:
    return (
        f"{db_config.get('user')}@{db_config.get('host')}:"
        f"{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--seed", action="store_true", help="also load seed data and demo logins")
    group.add_argument("--seed-only", action="store_true", help="skip the schema step")
    args = parser.parse_args(argv)

    settings_module = get_settings_module()
    db_config = dict(importlib.import_module(settings_module).DB_CONFIG)
    print(f"Using {settings_module} -> {_describe(db_config)}")

    if not args.seed_only:
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        print(f"Schema applied (tables={len(list_tables(db_config))})")

    if args.seed or args.seed_only:
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        ensure_demo_accounts(db_config)
        print("Seed applied. Demo logins:")
        for _, email, password, role in DEMO_ACCOUNTS:
            print(f"  {role:<8} {email} / {password}")


if __name__ == "__main__":
    main()
