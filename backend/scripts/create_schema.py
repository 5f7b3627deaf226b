#!/usr/bin/env python3
"""
Create the checkout tables (users, catalog_items, orders, order_lines, payments)

Existing tables are left untouched.

Usage:
    export DATABASE_URL="postgresql://..."
    python3 backend/scripts/create_schema.py
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app import models  # noqa: F401  (registers tables on Base.metadata)
from app.core.config import settings
from app.core.database import Base, create_schema_engine


def main():
    engine = create_schema_engine(settings.DATABASE_URL)
    Base.metadata.create_all(engine)
    print(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")
    engine.dispose()


if __name__ == "__main__":
    main()
