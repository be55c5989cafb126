"""Seed demo field mappings for one user and print a bearer token for them.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make `app` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app.auth import Authenticator
from app.config import get_settings
from app.db.session import build_engine, build_session_factory
from app.models.base import Base
from app.services.mapping_store import MappingStore


DEFAULT_USER_ID = "demo-user"
DEFAULT_DOMAIN = "apply.example.edu"


def build_demo_mappings() -> list[tuple[str, str, str | None, str | None]]:
    """Return (selector, profile field, dom id, dom name) rows for a typical form."""

    return [
        ("#given-name", "given_name", "given-name", "givenName"),
        ("#family-name", "family_name", "family-name", "familyName"),
        ('input[name="email"]', "email", None, "email"),
        ("#dob", "dob", "dob", None),
        ("#ssn", "socialSecurityNumber", "ssn", None),
        ("textarea:nth-of-type(1)", "personal_statement", None, None),
    ]


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed demo field mappings for one user and site.")
    parser.add_argument("--user-id", default=DEFAULT_USER_ID, help=f"Owning user (default: {DEFAULT_USER_ID})")
    parser.add_argument("--domain", default=DEFAULT_DOMAIN, help=f"Site host (default: {DEFAULT_DOMAIN})")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables first (for SQLite; use Alembic for PostgreSQL).",
    )
    return parser.parse_args()


def main() -> None:
    """Seed demo data and print a short summary."""

    args = parse_args()
    settings = get_settings()
    engine = build_engine(settings.database_url)
    session_factory = build_session_factory(engine)
    if args.create_tables:
        Base.metadata.create_all(engine)

    store = MappingStore(session_factory, native_upsert=settings.native_upsert)
    for selector, profile_field, dom_id, dom_name in build_demo_mappings():
        store.upsert(args.user_id, args.domain, selector, profile_field, dom_id=dom_id, dom_name=dom_name)
    saved = store.find_by_user_and_domain(args.user_id, args.domain)
    token = Authenticator(settings.jwt_secret, settings.jwt_algorithm).issue_token(args.user_id)
    engine.dispose()

    print("Seed complete")
    print(f"user_id={args.user_id}")
    print(f"domain={args.domain}")
    print(f"mappings={len(saved)}")
    print()
    print("Bearer token:")
    print(f"  {token}")
    print()
    print("Inspect:")
    print(f"  GET /autofill/mappings?domain={args.domain}")
    print("  GET /autofill/mapping-ui")


if __name__ == "__main__":
    main()
