#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from popup_pos.core.database import SessionLocal  # noqa: E402
from popup_pos.core.errors import ConflictError, ValidationError  # noqa: E402
from popup_pos.services.registration import register_organization  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create an organization with its owner account.",
        epilog='Example: scripts/create_admin.py joes-coffee "Joe\'s Coffee" admin password123',
    )
    parser.add_argument("org_slug", help="URL slug, e.g. joes-coffee")
    parser.add_argument("org_name", help="Display name of the organization")
    parser.add_argument("username", help="Owner username")
    parser.add_argument("password", help="Owner password")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    db = SessionLocal()
    try:
        organization = register_organization(
            db,
            org_name=args.org_name,
            org_slug=args.org_slug,
            username=args.username,
            password=args.password,
        )
    except (ConflictError, ValidationError) as exc:
        print(exc.message, file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f'Organization "{organization.name}" created successfully!')
    print(f"  Slug: {organization.slug}")
    print(f"  Admin: {args.username}")
    print(f"\nCustomers can order at: /{organization.slug}/menu")
    print("Admin login at: /login")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
