#!/usr/bin/env python3
"""
Grant (or revoke) the admin role for a user.

Usage:
    python -m scripts.promote_admin <email>
    python -m scripts.promote_admin <email> --demote
"""
import asyncio
import sys
from argparse import ArgumentParser

from dotenv import load_dotenv
load_dotenv()

from services.db import get_user_by_email, session_scope


async def set_role(email: str, role: str) -> int:
    async with session_scope() as db:
        user = await get_user_by_email(db, email)
        if user is None:
            print(f"No user found with email {email}")
            return 1
        if user.role == role:
            print(f"{email} already has role '{role}'")
            return 0
        user.role = role
        await db.commit()
    print(f"✓ {email} is now '{role}'")
    return 0


def main() -> None:
    ap = ArgumentParser()
    ap.add_argument("email")
    ap.add_argument("--demote", action="store_true", help="set the role back to 'user'")
    args = ap.parse_args()
    sys.exit(asyncio.run(set_role(args.email, "user" if args.demote else "admin")))


if __name__ == "__main__":  # pragma: no cover
    main()
