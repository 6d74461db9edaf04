"""
Create an account from the command line. Run from project root:
  python -m coopqueue.scripts.create_user USERNAME PASSWORD
The first account ever created becomes the administrator (owner).
"""
import argparse
import sys

from coopqueue.core.database import SessionLocal
from coopqueue.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from coopqueue.models import Account
from coopqueue.services.credentials import register


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a CoopQueue account.")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        result = register(db, username, args.password)
        if not result.success:
            print(result.message, file=sys.stderr)
            return 1
        account = db.get(Account, result.data)
        print(f"Created user '{username}' (id={result.data}) with role '{account.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
