"""
Create a user (e.g. a real admin). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user ops ops@example.com your-secure-password dispatcher
"""
import argparse
import sys

from sqlalchemy.exc import IntegrityError

from app.core.config import get_settings
from app.core.database import create_store
from app.core.security import hash_password
from app.models.user import Role
from app.services.seed import ensure_users_table
from app.services.users import create_user, get_user_by_username


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a user (no registration UI).")
    parser.add_argument("username", help="Username (1-50 chars)")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("role", nargs="?", default=Role.CUSTOMER.value, choices=[r.value for r in Role])
    parser.add_argument("--first-name", default=None)
    parser.add_argument("--last-name", default=None)
    parser.add_argument("--inactive", action="store_true", help="Create the account deactivated")
    args = parser.parse_args()

    username = args.username.strip()
    email = args.email.strip()
    if not username or len(username) > 50:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not email or "@" not in email or len(email) > 100:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if len(args.password) < 8 or len(args.password) > 128:
        print("Password must be 8-128 characters.", file=sys.stderr)
        return 1

    store = create_store(get_settings())
    try:
        store.connect()
        ensure_users_table(store)
        if get_user_by_username(store, username) is not None:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        try:
            create_user(
                store,
                username=username,
                email=email,
                password_hash=hash_password(args.password),
                role=args.role,
                first_name=args.first_name,
                last_name=args.last_name,
                is_active=not args.inactive,
            )
        except IntegrityError:
            print(f"Email '{email}' is already in use.", file=sys.stderr)
            return 1
        print(f"Created user '{username}' with role '{args.role}'.")
        return 0
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
