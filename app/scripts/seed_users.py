"""
Seed the roster of test users. Run from project root:
  python -m app.scripts.seed_users [--force]

Without --force, an already populated USERS table is left untouched.
With --force, every roster account is overwritten with a freshly hashed password.
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import CredentialStore, StoreConnectionError, create_store
from app.core.logging import configure_logging
from app.models.user import LIST_USERS_BY_ROLE_SQL
from app.services.seed import ROSTER, count_users, ensure_users_table, seed_users

logger = logging.getLogger(__name__)

_COLUMNS = (
    ("username", "Username", 11),
    ("role", "Role", 10),
    ("email", "Email", 24),
    ("firstName", "First Name", 12),
    ("lastName", "Last Name", 11),
    ("createdAt", "Created At", 21),
)


def display_users(store: CredentialStore) -> None:
    """Print stored users and the local-development test credentials."""
    users = store.execute(LIST_USERS_BY_ROLE_SQL)
    if not users:
        print("No users found in database")
        return
    print("\nUsers:")
    print(" | ".join(title.ljust(width) for _, title, width in _COLUMNS))
    print("-+-".join("-" * width for _, _, width in _COLUMNS))
    for user in users:
        print(" | ".join(str(user.get(key) or "").ljust(width) for key, _, width in _COLUMNS))

    print("\nTEST CREDENTIALS (local development only):")
    for account in ROSTER:
        print(f"   {account.username}:{account.password} ({account.role.value})")


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the roster of test users.")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing roster accounts with fresh password hashes",
    )
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting user seeding (database=%s)", settings.DB_TYPE)

    store = create_store(settings)
    try:
        store.connect()
        ensure_users_table(store)
        existing = count_users(store)
        if existing and not args.force:
            logger.warning(
                "USERS table already contains %d users. Use --force to overwrite roster accounts.",
                existing,
            )
            return 0

        report = seed_users(store, force=args.force)
        if not report.ok:
            logger.error("User seeding completed with errors for: %s", ", ".join(report.failed))
            return 1
        logger.info("User seeding completed successfully")
        display_users(store)
        return 0
    except StoreConnectionError as e:
        logger.error("Seeding aborted: %s", e)
        return 1
    except Exception as e:
        logger.exception("Fatal error during seeding: %s", e)
        return 1
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
