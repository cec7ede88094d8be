"""
Bootstrap the USERS table and the fixed roster of test accounts.

The whole seeding pass runs in one transaction. Each account is written inside
its own savepoint: a storage error for one account is logged and recorded, that
account's savepoint is rolled back, and the remaining accounts still commit. Any
other exception rolls back the whole batch.

The table/row-count check followed by seeding is not atomic across processes;
two processes starting against an empty database can both try to seed.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError

from app.core.database import CredentialStore
from app.core.security import hash_password
from app.models.user import (
    COUNT_USERS_SQL,
    CREATE_USERS_TABLE_SQL,
    FIND_EXISTING_SQL,
    INSERT_USER_SQL,
    UPDATE_USER_SQL,
    USERS_TABLE,
    Role,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterAccount:
    username: str
    password: str
    role: Role
    email: str
    first_name: str
    last_name: str


# Local-development accounts; the plaintext passwords are intentionally public.
ROSTER: tuple[RosterAccount, ...] = (
    RosterAccount("admin", "admin123", Role.ADMIN, "admin@example.com", "Admin", "User"),
    RosterAccount("driver1", "driver123", Role.DRIVER, "driver1@example.com", "John", "Driver"),
    RosterAccount("customer1", "customer123", Role.CUSTOMER, "customer1@example.com", "Jane", "Customer"),
    RosterAccount("dispatcher1", "dispatch123", Role.DISPATCHER, "dispatcher1@example.com", "Mike", "Dispatcher"),
    RosterAccount("support1", "support123", Role.SUPPORT, "support1@example.com", "Sarah", "Support"),
)


@dataclass
class SeedReport:
    """Usernames per outcome of one seeding pass."""

    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.created) + len(self.updated)

    @property
    def ok(self) -> bool:
        return not self.failed


def ensure_users_table(store: CredentialStore) -> bool:
    """Create USERS if missing. Returns True when the table was created."""
    if store.table_exists(USERS_TABLE):
        return False
    logger.info("%s table does not exist; creating it", USERS_TABLE)
    store.create_table(CREATE_USERS_TABLE_SQL)
    logger.info("%s table created", USERS_TABLE)
    return True


def count_users(store: CredentialStore) -> int:
    rows = store.execute(COUNT_USERS_SQL)
    return int(rows[0]["count"]) if rows else 0


def _params(account: RosterAccount) -> dict[str, object]:
    return {
        "username": account.username,
        "password_hash": hash_password(account.password),
        "role": account.role.value,
        "email": account.email,
        "first_name": account.first_name,
        "last_name": account.last_name,
        "is_active": True,
    }


def _seed_account(store: CredentialStore, account: RosterAccount, force: bool, report: SeedReport) -> None:
    existing = store.execute(FIND_EXISTING_SQL, {"username": account.username, "email": account.email})
    if existing and not force:
        logger.info("Skipping existing user: %s", account.username)
        report.skipped.append(account.username)
        return
    if any(row["username"] != account.username for row in existing):
        logger.error("Cannot seed user %s: email %s belongs to another account", account.username, account.email)
        report.failed.append(account.username)
        return
    if existing:
        store.execute(UPDATE_USER_SQL, _params(account))
        logger.info("Updated user: %s (%s)", account.username, account.role.value)
        report.updated.append(account.username)
    else:
        store.execute(INSERT_USER_SQL, _params(account))
        logger.info("Created user: %s (%s)", account.username, account.role.value)
        report.created.append(account.username)


def seed_users(
    store: CredentialStore,
    force: bool = False,
    roster: tuple[RosterAccount, ...] = ROSTER,
) -> SeedReport:
    """
    Write the roster accounts in one transaction.

    Without force, accounts whose username or email already exists are skipped.
    With force, every account is overwritten in place with a freshly hashed password;
    usernames, emails and ids are preserved. An account whose email is held by a
    different username is left untouched and recorded as failed.
    """
    report = SeedReport()
    logger.info("Seeding %d roster users (force=%s)", len(roster), force)
    with store.transaction():
        for account in roster:
            try:
                with store.savepoint():
                    _seed_account(store, account, force, report)
            except SQLAlchemyError as exc:
                logger.error("Error seeding user %s: %s", account.username, exc)
                report.failed.append(account.username)
    logger.info(
        "Seeding summary: created=%d updated=%d skipped=%d failed=%d",
        len(report.created),
        len(report.updated),
        len(report.skipped),
        len(report.failed),
    )
    return report


def auto_seed_on_startup(store: CredentialStore) -> SeedReport | None:
    """
    Ensure USERS exists and seed it when it was just created or is empty.

    Best-effort: errors are logged and None is returned so startup can continue.
    """
    try:
        logger.info("Checking %s table for existing data", USERS_TABLE)
        if ensure_users_table(store):
            return seed_users(store)
        existing = count_users(store)
        if existing == 0:
            logger.info("%s table is empty; seeding initial users", USERS_TABLE)
            return seed_users(store)
        logger.info("%s table contains %d existing users; skipping auto-seeding", USERS_TABLE, existing)
        return None
    except Exception:
        logger.exception("Error during auto-seeding; continuing startup")
        return None
