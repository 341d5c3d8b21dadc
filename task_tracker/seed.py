"""
Admin Seeding - Creates the first admin account

Usage:
    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD=... python -m task_tracker.seed

Safe to run repeatedly: an existing account with the same email is left as is.
"""

import logging
import sys

from task_tracker.core.config import settings
from task_tracker.database import SessionLocal, init_db
from task_tracker.repositories import UserRepository
from task_tracker.services import IdentityService

logger = logging.getLogger(__name__)

def seed_admin() -> bool:
    """
    Create tables if needed and seed the configured admin.

    Returns:
        True when a new admin was created, False when it already existed
    """
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        raise ValueError("ADMIN_EMAIL and ADMIN_PASSWORD must be set to seed an admin")

    init_db()
    with SessionLocal() as db:
        identity = IdentityService(UserRepository(db))
        user, created = identity.seed_admin(settings.ADMIN_NAME, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)

    if created:
        logger.info(f"✅ Admin user created: {user.name} <{user.email}> ({user.role.value})")
    else:
        logger.info(f"⚠️  Admin user already exists: {user.email}, skipping")
    return created

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    try:
        seed_admin()
    except Exception as e:
        logger.error(f"❌ Failed to seed admin user: {e}", exc_info=True)
        sys.exit(1)
