"""
Admin seeding command
"""

import pytest

from task_tracker import seed
from task_tracker.core import config
from task_tracker.models import UserRole
from task_tracker.repositories import UserRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def admin_env(monkeypatch):
    monkeypatch.setattr(config.settings, "ADMIN_NAME", "Seeded Admin")
    monkeypatch.setattr(config.settings, "ADMIN_EMAIL", "seeded@example.com")
    monkeypatch.setattr(config.settings, "ADMIN_PASSWORD", "seeded-secret")


def test_seed_creates_admin_once(db_session, admin_env):
    assert seed.seed_admin() is True
    assert seed.seed_admin() is False

    user = UserRepository(db_session).find_by_email("seeded@example.com")
    assert user.role == UserRole.ADMIN
    assert user.name == "Seeded Admin"


def test_seed_requires_credentials(db_session, monkeypatch):
    monkeypatch.setattr(config.settings, "ADMIN_EMAIL", "")
    with pytest.raises(ValueError, match="ADMIN_EMAIL"):
        seed.seed_admin()
