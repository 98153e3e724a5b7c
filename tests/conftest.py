# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Sets up environment variables before any app import, then provides an
# in-memory Supabase and a TestClient wired to it.
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# app.config loads settings at import time

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("GROUP_TOKEN_SECRET", "test-group-token-secret-0123456789abcdef")
os.environ.setdefault("SITE_URL", "https://lists.example.com")
os.environ.setdefault("ENVIRONMENT", "development")

import pytest
from fastapi.testclient import TestClient

from app.database.supabase_client import get_supabase
from app.main import app
from app.modules.auth.service import clear_auth_cache
from tests.fake_supabase import FakeSupabase

OWNER_TOKEN = "owner-token"
MEMBER_TOKEN = "member-token"
OUTSIDER_TOKEN = "outsider-token"
ADMIN_TOKEN = "admin-token"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def db():
    """Empty fake store with an owner, a member-to-be, an outsider and an admin."""
    fake = FakeSupabase()
    fake.add_user(OWNER_TOKEN, "user-owner", "owner@example.com")
    fake.add_user(MEMBER_TOKEN, "user-member", "Friend@Example.com")
    fake.add_user(OUTSIDER_TOKEN, "user-outsider", "outsider@example.com")
    fake.add_user(ADMIN_TOKEN, "user-admin", "admin@example.com", admin=True)
    clear_auth_cache()
    yield fake
    clear_auth_cache()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_supabase] = lambda: db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def group(client):
    """A group "Xmas" owned by the owner user, with password "hohoho"."""
    response = client.post(
        "/api/groups",
        json={"name": "Xmas", "password": "hohoho"},
        headers=bearer(OWNER_TOKEN),
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def member(db, group):
    """Make the member user a member of the group."""
    return db.insert("user_groups", user_id="user-member", group_id=group["id"], role="member")


@pytest.fixture
def owner_headers():
    return bearer(OWNER_TOKEN)
