"""
Authentication: OAuth callback polling, session endpoint, role checks and
first-login profile creation.
"""

import uuid
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from test_fixtures import (
    API,
    app,
    client,
    _fake_db,
    admin_profile,
    current_profile,
    make_profile,
    make_role,
)
from adapters import supabase_auth
from api.dependencies import get_db
from app.exceptions import NotFoundError, ServiceUnavailableError, UnauthorizedError
from services import auth_service, profile_service, role_service
from services.auth_service import AuthService
from services.profile_service import ProfileService, derive_names
from services.role_service import RoleService

SESSION = {
    "access_token": "access-abc",
    "refresh_token": "refresh-def",
    "expires_in": 3600,
    "token_type": "bearer",
}


# =============================================================================
# OAUTH CALLBACK
# =============================================================================


def test_oauth_callback_polls_until_session_is_ready(monkeypatch):
    profile = make_profile()
    slept = []
    calls = {"n": 0}

    monkeypatch.setattr(supabase_auth, "exchange_code", lambda code, verifier=None: dict(SESSION))
    monkeypatch.setattr(auth_service, "_sleep", slept.append)

    def authenticate(db, token):
        calls["n"] += 1
        assert token == "access-abc"
        if calls["n"] < 3:
            raise UnauthorizedError("Invalid authentication")
        return {"id": str(profile.id)}, profile

    monkeypatch.setattr(AuthService, "authenticate", authenticate)

    session, got, attempts = AuthService.complete_oauth_callback(MagicMock(), "code-1", "verifier")
    assert got is profile
    assert attempts == 3
    assert session["refresh_token"] == "refresh-def"
    # first attempt is immediate, then the configured backoff
    assert slept == [0.5, 1.0]


def test_oauth_callback_gives_up_with_503(monkeypatch):
    slept = []
    monkeypatch.setattr(supabase_auth, "exchange_code", lambda code, verifier=None: dict(SESSION))
    monkeypatch.setattr(auth_service, "_sleep", slept.append)

    def never_ready(db, token):
        raise UnauthorizedError("Invalid authentication")

    monkeypatch.setattr(AuthService, "authenticate", never_ready)

    with pytest.raises(ServiceUnavailableError) as exc:
        AuthService.complete_oauth_callback(MagicMock(), "code-1")
    assert exc.value.details == {"attempts": 4}
    assert slept == [0.5, 1.0, 2.0]


def test_oauth_callback_route(monkeypatch):
    profile = make_profile()
    app.dependency_overrides[get_db] = _fake_db
    monkeypatch.setattr(
        AuthService,
        "complete_oauth_callback",
        lambda db, code, verifier=None: (dict(SESSION), profile, 2),
    )

    r = client.post(f"{API}/auth/callback", json={"code": "abc", "code_verifier": "xyz"})
    assert r.status_code == 200
    body = r.json()
    assert body["access_token"] == "access-abc"
    assert body["attempts"] == 2
    assert body["profile"]["id"] == str(profile.id)
    assert body["profile"]["roles"] == ["user"]


def test_oauth_callback_rejected_code_is_401(monkeypatch):
    app.dependency_overrides[get_db] = _fake_db

    def reject(code, verifier=None):
        raise UnauthorizedError("Authorization code exchange failed")

    monkeypatch.setattr(supabase_auth, "exchange_code", reject)
    r = client.post(f"{API}/auth/callback", json={"code": "stale"})
    assert r.status_code == 401
    assert r.json()["error"]["message"] == "Authorization code exchange failed"


def test_session_endpoint_returns_user_and_profile(monkeypatch):
    profile = make_profile(roles=["user", "family_member"])
    app.dependency_overrides[get_db] = _fake_db
    user = {"id": str(profile.id), "email": profile.email, "user_metadata": {"full_name": "Sarah Martinez"}}
    monkeypatch.setattr(AuthService, "authenticate", lambda db, token: (user, profile))

    r = client.get(f"{API}/auth/session", headers={"Authorization": "Bearer token-1"})
    assert r.status_code == 200
    body = r.json()
    assert body["user"]["email"] == profile.email
    assert body["profile"]["roles"] == ["family_member", "user"]


# =============================================================================
# ROLES
# =============================================================================


def test_assign_role_requires_admin(current_profile):
    r = client.post(f"{API}/roles/users/{uuid.uuid4()}", json={"role": "admin"})
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "FORBIDDEN"


def test_admin_can_assign_role(monkeypatch, admin_profile):
    target = uuid.uuid4()
    seen = {}

    def assign(db, user_id, role_name, assigned_by):
        seen.update(user_id=user_id, role=role_name, by=assigned_by)
        return make_role(role_name, {"recipes": True, "view_meal_plans": True})

    monkeypatch.setattr(RoleService, "assign_role", assign)
    r = client.post(f"{API}/roles/users/{target}", json={"role": "family_member"})
    assert r.status_code == 201
    assert r.json()["name"] == "family_member"
    assert seen == {"user_id": target, "role": "family_member", "by": admin_profile.id}


def test_revoke_role_requires_admin(current_profile):
    r = client.delete(f"{API}/roles/users/{uuid.uuid4()}/admin")
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "FORBIDDEN"


def test_admin_can_revoke_role(monkeypatch, admin_profile):
    target = uuid.uuid4()
    seen = {}
    monkeypatch.setattr(
        RoleService, "revoke_role", lambda db, user_id, role_name: seen.update(user_id=user_id, role=role_name)
    )

    r = client.delete(f"{API}/roles/users/{target}/family_member")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "deleted": f"{target}:family_member"}
    assert seen == {"user_id": target, "role": "family_member"}


def test_revoke_role_not_held_is_404(monkeypatch, admin_profile):
    role = make_role("family_member")
    monkeypatch.setattr(role_service, "ProfileRepository", lambda db: SimpleNamespace(get_by_id=lambda uid: make_profile()))
    monkeypatch.setattr(role_service, "RoleRepository", lambda db: SimpleNamespace(get_by_name=lambda name: role))
    monkeypatch.setattr(
        role_service,
        "UserRoleRepository",
        lambda db: SimpleNamespace(get_assignment=lambda uid, rid: None),
    )

    r = client.delete(f"{API}/roles/users/{uuid.uuid4()}/family_member")
    assert r.status_code == 404
    assert r.json()["error"]["message"] == "Profile does not have role 'family_member'"


def test_revoke_role_deletes_assignment(monkeypatch):
    role = make_role("family_member")
    assignment = SimpleNamespace(user_id=uuid.uuid4(), role_id=role.id)
    deleted = []
    monkeypatch.setattr(role_service, "ProfileRepository", lambda db: SimpleNamespace(get_by_id=lambda uid: make_profile()))
    monkeypatch.setattr(role_service, "RoleRepository", lambda db: SimpleNamespace(get_by_name=lambda name: role))
    monkeypatch.setattr(
        role_service,
        "UserRoleRepository",
        lambda db: SimpleNamespace(
            get_assignment=lambda uid, rid: assignment if rid == role.id else None,
            delete=deleted.append,
        ),
    )

    RoleService.revoke_role(MagicMock(), assignment.user_id, "family_member")
    assert deleted == [assignment]


def test_revoke_unknown_role_is_not_found(monkeypatch):
    monkeypatch.setattr(role_service, "ProfileRepository", lambda db: SimpleNamespace(get_by_id=lambda uid: make_profile()))
    monkeypatch.setattr(role_service, "RoleRepository", lambda db: SimpleNamespace(get_by_name=lambda name: None))

    with pytest.raises(NotFoundError):
        RoleService.revoke_role(MagicMock(), uuid.uuid4(), "chef")


def test_list_my_roles(monkeypatch, current_profile):
    monkeypatch.setattr(RoleService, "roles_for_user", lambda db, uid: [make_role("user")])
    r = client.get(f"{API}/roles/me")
    assert r.status_code == 200
    assert [role["name"] for role in r.json()] == ["user"]


# =============================================================================
# PROFILE CREATION ON FIRST LOGIN
# =============================================================================


def test_derive_names_from_full_name():
    assert derive_names("sarah@example.com", {"full_name": "Sarah Jane Martinez"}) == (
        "Sarah Jane Martinez",
        "Sarah",
        "Jane Martinez",
    )


def test_derive_names_prefers_display_name():
    assert derive_names("x@example.com", {"display_name": "Chef S", "first_name": "Sarah"})[0] == "Chef S"


def test_derive_names_falls_back_to_email_local_part():
    assert derive_names("michael.chen@example.com", None) == ("michael.chen", "", "")


class _FakeProfileRepo:
    def __init__(self, results):
        self._results = list(results)

    def get_by_id(self, user_id):
        return self._results.pop(0)


def test_ensure_profile_returns_existing(monkeypatch):
    profile = make_profile()
    monkeypatch.setattr(profile_service, "ProfileRepository", lambda db: _FakeProfileRepo([profile]))
    registered = []
    monkeypatch.setattr(profile_service.WebhookService, "user_registered", registered.append)

    got = ProfileService.ensure_profile(MagicMock(), {"id": str(profile.id), "email": profile.email})
    assert got is profile
    assert registered == []


def test_ensure_profile_creates_profile_with_default_role(monkeypatch):
    created = make_profile()
    role = make_role("user")
    db = MagicMock()
    registered = []

    monkeypatch.setattr(
        profile_service, "ProfileRepository", lambda db: _FakeProfileRepo([None, created])
    )
    monkeypatch.setattr(
        profile_service, "RoleRepository", lambda db: SimpleNamespace(get_by_name=lambda name: role)
    )
    monkeypatch.setattr(profile_service.WebhookService, "user_registered", registered.append)

    got = ProfileService.ensure_profile(
        db,
        {
            "id": str(created.id),
            "email": "emma.johnson@example.com",
            "user_metadata": {"full_name": "Emma Johnson"},
        },
    )

    assert got is created
    added = [call.args[0] for call in db.add.call_args_list]
    new_profile, assignment = added
    assert new_profile.display_name == "Emma Johnson"
    assert new_profile.first_name == "Emma"
    assert assignment.role_id == role.id
    db.commit.assert_called_once()
    assert registered == [created]
