"""Auth Routes — register, login, logout, refresh and self profile.

Invariants:
    - Register creates a member and returns a working token (201)
    - Wrong email and wrong password are indistinguishable (401 "Invalid credentials")
    - Logout and refresh invalidate the presented token immediately
    - PUT /auth/me never changes role or activation
"""

from catalog.core.domain_types import UserRole

API = "/api/v1"
PASSWORD = "secret-password"

REGISTRATION = {
    "name": "Grace Hopper",
    "email": "Grace@Example.com",
    "password": "compiler-first",
    "phone": "555-0100",
}


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def test_register_returns_token_and_member(client):
    res = await client.post(f"{API}/auth/register", json=REGISTRATION)
    assert res.status_code == 201
    body = res.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == 24 * 60 * 60
    assert body["user"]["email"] == "grace@example.com"
    assert body["user"]["role"] == "member"

    me = await client.get(f"{API}/auth/me", headers=_bearer(body["access_token"]))
    assert me.status_code == 200
    assert me.json()["id"] == body["user"]["id"]


async def test_register_ignores_requested_role(client):
    res = await client.post(
        f"{API}/auth/register", json={**REGISTRATION, "role": "admin"},
    )
    assert res.json()["user"]["role"] == "member"


async def test_register_duplicate_email_is_422(client, member):
    res = await client.post(
        f"{API}/auth/register",
        json={**REGISTRATION, "email": "member@example.com"},
    )
    assert res.status_code == 422
    assert "email" in res.json()["error"]["details"]


async def test_register_short_password_is_422(client):
    res = await client.post(
        f"{API}/auth/register", json={**REGISTRATION, "password": "short"},
    )
    assert res.status_code == 422
    assert "password" in res.json()["error"]["details"]


async def test_login_success(client, member):
    res = await client.post(
        f"{API}/auth/login",
        json={"email": "MEMBER@example.com", "password": PASSWORD},
    )
    assert res.status_code == 200
    assert res.json()["user"]["id"] == member[0].id
    assert res.json()["access_token"].startswith("lc_")


async def test_login_wrong_password_and_unknown_email_look_the_same(client, member):
    wrong = await client.post(
        f"{API}/auth/login",
        json={"email": "member@example.com", "password": "nope-nope"},
    )
    unknown = await client.post(
        f"{API}/auth/login",
        json={"email": "ghost@example.com", "password": PASSWORD},
    )
    for res in (wrong, unknown):
        assert res.status_code == 401
        assert res.json()["error"]["message"] == "Invalid credentials"
        assert res.headers["www-authenticate"] == "Bearer"


async def test_login_inactive_user(client, make_user):
    await make_user("sleepy@example.com", is_active=False)
    res = await client.post(
        f"{API}/auth/login",
        json={"email": "sleepy@example.com", "password": PASSWORD},
    )
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Account is inactive"


async def test_login_requires_fields(client):
    res = await client.post(f"{API}/auth/login", json={})
    assert res.status_code == 422
    assert set(res.json()["error"]["details"]) == {"email", "password"}


async def test_logout_revokes_token(client, member):
    _, headers = member
    res = await client.post(f"{API}/auth/logout", headers=headers)
    assert res.status_code == 200
    assert res.json() == {"message": "Successfully logged out"}

    again = await client.get(f"{API}/auth/me", headers=headers)
    assert again.status_code == 401
    assert again.json()["error"]["message"] == "Invalid or expired token"


async def test_refresh_rotates_token(client, member):
    _, headers = member
    res = await client.post(f"{API}/auth/refresh", headers=headers)
    assert res.status_code == 200
    fresh = res.json()["access_token"]
    assert fresh != headers["Authorization"].split()[1]

    assert (await client.get(f"{API}/auth/me", headers=headers)).status_code == 401
    ok = await client.get(f"{API}/auth/me", headers=_bearer(fresh))
    assert ok.status_code == 200


async def test_me_without_token_is_401(client):
    res = await client.get(f"{API}/auth/me")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHENTICATED"


async def test_me_with_garbage_token_is_401(client):
    res = await client.get(f"{API}/auth/me", headers=_bearer("lc_garbage"))
    assert res.status_code == 401


async def test_update_profile(client, member):
    _, headers = member
    res = await client.put(
        f"{API}/auth/me",
        json={"name": "Renamed", "address": "1 Library Way", "role": "admin"},
        headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["name"] == "Renamed"
    assert res.json()["address"] == "1 Library Way"
    assert res.json()["role"] == UserRole.MEMBER.value


async def test_update_profile_password_allows_new_login(client, member):
    _, headers = member
    await client.put(
        f"{API}/auth/me", json={"password": "brand-new-pass"}, headers=headers,
    )
    res = await client.post(
        f"{API}/auth/login",
        json={"email": "member@example.com", "password": "brand-new-pass"},
    )
    assert res.status_code == 200


async def test_update_profile_taken_email_is_422(client, member, admin):
    _, headers = member
    res = await client.put(
        f"{API}/auth/me", json={"email": "admin@example.com"}, headers=headers,
    )
    assert res.status_code == 422
    assert res.json()["error"]["details"] == {
        "email": ["The email has already been taken."],
    }


async def test_register_password_over_72_bytes_is_422(client):
    res = await client.post(
        f"{API}/auth/register", json={**REGISTRATION, "password": "p" * 100},
    )
    assert res.status_code == 422
    assert res.json()["error"]["details"] == {
        "password": ["The password may not be greater than 72 bytes."],
    }


async def test_register_password_of_72_bytes_can_log_in(client):
    password = "p" * 72
    res = await client.post(
        f"{API}/auth/register", json={**REGISTRATION, "password": password},
    )
    assert res.status_code == 201
    login = await client.post(
        f"{API}/auth/login",
        json={"email": REGISTRATION["email"], "password": password},
    )
    assert login.status_code == 200


async def test_update_profile_multibyte_password_over_limit_is_422(client, member):
    _, headers = member
    res = await client.put(
        f"{API}/auth/me", json={"password": "é" * 40}, headers=headers,
    )
    assert res.status_code == 422
    assert "password" in res.json()["error"]["details"]


async def test_update_profile_without_body_is_422(client, member):
    _, headers = member
    res = await client.put(f"{API}/auth/me", headers=headers)
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert "body" in res.json()["error"]["details"]
