"""Auth API tests.

Covers:
1. Registration + duplicate prevention + input validation
2. Login → session cookie, and identical failures for unknown email
   vs wrong password
3. /me through the real cookie pipeline (no auth overrides anywhere)
4. Logout
"""

import uuid

import pytest

from conftest import PASSWORD, unique_email


# ═══════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_user(client):
    email = unique_email("reg")
    r = await client.post(
        "/api/auth/register", json={"email": email, "password": PASSWORD}
    )
    assert r.status_code == 201
    body = r.json()
    assert body["message"]
    assert body["user"]["email"] == email
    uuid.UUID(body["user"]["id"])
    assert "createdAt" in body["user"]
    assert "password" not in body["user"]
    assert "passwordHash" not in body["user"]


@pytest.mark.asyncio
async def test_register_sets_session_cookie(client):
    r = await client.post(
        "/api/auth/register",
        json={"email": unique_email("cookie"), "password": PASSWORD},
    )
    assert r.status_code == 201
    cookie = r.headers["set-cookie"]
    assert cookie.startswith("token=")
    assert "HttpOnly" in cookie
    assert "Path=/" in cookie
    assert "SameSite=lax" in cookie
    assert "Max-Age=86400" in cookie
    # Not production → no Secure flag
    assert "Secure" not in cookie


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    """Can't register with the same email twice."""
    body = {"email": unique_email("dup"), "password": PASSWORD}

    r1 = await client.post("/api/auth/register", json=body)
    assert r1.status_code == 201

    r2 = await client.post("/api/auth/register", json=body)
    assert r2.status_code == 409
    assert r2.json() == {"error": "This email address is already in use."}


@pytest.mark.asyncio
async def test_register_email_is_case_sensitive(client):
    """Emails match exactly; a different case is a different account."""
    email = f"Case-{uuid.uuid4().hex[:8]}@example.com"
    r1 = await client.post("/api/auth/register", json={"email": email, "password": PASSWORD})
    r2 = await client.post(
        "/api/auth/register", json={"email": email.lower(), "password": PASSWORD}
    )
    assert r1.status_code == 201
    assert r2.status_code == 201


@pytest.mark.asyncio
async def test_register_short_password(client):
    r = await client.post(
        "/api/auth/register",
        json={"email": unique_email("short"), "password": "abc"},
    )
    assert r.status_code == 400
    body = r.json()
    assert "error" in body
    assert body["fields"]["password"] == "Password must be at least 6 characters."


@pytest.mark.asyncio
async def test_register_invalid_email(client):
    r = await client.post(
        "/api/auth/register", json={"email": "not-an-email", "password": PASSWORD}
    )
    assert r.status_code == 400
    assert r.json()["fields"]["email"] == "Enter a valid email address."


@pytest.mark.asyncio
async def test_register_missing_body(client):
    r = await client.post("/api/auth/register", json={})
    assert r.status_code == 400
    assert set(r.json()["fields"]) == {"email", "password"}


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_success(client, make_client):
    email = unique_email("login")
    await client.post("/api/auth/register", json={"email": email, "password": PASSWORD})

    fresh = await make_client()
    r = await fresh.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == email
    assert "token" in fresh.cookies

    me = await fresh.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["email"] == email


@pytest.mark.asyncio
async def test_login_wrong_password(client):
    email = unique_email("wrong")
    await client.post("/api/auth/register", json={"email": email, "password": PASSWORD})

    r = await client.post(
        "/api/auth/login", json={"email": email, "password": "not-the-password"}
    )
    assert r.status_code == 401
    assert r.json() == {"error": "Incorrect email address or password."}


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client):
    """Unknown email and wrong password produce byte-identical responses."""
    email = unique_email("enum")
    await client.post("/api/auth/register", json={"email": email, "password": PASSWORD})

    wrong_password = await client.post(
        "/api/auth/login", json={"email": email, "password": "wrong-password"}
    )
    unknown_user = await client.post(
        "/api/auth/login",
        json={"email": unique_email("nobody"), "password": "wrong-password"},
    )
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.content == unknown_user.content
    assert "set-cookie" not in wrong_password.headers
    assert "set-cookie" not in unknown_user.headers


# ═══════════════════════════════════════════════════════════
# /me
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_me_with_cookie(auth_client):
    r = await auth_client.get("/api/auth/me")
    assert r.status_code == 200
    assert r.json() == {
        "user": {"id": auth_client.user["id"], "email": auth_client.user["email"]}
    }


@pytest.mark.asyncio
async def test_me_without_cookie(client):
    r = await client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json() == {"error": "Not logged in."}


@pytest.mark.asyncio
async def test_me_with_invalid_token(client):
    r = await client.get("/api/auth/me", headers={"Cookie": "token=not.a.jwt"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid token."}


@pytest.mark.asyncio
async def test_me_ignores_bearer_header(auth_client, client):
    """Only the cookie authenticates; an Authorization header does nothing."""
    token = auth_client.cookies["token"]
    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


# ═══════════════════════════════════════════════════════════
# Logout
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_logout_clears_cookie(auth_client):
    r = await auth_client.post("/api/auth/logout")
    assert r.status_code == 200
    assert r.json()["message"] == "Logged out."
    cookie = r.headers["set-cookie"]
    assert cookie.startswith('token=""') or cookie.startswith("token=;")
    assert "Max-Age=0" in cookie
    assert "HttpOnly" in cookie

    r = await auth_client.get("/api/auth/me")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_logout_without_session(client):
    r = await client.post("/api/auth/logout")
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_logout_does_not_revoke_copied_token(auth_client, client):
    """Sessions are stateless: a copied token outlives the logout."""
    token = auth_client.cookies["token"]
    await auth_client.post("/api/auth/logout")

    r = await client.get("/api/auth/me", headers={"Cookie": f"token={token}"})
    assert r.status_code == 200
