"""Auth gate tests.

Learn: authenticate() is pure (headers in, identity or Rejected out), so
most cases are checked directly. The HTTP tests at the bottom exercise
the real dependency through the app: nothing is mocked.
"""

from datetime import datetime, timedelta, timezone

import pytest

from devconnect.auth.dependencies import CurrentIdentity, authenticate
from devconnect.auth.jwt import TokenService
from devconnect.errors import ErrorKind, Rejected
from devconnect.main import app

SECRET = "unit-test-signing-secret-0123456789abcdef"


@pytest.fixture
def tokens():
    return TokenService(secret=SECRET, ttl_seconds=3600)


# ═══════════════════════════════════════════════════════════
# authenticate()
# ═══════════════════════════════════════════════════════════


def test_no_token_is_unauthenticated(tokens):
    result = authenticate({}, tokens)
    assert isinstance(result, Rejected)
    assert result.kind == ErrorKind.UNAUTHENTICATED


def test_token_header_resolves_identity(tokens):
    result = authenticate({"x-auth-token": tokens.issue("u-1")}, tokens)
    assert result == CurrentIdentity(user_id="u-1")


def test_custom_header_name(tokens):
    headers = {"x-session": tokens.issue("u-2")}
    assert authenticate(headers, tokens, header_name="x-session").user_id == "u-2"
    assert authenticate(headers, tokens).kind == ErrorKind.UNAUTHENTICATED


def test_bearer_fallback(tokens):
    headers = {"authorization": f"Bearer {tokens.issue('u-3')}"}
    assert authenticate(headers, tokens).user_id == "u-3"


def test_non_bearer_authorization_ignored(tokens):
    headers = {"authorization": f"Basic {tokens.issue('u-3')}"}
    assert authenticate(headers, tokens).kind == ErrorKind.UNAUTHENTICATED


def test_expired_token_rejected(tokens):
    issued = datetime.now(timezone.utc) - timedelta(hours=2)
    result = authenticate({"x-auth-token": tokens.issue("u-1", now=issued)}, tokens)
    assert result.kind == ErrorKind.EXPIRED


def test_invalid_token_rejected(tokens):
    result = authenticate({"x-auth-token": "garbage"}, tokens)
    assert result.kind == ErrorKind.MALFORMED


# ═══════════════════════════════════════════════════════════
# Through the app
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_private_route_without_token(client):
    r = await client.get("/api/auth")
    assert r.status_code == 401
    assert r.json()["detail"]["kind"] == "unauthenticated"
    assert r.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_private_route_with_expired_token(client, register):
    headers = await register()
    gate_tokens = app.state.token_service
    user_id = gate_tokens.verify(headers["x-auth-token"])
    issued = datetime.now(timezone.utc) - timedelta(
        seconds=gate_tokens.ttl_seconds + 1
    )
    expired = gate_tokens.issue(user_id, now=issued)

    r = await client.get("/api/auth", headers={"x-auth-token": expired})
    assert r.status_code == 401
    assert r.json()["detail"]["kind"] == "expired"


@pytest.mark.asyncio
async def test_private_route_with_foreign_signature(client, register):
    await register()
    forged = TokenService(secret="not-the-server-secret-0123456789abcdef")
    r = await client.get(
        "/api/auth", headers={"x-auth-token": forged.issue("anyone")}
    )
    assert r.status_code == 401
    assert r.json()["detail"]["kind"] == "invalid_signature"


@pytest.mark.asyncio
async def test_bearer_header_accepted(client, register):
    headers = await register(email="bearer@example.com")
    token = headers["x-auth-token"]
    r = await client.get("/api/auth", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["email"] == "bearer@example.com"


@pytest.mark.asyncio
async def test_token_for_deleted_user_passes_gate_but_user_not_found(client, register):
    """The gate doesn't re-check the store; the lookup behind it does."""
    headers = await register()
    r = await client.delete("/api/profile", headers=headers)
    assert r.status_code == 200

    r = await client.get("/api/auth", headers=headers)
    assert r.status_code == 400
    assert r.json()["detail"]["kind"] == "not_found"
