"""Tests for the bearer-token caller dependency."""

import asyncio

import pytest
from fastapi import HTTPException
from jose import jwt

import api.auth_supabase as auth


SECRET = "legacy-test-secret"


@pytest.fixture
def legacy_secret(monkeypatch):
    monkeypatch.setattr(auth, "LEGACY_HS256_SECRET", SECRET)


def _resolve(header):
    return asyncio.run(auth.get_caller(authorization=header))


def test_no_header_means_no_caller():
    assert _resolve(None) is None


def test_non_bearer_header_means_no_caller():
    assert _resolve("Basic dXNlcjpwYXNz") is None


def test_hs256_token_resolves_subject(legacy_secret):
    token = jwt.encode({"sub": "user-123"}, SECRET, algorithm="HS256")
    assert _resolve(f"Bearer {token}") == "user-123"


def test_user_id_claim_is_accepted(legacy_secret):
    token = jwt.encode({"user_id": "user-456"}, SECRET, algorithm="HS256")
    assert _resolve(f"bearer {token}") == "user-456"


def test_missing_subject_is_rejected(legacy_secret):
    token = jwt.encode({"role": "authenticated"}, SECRET, algorithm="HS256")
    with pytest.raises(HTTPException) as exc:
        _resolve(f"Bearer {token}")
    assert exc.value.status_code == 401


def test_wrong_secret_is_rejected(legacy_secret):
    token = jwt.encode({"sub": "user-123"}, "some-other-secret", algorithm="HS256")
    with pytest.raises(HTTPException) as exc:
        _resolve(f"Bearer {token}")
    assert exc.value.status_code == 401


def test_hs256_without_configured_secret_is_rejected(monkeypatch):
    monkeypatch.setattr(auth, "LEGACY_HS256_SECRET", None)
    token = jwt.encode({"sub": "user-123"}, SECRET, algorithm="HS256")
    with pytest.raises(HTTPException) as exc:
        _resolve(f"Bearer {token}")
    assert exc.value.status_code == 401
    assert "HS256" in exc.value.detail


def test_malformed_token_is_rejected():
    with pytest.raises(HTTPException) as exc:
        _resolve("Bearer not-a-jwt")
    assert exc.value.status_code == 401
    assert exc.value.detail == "Invalid token format"
