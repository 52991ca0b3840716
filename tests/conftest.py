"""
Shared fixtures: env defaults, an in-memory folder store and a TestClient
with auth and storage dependencies overridden.

Run:  pytest tests/ -v
"""

from __future__ import annotations

import copy
import os
import uuid
from typing import Any, Dict, Iterable, List, Optional

# The app validates config and reads auth settings at import time.
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role")

import pytest
from fastapi import Header
from fastapi.testclient import TestClient

from api.auth_supabase import get_caller
from api.db import get_repo
from api.main import app


class InMemoryRepo:
    """Dict-backed store with the same async surface as SupabaseRepo."""

    def __init__(self):
        self.folders: Dict[str, Dict[str, Any]] = {}
        self.files: List[Dict[str, Any]] = []
        self.shares: List[Dict[str, Any]] = []

    # seeding helpers
    def add_folder(self, name: str, user_id: str, parent_folder_id: Optional[str] = None) -> Dict[str, Any]:
        folder = {
            "id": str(uuid.uuid4()),
            "name": name,
            "user_id": user_id,
            "parent_folder_id": parent_folder_id,
            "created_at": "2026-01-01T00:00:00+00:00",
            "updated_at": "2026-01-01T00:00:00+00:00",
        }
        self.folders[folder["id"]] = folder
        return copy.deepcopy(folder)

    def add_file(self, name: str, folder_id: Optional[str], user_id: str = "owner") -> Dict[str, Any]:
        row = {"id": str(uuid.uuid4()), "name": name, "folder_id": folder_id, "user_id": user_id}
        self.files.append(row)
        return copy.deepcopy(row)

    def add_share(self, resource_type: str, shared_with: str, *, folder_id: Optional[str] = None,
                  resource_id: Optional[str] = None, owner_id: str = "owner") -> Dict[str, Any]:
        row = {
            "id": str(uuid.uuid4()),
            "resource_type": resource_type,
            "resource_id": resource_id,
            "folder_id": folder_id,
            "shared_with": shared_with,
            "owner_id": owner_id,
        }
        self.shares.append(row)
        return copy.deepcopy(row)

    # SupabaseRepo surface
    async def create_folder(self, data: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(data, id=str(uuid.uuid4()))
        self.folders[row["id"]] = row
        return copy.deepcopy(row)

    async def get_folder(self, folder_id: str) -> Optional[Dict[str, Any]]:
        row = self.folders.get(folder_id)
        return copy.deepcopy(row) if row else None

    async def list_folders_for_owner(self, user_id: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(f) for f in self.folders.values() if f["user_id"] == user_id]

    async def update_folder(self, folder_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        self.folders[folder_id].update(changes)
        return copy.deepcopy(self.folders[folder_id])

    async def delete_folder(self, folder_id: str) -> None:
        self.folders.pop(folder_id, None)

    async def list_files_in_folders(self, folder_ids: Iterable[str]) -> List[Dict[str, Any]]:
        ids = set(folder_ids)
        return [copy.deepcopy(f) for f in self.files if f["folder_id"] in ids]

    async def list_files_by_ids(self, file_ids: Iterable[str]) -> List[Dict[str, Any]]:
        ids = set(file_ids)
        return [copy.deepcopy(f) for f in self.files if f["id"] in ids]

    async def list_shares_for_recipient(self, user_id: str) -> List[Dict[str, Any]]:
        out = []
        for share in self.shares:
            if share["shared_with"] != user_id:
                continue
            folder = self.folders.get(share["folder_id"]) if share["folder_id"] else None
            out.append(dict(copy.deepcopy(share), folder=copy.deepcopy(folder)))
        return out

    async def list_shares_in_folder(self, folder_id: str, user_id: str) -> List[Dict[str, Any]]:
        return [
            copy.deepcopy(s) for s in self.shares
            if s["folder_id"] == folder_id and s["shared_with"] == user_id
        ]


async def _caller_from_header(x_test_user: Optional[str] = Header(default=None)) -> Optional[str]:
    return x_test_user


@pytest.fixture
def repo():
    return InMemoryRepo()


@pytest.fixture
def client(repo):
    app.dependency_overrides[get_repo] = lambda: repo
    app.dependency_overrides[get_caller] = _caller_from_header
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    """Headers that make the overridden auth dependency resolve to user_id."""
    def _headers(user_id: str) -> Dict[str, str]:
        return {"X-Test-User": user_id}
    return _headers
