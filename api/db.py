# api/db.py
"""
Async Supabase repository for folders, files and shares.
Provides a consistent interface for the folder handlers and makes testing easier:
routes take the repo as a dependency, so tests swap in an in-memory store.
"""

import os
from typing import Any, Dict, Iterable, List, Optional
from supabase import AsyncClient
from postgrest.exceptions import APIError
from api.supa import admin_client

# PostgREST error codes we translate instead of propagating
NO_ROWS = "PGRST116"
INVALID_TEXT_REPRESENTATION = "22P02"  # e.g. "abc" where a uuid is expected


def _table_name(env_var: str, default: str) -> str:
    return os.getenv(env_var) or default


class SupabaseRepo:
    """Repository pattern wrapper around the async Supabase client."""

    def __init__(self):
        self._client: Optional[AsyncClient] = None
        self.folders_table = _table_name("FOLDERS_TABLE", "folders")
        self.files_table = _table_name("FILES_TABLE", "files")
        self.shares_table = _table_name("SHARES_TABLE", "shares")

    async def client(self) -> AsyncClient:
        """Lazy-load Supabase client (can be mocked in tests)."""
        if self._client is None:
            self._client = await admin_client()
        return self._client

    async def _get_by_id(self, table: str, row_id: str) -> Optional[Dict[str, Any]]:
        client = await self.client()
        query = client.table(table).select("*").eq("id", row_id).limit(1)
        try:
            result = await query.execute()
        except APIError as exc:
            if getattr(exc, "code", None) in (NO_ROWS, INVALID_TEXT_REPRESENTATION):
                # A malformed id cannot match any row; treat it as missing.
                return None
            raise
        rows = result.data or []
        return rows[0] if rows else None

    # Folder operations
    async def create_folder(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a folder and return the stored row."""
        client = await self.client()
        result = await client.table(self.folders_table).insert(data).execute()
        return result.data[0] if result.data else {}

    async def get_folder(self, folder_id: str) -> Optional[Dict[str, Any]]:
        return await self._get_by_id(self.folders_table, folder_id)

    async def list_folders_for_owner(self, user_id: str) -> List[Dict[str, Any]]:
        """Folders owned by user_id, oldest first."""
        client = await self.client()
        result = await client.table(self.folders_table)\
            .select("*")\
            .eq("user_id", user_id)\
            .order("created_at")\
            .execute()
        return result.data or []

    async def update_folder(self, folder_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Write changes to a folder and return the stored row."""
        client = await self.client()
        result = await client.table(self.folders_table)\
            .update(changes)\
            .eq("id", folder_id)\
            .execute()
        return result.data[0] if result.data else {}

    async def delete_folder(self, folder_id: str) -> None:
        client = await self.client()
        await client.table(self.folders_table)\
            .delete()\
            .eq("id", folder_id)\
            .execute()

    # File operations
    async def list_files_in_folders(self, folder_ids: Iterable[str]) -> List[Dict[str, Any]]:
        """All files whose folder_id is one of folder_ids."""
        ids = list(folder_ids)
        if not ids:
            return []
        client = await self.client()
        result = await client.table(self.files_table)\
            .select("*")\
            .in_("folder_id", ids)\
            .execute()
        return result.data or []

    async def list_files_by_ids(self, file_ids: Iterable[str]) -> List[Dict[str, Any]]:
        ids = list(file_ids)
        if not ids:
            return []
        client = await self.client()
        result = await client.table(self.files_table)\
            .select("*")\
            .in_("id", ids)\
            .execute()
        return result.data or []

    # Share operations
    async def list_shares_for_recipient(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Shares addressed to user_id, each with its folder embedded under
        "folder" (None when the folder row no longer exists).
        """
        client = await self.client()
        result = await client.table(self.shares_table)\
            .select(f"*, folder:{self.folders_table}(*)")\
            .eq("shared_with", user_id)\
            .execute()
        return result.data or []

    async def list_shares_in_folder(self, folder_id: str, user_id: str) -> List[Dict[str, Any]]:
        """Shares of folder_id (or of files in it) addressed to user_id."""
        client = await self.client()
        result = await client.table(self.shares_table)\
            .select("*")\
            .eq("folder_id", folder_id)\
            .eq("shared_with", user_id)\
            .execute()
        return result.data or []


# Singleton instance
_repo: Optional[SupabaseRepo] = None

def get_repo() -> SupabaseRepo:
    """Get or create singleton repository instance."""
    global _repo
    if _repo is None:
        _repo = SupabaseRepo()
    return _repo
