# api/routes/folders.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from api.auth_supabase import get_caller
from api.db import SupabaseRepo, get_repo
from api.errors import Forbidden, InvalidReference, NotFound, Unauthenticated
from api.logger import get_request_logger
from core.sharing import (
    dedupe_by_id,
    partition_shares,
    shared_file_ids,
    shared_folder_ids,
    shared_folders_from_shares,
)

router = APIRouter(tags=["folders"])
logger = get_request_logger(__name__)


class NewFolder(BaseModel):
    name: str = Field(..., min_length=1)


class FolderUpdate(BaseModel):
    """
    Partial update. parentFolderId distinguishes "absent" (leave as is) from
    an explicit null (detach from parent) via model_fields_set.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    parent_folder_id: Optional[str] = Field(default=None, alias="parentFolderId")


def _require_caller(caller: Optional[str]) -> str:
    if caller is None:
        raise Unauthenticated()
    return caller

def _owns(folder: Dict[str, Any], user_id: str) -> bool:
    return str(folder.get("user_id")) == str(user_id)

async def _load_folder(repo: SupabaseRepo, folder_id: str) -> Dict[str, Any]:
    folder = await repo.get_folder(folder_id)
    if not folder:
        raise NotFound("Folder not found.")
    return folder

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.post("/folders", status_code=status.HTTP_201_CREATED)
async def create_folder(
    body: NewFolder,
    caller: Optional[str] = Depends(get_caller),
    repo: SupabaseRepo = Depends(get_repo),
) -> Dict[str, Any]:
    user_id = _require_caller(caller)
    now = _now()
    folder = await repo.create_folder({
        "name": body.name,
        "user_id": user_id,
        "parent_folder_id": None,
        "created_at": now,
        "updated_at": now,
    })
    logger.info(f"Created folder {folder.get('id')} for user {user_id}")
    return folder


@router.get("/folders")
async def list_folders_for_user(
    caller: Optional[str] = Depends(get_caller),
    repo: SupabaseRepo = Depends(get_repo),
) -> Dict[str, Any]:
    """
    Folders the caller owns plus folders shared with them.
    Shared folders are not filtered against owned ones.
    """
    user_id = _require_caller(caller)
    user_folders = await repo.list_folders_for_owner(user_id)
    shares = await repo.list_shares_for_recipient(user_id)
    return {
        "userFolders": user_folders,
        "sharedFolders": shared_folders_from_shares(shares),
    }


@router.get("/folders/{folder_id}")
async def get_folder_with_files(
    folder_id: str,
    caller: Optional[str] = Depends(get_caller),
    repo: SupabaseRepo = Depends(get_repo),
) -> Dict[str, Any]:
    user_id = _require_caller(caller)
    folder = await _load_folder(repo, folder_id)
    if not _owns(folder, user_id):
        logger.warning(f"User {user_id} denied read of folder {folder_id}")
        raise Forbidden("Unauthorized: Folder does not belong to the user.")

    files = await repo.list_files_in_folders([folder_id])
    return {"folder": folder, "files": files}


@router.get("/folders/{folder_id}/shared")
async def get_folder_with_shared_files(
    folder_id: str,
    caller: Optional[str] = Depends(get_caller),
    repo: SupabaseRepo = Depends(get_repo),
) -> Dict[str, Any]:
    """
    Files inside folder_id that were shared with the caller, either as a
    folder share or one file at a time.

    Ownership is not checked: a caller with no matching share still gets the
    folder back with an empty sharedFiles list.
    """
    user_id = _require_caller(caller)
    folder = await _load_folder(repo, folder_id)

    shares = await repo.list_shares_in_folder(folder_id, user_id)
    folder_shares, file_shares = partition_shares(shares)

    from_folders = await repo.list_files_in_folders(shared_folder_ids(folder_shares))
    direct = await repo.list_files_by_ids(shared_file_ids(file_shares))

    return {
        "folder": folder,
        "sharedFiles": dedupe_by_id([*direct, *from_folders]),
    }


@router.api_route("/folders/{folder_id}", methods=["PATCH", "PUT"])
async def update_folder(
    folder_id: str,
    body: FolderUpdate,
    caller: Optional[str] = Depends(get_caller),
    repo: SupabaseRepo = Depends(get_repo),
) -> Dict[str, Any]:
    user_id = _require_caller(caller)
    folder = await _load_folder(repo, folder_id)
    if not _owns(folder, user_id):
        logger.warning(f"User {user_id} denied update of folder {folder_id}")
        raise Forbidden("Unauthorized: You do not have permission to update this folder.")

    parent_given = "parent_folder_id" in body.model_fields_set
    # "" detaches, same as null
    parent_id = body.parent_folder_id or None

    if parent_id is not None:
        if str(parent_id) == str(folder_id):
            raise InvalidReference("A folder cannot be its own parent.")
        parent = await repo.get_folder(parent_id)
        if not parent:
            raise InvalidReference("Invalid parent folder ID.")
        if not _owns(parent, user_id):
            logger.warning(f"User {user_id} denied moving folder {folder_id} under {parent_id}")
            raise Forbidden("Unauthorized: Parent folder does not belong to the user.")

    changes: Dict[str, Any] = {"updated_at": _now()}
    if body.name:
        changes["name"] = body.name
    if parent_given:
        changes["parent_folder_id"] = parent_id

    updated = await repo.update_folder(folder_id, changes)
    logger.info(f"Updated folder {folder_id}: {sorted(changes)}")
    # Fall back to the merged view if the store did not echo the row back
    return updated or {**folder, **changes}


@router.delete("/folders/{folder_id}")
async def delete_folder(
    folder_id: str,
    caller: Optional[str] = Depends(get_caller),
    repo: SupabaseRepo = Depends(get_repo),
) -> Dict[str, str]:
    user_id = _require_caller(caller)
    folder = await _load_folder(repo, folder_id)
    if not _owns(folder, user_id):
        logger.warning(f"User {user_id} denied delete of folder {folder_id}")
        raise Forbidden("Unauthorized: You do not have permission to delete this folder.")

    # Contained files and shares are left in place.
    await repo.delete_folder(folder_id)
    logger.info(f"Deleted folder {folder_id}")
    return {"message": "Folder deleted successfully."}
