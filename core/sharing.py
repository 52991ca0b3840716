# core/sharing.py
"""
Helpers for turning share records into the folders/files they expose.

Share rows look like:
    {"id", "resource_type": "folder" | "file", "resource_id", "folder_id",
     "shared_with", "owner_id", ...}
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple

FOLDER = "folder"
FILE = "file"


def dedupe_by_id(rows: Iterable[Dict[str, Any]], key: str = "id") -> List[Dict[str, Any]]:
    """
    Drop rows whose `key` was already seen.

    The first occurrence keeps its position; a later duplicate replaces its
    content (last-seen wins). Rows without the key are skipped.
    """
    unique: Dict[Any, Dict[str, Any]] = {}
    for row in rows:
        row_id = row.get(key)
        if row_id is None:
            continue
        unique[row_id] = row
    return list(unique.values())


def shared_folders_from_shares(shares: Iterable[Dict[str, Any]], embed: str = "folder") -> List[Dict[str, Any]]:
    """Folders embedded in share rows, minus deleted ones, one per folder id."""
    folders = [share.get(embed) for share in shares]
    return dedupe_by_id(folder for folder in folders if folder is not None)


def partition_shares(shares: Iterable[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Split shares into (folder_shares, file_shares); other types are ignored."""
    folder_shares: List[Dict[str, Any]] = []
    file_shares: List[Dict[str, Any]] = []
    for share in shares:
        kind = share.get("resource_type")
        if kind == FOLDER:
            folder_shares.append(share)
        elif kind == FILE:
            file_shares.append(share)
    return folder_shares, file_shares


def shared_folder_ids(folder_shares: Iterable[Dict[str, Any]]) -> List[str]:
    return list(dict.fromkeys(s["folder_id"] for s in folder_shares if s.get("folder_id") is not None))


def shared_file_ids(file_shares: Iterable[Dict[str, Any]]) -> List[str]:
    return list(dict.fromkeys(s["resource_id"] for s in file_shares if s.get("resource_id") is not None))
