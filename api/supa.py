# api/supa.py
import os
from supabase import acreate_client, AsyncClient
from supabase.lib.client_options import AsyncClientOptions


def _url() -> str:
    return os.getenv("SUPABASE_URL", "").rstrip("/")

def _admin_key() -> str:
    # accept both SERVICE_ROLE and SERVICE_ROLE_KEY
    return (
        os.getenv("SUPABASE_SERVICE_ROLE_KEY")
        or os.getenv("SUPABASE_SERVICE_ROLE")
        or ""
    )

async def admin_client() -> AsyncClient:
    url, key = _url(), _admin_key()
    if not url or not key:
        raise RuntimeError("Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY")

    # Folder lookups are small; keep the default well below the ingestion-era 10 minutes
    timeout = int(os.getenv("SUPABASE_TIMEOUT", "30"))

    return await acreate_client(
        url,
        key,
        options=AsyncClientOptions(
            postgrest_client_timeout=timeout,
            storage_client_timeout=timeout,
        )
    )
