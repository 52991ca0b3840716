# api/routes/health.py
from typing import Any, Dict
from fastapi import APIRouter

router = APIRouter()

@router.api_route("/health", methods=["GET", "HEAD"])
def health() -> Dict[str, Any]:
    return {"ok": True}
