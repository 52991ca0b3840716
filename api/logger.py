# api/logger.py
"""
Logging setup shared by the API: stdout handler, request IDs and a
request-aware adapter for handler logs.
"""

import logging
import sys
import uuid
from typing import Optional
from contextvars import ContextVar

# Request context for tracking request IDs across async calls
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)

# Configure root logger
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] [%(name)s] %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)

def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)

def get_request_logger(name: str) -> "RequestLogger":
    """Get a logger that tags every line with the current request ID."""
    return RequestLogger(logging.getLogger(name), {})

def new_request_id() -> str:
    return uuid.uuid4().hex

def set_request_id(request_id: Optional[str]):
    """Set request ID for current context."""
    request_id_var.set(request_id)

def get_request_id() -> Optional[str]:
    """Get request ID from current context."""
    return request_id_var.get()

class RequestLogger(logging.LoggerAdapter):
    """Logger adapter that automatically includes request ID."""

    def process(self, msg, kwargs):
        request_id = get_request_id()
        if request_id:
            msg = f"[req:{request_id[:8]}] {msg}"
        return msg, kwargs
