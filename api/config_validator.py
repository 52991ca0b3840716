# api/config_validator.py
"""
Startup configuration validator - fails fast when required env vars are missing.
"""

import os
import sys
from typing import List, Tuple

from api.logger import get_logger

logger = get_logger(__name__)


def validate_required_env_vars() -> Tuple[bool, List[str]]:
    """
    Validate that all required environment variables are set.

    Returns:
        Tuple of (is_valid, list_of_missing_vars)
    """
    required_vars = [
        "SUPABASE_URL",
        ("SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_SERVICE_ROLE"),  # Either one is fine
    ]

    missing = []

    for var in required_vars:
        if isinstance(var, tuple):
            # Check if at least one of the alternatives is set
            if not any(os.getenv(v) for v in var):
                missing.append(f"{var[0]} or {var[1]}")
        else:
            if not os.getenv(var):
                missing.append(var)

    return len(missing) == 0, missing


def validate_optional_features() -> List[str]:
    """
    Check optional feature configurations and return warnings.
    """
    warnings = []

    if not os.getenv("SUPABASE_JWT_SECRET"):
        warnings.append(
            "SUPABASE_JWT_SECRET not set - legacy HS256 tokens will be rejected"
        )

    if not os.getenv("FRONTEND_ORIGIN"):
        warnings.append(
            "FRONTEND_ORIGIN not set - CORS only allows localhost dev origins and the default frontend"
        )

    timeout = os.getenv("SUPABASE_TIMEOUT")
    if timeout is not None and not timeout.isdigit():
        warnings.append(
            f"SUPABASE_TIMEOUT={timeout!r} is not an integer number of seconds"
        )

    return warnings


def validate_startup_config(exit_on_failure: bool = True) -> bool:
    """
    Run all startup validation checks.

    Args:
        exit_on_failure: If True, sys.exit(1) on validation failure

    Returns:
        True if all required configs are valid
    """
    logger.info("Validating startup configuration...")

    is_valid, missing = validate_required_env_vars()

    if not is_valid:
        logger.error(
            "Missing required environment variables: %s. "
            "Set them in your .env file or environment.",
            ", ".join(missing),
        )
        if exit_on_failure:
            sys.exit(1)
        return False

    for warning in validate_optional_features():
        logger.warning(warning)

    logger.info("Configuration validation complete")
    return True


if __name__ == "__main__":
    # Can be run standalone to check config
    validate_startup_config(exit_on_failure=False)
