"""Application-wide settings and environment loading."""

import logging
import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()
logger.debug("Environment variables loaded from .env if present")


@lru_cache(maxsize=1)
def get_repository_path() -> str:
    """Return the repository analyzed when a caller does not name one."""
    repo_path = os.getenv("FUNCDIFF_REPO_PATH", ".")
    logger.debug("Repository path resolved", extra={"repo_path": repo_path})
    return repo_path


@lru_cache(maxsize=1)
def get_target_scope() -> Optional[str]:
    """Return the default target scope, or None to analyze every path."""
    scope = os.getenv("FUNCDIFF_TARGET_SCOPE")
    if scope and scope.strip():
        logger.debug("Target scope configured", extra={"target_scope": scope})
        return scope.strip()

    logger.debug("Target scope not configured")
    return None


@lru_cache(maxsize=1)
def get_cors_origins() -> List[str]:
    """Return allowed CORS origins from a comma separated variable."""
    raw = os.getenv("FUNCDIFF_CORS_ORIGINS", "*")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]
