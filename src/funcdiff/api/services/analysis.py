"""Service layer for the funcdiff API."""

import logging
from typing import Any, Dict, Optional

from ...analyzer import run_analysis
from ...config import DEFAULT_SOURCE_EXTENSIONS, AnalysisConfig
from ...errors import FuncDiffError
from ...serialize import ResultSerializer
from ...settings import get_repository_path, get_target_scope

logger = logging.getLogger(__name__)


class AnalysisService:
    """Runs function change analyses on behalf of the HTTP routes."""

    def analyze_request(
        self,
        old_commit: str,
        new_commit: str,
        repo_path: Optional[str] = None,
        target_scope: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Analyze a request and return a success or error envelope."""
        repo_path = repo_path or get_repository_path()
        if target_scope is None:
            target_scope = get_target_scope()

        logger.info(
            "Processing analysis request",
            extra={"repo_path": repo_path, "old_ref": old_commit, "new_ref": new_commit},
        )

        try:
            config = AnalysisConfig(
                repo_path=repo_path,
                old_ref=old_commit,
                new_ref=new_commit,
                target_scope=target_scope,
            )
            result = run_analysis(config)

            serializer = ResultSerializer(config)
            envelope = serializer.create_success_envelope(serializer.serialize_result(result))

            logger.info(
                "Analysis request succeeded",
                extra={"repo_path": repo_path, "changes": result.total_changes},
            )
            return envelope

        except FuncDiffError as exc:
            logger.warning(
                "Known funcdiff error",
                extra={"repo_path": repo_path, "code": exc.code},
            )
            return ResultSerializer().create_error_envelope(exc.code, exc.message, exc.details)

        except Exception as exc:  # pragma: no cover
            logger.exception("Unexpected error during analysis", extra={"repo_path": repo_path})
            return ResultSerializer().create_error_envelope(
                "INTERNAL_ERROR",
                f"Internal error: {str(exc)}",
                {"exception_type": type(exc).__name__},
            )

    def repository_info(self) -> Dict[str, Any]:
        """Describe the repository and scope used when requests name none."""
        return {
            "status": "success",
            "repository": get_repository_path(),
            "description": "Finds functions added, deleted or changed between two Git revisions",
            "target_scope": get_target_scope(),
            "source_extensions": list(DEFAULT_SOURCE_EXTENSIONS),
        }
