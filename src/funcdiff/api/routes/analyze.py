"""Analysis routes for the funcdiff API."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..models import AnalyzeRequest, RepositoryInfoResponse
from ..services import AnalysisService

router = APIRouter(tags=["analysis"])

logger = logging.getLogger(__name__)

analysis_service = AnalysisService()


@router.post("/analyze")
def analyze_changes(request: AnalyzeRequest) -> JSONResponse:
    """Report functions added, deleted or changed between two revisions."""
    logger.info(
        "Received analysis request",
        extra={"old_ref": request.old_commit, "new_ref": request.new_commit},
    )

    envelope = analysis_service.analyze_request(
        old_commit=request.old_commit,
        new_commit=request.new_commit,
        repo_path=request.repo_path,
        target_scope=request.target_scope,
    )

    if not envelope["ok"]:
        logger.info(
            "Analysis request failed",
            extra={"code": envelope["error"]["code"]},
        )
        return JSONResponse(status_code=500, content=envelope)

    return JSONResponse(status_code=200, content=envelope)


@router.get("/repository", response_model=RepositoryInfoResponse)
def repository_info() -> RepositoryInfoResponse:
    """Describe the default repository and target scope."""
    logger.info("Repository info requested")
    return RepositoryInfoResponse(**analysis_service.repository_info())
