"""Error definitions and handling for funcdiff."""

from typing import Any, Dict, Optional


class FuncDiffError(Exception):
    """Base exception for funcdiff errors."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with code, message, and optional details."""
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class RepositoryOpenError(FuncDiffError):
    """Repository path is missing or not a git work tree."""

    def __init__(self, repo_path: str, reason: str):
        super().__init__(
            code="REPOSITORY_OPEN_FAILED",
            message=f"Failed to open repository at {repo_path}: {reason}",
            details={"repo_path": repo_path, "reason": reason},
        )


class GitVersionUnsupportedError(FuncDiffError):
    """Git version is not supported."""

    def __init__(self, detected_version: str, required_version: str = "2.30"):
        super().__init__(
            code="GIT_VERSION_UNSUPPORTED",
            message=f"Git version {detected_version} is not supported. "
            f"Minimum required: {required_version}",
            details={
                "detected_version": detected_version,
                "required_version": required_version,
            },
        )


class RevisionResolutionError(FuncDiffError):
    """A revision identifier does not resolve to a commit."""

    def __init__(self, ref: str, repo_path: str):
        super().__init__(
            code="REVISION_NOT_FOUND",
            message=f"Revision does not resolve to a commit: {ref}",
            details={"ref": ref, "repo_path": repo_path},
        )


class GitCommandTimeoutError(FuncDiffError):
    """A git subprocess timed out."""

    def __init__(self, operation: str, timeout_seconds: float):
        super().__init__(
            code="GIT_TIMEOUT",
            message=f"Timeout during git {operation} after {timeout_seconds}s",
            details={"operation": operation, "timeout_seconds": timeout_seconds},
        )


class ContentReadError(FuncDiffError):
    """Reading or decoding a blob failed for reasons other than absence."""

    def __init__(self, path: str, revision: str, reason: str):
        super().__init__(
            code="CONTENT_READ_FAILED",
            message=f"Failed to read {path} at {revision}: {reason}",
            details={"path": path, "revision": revision, "reason": reason},
        )


class ParseError(FuncDiffError):
    """Source text could not be parsed into a syntax tree."""

    def __init__(self, reason: str, line: Optional[int] = None):
        details: Dict[str, Any] = {"reason": reason}
        if line is not None:
            details["line"] = line
        super().__init__(
            code="PARSE_FAILED",
            message=f"Failed to parse source: {reason}",
            details=details,
        )


class AnalysisError(FuncDiffError):
    """Function change analysis could not be completed."""

    def __init__(self, old_ref: str, new_ref: str, cause: Exception):
        details: Dict[str, Any] = {"old_ref": old_ref, "new_ref": new_ref}
        if isinstance(cause, FuncDiffError):
            details["cause_code"] = cause.code
            reason = cause.message
        else:
            details["cause_type"] = type(cause).__name__
            reason = str(cause)
        super().__init__(
            code="ANALYSIS_FAILED",
            message=f"Failed to analyze function changes: {reason}",
            details=details,
        )
        self.cause = cause
