"""Pydantic models for funcdiff API requests and responses."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class AnalyzeRequest(BaseModel):
    """Request model for the analyze endpoint."""

    old_commit: str = Field(
        ...,
        description="Old revision: commit SHA, abbreviated hash, tag or branch",
        examples=["ba7765dd48c0ba51f4fd12cde48fd100aecdb743"],
    )
    new_commit: str = Field(
        ...,
        description="New revision: commit SHA, abbreviated hash, tag or branch",
        examples=["d7a39abec5a282b9955afdd1649a5f1bafae35f7"],
    )
    repo_path: Optional[str] = Field(
        None,
        description="Local repository path; defaults to the configured repository",
        examples=["/srv/repos/myapp"],
    )
    target_scope: Optional[str] = Field(
        None,
        description="Package or directory to restrict the analysis to",
        examples=["com.example.myapp"],
    )

    @field_validator("old_commit", "new_commit")
    @classmethod
    def revision_must_be_valid(cls, v):
        """Basic validation for revision identifiers."""
        v = v.strip()
        if not v:
            raise ValueError("revision cannot be empty")
        if v.startswith("-"):
            raise ValueError("revision cannot start with '-'")
        return v

    @field_validator("repo_path")
    @classmethod
    def repo_path_must_not_be_blank(cls, v):
        """Reject blank repository paths."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("repo_path cannot be empty")
        return v


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str = Field(..., examples=["UP"])
    service: str = Field(..., examples=["funcdiff"])
    version: str = Field(..., examples=["1.0.0"])
    git_available: bool = Field(..., examples=[True])
    git_version: Optional[str] = Field(None, examples=["2.34.1"])
    timestamp: int = Field(..., description="Epoch milliseconds", examples=[1760000000000])


class VersionResponse(BaseModel):
    """Response model for version endpoint."""

    version: str = Field(..., examples=["1.0.0"])
    api_version: str = Field(..., examples=["v1"])
    git_version: Optional[str] = Field(None, examples=["2.34.1"])
    supported_features: List[str] = Field(
        default_factory=lambda: [
            "function_level_diff",
            "signature_change_detection",
            "body_change_detection",
            "target_scope_filter",
            "deterministic_output",
        ]
    )


class RepositoryInfoResponse(BaseModel):
    """Response model for repository information endpoint."""

    status: str = Field(..., examples=["success"])
    repository: str = Field(..., examples=["."])
    description: str
    target_scope: Optional[str] = Field(None, examples=["com.example.myapp"])
    source_extensions: List[str] = Field(default_factory=lambda: [".java"])
