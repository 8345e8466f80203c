"""Service layer for the funcdiff API."""

from .analysis import AnalysisService

__all__ = ["AnalysisService"]
