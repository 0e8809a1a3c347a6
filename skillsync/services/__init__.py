"""
External service integrations for SkillSync.
"""

from .analysis_provider import (
    AnalysisProvider,
    HttpAnalysisProvider,
    OfflineAnalysisProvider,
    get_analysis_provider,
)

__all__ = [
    "AnalysisProvider",
    "HttpAnalysisProvider",
    "OfflineAnalysisProvider",
    "get_analysis_provider",
]
