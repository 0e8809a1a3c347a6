"""Skill set partitioning and AI gap analysis module."""

from .skill_analyzer import (
    AnalysisSession,
    SkillPartition,
    SkillSetAnalyzer,
    build_match_view,
    get_skill_analyzer,
    informational_score,
    parse_analysis_payload,
    partition,
    recover_analysis_payload,
)

__all__ = [
    "AnalysisSession",
    "SkillPartition",
    "SkillSetAnalyzer",
    "build_match_view",
    "get_skill_analyzer",
    "informational_score",
    "parse_analysis_payload",
    "partition",
    "recover_analysis_payload",
]
