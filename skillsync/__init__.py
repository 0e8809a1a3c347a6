"""
SkillSync domain core.

Match classification, skill gap analysis, application lifecycle tracking
and hiring analytics for the SkillSync recruiting platform.
"""

__app_name__ = "SkillSync"
__version__ = "0.1.0"
