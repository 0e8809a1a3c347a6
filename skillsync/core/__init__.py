"""
Core domain logic for SkillSync.

Submodules:
- classification: Score tiers and status badges
- matching: Skill set partitioning and AI gap analysis
- pipeline: Application timeline state machine and status pipeline
- analytics: Chart and CSV export aggregations
"""
