"""
Data layer for SkillSync.

Submodules:
- models: Pydantic data models, view-models and analytics rows
"""
