"""Pydantic schemas"""
from app.schemas.object import ExtractedObject, ObjectRelationship
from app.schemas.report import AssessmentSnapshot, AssessmentReport, UsageCounts

__all__ = [
    "ExtractedObject",
    "ObjectRelationship",
    "AssessmentSnapshot",
    "AssessmentReport",
    "UsageCounts",
]
