"""Shared domain models for Mediscreen services."""
from .patient import Gender, PatientNote, PatientProfile
from .risk import AssessmentResult, RiskLevel

__all__ = [
    "Gender",
    "PatientNote",
    "PatientProfile",
    "AssessmentResult",
    "RiskLevel",
]
