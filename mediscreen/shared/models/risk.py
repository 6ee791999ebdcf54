"""Risk level and assessment result domain models.

This file defines the diabetes risk classification shared by the
assessment service and its callers.
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Tuple


class RiskLevel(Enum):
    """Diabetes risk levels, ordered by severity.

    Members compare by severity, so ``RiskLevel.NONE < RiskLevel.BORDERLINE``.
    """
    NONE = "None"
    BORDERLINE = "Borderline"
    IN_DANGER = "InDanger"
    EARLY_ONSET = "EarlyOnset"

    @property
    def severity(self) -> int:
        """Rank of this level, 0 for NONE up to 3 for EARLY_ONSET."""
        return _SEVERITY[self]

    @property
    def label(self) -> str:
        """Human-readable label used in assessment reports."""
        return _LABELS[self]

    def __lt__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity >= other.severity


_SEVERITY = {
    RiskLevel.NONE: 0,
    RiskLevel.BORDERLINE: 1,
    RiskLevel.IN_DANGER: 2,
    RiskLevel.EARLY_ONSET: 3,
}

_LABELS = {
    RiskLevel.NONE: "None",
    RiskLevel.BORDERLINE: "Borderline",
    RiskLevel.IN_DANGER: "In Danger",
    RiskLevel.EARLY_ONSET: "Early onset",
}


@dataclass(frozen=True)
class AssessmentResult:
    """Outcome of one diabetes risk assessment.

    Created fresh per request and never persisted.
    """
    patient_id: str
    patient_name: str
    age: int
    trigger_count: int
    risk_level: RiskLevel
    assessed_on: date
    matched_terms: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "matched_terms", tuple(self.matched_terms))
        if self.trigger_count < 0:
            raise ValueError(f"Trigger count must be >= 0, got {self.trigger_count}")

    def summary(self) -> str:
        """Report sentence shown to practitioners."""
        return (
            f"Patient: {self.patient_name} (age {self.age}) "
            f"diabetes assessment is: {self.risk_level.label}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "patient_id": self.patient_id,
            "patient_name": self.patient_name,
            "age": self.age,
            "trigger_count": self.trigger_count,
            "risk_level": self.risk_level.value,
            "matched_terms": list(self.matched_terms),
            "assessed_on": self.assessed_on.isoformat(),
            "summary": self.summary(),
        }
