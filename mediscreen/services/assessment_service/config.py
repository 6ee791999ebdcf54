"""Assessment Service configuration, trigger vocabulary and risk bands.

The trigger vocabulary and the risk band table are fixed clinical rules.
They are loaded once at import time and never altered at runtime.
"""
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from mediscreen.shared.models import Gender, RiskLevel


# Terms whose presence in a practitioner note signals diabetes risk.
# Matched case-insensitively as plain substrings.
TRIGGER_TERMS: Tuple[str, ...] = (
    "Hemoglobin A1C",
    "Microalbumin",
    "Height",
    "Weight",
    "Smoker",
    "Abnormal",
    "Cholesterol",
    "Dizziness",
    "Relapse",
    "Reaction",
    "Antibodies",
)

# Patients above this age are classified without regard to gender.
AGE_THRESHOLD = 30


@dataclass(frozen=True)
class RiskBand:
    """One row of the classification table.

    All bounds are inclusive; None means unbounded. A band with
    gender=None applies to every gender.
    """
    level: RiskLevel
    min_triggers: int
    max_triggers: Optional[int] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    gender: Optional[Gender] = None

    def matches(self, age: int, gender: Gender, trigger_count: int) -> bool:
        if self.min_age is not None and age < self.min_age:
            return False
        if self.max_age is not None and age > self.max_age:
            return False
        if self.gender is not None and gender != self.gender:
            return False
        if trigger_count < self.min_triggers:
            return False
        if self.max_triggers is not None and trigger_count > self.max_triggers:
            return False
        return True


_OVER = AGE_THRESHOLD + 1

# Evaluated top to bottom, first match wins.
# Patients aged 30 and under have no Borderline tier.
RISK_BANDS: Tuple[RiskBand, ...] = (
    # Over 30, any gender
    RiskBand(RiskLevel.NONE, 0, 1, min_age=_OVER),
    RiskBand(RiskLevel.BORDERLINE, 2, 5, min_age=_OVER),
    RiskBand(RiskLevel.IN_DANGER, 6, 7, min_age=_OVER),
    RiskBand(RiskLevel.EARLY_ONSET, 8, None, min_age=_OVER),
    # 30 and under, male
    RiskBand(RiskLevel.NONE, 0, 2, max_age=AGE_THRESHOLD, gender=Gender.MALE),
    RiskBand(RiskLevel.IN_DANGER, 3, 4, max_age=AGE_THRESHOLD, gender=Gender.MALE),
    RiskBand(RiskLevel.EARLY_ONSET, 5, None, max_age=AGE_THRESHOLD, gender=Gender.MALE),
    # 30 and under, female
    RiskBand(RiskLevel.NONE, 0, 3, max_age=AGE_THRESHOLD, gender=Gender.FEMALE),
    RiskBand(RiskLevel.IN_DANGER, 4, 6, max_age=AGE_THRESHOLD, gender=Gender.FEMALE),
    RiskBand(RiskLevel.EARLY_ONSET, 7, None, max_age=AGE_THRESHOLD, gender=Gender.FEMALE),
)


@dataclass(frozen=True)
class AssessmentConfig:
    """Runtime settings for the Assessment Service."""

    # Base URLs of the collaborating services
    patient_service_url: str = "http://localhost:8080"
    notes_service_url: str = "http://localhost:8082"

    # Per-call timeout for collaborator requests (seconds)
    request_timeout_seconds: float = 5.0

    # Version tracking for log traceability
    vocabulary_version: str = "2024.06.01"

    @classmethod
    def from_env(cls) -> "AssessmentConfig":
        """Create config from environment variables.

        Environment variables:
            PATIENT_SERVICE_URL: Patient registry base URL
            NOTES_SERVICE_URL: Notes store base URL
            REQUEST_TIMEOUT_SECONDS: Collaborator call timeout (default 5)
            VOCABULARY_VERSION: Trigger vocabulary version label
        """
        defaults = cls()
        return cls(
            patient_service_url=os.getenv("PATIENT_SERVICE_URL", defaults.patient_service_url).rstrip("/"),
            notes_service_url=os.getenv("NOTES_SERVICE_URL", defaults.notes_service_url).rstrip("/"),
            request_timeout_seconds=float(
                os.getenv("REQUEST_TIMEOUT_SECONDS", str(defaults.request_timeout_seconds))
            ),
            vocabulary_version=os.getenv("VOCABULARY_VERSION", defaults.vocabulary_version),
        )
