"""Assessment Service: diabetes risk screening from practitioner notes.

Counts trigger terms in a patient's notes and classifies the patient's
diabetes risk from the count, their age and their gender.

Components:
- config.py: Trigger vocabulary, risk band table, runtime settings
- scanner.py: TriggerScanner, counts (note, term) matches
- age.py: Age in completed years
- classifier.py: RiskClassifier over the risk band table
- clients.py: Patient registry and notes store clients
- assessor.py: RiskAssessor, the orchestrating entry point
- handler.py: Flask HTTP endpoints (/health, /ready, /assess)

Usage:
    # As HTTP service
    GET /assess/<patient_id>

    # Direct import
    from mediscreen.services.assessment_service import RiskAssessor
    assessor = RiskAssessor(patient_client, notes_client)
    result = assessor.assess(patient_id)
"""

from .assessor import RiskAssessor
from .age import calculate_age
from .classifier import RiskClassifier
from .clients import (
    HttpNotesClient,
    HttpPatientClient,
    NotesClient,
    PatientClient,
)
from .config import AGE_THRESHOLD, RISK_BANDS, TRIGGER_TERMS, AssessmentConfig, RiskBand
from .errors import (
    AssessmentError,
    CollaboratorUnavailableError,
    InvalidDateError,
    InvalidPatientDataError,
    PatientNotFoundError,
)
from .scanner import ScanResult, TriggerScanner

__all__ = [
    "RiskAssessor",
    "calculate_age",
    "RiskClassifier",
    "HttpNotesClient",
    "HttpPatientClient",
    "NotesClient",
    "PatientClient",
    "AGE_THRESHOLD",
    "RISK_BANDS",
    "TRIGGER_TERMS",
    "AssessmentConfig",
    "RiskBand",
    "AssessmentError",
    "CollaboratorUnavailableError",
    "InvalidDateError",
    "InvalidPatientDataError",
    "PatientNotFoundError",
    "ScanResult",
    "TriggerScanner",
]
