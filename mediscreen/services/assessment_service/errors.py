"""Assessment Service error types.

Every error raised while assessing a patient derives from AssessmentError.
The HTTP handler maps each subclass to a response status.
"""
from typing import Optional


class AssessmentError(Exception):
    """Base exception for assessment errors."""
    pass


class PatientNotFoundError(AssessmentError):
    """Patient id (or family name) unknown to the patient registry."""

    def __init__(self, patient_ref: str):
        super().__init__(f"Patient not found: {patient_ref}")
        self.patient_ref = patient_ref


class InvalidDateError(AssessmentError):
    """Birthdate falls after the reference date of the assessment."""
    pass


class InvalidPatientDataError(AssessmentError):
    """A collaborator or caller supplied a record that cannot be assessed."""
    pass


class CollaboratorUnavailableError(AssessmentError):
    """A collaborating service could not be reached or failed to answer."""

    def __init__(self, collaborator: str, reason: str, status_code: Optional[int] = None):
        super().__init__(f"{collaborator} unavailable: {reason}")
        self.collaborator = collaborator
        self.reason = reason
        self.status_code = status_code
