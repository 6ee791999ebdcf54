"""Risk assessment orchestration.

Fetches a patient's profile and notes from the collaborating services, then
runs scan -> age -> classify. Nothing is cached: every call reflects the
current notes and the current date.
"""
import logging
from datetime import date
from typing import List, Optional, Sequence

from mediscreen.shared.models import AssessmentResult, PatientProfile
from mediscreen.shared.utils import hash_pii
from .age import calculate_age
from .classifier import RiskClassifier
from .clients import NotesClient, PatientClient
from .errors import PatientNotFoundError
from .scanner import TriggerScanner

logger = logging.getLogger(__name__)


class RiskAssessor:
    """Public entry point of the assessment service.

    Holds no per-request state; one instance serves concurrent requests.
    """

    def __init__(
        self,
        patient_client: PatientClient,
        notes_client: NotesClient,
        scanner: Optional[TriggerScanner] = None,
        classifier: Optional[RiskClassifier] = None,
    ):
        """Initialize assessor.

        Args:
            patient_client: Patient registry lookup
            notes_client: Notes store lookup
            scanner: Trigger scanner, defaults to the fixed vocabulary
            classifier: Risk classifier, defaults to the standard bands
        """
        self.patient_client = patient_client
        self.notes_client = notes_client
        self.scanner = scanner or TriggerScanner()
        self.classifier = classifier or RiskClassifier()

    def assess(self, patient_id: str, as_of: Optional[date] = None) -> AssessmentResult:
        """Assess one patient by id.

        Args:
            patient_id: Patient registry identifier
            as_of: Reference date for the age, defaults to today

        Returns:
            AssessmentResult for the patient

        Raises:
            PatientNotFoundError: If the patient registry has no such patient
            InvalidDateError: If the birthdate is after as_of
            CollaboratorUnavailableError: If either lookup fails
        """
        patient_id_hash = hash_pii(patient_id)
        logger.info("ASSESSMENT_REQUESTED", extra={"patient_id_hash": patient_id_hash})

        # Raises before the notes store is consulted
        profile = self.patient_client.get_patient(patient_id)
        notes = self.notes_client.get_notes_for_patient(patient_id)

        return self.assess_profile(profile, [note.body for note in notes], as_of=as_of)

    def assess_by_family_name(
        self,
        family_name: str,
        as_of: Optional[date] = None,
    ) -> List[AssessmentResult]:
        """Assess every patient sharing a family name.

        Raises:
            PatientNotFoundError: If no patient has this family name
        """
        profiles = self.patient_client.find_by_family_name(family_name)
        if not profiles:
            logger.info(
                "ASSESSMENT_FAMILY_NOT_FOUND",
                extra={"family_name_hash": hash_pii(family_name)}
            )
            raise PatientNotFoundError(family_name)

        results = []
        for profile in profiles:
            notes = self.notes_client.get_notes_for_patient(profile.patient_id)
            results.append(
                self.assess_profile(profile, [note.body for note in notes], as_of=as_of)
            )
        return results

    def assess_profile(
        self,
        profile: PatientProfile,
        note_bodies: Sequence[str],
        as_of: Optional[date] = None,
    ) -> AssessmentResult:
        """Assess a patient whose profile and notes are already in hand.

        Args:
            profile: Patient demographics
            note_bodies: Full text of each note
            as_of: Reference date for the age, defaults to today

        Returns:
            AssessmentResult for the patient
        """
        as_of = as_of or date.today()

        scan = self.scanner.scan(note_bodies)
        age = calculate_age(profile.birthdate, as_of)
        risk_level = self.classifier.classify(age, profile.gender, scan.trigger_count)

        logger.info(
            "ASSESSMENT_COMPLETED",
            extra={
                "patient_id_hash": hash_pii(profile.patient_id),
                "note_count": len(note_bodies),
                "trigger_count": scan.trigger_count,
                "age": age,
                "gender": profile.gender.value,
                "risk_level": risk_level.value,
            }
        )

        return AssessmentResult(
            patient_id=profile.patient_id,
            patient_name=profile.full_name,
            age=age,
            trigger_count=scan.trigger_count,
            risk_level=risk_level,
            assessed_on=as_of,
            matched_terms=scan.matched_terms,
        )
