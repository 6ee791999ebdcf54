"""Collaborator clients for the patient registry and the notes store.

The assessment service only reads from these services. Abstract interfaces
let tests substitute in-memory fakes; the HTTP implementations talk to the
running services.

Error contract:
- Unknown or malformed patient id (404, 400) -> PatientNotFoundError
- Patient without notes -> empty list, not an error
- Transport failure, timeout or 5xx -> CollaboratorUnavailableError
- Unparseable payload or any other 4xx -> InvalidPatientDataError
"""
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from mediscreen.shared.models import Gender, PatientNote, PatientProfile
from mediscreen.shared.utils import hash_pii
from .errors import (
    CollaboratorUnavailableError,
    InvalidPatientDataError,
    PatientNotFoundError,
)

logger = logging.getLogger(__name__)

PATIENT_SERVICE = "patient-service"
NOTES_SERVICE = "notes-service"


class PatientClient(ABC):
    """Read-only access to the patient registry."""

    @abstractmethod
    def get_patient(self, patient_id: str) -> PatientProfile:
        """Fetch a patient profile.

        Raises:
            PatientNotFoundError: If the id is unknown
        """
        pass

    @abstractmethod
    def find_by_family_name(self, family_name: str) -> List[PatientProfile]:
        """Fetch every patient with the given family name (may be empty)."""
        pass


class NotesClient(ABC):
    """Read-only access to the notes store."""

    @abstractmethod
    def get_notes_for_patient(self, patient_id: str) -> List[PatientNote]:
        """Fetch a patient's notes in store order (empty if none)."""
        pass


def parse_patient(payload: Dict[str, Any]) -> PatientProfile:
    """Build a PatientProfile from a patient registry payload.

    Accepts the registry's field names (lastName, firstName) as well as
    familyName/givenName.

    Raises:
        InvalidPatientDataError: If a required field is missing or malformed
    """
    if not isinstance(payload, dict):
        raise InvalidPatientDataError("Patient payload must be a JSON object")

    family_name = payload.get("lastName", payload.get("familyName"))
    given_name = payload.get("firstName", payload.get("givenName"))
    raw_birthdate = payload.get("birthdate", payload.get("birthDate"))
    raw_gender = payload.get("gender")

    missing = [
        name for name, value in (
            ("familyName", family_name),
            ("givenName", given_name),
            ("birthdate", raw_birthdate),
            ("gender", raw_gender),
        )
        if value in (None, "")
    ]
    if missing:
        raise InvalidPatientDataError(f"Patient payload missing fields: {', '.join(missing)}")

    try:
        birthdate = date.fromisoformat(str(raw_birthdate))
    except ValueError as e:
        raise InvalidPatientDataError(f"Invalid birthdate: {raw_birthdate!r}") from e

    try:
        gender = Gender.parse(raw_gender)
    except ValueError as e:
        raise InvalidPatientDataError(str(e)) from e

    return PatientProfile(
        patient_id=str(payload.get("id", "")),
        family_name=str(family_name),
        given_name=str(given_name),
        birthdate=birthdate,
        gender=gender,
    )


def parse_note(payload: Dict[str, Any]) -> PatientNote:
    """Build a PatientNote from a notes store payload.

    Raises:
        InvalidPatientDataError: If the payload is not an object
    """
    if not isinstance(payload, dict):
        raise InvalidPatientDataError("Note payload must be a JSON object")

    created_date: Optional[date] = None
    raw_created = payload.get("creationDate")
    if raw_created:
        try:
            created_date = date.fromisoformat(str(raw_created)[:10])
        except ValueError as e:
            raise InvalidPatientDataError(f"Invalid creationDate: {raw_created!r}") from e

    return PatientNote(
        note_id=str(payload.get("id", "")),
        patient_id=str(payload.get("patientId", "")),
        body=str(payload.get("note") or ""),
        created_date=created_date,
    )


class _HttpClient:
    """Shared GET plumbing for the collaborator HTTP clients."""

    def __init__(
        self,
        service_name: str,
        base_url: str,
        timeout_seconds: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.service_name = service_name
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

        logger.info(
            "COLLABORATOR_CLIENT_INITIALIZED",
            extra={
                "service": service_name,
                "base_url": self.base_url,
                "timeout_seconds": timeout_seconds,
            }
        )

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            logger.error(
                "COLLABORATOR_UNREACHABLE",
                extra={
                    "service": self.service_name,
                    "error": str(e),
                    "error_type": type(e).__name__,
                }
            )
            raise CollaboratorUnavailableError(self.service_name, type(e).__name__) from e

        if response.status_code >= 500:
            logger.error(
                "COLLABORATOR_ERROR_RESPONSE",
                extra={"service": self.service_name, "status_code": response.status_code}
            )
            raise CollaboratorUnavailableError(
                self.service_name,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def _json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise InvalidPatientDataError(f"{self.service_name} returned invalid JSON") from e

    def _raise_unexpected(self, response: requests.Response) -> None:
        # 5xx is handled in _get; anything left is a definite rejection
        logger.warning(
            "COLLABORATOR_REJECTED_REQUEST",
            extra={"service": self.service_name, "status_code": response.status_code}
        )
        raise InvalidPatientDataError(
            f"{self.service_name} rejected request with HTTP {response.status_code}"
        )


class HttpPatientClient(_HttpClient, PatientClient):
    """Patient registry client over its JSON API."""

    def __init__(self, base_url: str, timeout_seconds: float = 5.0, session: Optional[requests.Session] = None):
        super().__init__(PATIENT_SERVICE, base_url, timeout_seconds, session)

    def get_patient(self, patient_id: str) -> PatientProfile:
        response = self._get(f"/api/patients/{patient_id}")
        # The registry answers 400 for ids it cannot parse
        if response.status_code in (400, 404):
            logger.info(
                "PATIENT_NOT_FOUND",
                extra={"patient_id_hash": hash_pii(patient_id)}
            )
            raise PatientNotFoundError(str(patient_id))
        if response.status_code != 200:
            self._raise_unexpected(response)

        profile = parse_patient(self._json(response))
        if not profile.patient_id:
            profile = PatientProfile(
                patient_id=str(patient_id),
                family_name=profile.family_name,
                given_name=profile.given_name,
                birthdate=profile.birthdate,
                gender=profile.gender,
            )
        return profile

    def find_by_family_name(self, family_name: str) -> List[PatientProfile]:
        response = self._get("/api/patients", params={"familyName": family_name})
        if response.status_code == 404:
            return []
        if response.status_code != 200:
            self._raise_unexpected(response)

        payload = self._json(response)
        if not isinstance(payload, list):
            raise InvalidPatientDataError("Patient search must return a JSON list")
        return [parse_patient(item) for item in payload]


class HttpNotesClient(_HttpClient, NotesClient):
    """Notes store client over its JSON API."""

    def __init__(self, base_url: str, timeout_seconds: float = 5.0, session: Optional[requests.Session] = None):
        super().__init__(NOTES_SERVICE, base_url, timeout_seconds, session)

    def get_notes_for_patient(self, patient_id: str) -> List[PatientNote]:
        response = self._get(f"/api/notes/patient/{patient_id}")
        if response.status_code == 404:
            return []
        if response.status_code != 200:
            self._raise_unexpected(response)

        payload = self._json(response)
        if not isinstance(payload, list):
            raise InvalidPatientDataError("Notes lookup must return a JSON list")
        return [parse_note(item) for item in payload]
