"""Tests for the patient registry and notes store HTTP clients."""
from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from mediscreen.shared.models import Gender
from mediscreen.shared.utils import configure_pii_salt
from mediscreen.services.assessment_service.clients import (
    HttpNotesClient,
    HttpPatientClient,
    parse_note,
    parse_patient,
)
from mediscreen.services.assessment_service.errors import (
    CollaboratorUnavailableError,
    InvalidPatientDataError,
    PatientNotFoundError,
)


@pytest.fixture(autouse=True)
def setup_pii_salt():
    configure_pii_salt("test_salt_that_is_at_least_32_characters_long")


def _response(status_code, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


@pytest.fixture
def session():
    session = MagicMock()
    session.headers = {}
    return session


PATIENT_PAYLOAD = {
    "id": 1,
    "lastName": "TestNone",
    "firstName": "Test",
    "birthdate": "1966-12-31",
    "gender": "F",
    "address": "1 Brookside St",
    "phone": "100-222-3333",
}


class TestParsePatient:
    def test_registry_field_names(self):
        profile = parse_patient(PATIENT_PAYLOAD)

        assert profile.patient_id == "1"
        assert profile.family_name == "TestNone"
        assert profile.given_name == "Test"
        assert profile.birthdate == date(1966, 12, 31)
        assert profile.gender == Gender.FEMALE
        assert profile.full_name == "Test TestNone"

    def test_alternate_field_names(self):
        profile = parse_patient({
            "familyName": "Ferguson",
            "givenName": "Lucas",
            "birthDate": "1968-06-22",
            "gender": "Male",
        })

        assert profile.family_name == "Ferguson"
        assert profile.gender == Gender.MALE

    def test_missing_fields_raise(self):
        with pytest.raises(InvalidPatientDataError) as exc_info:
            parse_patient({"lastName": "TestNone"})
        assert "birthdate" in str(exc_info.value)

    def test_bad_birthdate_raises(self):
        payload = dict(PATIENT_PAYLOAD, birthdate="31/12/1966")
        with pytest.raises(InvalidPatientDataError):
            parse_patient(payload)

    def test_bad_gender_raises(self):
        payload = dict(PATIENT_PAYLOAD, gender="X")
        with pytest.raises(InvalidPatientDataError):
            parse_patient(payload)

    def test_non_object_raises(self):
        with pytest.raises(InvalidPatientDataError):
            parse_patient(None)


class TestParseNote:
    def test_note_fields(self):
        note = parse_note({
            "id": "64a1f",
            "patientId": 1,
            "note": "Patient states that they are 'feeling terrific' Weight at or below recommended level",
            "creationDate": "2024-05-02",
        })

        assert note.note_id == "64a1f"
        assert note.patient_id == "1"
        assert note.body.startswith("Patient states")
        assert note.created_date == date(2024, 5, 2)

    def test_missing_body_is_empty(self):
        assert parse_note({"id": "n1", "patientId": 1}).body == ""

    def test_datetime_creation_date(self):
        note = parse_note({"id": "n1", "note": "x", "creationDate": "2024-05-02T10:30:00"})
        assert note.created_date == date(2024, 5, 2)


class TestHttpPatientClient:
    def test_get_patient(self, session):
        session.get.return_value = _response(200, PATIENT_PAYLOAD)
        client = HttpPatientClient("http://patient:8080/", session=session)

        profile = client.get_patient("1")

        assert profile.family_name == "TestNone"
        session.get.assert_called_once_with(
            "http://patient:8080/api/patients/1", params=None, timeout=5.0
        )

    def test_missing_id_in_payload_uses_requested_id(self, session):
        payload = {key: value for key, value in PATIENT_PAYLOAD.items() if key != "id"}
        session.get.return_value = _response(200, payload)
        client = HttpPatientClient("http://patient:8080", session=session)

        assert client.get_patient("7").patient_id == "7"

    def test_404_raises_not_found(self, session):
        session.get.return_value = _response(404)
        client = HttpPatientClient("http://patient:8080", session=session)

        with pytest.raises(PatientNotFoundError):
            client.get_patient("999")

    def test_400_raises_not_found(self, session):
        session.get.return_value = _response(400)
        client = HttpPatientClient("http://patient:8080", session=session)

        with pytest.raises(PatientNotFoundError):
            client.get_patient("abc")

    def test_403_raises_invalid_data(self, session):
        session.get.return_value = _response(403)
        client = HttpPatientClient("http://patient:8080", session=session)

        with pytest.raises(InvalidPatientDataError) as exc_info:
            client.get_patient("1")
        assert "HTTP 403" in str(exc_info.value)

    def test_500_raises_unavailable(self, session):
        session.get.return_value = _response(503)
        client = HttpPatientClient("http://patient:8080", session=session)

        with pytest.raises(CollaboratorUnavailableError) as exc_info:
            client.get_patient("1")
        assert exc_info.value.collaborator == "patient-service"
        assert exc_info.value.status_code == 503

    def test_connection_error_raises_unavailable(self, session):
        session.get.side_effect = requests.ConnectionError("refused")
        client = HttpPatientClient("http://patient:8080", session=session)

        with pytest.raises(CollaboratorUnavailableError):
            client.get_patient("1")

    def test_timeout_raises_unavailable(self, session):
        session.get.side_effect = requests.Timeout("slow")
        client = HttpPatientClient("http://patient:8080", timeout_seconds=0.5, session=session)

        with pytest.raises(CollaboratorUnavailableError) as exc_info:
            client.get_patient("1")
        assert exc_info.value.reason == "Timeout"

    def test_invalid_json_raises(self, session):
        response = _response(200)
        response.json.side_effect = ValueError("not json")
        session.get.return_value = response
        client = HttpPatientClient("http://patient:8080", session=session)

        with pytest.raises(InvalidPatientDataError):
            client.get_patient("1")

    def test_find_by_family_name(self, session):
        session.get.return_value = _response(200, [PATIENT_PAYLOAD])
        client = HttpPatientClient("http://patient:8080", session=session)

        profiles = client.find_by_family_name("TestNone")

        assert [p.patient_id for p in profiles] == ["1"]
        session.get.assert_called_once_with(
            "http://patient:8080/api/patients",
            params={"familyName": "TestNone"},
            timeout=5.0,
        )

    def test_find_by_family_name_none(self, session):
        session.get.return_value = _response(200, [])
        client = HttpPatientClient("http://patient:8080", session=session)

        assert client.find_by_family_name("Nobody") == []


class TestHttpNotesClient:
    def test_get_notes(self, session):
        session.get.return_value = _response(200, [
            {"id": "n1", "patientId": 1, "note": "Smoker"},
            {"id": "n2", "patientId": 1, "note": "Weight stable"},
        ])
        client = HttpNotesClient("http://notes:8082", session=session)

        notes = client.get_notes_for_patient("1")

        assert [note.body for note in notes] == ["Smoker", "Weight stable"]
        session.get.assert_called_once_with(
            "http://notes:8082/api/notes/patient/1", params=None, timeout=5.0
        )

    def test_404_is_empty(self, session):
        session.get.return_value = _response(404)
        client = HttpNotesClient("http://notes:8082", session=session)

        assert client.get_notes_for_patient("1") == []

    def test_non_list_payload_raises(self, session):
        session.get.return_value = _response(200, {"note": "Smoker"})
        client = HttpNotesClient("http://notes:8082", session=session)

        with pytest.raises(InvalidPatientDataError):
            client.get_notes_for_patient("1")

    def test_unexpected_4xx_raises_invalid_data(self, session):
        session.get.return_value = _response(403)
        client = HttpNotesClient("http://notes:8082", session=session)

        with pytest.raises(InvalidPatientDataError) as exc_info:
            client.get_notes_for_patient("1")
        assert "notes-service" in str(exc_info.value)

    def test_500_raises_unavailable(self, session):
        session.get.return_value = _response(500)
        client = HttpNotesClient("http://notes:8082", session=session)

        with pytest.raises(CollaboratorUnavailableError) as exc_info:
            client.get_notes_for_patient("1")
        assert exc_info.value.collaborator == "notes-service"
