"""Assessment Service HTTP handler.

Exposes the diabetes risk assessment to the gateway/UI. The service owns no
data: each request reads the patient registry and the notes store, computes
the assessment and returns it without storing anything.

Patient identifiers are logged only as hash_pii() digests.
"""
import logging
import os
from datetime import date
from typing import Optional, Tuple

from flask import Flask, Response, jsonify, request

from mediscreen.shared.utils import configure_pii_salt, hash_pii
from .assessor import RiskAssessor
from .clients import HttpNotesClient, HttpPatientClient, parse_patient
from .config import AssessmentConfig
from .errors import (
    AssessmentError,
    CollaboratorUnavailableError,
    InvalidDateError,
    InvalidPatientDataError,
    PatientNotFoundError,
)

logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)

# Configure PII salt from environment
pii_salt = os.getenv("PII_HASH_SALT", "default_dev_salt_change_in_production_32chars")
configure_pii_salt(pii_salt)

config = AssessmentConfig.from_env()

_assessor: Optional[RiskAssessor] = None


def get_assessor() -> RiskAssessor:
    """Get or create the global assessor wired to the HTTP collaborators."""
    global _assessor
    if _assessor is None:
        _assessor = RiskAssessor(
            patient_client=HttpPatientClient(
                base_url=config.patient_service_url,
                timeout_seconds=config.request_timeout_seconds,
            ),
            notes_client=HttpNotesClient(
                base_url=config.notes_service_url,
                timeout_seconds=config.request_timeout_seconds,
            ),
        )
    return _assessor


def set_assessor(assessor: Optional[RiskAssessor]) -> None:
    """Set the global assessor (for testing)."""
    global _assessor
    _assessor = assessor


_STATUS_BY_ERROR = (
    (PatientNotFoundError, 404),
    (InvalidDateError, 400),
    (InvalidPatientDataError, 400),
    (CollaboratorUnavailableError, 503),
)


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "assessment-service",
        "vocabulary_version": config.vocabulary_version,
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - verifies both collaborator URLs are configured."""
    missing = [
        name for name, url in (
            ("PATIENT_SERVICE_URL", config.patient_service_url),
            ("NOTES_SERVICE_URL", config.notes_service_url),
        )
        if not url
    ]
    if missing:
        logger.warning("SERVICE_NOT_READY", extra={"missing_config": missing})
        return jsonify({"status": "not_ready", "reason": "collaborator_url_missing", "missing": missing}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/assess/<patient_id>", methods=["GET"])
def assess_patient(patient_id: str):
    """Assess one patient by registry id.

    Query Parameters:
        asOf: Reference date YYYY-MM-DD (optional, defaults to today)

    Response:
        {
            "patient_id": "1",
            "patient_name": "Test TestNone",
            "age": 58,
            "trigger_count": 1,
            "risk_level": "None" | "Borderline" | "InDanger" | "EarlyOnset",
            "matched_terms": ["Weight"],
            "assessed_on": "2024-06-15",
            "summary": "Patient: Test TestNone (age 58) diabetes assessment is: None"
        }
    """
    try:
        as_of = _parse_as_of()
        result = get_assessor().assess(patient_id, as_of=as_of)
        return jsonify(result.to_dict()), 200
    except AssessmentError as e:
        return _error_response(e, patient_ref=patient_id)
    except Exception as e:
        return _unexpected_error(e)


@app.route("/assess", methods=["GET"])
def assess_family():
    """Assess every patient with a given family name.

    Query Parameters:
        familyName: Family name to look up (required)
        asOf: Reference date YYYY-MM-DD (optional)
    """
    family_name = (request.args.get("familyName") or "").strip()
    if not family_name:
        logger.warning("ASSESS_REQUEST_INVALID", extra={"reason": "missing_family_name"})
        return jsonify({"error": "Missing required parameter: familyName"}), 400

    try:
        as_of = _parse_as_of()
        results = get_assessor().assess_by_family_name(family_name, as_of=as_of)
        return jsonify({"assessments": [item.to_dict() for item in results]}), 200
    except AssessmentError as e:
        return _error_response(e, patient_ref=family_name)
    except Exception as e:
        return _unexpected_error(e)


@app.route("/assess", methods=["POST"])
def assess_inline():
    """Assess patient data supplied in the request body.

    No collaborator is called.

    Request Body:
        {
            "patient": {"lastName": "...", "firstName": "...",
                        "birthdate": "1966-12-31", "gender": "F"},
            "notes": ["note text", {"note": "note text"}, ...],
            "asOf": "2024-06-15" (optional)
        }
    """
    data = request.get_json(silent=True)
    if not data:
        logger.warning("ASSESS_REQUEST_INVALID", extra={"reason": "empty_body"})
        return jsonify({"error": "Request body required"}), 400
    if not isinstance(data, dict):
        logger.warning("ASSESS_REQUEST_INVALID", extra={"reason": "body_not_object"})
        return jsonify({"error": "Request body must be a JSON object"}), 400

    raw_notes = data.get("notes", [])
    if not isinstance(raw_notes, list):
        logger.warning("ASSESS_REQUEST_INVALID", extra={"reason": "notes_not_list"})
        return jsonify({"error": "Field notes must be a list"}), 400

    note_bodies = [
        item.get("note") if isinstance(item, dict) else item
        for item in raw_notes
    ]
    if not all(body is None or isinstance(body, str) for body in note_bodies):
        logger.warning("ASSESS_REQUEST_INVALID", extra={"reason": "note_not_string"})
        return jsonify({"error": "Each note must be a string or an object with a string note"}), 400
    note_bodies = [body or "" for body in note_bodies]

    try:
        profile = parse_patient(data.get("patient"))
        as_of = _parse_date(data.get("asOf"))
        result = get_assessor().assess_profile(profile, note_bodies, as_of=as_of)
        return jsonify(result.to_dict()), 200
    except AssessmentError as e:
        return _error_response(e)
    except Exception as e:
        return _unexpected_error(e)


def _parse_as_of() -> Optional[date]:
    return _parse_date(request.args.get("asOf"))


def _parse_date(raw: Optional[str]) -> Optional[date]:
    """Parse an optional ISO date from the request.

    Raises:
        InvalidDateError: If the value is not YYYY-MM-DD
    """
    if not raw:
        return None
    try:
        return date.fromisoformat(str(raw))
    except ValueError as e:
        raise InvalidDateError(f"Invalid date: {raw!r}, expected YYYY-MM-DD") from e


def _error_response(error: AssessmentError, patient_ref: Optional[str] = None) -> Tuple[Response, int]:
    """Map an assessment error to its HTTP response."""
    status = 500
    for error_type, error_status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            status = error_status
            break

    # Error text may carry birthdates, so only the type is logged
    extra = {
        "error_type": type(error).__name__,
        "status_code": status,
    }
    if isinstance(error, CollaboratorUnavailableError):
        extra["collaborator"] = error.collaborator
        extra["reason"] = error.reason
    if patient_ref is not None:
        extra["patient_ref_hash"] = hash_pii(patient_ref)

    if status >= 500:
        logger.error("ASSESSMENT_FAILED", extra=extra)
    else:
        logger.warning("ASSESSMENT_REJECTED", extra=extra)

    message = "Patient not found" if status == 404 else str(error)
    return jsonify({"error": message, "error_type": type(error).__name__}), status


def _unexpected_error(error: Exception) -> Tuple[Response, int]:
    logger.error(
        "ASSESSMENT_ERROR",
        extra={
            "error": str(error),
            "error_type": type(error).__name__,
        }
    )
    return jsonify({"error": "Assessment failed", "error_type": type(error).__name__}), 500


if __name__ == "__main__":
    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Run development server
    port = int(os.getenv("PORT", "8081"))
    app.run(host="0.0.0.0", port=port, debug=False)
