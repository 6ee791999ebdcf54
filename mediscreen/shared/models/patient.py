"""Patient and clinical note domain models.

These are read-only snapshots of records owned by the patient registry and
the notes store. The assessment service never mutates or persists them.
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class Gender(Enum):
    """Patient gender as recorded by the patient registry."""
    MALE = "Male"
    FEMALE = "Female"

    @classmethod
    def parse(cls, value: str) -> "Gender":
        """Parse a gender value from a registry payload.

        Accepts the single-letter codes stored by the registry ("M", "F")
        as well as the full names, case-insensitively.

        Args:
            value: Raw gender value

        Returns:
            Matching Gender

        Raises:
            ValueError: If the value is not a recognised gender
        """
        normalized = str(value or "").strip().lower()
        if normalized in {"m", "male"}:
            return cls.MALE
        if normalized in {"f", "female"}:
            return cls.FEMALE
        raise ValueError(f"Unrecognised gender: {value!r}")


@dataclass(frozen=True)
class PatientProfile:
    """Demographic snapshot of a patient, fetched per assessment."""
    patient_id: str
    family_name: str
    given_name: str
    birthdate: date
    gender: Gender

    @property
    def full_name(self) -> str:
        """Given name followed by family name."""
        return f"{self.given_name} {self.family_name}".strip()


@dataclass(frozen=True)
class PatientNote:
    """A practitioner's free-text note about a patient."""
    note_id: str
    patient_id: str
    body: str
    created_date: Optional[date] = None
