"""Diabetes risk classification.

Maps (age, gender, trigger count) to a RiskLevel by walking RISK_BANDS
top to bottom and returning the first band that matches.
"""
from typing import Optional, Sequence

from mediscreen.shared.models import Gender, RiskLevel
from .config import RISK_BANDS, RiskBand


class RiskClassifier:
    """Deterministic decision table over age, gender and trigger count."""

    def __init__(self, bands: Optional[Sequence[RiskBand]] = None):
        self.bands = tuple(bands) if bands is not None else RISK_BANDS

    def classify(self, age: int, gender: Gender, trigger_count: int) -> RiskLevel:
        """Classify a patient.

        Args:
            age: Age in completed years
            gender: Patient gender
            trigger_count: Number of (note, term) trigger matches

        Returns:
            RiskLevel of the first matching band

        Raises:
            ValueError: If trigger_count is negative
        """
        if trigger_count < 0:
            raise ValueError(f"Trigger count must be >= 0, got {trigger_count}")

        for band in self.bands:
            if band.matches(age, gender, trigger_count):
                return band.level

        # Bands cover every (age, gender, count >= 0) combination
        raise LookupError(
            f"No risk band for age={age}, gender={gender.value}, triggers={trigger_count}"
        )
