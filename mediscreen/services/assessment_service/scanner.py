"""Trigger term scanner for practitioner notes.

Counts how many trigger terms appear in a patient's notes. Each note is
scanned on its own, and a term counts at most once per note:

    ["patient is a Smoker", "SMOKER noted again"]  -> 2
    ["patient smoker smoker smoker"]               -> 1

Matching is case-insensitive substring containment. There is deliberately
no word-boundary check, so "Smoker" also matches "Smokers" and "Height"
matches "heights".
"""
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import TRIGGER_TERMS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    """Trigger terms found across one patient's notes.

    Immutable - scan results cannot be modified after creation.
    """
    trigger_count: int
    matched_terms: Tuple[str, ...] = ()
    per_note: Tuple[Tuple[str, ...], ...] = ()
    scan_latency_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "trigger_count": self.trigger_count,
            "matched_terms": list(self.matched_terms),
            "per_note": [list(terms) for terms in self.per_note],
            "scan_latency_ms": round(self.scan_latency_ms, 2),
        }


class TriggerScanner:
    """Stateless scanner over the fixed trigger vocabulary.

    Safe to share between threads: compiled patterns are read-only.
    """

    def __init__(self, terms: Optional[Sequence[str]] = None):
        """Initialize scanner.

        Args:
            terms: Vocabulary override, defaults to TRIGGER_TERMS
        """
        self.terms: Tuple[str, ...] = tuple(terms) if terms is not None else TRIGGER_TERMS
        self._patterns = self._compile_patterns(self.terms)

        logger.info(
            "TRIGGER_SCANNER_INITIALIZED",
            extra={"term_count": len(self.terms)}
        )

    def _compile_patterns(self, terms: Sequence[str]) -> List[Tuple[str, re.Pattern]]:
        """Compile terms into case-insensitive substring patterns.

        Args:
            terms: Vocabulary to compile

        Returns:
            (term, pattern) pairs in vocabulary order
        """
        return [
            (term, re.compile(re.escape(term), re.IGNORECASE))
            for term in terms
        ]

    def count_triggers(self, notes: Sequence[str]) -> int:
        """Count (note, term) pairs with at least one match.

        Args:
            notes: Note bodies belonging to one patient

        Returns:
            Trigger count, 0 for an empty sequence
        """
        return self.scan(notes).trigger_count

    def scan(self, notes: Sequence[str]) -> ScanResult:
        """Scan note bodies against the vocabulary.

        Args:
            notes: Note bodies belonging to one patient

        Returns:
            ScanResult with the count and the terms behind it
        """
        start_time = time.perf_counter()

        per_note: List[Tuple[str, ...]] = []
        found = set()
        for body in notes:
            terms = self._terms_in(body)
            per_note.append(terms)
            found.update(terms)

        trigger_count = sum(len(terms) for terms in per_note)
        matched_terms = tuple(term for term in self.terms if term in found)
        latency_ms = (time.perf_counter() - start_time) * 1000

        logger.debug(
            "TRIGGER_SCAN_COMPLETED",
            extra={
                "note_count": len(per_note),
                "trigger_count": trigger_count,
                "distinct_terms": len(matched_terms),
                "latency_ms": latency_ms,
            }
        )

        return ScanResult(
            trigger_count=trigger_count,
            matched_terms=matched_terms,
            per_note=tuple(per_note),
            scan_latency_ms=latency_ms,
        )

    def _terms_in(self, body: Optional[str]) -> Tuple[str, ...]:
        if not body:
            return ()
        return tuple(term for term, pattern in self._patterns if pattern.search(body))
