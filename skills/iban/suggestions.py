"""Mistranscription suggestions for IBANs that fail validation."""

from __future__ import annotations

import re
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from skills.iban.validator import MAX_IBAN_LENGTH, MIN_IBAN_LENGTH, Validator, normalize_iban
from utils.logger import logger

MAX_SUGGESTIONS = 5

# Characters commonly confused when typing or OCR-scanning an IBAN.
# Lower-case "l" is covered by upper-casing during normalization.
CONFUSABLE_CHARACTERS: Dict[str, str] = {
    "0": "ODQ",
    "O": "0",
    "D": "0",
    "Q": "0",
    "1": "IL7",
    "I": "1",
    "L": "1",
    "7": "1T",
    "T": "7",
    "2": "Z",
    "Z": "2",
    "5": "S",
    "S": "5",
    "6": "G",
    "G": "6",
    "8": "B",
    "B": "8",
}

SUBSTITUTION = 0
TRANSPOSITION = 1

_ALNUM_RE = re.compile(r"^[A-Z0-9]+$")


class SuggestionEngine:
    """
    Proposes corrected IBANs one edit away from an invalid input.

    Candidates are single confusable-character substitutions anywhere in the
    IBAN and adjacent transpositions inside the BBAN. Every candidate is
    re-validated; survivors are ranked substitutions first, then by the
    position of the edit, then alphabetically.
    """

    def __init__(
        self,
        validator: Optional[Validator] = None,
        max_suggestions: int = MAX_SUGGESTIONS,
        confusables: Optional[Mapping[str, str]] = None,
    ) -> None:
        if max_suggestions < 0:
            raise ValueError("max_suggestions must not be negative")
        self.validator = validator if validator is not None else Validator()
        self.max_suggestions = max_suggestions
        self.confusables = dict(confusables if confusables is not None else CONFUSABLE_CHARACTERS)

    def candidates(self, iban: str) -> Iterator[Tuple[int, int, str]]:
        """Yield (edit kind, position, candidate) for a machine-format IBAN."""
        for pos, ch in enumerate(iban):
            for alt in self.confusables.get(ch, ""):
                yield SUBSTITUTION, pos, iban[:pos] + alt + iban[pos + 1:]
        # country code and check digits are never transposed
        for pos in range(4, len(iban) - 1):
            a, b = iban[pos], iban[pos + 1]
            if a != b:
                yield TRANSPOSITION, pos, iban[:pos] + b + a + iban[pos + 2:]

    def suggest(self, raw: str) -> List[str]:
        iban = normalize_iban(raw)
        if not MIN_IBAN_LENGTH <= len(iban) <= MAX_IBAN_LENGTH or not _ALNUM_RE.match(iban):
            return []
        if self.validator.validate(iban):
            return []

        found = [
            (kind, pos, candidate)
            for kind, pos, candidate in self.candidates(iban)
            if self.validator.validate(candidate)
        ]
        found.sort()

        suggestions: List[str] = []
        for _, _, candidate in found:
            if len(suggestions) >= self.max_suggestions:
                break
            if candidate not in suggestions:
                suggestions.append(candidate)
        logger.debug("IBAN %s: %d suggestion(s)", iban, len(suggestions))
        return suggestions
