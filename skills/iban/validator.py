"""IBAN validation and decomposition (ISO 13616, MOD 97-10)."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from skills.iban.checksum import rearrange, mod97, verify_checksum
from skills.iban.countries import CountryRegistry, default_registry
from utils.logger import logger, mask_iban

MIN_IBAN_LENGTH = 15  # Norway
MAX_IBAN_LENGTH = 34  # ISO 13616 ceiling

_PREFIX_RE = re.compile(r"^\s*IBAN\s*", re.IGNORECASE | re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")
_IBAN_RE = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]+$")
# str.upper() would also fold non-ASCII letters (e.g. "ſ" to "S")
_ASCII_UPPER = str.maketrans("abcdefghijklmnopqrstuvwxyz", "ABCDEFGHIJKLMNOPQRSTUVWXYZ")


def normalize_iban(raw: str) -> str:
    """Machine format: drop a leading "IBAN" token and all whitespace, upper-case ASCII letters."""
    if not raw:
        return ""
    return _WHITESPACE_RE.sub("", _PREFIX_RE.sub("", raw)).translate(_ASCII_UPPER)


def format_iban(iban: str) -> str:
    """Human format: groups of four characters separated by single spaces."""
    return " ".join(iban[i:i + 4] for i in range(0, len(iban), 4))


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    masked: str
    error: str = ""


@dataclass(frozen=True)
class ExtractionResult:
    valid: bool = False
    country_code: str = ""
    country_name: str = ""
    currency: str = ""
    bank_code: str = ""
    branch_code: str = ""
    account: str = ""
    bban: str = ""
    checksum: str = ""
    formatted: str = ""
    is_sepa: bool = False
    central_bank_name: str = ""
    central_bank_url: str = ""

    @property
    def machine_format(self) -> str:
        return self.formatted.replace(" ", "")

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


INVALID = ExtractionResult()


class Validator:
    """Validates and decomposes IBANs against a country registry."""

    def __init__(self, registry: Optional[CountryRegistry] = None) -> None:
        self.registry = registry if registry is not None else default_registry()

    def _rejection(self, iban: str) -> str:
        """Reason ``iban`` (machine format) is not a valid IBAN, or "" if it is."""
        if not iban:
            return "Keine IBAN angegeben."
        if len(iban) < MIN_IBAN_LENGTH:
            return "IBAN ist zu kurz."
        if len(iban) > MAX_IBAN_LENGTH:
            return "IBAN ist zu lang."
        if not _IBAN_RE.match(iban):
            return "IBAN enthaelt ungueltige Zeichen."
        country = iban[:2]
        record = self.registry.get(country)
        if record is None:
            return f"Unbekannter Laendercode: {country}"
        if len(iban) != record.length:
            return (
                f"Falsche IBAN-Laenge fuer {country}: erwartet {record.length}, "
                f"erhalten {len(iban)}."
            )
        if not record.matches_bban(iban[4:]):
            return f"BBAN entspricht nicht dem Format fuer {country}."
        if mod97(rearrange(iban)) != 1:
            return "IBAN-Pruefsumme (MOD-97) ungueltig."
        return ""

    def validate(self, raw: str) -> bool:
        return not self._rejection(normalize_iban(raw))

    def check(self, raw: str) -> ValidationResult:
        """Like validate(), but also reports why an IBAN was rejected."""
        iban = normalize_iban(raw)
        error = self._rejection(iban)
        if error:
            logger.debug("IBAN rejected: %s (%s)", iban, error)
        return ValidationResult(not error, mask_iban(iban), error)

    def extract(self, raw: str) -> ExtractionResult:
        """Decompose a valid IBAN; invalid input yields an empty, invalid result."""
        iban = normalize_iban(raw)
        error = self._rejection(iban)
        if error:
            logger.debug("IBAN not extracted: %s (%s)", iban, error)
            return INVALID

        record = self.registry.get(iban[:2])
        bban = iban[4:]
        bank_code, branch_code, account = record.split_bban(bban)
        return ExtractionResult(
            valid=True,
            country_code=record.code,
            country_name=record.name,
            currency=record.currency,
            bank_code=bank_code,
            branch_code=branch_code,
            account=account,
            bban=bban,
            checksum=iban[2:4],
            formatted=format_iban(iban),
            is_sepa=record.is_sepa,
            central_bank_name=record.central_bank_name,
            central_bank_url=record.central_bank_url,
        )

    def verify_checksum(self, raw: str) -> bool:
        """MOD 97-10 only, without country length or layout checks."""
        return verify_checksum(normalize_iban(raw))

    @staticmethod
    def to_machine_format(raw: str) -> str:
        return normalize_iban(raw)

    @staticmethod
    def format_for_display(raw: str) -> str:
        return format_iban(normalize_iban(raw))
