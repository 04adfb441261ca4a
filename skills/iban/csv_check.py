"""Bulk IBAN check for CSV files (one IBAN per row)."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from skills.iban.suggestions import SuggestionEngine
from skills.iban.validator import ExtractionResult, Validator
from utils.logger import logger

REQUIRED_COLUMNS = {"iban"}


@dataclass
class CheckedRow:
    line: int
    name: str
    raw: str
    masked: str
    result: ExtractionResult
    error: str = ""
    suggestions: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.result.valid


@dataclass
class CsvCheckResult:
    rows: List[CheckedRow] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def invalid_rows(self) -> List[CheckedRow]:
        return [r for r in self.rows if not r.valid]


def _decode(raw: bytes) -> str:
    # latin-1 maps every byte, so it is the last resort
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def check_csv(
    path: Union[str, Path],
    validator: Optional[Validator] = None,
    engine: Optional[SuggestionEngine] = None,
) -> CsvCheckResult:
    """
    Validate every IBAN in a CSV file.

    Expected format (UTF-8 or latin-1, comma, semicolon or tab separated):
        name,iban
        Max Mustermann,DE89 3704 0044 0532 0130 00

    The ``name`` column is optional. Invalid rows carry the rejection reason
    and any mistranscription suggestions.
    """
    validator = validator if validator is not None else Validator()
    engine = engine if engine is not None else SuggestionEngine(validator)
    result = CsvCheckResult()
    path = Path(path)

    if not path.exists():
        result.errors.append(f"CSV-Datei nicht gefunden: {path}")
        return result

    text = _decode(path.read_bytes())

    try:
        dialect = csv.Sniffer().sniff(text[:2048], delimiters=",;\t")
    except csv.Error:
        dialect = csv.excel

    reader = csv.DictReader(io.StringIO(text), dialect=dialect)
    if reader.fieldnames is None:
        result.errors.append("CSV hat keine Kopfzeile.")
        return result

    fieldnames_lower = {f.strip().lower(): f for f in reader.fieldnames}
    missing = REQUIRED_COLUMNS - set(fieldnames_lower.keys())
    if missing:
        result.errors.append(f"CSV fehlen Spalten: {', '.join(sorted(missing))}.")
        return result

    iban_col = fieldnames_lower["iban"]
    name_col = fieldnames_lower.get("name")

    for row_num, row in enumerate(reader, start=2):
        raw_iban = (row.get(iban_col) or "").strip()
        name = (row.get(name_col) or "").strip() if name_col else ""
        if not raw_iban and not name:
            continue

        check = validator.check(raw_iban)
        checked = CheckedRow(
            line=row_num,
            name=name,
            raw=raw_iban,
            masked=check.masked,
            result=validator.extract(raw_iban) if check.valid else ExtractionResult(),
            error=check.error,
        )
        if not check.valid:
            checked.suggestions = engine.suggest(raw_iban)
        result.rows.append(checked)

    if not result.rows:
        result.errors.append("CSV enthaelt keine Eintraege.")

    logger.info(
        "CSV geprueft: %s (%d Zeilen, %d ungueltig)",
        path.name,
        len(result.rows),
        len(result.invalid_rows),
    )
    return result
