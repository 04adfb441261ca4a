"""IBAN skill – Validierung, Zerlegung und Korrekturvorschläge für IBANs."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

# merge-tag style modifiers for iban_field()
FIELD_MODIFIERS = (
    "formatted",
    "machine",
    "country",
    "country_code",
    "currency",
    "bank",
    "branch",
    "account",
    "bban",
    "checksum",
)


def register_tools(mcp: "FastMCP") -> None:
    """Register all IBAN tools with the given FastMCP instance."""
    import json
    import os

    from skills.iban.countries import default_registry
    from skills.iban.csv_check import check_csv
    from skills.iban.suggestions import MAX_SUGGESTIONS, SuggestionEngine
    from skills.iban.validator import Validator
    from utils.logger import logger

    raw_max = os.getenv("IBAN_MAX_SUGGESTIONS", "").strip()
    max_suggestions = MAX_SUGGESTIONS
    if raw_max:
        try:
            max_suggestions = int(raw_max)
        except ValueError:
            max_suggestions = -1
        if max_suggestions < 0:
            logger.warning(
                "IBAN_MAX_SUGGESTIONS=%r ungueltig, verwende %d.", raw_max, MAX_SUGGESTIONS
            )
            max_suggestions = MAX_SUGGESTIONS

    validator = Validator(default_registry())
    engine = SuggestionEngine(validator, max_suggestions=max_suggestions)

    def _did_you_mean(suggestions: list) -> list:
        if not suggestions:
            return []
        lines = ["Meinten Sie:"]
        lines.extend(f"  {validator.format_for_display(s)}" for s in suggestions)
        return lines

    # ------------------------------------------------------------------

    @mcp.tool()
    def iban_validate(iban: str) -> str:
        """
        Prüft eine IBAN (Länge, Länderformat, MOD-97-Prüfsumme).

        Bei ungültiger IBAN werden mögliche Tippfehler-Korrekturen vorgeschlagen.

        Args:
            iban: IBAN in beliebiger Schreibweise (z.B. "DE89 3704 0044 0532 0130 00").
        """
        check = validator.check(iban)
        if check.valid:
            return f"Gueltige IBAN: {validator.format_for_display(iban)}"
        lines = [f"Ungueltige IBAN: {check.error}"]
        lines.extend(_did_you_mean(engine.suggest(iban)))
        return "\n".join(lines)

    # ------------------------------------------------------------------

    @mcp.tool()
    def iban_extract(iban: str) -> str:
        """
        Zerlegt eine IBAN in ihre Bestandteile und liefert Länderinformationen als JSON.

        Felder: valid, country_code, country_name, currency, bank_code, branch_code,
        account, bban, checksum, formatted, is_sepa, central_bank_name,
        central_bank_url. Bei ungültiger IBAN zusätzlich: error, suggestions.

        Args:
            iban: IBAN in beliebiger Schreibweise.
        """
        data = validator.extract(iban).as_dict()
        if not data["valid"]:
            data["error"] = validator.check(iban).error
            data["suggestions"] = engine.suggest(iban)
        return json.dumps(data, ensure_ascii=False, indent=2)

    # ------------------------------------------------------------------

    @mcp.tool()
    def iban_suggest(iban: str) -> str:
        """
        Schlägt Korrekturen für eine ungültige IBAN vor (z.B. O statt 0, vertauschte Ziffern).

        Args:
            iban: Die fehlerhafte IBAN.
        """
        if validator.validate(iban):
            return "IBAN ist gueltig, keine Korrektur noetig."
        suggestions = engine.suggest(iban)
        if not suggestions:
            return "Keine Korrekturvorschlaege gefunden."
        return "\n".join(_did_you_mean(suggestions))

    # ------------------------------------------------------------------

    @mcp.tool()
    def iban_field(iban: str, modifier: str = "formatted") -> str:
        """
        Liefert ein einzelnes Feld einer IBAN.

        Args:
            iban:     IBAN in beliebiger Schreibweise.
            modifier: formatted, machine, country, country_code, currency, bank,
                      branch, account, bban oder checksum (Standard: formatted).
        """
        if modifier == "machine":
            return validator.to_machine_format(iban)
        if modifier not in FIELD_MODIFIERS or modifier == "formatted":
            return validator.format_for_display(iban)
        data = validator.extract(iban)
        return {
            "country": data.country_name,
            "country_code": data.country_code,
            "currency": data.currency,
            "bank": data.bank_code,
            "branch": data.branch_code,
            "account": data.account,
            "bban": data.bban,
            "checksum": data.checksum,
        }[modifier]

    # ------------------------------------------------------------------

    @mcp.tool()
    def iban_list_countries(sepa_only: bool = False) -> str:
        """
        Listet alle Länder mit IBAN-Format auf.

        Args:
            sepa_only: True → nur SEPA-Teilnehmerländer.
        """
        registry = validator.registry
        records = registry.sepa_countries() if sepa_only else list(registry)
        records = sorted(records, key=lambda r: r.code)
        lines = [f"{'Land':<4} {'Name':<28} {'Laenge':>6}  {'Waehrung':<8}  SEPA"]
        lines.append("-" * 58)
        for r in records:
            sepa = "ja" if r.is_sepa else "nein"
            lines.append(f"{r.code:<4} {r.name:<28} {r.length:>6}  {r.currency:<8}  {sepa}")
        lines.append(f"\n{len(records)} Laender")
        return "\n".join(lines)

    # ------------------------------------------------------------------

    @mcp.tool()
    def iban_check_csv(csv_path: str) -> str:
        """
        Prüft alle IBANs einer CSV-Datei und zeigt ungültige Zeilen mit Korrekturvorschlägen.

        Args:
            csv_path: Absoluter Pfad zur CSV-Datei (Spalten: iban, optional name).
        """
        result = check_csv(csv_path, validator=validator, engine=engine)
        if result.errors and not result.rows:
            return "CSV-Fehler:\n" + "\n".join(result.errors)

        invalid = result.invalid_rows
        lines = [f"{len(result.rows)} IBANs geprueft, {len(invalid)} ungueltig."]
        for row in invalid:
            label = f" ({row.name})" if row.name else ""
            lines.append(f"  Zeile {row.line}{label}: {row.masked} – {row.error}")
            lines.extend(f"    Vorschlag: {validator.format_for_display(s)}" for s in row.suggestions)
        logger.debug("iban_check_csv: %s", csv_path)
        return "\n".join(lines)
