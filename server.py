"""
ibanMCP – MCP Server für IBAN-Prüfung und -Zerlegung.

Startet einen FastMCP Server (stdio) und registriert alle Skills.

Skills:
  iban  – IBAN-Validierung (MOD-97), Zerlegung in Bank/Filiale/Konto,
          Korrekturvorschläge bei Tipp- und OCR-Fehlern, CSV-Massenprüfung

Verwendung:
  python server.py                        # startet den MCP Server
  claude mcp add ibanMCP -- python /pfad/zu/server.py

Konfiguration (optional, .env im Projektverzeichnis):
  IBAN_MAX_SUGGESTIONS   maximale Anzahl Korrekturvorschläge (Standard: 5)
  IBAN_MCP_LOG_DIR       Log-Verzeichnis (Standard: ~/.ibanMCP/logs)
  IBAN_MCP_LOG_LEVEL     Log-Level der Konsole (Standard: INFO)
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP

# .env aus dem Projektverzeichnis laden (vor allen Skill-Imports)
load_dotenv(Path(__file__).parent / ".env", override=False)

mcp = FastMCP(
    "ibanMCP",
    instructions=(
        "MCP Server für IBAN-Prüfung. "
        "Verfügbarer Skill: iban (Validierung, Zerlegung, Korrekturvorschläge). "
        "Pfadangaben für CSV-Dateien müssen absolute Pfade sein."
    ),
)

# ── Skills registrieren ────────────────────────────────────────────────
from skills.iban import register_tools as _iban  # noqa: E402

_iban(mcp)

# ── Einstiegspunkt ─────────────────────────────────────────────────────
if __name__ == "__main__":
    mcp.run()
