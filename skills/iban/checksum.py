"""ISO 7064 MOD 97-10 check digits as used by IBAN (ISO 13616)."""

from __future__ import annotations


def mod97(value: str) -> int:
    """
    Remainder of ``value`` modulo 97, reading letters as two digits (A=10 .. Z=35).

    The remainder is reduced after every character, so the numeric form never
    has to fit into a machine integer.
    """
    remainder = 0
    for ch in value:
        if "0" <= ch <= "9":
            remainder = (remainder * 10 + ord(ch) - 48) % 97
        elif "A" <= ch <= "Z":
            remainder = (remainder * 100 + ord(ch) - 55) % 97
        else:
            raise ValueError(f"Invalid character for MOD 97-10: {ch!r}")
    return remainder


def rearrange(iban: str) -> str:
    # country code and check digits move to the end
    return iban[4:] + iban[:4]


def verify_checksum(iban: str) -> bool:
    """True when a machine-format IBAN satisfies MOD 97-10."""
    if len(iban) < 5:
        return False
    try:
        return mod97(rearrange(iban)) == 1
    except ValueError:
        return False


def compute_check_digits(country_code: str, bban: str) -> str:
    """Check digits that make ``country_code + digits + bban`` a valid IBAN."""
    return f"{98 - mod97(bban + country_code + '00'):02d}"
