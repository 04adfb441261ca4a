from __future__ import annotations

import pytest

from skills.iban.countries import CountryRecord, CountryRegistry, parse_layout
from skills.iban.validator import (
    ExtractionResult,
    Validator,
    format_iban,
    normalize_iban,
)

DE_IBAN = "DE89370400440532013000"


@pytest.mark.parametrize(
    "raw",
    [
        "DE89370400440532013000",
        "DE89 3704 0044 0532 0130 00",
        "de89370400440532013000",
        "IBAN DE89370400440532013000",
        "Iban de89 3704 0044 0532 0130 00",
        "  DE89\t3704 0044\n0532 0130 00  ",
    ],
)
def test_normalize_iban(raw):
    assert normalize_iban(raw) == DE_IBAN


def test_normalize_keeps_foreign_characters():
    assert normalize_iban("DE89-3704") == "DE89-3704"
    assert normalize_iban("") == ""


def test_format_iban():
    assert format_iban(DE_IBAN) == "DE89 3704 0044 0532 0130 00"
    assert format_iban("BE68539007547034") == "BE68 5390 0754 7034"
    assert format_iban("NO9386011117947") == "NO93 8601 1117 947"


def test_extract_german_iban(validator):
    result = validator.extract(DE_IBAN)
    assert result == ExtractionResult(
        valid=True,
        country_code="DE",
        country_name="Germany",
        currency="EUR",
        bank_code="37040044",
        branch_code="",
        account="0532013000",
        bban="370400440532013000",
        checksum="89",
        formatted="DE89 3704 0044 0532 0130 00",
        is_sepa=True,
        central_bank_name="Deutsche Bundesbank",
        central_bank_url="https://www.bundesbank.de",
    )


@pytest.mark.parametrize(
    "raw",
    ["DE89 3704 0044 0532 0130 00", "de89370400440532013000", "IBAN DE89370400440532013000"],
)
def test_extract_is_whitespace_case_and_prefix_insensitive(validator, raw):
    assert validator.extract(raw) == validator.extract(DE_IBAN)


def test_extract_uk_iban(validator):
    result = validator.extract("GB82WEST12345698765432")
    assert result.valid
    assert result.country_code == "GB"
    assert result.country_name == "United Kingdom"
    assert result.currency == "GBP"
    assert result.bank_code == "WEST"
    assert result.branch_code == "123456"
    assert result.account == "98765432"


@pytest.mark.parametrize(
    "iban, country, name, currency, bank, branch, account",
    [
        ("FR7630006000011234567890189", "FR", "France", "EUR", "30006", "00001", "1234567890189"),
        ("ES9121000418450200051332", "ES", "Spain", "EUR", "2100", "0418", "450200051332"),
        ("BE68539007547034", "BE", "Belgium", "EUR", "539", "", "007547034"),
        ("IT60X0542811101000000123456", "IT", "Italy", "EUR", "05428", "11101", "000000123456"),
        ("NL91ABNA0417164300", "NL", "Netherlands", "EUR", "ABNA", "", "0417164300"),
        ("CH9300762011623852957", "CH", "Switzerland", "CHF", "00762", "", "011623852957"),
    ],
)
def test_extract_decomposition(validator, iban, country, name, currency, bank, branch, account):
    result = validator.extract(iban)
    assert result.valid
    assert (result.country_code, result.country_name, result.currency) == (country, name, currency)
    assert (result.bank_code, result.branch_code, result.account) == (bank, branch, account)
    assert result.bban == iban[4:]
    assert result.checksum == iban[2:4]


def test_non_sepa_country(validator):
    result = validator.extract("BR1500000000000010932840814P2")
    assert result.valid
    assert result.country_name == "Brazil"
    assert result.is_sepa is False


@pytest.mark.parametrize(
    "raw, error",
    [
        ("", "Keine IBAN"),
        ("DE893704", "zu kurz"),
        ("DE89" + "0" * 31, "zu lang"),
        ("DE89-3704-0044-0532-0130-00", "ungueltige Zeichen"),
        ("1E89370400440532013000", "ungueltige Zeichen"),
        ("DEA9370400440532013000", "ungueltige Zeichen"),
        ("XX89370400440532013000", "Unbekannter Laendercode: XX"),
        ("DE8937040044053201300", "Falsche IBAN-Laenge fuer DE"),
        ("DE8937040044053201300O", "BBAN entspricht nicht"),
        ("DE00370400440532013000", "Pruefsumme"),
    ],
)
def test_invalid_inputs(validator, raw, error):
    check = validator.check(raw)
    assert not check.valid
    assert error in check.error
    assert validator.validate(raw) is False
    assert validator.extract(raw) == ExtractionResult()


def test_invalid_result_has_only_defaults(validator):
    result = validator.extract("DE00370400440532013000")
    assert result.valid is False
    assert result.country_code == ""
    assert result.formatted == ""
    assert result.is_sepa is False


def test_check_masks_iban(validator):
    check = validator.check(DE_IBAN)
    assert check.valid
    assert check.error == ""
    assert check.masked == "DE89**************3000"


def test_validate_agrees_with_extract(validator, registry):
    samples = [r.example for r in registry] + [
        "",
        "DE00370400440532013000",
        "GB82WEST12345698765432",
        "XX89370400440532013000",
        "de89 3704 0044 0532 0130 00",
        "DE89370400440532O13000",
    ]
    for raw in samples:
        assert validator.validate(raw) == validator.extract(raw).valid, raw


def test_formatted_round_trip(validator, registry):
    for record in registry:
        result = validator.extract(record.example)
        assert result.valid, record.code
        assert result.machine_format == normalize_iban(record.example)
        assert validator.extract(result.machine_format) == result


def test_longest_registered_iban(validator):
    result = validator.extract("LC55 HEMM 0001 0001 0012 0012 0002 3015")
    assert result.valid
    assert result.currency == "XCD"
    assert result.formatted == "LC55 HEMM 0001 0001 0012 0012 0002 3015"


def test_helpers(validator):
    assert validator.to_machine_format("de89 3704 0044 0532 0130 00") == DE_IBAN
    assert validator.format_for_display(DE_IBAN) == "DE89 3704 0044 0532 0130 00"
    assert validator.verify_checksum("de89 3704 0044 0532 0130 00")
    assert not validator.verify_checksum("DE00370400440532013000")


def test_as_dict_has_all_fields(validator):
    data = validator.extract(DE_IBAN).as_dict()
    assert set(data) == {
        "valid",
        "country_code",
        "country_name",
        "currency",
        "bank_code",
        "branch_code",
        "account",
        "bban",
        "checksum",
        "formatted",
        "is_sepa",
        "central_bank_name",
        "central_bank_url",
    }


def test_injected_registry_limits_countries():
    registry = CountryRegistry(
        {"GB": CountryRecord("GB", "United Kingdom", "GBP", True, 22, parse_layout("4a:bank 6n:branch 8n:account"))}
    )
    validator = Validator(registry)
    assert validator.validate("GB82WEST12345698765432")
    assert not validator.validate(DE_IBAN)
    assert "Unbekannter Laendercode: DE" in validator.check(DE_IBAN).error


@pytest.mark.parametrize(
    "raw",
    [
        "GB82WEſT12345698765432",  # long s
        "ıe29aıbk93115212345678",  # dotless i
        "gb82weſt12345698765432",
        "ıban GB82WEST12345698765432",
        "DE89 3704 0044 0532 0130 0ß",
    ],
)
def test_non_ascii_letters_are_not_folded(validator, raw):
    assert validator.validate(raw) is False
    assert validator.extract(raw) == ExtractionResult()
    assert "ungueltige Zeichen" in validator.check(raw).error


def test_normalize_upper_cases_ascii_only():
    assert normalize_iban("gb82weſt") == "GB82WEſT"
    assert normalize_iban("straße") == "STRAßE"
