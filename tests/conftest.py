from __future__ import annotations

import pytest

from skills.iban.countries import default_registry
from skills.iban.suggestions import SuggestionEngine
from skills.iban.validator import Validator


@pytest.fixture(scope="session")
def registry():
    return default_registry()


@pytest.fixture(scope="session")
def validator(registry):
    return Validator(registry)


@pytest.fixture(scope="session")
def engine(validator):
    return SuggestionEngine(validator)
