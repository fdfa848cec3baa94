import copy

import pytest

from helpers.loader import load_form_states, load_legacy_answers, load_yaml


@pytest.fixture
def yml():
    return load_yaml


@pytest.fixture(scope="session")
def form_states():
    return load_form_states()


@pytest.fixture(scope="session")
def legacy_records():
    return load_legacy_answers()


@pytest.fixture
def full_form(form_states):
    """A fresh copy of the complete 'Budget Tracker' wizard snapshot."""
    return copy.deepcopy(form_states["full_submission"])


@pytest.fixture(autouse=True)
def production_env(monkeypatch):
    """Integrity assertions are off unless a test turns them on."""
    monkeypatch.delenv("INTAKE_ENV", raising=False)
