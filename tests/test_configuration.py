"""Mini README: Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dispatchdrone.configuration import DispatchdroneSettings


def test_environment_overrides_and_normalisation(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISPATCHDRONE_ILP_ENDPOINT", " https://ilp.example.org/api ")
    monkeypatch.setenv("DISPATCHDRONE_LOG_LEVEL", "debug")
    monkeypatch.setenv("DISPATCHDRONE_ASTAR_MAX_ITERATIONS", "1234")

    settings = DispatchdroneSettings(_env_file=None)

    assert settings.ilp_endpoint == "https://ilp.example.org/api/"
    assert settings.log_level == "DEBUG"
    assert settings.astar_max_iterations == 1234
    assert settings.greedy_max_iterations == 20_000


def test_invalid_values_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISPATCHDRONE_REQUEST_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValidationError):
        DispatchdroneSettings(_env_file=None)
