"""Unit tests for settings loading and error types."""

import pytest

from foundation_estimator.config.errors import (
    ErrorCode,
    EstimatorError,
    RecordNotFoundError,
    ValidationError,
)
from foundation_estimator.config.settings import DefaultCosts, Settings


class TestSettings:

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_JSON", "true")
        monkeypatch.setenv("DEFAULT_LINE_ROWS", "5")

        settings = Settings()

        assert settings.log_level == "DEBUG"
        assert settings.log_json is True
        assert settings.default_line_rows == 5

    def test_validate_rejects_unknown_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ValueError):
            Settings().validate()

    def test_validate_rejects_negative_rows(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_LINE_ROWS", "-1")

        with pytest.raises(ValueError):
            Settings().validate()


class TestDefaultCosts:

    def test_unset_defaults_are_none(self, monkeypatch):
        monkeypatch.delenv("DEFAULT_CONCRETE_PER_YARD", raising=False)

        assert DefaultCosts().concrete_per_yard is None

    def test_labor_falls_back_to_60(self, monkeypatch):
        monkeypatch.delenv("DEFAULT_LABOR_PER_YARD", raising=False)

        assert DefaultCosts().labor_per_yard == 60.0

    def test_env_values_parsed(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_CONCRETE_PER_YARD", "182.50")
        monkeypatch.setenv("DEFAULT_REBAR_WASTE_PERCENT", "not-a-number")

        defaults = DefaultCosts()

        assert defaults.concrete_per_yard == 182.5
        assert defaults.rebar_waste_percent is None

    def test_as_dict(self):
        data = DefaultCosts(concrete_per_yard=185.0).as_dict()

        assert data["concrete_per_yard"] == 185.0
        assert "rebar_cost_per_lf" in data


class TestErrors:

    def test_validation_error_to_dict(self):
        error = ValidationError("Bad quantity", field="quantity", details={"value": "abc"})

        assert error.to_dict() == {
            "code": ErrorCode.VALIDATION_ERROR,
            "message": "Bad quantity",
            "details": {"value": "abc", "field": "quantity"},
        }

    def test_validation_error_without_field(self):
        error = ValidationError("Bad record")

        assert error.details == {}
        assert error.field is None

    def test_record_not_found(self):
        error = RecordNotFoundError(code=ErrorCode.PROPOSAL_NOT_FOUND, record_id="p-1")

        assert isinstance(error, EstimatorError)
        assert error.message == "Record not found: p-1"
        assert error.details["record_id"] == "p-1"
        assert str(error) == "Record not found: p-1"
