"""Foundation Estimator configuration settings.

Loads configuration from environment variables with sensible defaults.
Default cost rates pre-fill new proposals; estimators can still edit every
rate per proposal.
"""

import os
from typing import Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load .env file for local configuration (default rates, log level)
load_dotenv()


def _get_optional_float(name: str, default: Optional[float] = None) -> Optional[float]:
    """Read a numeric environment variable, ``default`` when unset or not a number."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class DefaultCosts:
    """Company-wide default cost rates.

    Every field is optional; ``None`` means the estimator has not configured
    a default and the proposal field starts empty. The pump, winter concrete,
    extra concrete and extra labor defaults price matching line items
    (``Proposal.apply_default_prices``).
    """

    # Material costs ($/yard)
    concrete_per_yard: Optional[float] = field(default_factory=lambda: _get_optional_float("DEFAULT_CONCRETE_PER_YARD"))
    extra_concrete_per_yard: Optional[float] = field(default_factory=lambda: _get_optional_float("DEFAULT_EXTRA_CONCRETE_PER_YARD"))
    winter_hot_water_per_yard: Optional[float] = field(default_factory=lambda: _get_optional_float("DEFAULT_WINTER_HOT_WATER_PER_YARD"))
    winter_high_early_per_yard: Optional[float] = field(default_factory=lambda: _get_optional_float("DEFAULT_WINTER_HIGH_EARLY_PER_YARD"))

    # Labor costs
    labor_per_yard: Optional[float] = field(default_factory=lambda: _get_optional_float("DEFAULT_LABOR_PER_YARD", 60.0))
    extra_labor_per_hour: Optional[float] = field(default_factory=lambda: _get_optional_float("DEFAULT_EXTRA_LABOR_PER_HOUR"))

    # Equipment costs
    concrete_pump_each: Optional[float] = field(default_factory=lambda: _get_optional_float("DEFAULT_CONCRETE_PUMP_EACH"))

    # Rebar
    rebar_cost_per_stick: Optional[float] = field(default_factory=lambda: _get_optional_float("DEFAULT_REBAR_COST_PER_STICK"))
    rebar_waste_percent: Optional[float] = field(default_factory=lambda: _get_optional_float("DEFAULT_REBAR_WASTE_PERCENT"))
    rebar_cost_per_lf: Optional[float] = field(default_factory=lambda: _get_optional_float("DEFAULT_REBAR_COST_PER_LF"))

    def as_dict(self) -> dict:
        """Return the configured defaults keyed by field name."""
        return {
            "concrete_per_yard": self.concrete_per_yard,
            "extra_concrete_per_yard": self.extra_concrete_per_yard,
            "winter_hot_water_per_yard": self.winter_hot_water_per_yard,
            "winter_high_early_per_yard": self.winter_high_early_per_yard,
            "labor_per_yard": self.labor_per_yard,
            "extra_labor_per_hour": self.extra_labor_per_hour,
            "concrete_pump_each": self.concrete_pump_each,
            "rebar_cost_per_stick": self.rebar_cost_per_stick,
            "rebar_waste_percent": self.rebar_waste_percent,
            "rebar_cost_per_lf": self.rebar_cost_per_lf,
        }


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_json: bool = field(default_factory=lambda: os.getenv("LOG_JSON", "false").lower() == "true")

    # Proposal defaults
    default_line_rows: int = field(default_factory=lambda: int(os.getenv("DEFAULT_LINE_ROWS", "8")))

    default_costs: DefaultCosts = field(default_factory=DefaultCosts)

    def validate(self) -> None:
        """Validate settings values.

        Raises:
            ValueError: If a setting is out of range.
        """
        if self.default_line_rows < 0:
            raise ValueError("DEFAULT_LINE_ROWS must be zero or positive")
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown LOG_LEVEL: {self.log_level}")


# Singleton settings instance
settings = Settings()
