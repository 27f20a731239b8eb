"""wattcast: smart-home energy usage forecasting."""

__version__ = "0.3.0"
