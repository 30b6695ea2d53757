"""Bite forecaster: weather/time/lunar conditions -> fish bite probability."""

__version__ = "0.1.0"
