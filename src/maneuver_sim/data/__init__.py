"""Preset starting conditions."""

from .scenarios import DEFAULT_SCENARIO_KEY, SCENARIOS, Scenario

__all__ = ["DEFAULT_SCENARIO_KEY", "SCENARIOS", "Scenario"]
