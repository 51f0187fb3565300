"""Comparison-cost benchmark: simulated sessions driven by automated oracles."""
