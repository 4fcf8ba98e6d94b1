"""Strata test-suite."""
