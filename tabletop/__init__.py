"""Parametric tabletop geometry and cost estimation engine."""
