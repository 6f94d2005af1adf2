"""Adapters wiring the scoring core to external systems."""
