"""Application layer contracts for the scoring core."""
