"""Darts scoring core: checkout routes, statistics and match state."""

from . import domain

__all__ = ["domain"]
