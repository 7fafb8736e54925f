"""Personal finance tracker: period resolution, aggregation and reporting."""
from __future__ import annotations

from .api import app

__all__ = ["app"]
