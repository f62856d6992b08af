"""Database package."""

from .db import get_session, init_db
from .models import ModeUsage
from .usage import UsageTracker

__all__ = ["get_session", "init_db", "ModeUsage", "UsageTracker"]
