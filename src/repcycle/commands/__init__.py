"""CLI commands for repcycle."""

from .backup import backup
from .generate import generate
from .init import init
from .plans import plans
from .serve import serve
from .session import session
from .strava import strava

__all__ = [
    "backup",
    "generate",
    "init",
    "plans",
    "serve",
    "session",
    "strava",
]
