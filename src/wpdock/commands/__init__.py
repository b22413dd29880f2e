"""Command modules for wpdock CLI."""

from .allocate import allocate
from .config import config
from .export import export_cmd
from .get import get
from .probe import probe
from .prune import prune
from .release import release
from .stats import stats
from .status import status

__all__ = [
    "allocate",
    "config",
    "export_cmd",
    "get",
    "probe",
    "prune",
    "release",
    "stats",
    "status",
]
