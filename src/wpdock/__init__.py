"""wpdock - Port allocation for WordPress container stacks."""

__version__ = "0.1.0"

from .allocator import AllocationError, PortAllocator, PortCandidate
from .config import ConfigError, Settings, load_settings
from .ledger import Ledger, LedgerEntry
from .probe import PortProbe, ProbeReport
from .pruner import Pruner, PruneResult, RegistryStats
from .system import PortStatus, SystemScanner

__all__ = [
    "__version__",
    "AllocationError",
    "PortAllocator",
    "PortCandidate",
    "ConfigError",
    "Settings",
    "load_settings",
    "Ledger",
    "LedgerEntry",
    "PortProbe",
    "ProbeReport",
    "PruneResult",
    "Pruner",
    "RegistryStats",
    "PortStatus",
    "SystemScanner",
]
