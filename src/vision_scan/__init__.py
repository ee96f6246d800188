"""
Collective Vision - external security posture scanner
"""

__version__ = "1.0.0"

from .scanner.normalization import InvalidDomain, normalize_domain
from .scanner.runner import ScanOrchestrator, scan_domain
from .util.types import ScanConfig, ScanReport

__all__ = [
    'InvalidDomain',
    'normalize_domain',
    'ScanOrchestrator',
    'scan_domain',
    'ScanConfig',
    'ScanReport',
]
