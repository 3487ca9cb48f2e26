"""LeakGuard filter service package.

Re-exports the public API for ergonomic imports:

    from leakguard.service import SensitiveDataFilter, create_filter_service

Layout:
    protocol.py       : SensitiveDataFilter Protocol + NullSensitiveDataFilterService
    filter_service.py : SensitiveDataFilterService (lazy pattern cache + scan)
    factory.py        : create_filter_service(), backend selection by env var
"""

from leakguard.service.factory import create_filter_service
from leakguard.service.filter_service import SensitiveDataFilterService
from leakguard.service.protocol import NullSensitiveDataFilterService, SensitiveDataFilter

__all__ = [
    "NullSensitiveDataFilterService",
    "SensitiveDataFilter",
    "SensitiveDataFilterService",
    "create_filter_service",
]
