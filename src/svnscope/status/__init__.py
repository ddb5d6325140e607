"""Status rollups and scan coordination."""

from svnscope.status.aggregator import direct_status, folder_status, folder_statuses
from svnscope.status.coordinator import ScanCoordinator, ScanRegistry, StatusSnapshot

__all__ = [
    "ScanCoordinator",
    "ScanRegistry",
    "StatusSnapshot",
    "direct_status",
    "folder_status",
    "folder_statuses",
]
