"""Project discovery and visited-directory history."""

from .history import expand_directory, find_expanded_folder, record_visit
from .scan import ProjectInfo, scan_projects, start_project_scan

__all__ = [
    "ProjectInfo",
    "expand_directory",
    "find_expanded_folder",
    "record_visit",
    "scan_projects",
    "start_project_scan",
]
