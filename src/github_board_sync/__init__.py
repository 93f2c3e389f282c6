"""GitHub Board Sync.

Keeps a single issue or pull request in sync with a GitHub Projects (v2) board:
- make sure the item is a member of the board
- set the board's "Status" field to a configured default for issues or PRs
"""

__version__ = "0.1.0"

from github_board_sync.config import BoardSyncSettings
from github_board_sync.project import DefaultStatus, Project

__all__ = ["__version__", "BoardSyncSettings", "DefaultStatus", "Project"]
